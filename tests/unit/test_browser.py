"""
Unit tests for browser session backends.
"""

import pytest
from unittest.mock import Mock, patch
import requests
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from news_agent.config.models import BrowserSettings
from news_agent.config.timeouts import TimeoutConfig
from news_agent.scraper.browser import (
    BrowserError, HttpPage, HttpSession, PageTimeoutError, PlaywrightPage, PlaywrightSession,
    create_browser_launcher, _navigation_headers
)


PAGE_HTML = "<html><head><title>Google News</title></head><body><article><h3>A</h3></article></body></html>"


class TestHttpBackend:
    """Test cases for the static HTTP page backend."""

    @pytest.fixture
    def session(self):
        return HttpSession(BrowserSettings(backend="http", user_agent="Test Agent"), TimeoutConfig())

    def test_session_sets_user_agent(self, session):
        """Test that the client identity string is applied."""
        assert session.session.headers["User-Agent"] == "Test Agent"

        page = session.new_page()
        page.set_user_agent("Other Agent")
        assert session.session.headers["User-Agent"] == "Other Agent"

    @patch('news_agent.scraper.browser.requests.Session.get')
    def test_successful_navigation(self, mock_get, session):
        """Test successful page load."""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.text = PAGE_HTML
        mock_response.url = "https://news.google.com/home?hl=en-US"
        mock_get.return_value = mock_response

        page = session.new_page()
        page.goto("https://news.google.com/home?hl=en-US", timeout_ms=5000)

        assert page.url == "https://news.google.com/home?hl=en-US"
        assert page.content() == PAGE_HTML
        assert page.title() == "Google News"
        _, kwargs = mock_get.call_args
        assert kwargs["timeout"] == (5.0, 5.0)
        assert kwargs["headers"]["Referer"] == "https://news.google.com/"

    @patch('news_agent.scraper.browser.requests.Session.get')
    def test_http_error(self, mock_get, session):
        """Test handling of HTTP errors."""
        mock_response = Mock()
        mock_response.status_code = 503
        mock_response.reason = "Service Unavailable"
        mock_get.return_value = mock_response

        with pytest.raises(BrowserError) as exc_info:
            session.new_page().goto("https://news.google.com/home", timeout_ms=5000)

        assert "503" in str(exc_info.value)
        assert not isinstance(exc_info.value, PageTimeoutError)

    @patch('news_agent.scraper.browser.requests.Session.get')
    def test_timeout(self, mock_get, session):
        """Test that request timeouts become page timeouts."""
        mock_get.side_effect = requests.exceptions.Timeout("Request timeout")

        with pytest.raises(PageTimeoutError) as exc_info:
            session.new_page().goto("https://news.google.com/home", timeout_ms=5000)

        assert exc_info.value.url == "https://news.google.com/home"
        assert mock_get.call_count == 1

    @patch('news_agent.scraper.browser.requests.Session.get')
    def test_connection_error(self, mock_get, session):
        """Test that other request failures become browser errors."""
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(BrowserError):
            session.new_page().goto("https://news.google.com/home", timeout_ms=5000)

    def test_readiness_check_on_static_markup(self):
        """Test readiness against the fetched markup."""
        page = HttpPage(requests.Session(), TimeoutConfig())
        page._html = PAGE_HTML

        page.wait_for_any(["article", ".JtKRv"], timeout_ms=100)

        page._html = "<html><body><p>nothing</p></body></html>"
        with pytest.raises(PageTimeoutError):
            page.wait_for_any(["article", ".JtKRv"], timeout_ms=100)

    def test_close_closes_requests_session(self, session):
        with patch.object(session.session, 'close') as mock_close:
            session.close()
        mock_close.assert_called_once()

    def test_navigation_headers(self):
        headers = _navigation_headers("https://news.google.com/search?q=x")
        assert headers["Sec-Fetch-Mode"] == "navigate"
        assert headers["Referer"] == "https://news.google.com/"


def open_playwright_page(context_options=None):
    """PlaywrightPage over a mocked browser; returns (page, browser, raw page)."""
    browser = Mock()
    raw_page = browser.new_context.return_value.new_page.return_value
    raw_page.url = "https://news.google.com/home"
    return PlaywrightPage(browser, context_options or {}), browser, raw_page


class TestPlaywrightPage:
    """Test cases for the Playwright page adapter."""

    def test_goto_waits_for_network_idle(self):
        page, _, raw_page = open_playwright_page()
        page.goto("https://news.google.com/home", timeout_ms=30000)

        raw_page.goto.assert_called_once_with(
            "https://news.google.com/home", wait_until="networkidle", timeout=30000
        )

    def test_goto_timeout(self):
        page, _, raw_page = open_playwright_page()
        raw_page.goto.side_effect = PlaywrightTimeoutError("Timeout 30000ms exceeded")

        with pytest.raises(PageTimeoutError):
            page.goto("https://news.google.com/home", timeout_ms=30000)

    def test_wait_for_any_checks_presence(self):
        """Test that readiness only needs the content to exist, not to be visible."""
        page, _, raw_page = open_playwright_page()
        page.wait_for_any(["article", "[data-n-tid]"], timeout_ms=15000)

        raw_page.wait_for_selector.assert_called_once_with(
            "article, [data-n-tid]", state="attached", timeout=15000
        )

    def test_wait_for_any_timeout(self):
        page, _, raw_page = open_playwright_page()
        raw_page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout")

        with pytest.raises(PageTimeoutError) as exc_info:
            page.wait_for_any(["article"], timeout_ms=15000)

        assert exc_info.value.url == "https://news.google.com/home"

    def test_user_agent_set_on_browser_context(self):
        """Test that the client identity becomes the context user agent."""
        viewport = {"width": 1920, "height": 1080}
        page, browser, raw_page = open_playwright_page({"viewport": viewport})

        page.set_user_agent("Agent/1.0")
        assert page.url == "about:blank"
        browser.new_context.assert_not_called()

        page.goto("https://news.google.com/home", timeout_ms=30000)

        browser.new_context.assert_called_once_with(viewport=viewport, user_agent="Agent/1.0")
        raw_page.set_extra_http_headers.assert_not_called()

    def test_user_agent_after_open_rejected(self):
        page, _, _ = open_playwright_page()
        page.content()

        with pytest.raises(BrowserError):
            page.set_user_agent("Agent/1.0")

    def test_page_opened_once(self):
        page, browser, _ = open_playwright_page()
        page.goto("https://news.google.com/home", timeout_ms=30000)
        page.title()
        page.content()

        browser.new_context.assert_called_once()

    @patch('playwright.sync_api.sync_playwright')
    def test_session_pages_use_configured_identity(self, mock_sync_playwright):
        settings = BrowserSettings(user_agent="Agent/2.0")
        browser = mock_sync_playwright.return_value.start.return_value.chromium.launch.return_value

        session = PlaywrightSession(settings)
        session.new_page().content()
        session.close()

        browser.new_context.assert_called_once_with(
            viewport={"width": settings.viewport_width, "height": settings.viewport_height},
            user_agent="Agent/2.0"
        )
        browser.close.assert_called_once()


class TestCreateBrowserLauncher:
    """Test cases for backend selection."""

    def test_http_backend(self):
        launcher = create_browser_launcher(BrowserSettings(backend="http"), TimeoutConfig(), logger=Mock())
        session = launcher()
        try:
            assert isinstance(session, HttpSession)
        finally:
            session.close()

    @patch('news_agent.scraper.browser.PlaywrightSession')
    def test_playwright_backend(self, mock_session_cls):
        settings = BrowserSettings(backend="playwright")
        launcher = create_browser_launcher(settings, TimeoutConfig(), logger=Mock())

        mock_session_cls.assert_not_called()
        session = launcher()

        mock_session_cls.assert_called_once_with(settings)
        assert session is mock_session_cls.return_value
