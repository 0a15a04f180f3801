"""
Unit tests for the news retrieval service.
"""

import pytest
from unittest.mock import MagicMock, Mock

from news_agent.config.models import BrowserSettings
from news_agent.config.timeouts import TimeoutConfig
from news_agent.scraper.browser import BrowserError, PageTimeoutError
from news_agent.scraper.extractor import ArticleExtractor
from news_agent.scraper.query import NewsQuery
from news_agent.scraper.service import NewsRetrievalService, RetrievalError


def article_page(count):
    items = "".join(
        f'<article><h3>Story {i}</h3><a href="./articles/{i}">x</a></article>' for i in range(count)
    )
    return f"<html><head><title>News</title></head><body>{items}</body></html>"


class FakePage:
    """In-memory page handle recording the calls made on it."""

    def __init__(self, html="", goto_error=None, ready=True):
        self.html = html
        self.goto_error = goto_error
        self.ready = ready
        self.url = "about:blank"
        self.calls = []

    def set_user_agent(self, user_agent):
        self.calls.append(("set_user_agent", user_agent))

    def goto(self, url, timeout_ms):
        self.calls.append(("goto", url, timeout_ms))
        if self.goto_error:
            raise self.goto_error
        self.url = url

    def wait_for_any(self, selectors, timeout_ms):
        self.calls.append(("wait_for_any", tuple(selectors), timeout_ms))
        if not self.ready:
            raise PageTimeoutError("not ready", url=self.url)

    def wait(self, delay_ms):
        self.calls.append(("wait", delay_ms))

    def title(self):
        return "News"

    def content(self):
        self.calls.append(("content",))
        return self.html


class FakeSession:
    """Browser session handing out a single fake page."""

    def __init__(self, page):
        self.page = page
        self.close_count = 0

    def new_page(self):
        return self.page

    def close(self):
        self.close_count += 1


class TestNewsRetrievalService:
    """Test cases for NewsRetrievalService class."""

    @pytest.fixture
    def timeouts(self):
        return TimeoutConfig(navigation_timeout_ms=30000, readiness_timeout_ms=15000, grace_delay_ms=3000)

    def make_service(self, page, timeouts, extractor=None):
        session = FakeSession(page)
        service = NewsRetrievalService(
            launch_browser=lambda: session,
            extractor=extractor,
            browser_settings=BrowserSettings(user_agent="Test Agent"),
            timeouts=timeouts,
            logger=MagicMock()
        )
        return service, session

    def test_category_scenario_truncates_in_order(self, timeouts):
        """Test ten containers with a limit of three."""
        page = FakePage(article_page(10))
        service, session = self.make_service(page, timeouts)

        records = service.retrieve(NewsQuery(category="TECHNOLOGY", max_articles=3))

        assert [r.title for r in records] == ["Story 0", "Story 1", "Story 2"]
        assert all(r.category == "TECHNOLOGY" for r in records)
        assert session.close_count == 1

    def test_retrieval_is_timed(self, timeouts):
        """Test that the browser phase runs inside a timed operation."""
        service, _ = self.make_service(FakePage(article_page(4)), timeouts)

        service.retrieve(NewsQuery(max_articles=2))

        service.logger.timed_operation.assert_called_once_with("news_retrieval")
        service.logger.log_metrics.assert_called_once_with(
            {"articles_found": 4, "articles_returned": 2}, "news_retrieval"
        )

    def test_protocol_order(self, timeouts):
        """Test identity, navigation, readiness and read order."""
        page = FakePage(article_page(1))
        service, _ = self.make_service(page, timeouts)

        service.retrieve(NewsQuery())

        assert page.calls[0] == ("set_user_agent", "Test Agent")
        assert page.calls[1] == ("goto", "https://news.google.com/home?hl=en-US&gl=US&ceid=US:en", 30000)
        assert page.calls[2] == ("wait_for_any", ("article", "[data-n-tid]", ".JtKRv"), 15000)
        assert page.calls[3] == ("content",)

    def test_navigation_timeout_raises_and_closes_once(self, timeouts):
        """Test that a navigation timeout fails the call and still releases the session."""
        page = FakePage(goto_error=PageTimeoutError("Navigation timeout of 30000 ms exceeded"))
        service, session = self.make_service(page, timeouts)

        with pytest.raises(RetrievalError) as exc_info:
            service.retrieve(NewsQuery())

        assert isinstance(exc_info.value.cause, PageTimeoutError)
        assert "Navigation timeout" in str(exc_info.value)
        assert exc_info.value.url.startswith("https://news.google.com/home")
        assert session.close_count == 1

    def test_readiness_timeout_waits_grace_delay(self, timeouts):
        """Test that missing readiness signals fall back to the grace delay."""
        page = FakePage(article_page(2), ready=False)
        service, session = self.make_service(page, timeouts)

        records = service.retrieve(NewsQuery())

        assert ("wait", 3000) in page.calls
        assert len(records) == 2
        assert session.close_count == 1

    def test_extraction_failure_closes_session(self, timeouts):
        """Test that an extractor failure is wrapped and the session released."""
        extractor = Mock()
        extractor.extract_articles.side_effect = RuntimeError("page crashed")
        service, session = self.make_service(FakePage(article_page(1)), timeouts, extractor=extractor)

        with pytest.raises(RetrievalError) as exc_info:
            service.retrieve(NewsQuery())

        assert str(exc_info.value) == "page crashed"
        assert session.close_count == 1

    def test_launch_failure(self, timeouts):
        """Test that a session launch failure becomes a RetrievalError."""
        def failing_launcher():
            raise BrowserError("Failed to launch browser: missing executable")

        service = NewsRetrievalService(launch_browser=failing_launcher, timeouts=timeouts, logger=MagicMock())

        with pytest.raises(RetrievalError) as exc_info:
            service.retrieve(NewsQuery())

        assert "Failed to launch browser" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, BrowserError)

    def test_search_results_have_no_category(self, timeouts):
        """Test that search results are not stamped with a category."""
        page = FakePage(article_page(2))
        service, _ = self.make_service(page, timeouts)

        records = service.retrieve(NewsQuery(category="SPORTS", search_query="final"))

        assert page.calls[1][1].startswith("https://news.google.com/search?q=final")
        assert all(r.category is None for r in records)

    def test_unknown_category_has_no_category(self, timeouts):
        service, _ = self.make_service(FakePage(article_page(1)), timeouts)

        records = service.retrieve(NewsQuery(category="GARDENING"))

        assert records[0].category is None

    def test_fewer_articles_than_requested(self, timeouts):
        service, _ = self.make_service(FakePage(article_page(2)), timeouts)

        assert len(service.retrieve(NewsQuery(max_articles=10))) == 2

    def test_default_extractor(self, timeouts):
        service, _ = self.make_service(FakePage(), timeouts)
        assert isinstance(service.extractor, ArticleExtractor)
