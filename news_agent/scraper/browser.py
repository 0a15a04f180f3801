"""
Browser sessions used to load news pages.

The retrieval service only depends on the small PageHandle / BrowserSession
surface defined here. Two backends implement it:

- PlaywrightSession drives headless Chromium and can wait for network
  quiescence and for dynamic content to appear.
- HttpSession fetches the page once with requests and serves the static
  markup; it needs no browser install, but content rendered by scripts is
  not visible to it.
"""

import time
from typing import Any, Callable, Dict, Optional, Protocol, Sequence
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from ..config.logging import StructuredLogger, get_logger
from ..config.models import BrowserSettings
from ..config.timeouts import TimeoutConfig


class BrowserError(Exception):
    """Raised when a browser session cannot launch or load a page."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url
        self.details = {"url": url} if url else {}


class PageTimeoutError(BrowserError):
    """Raised when a page operation exceeds its time bound."""
    pass


class PageHandle(Protocol):
    """A single page inside a browser session."""

    @property
    def url(self) -> str: ...

    def set_user_agent(self, user_agent: str) -> None: ...

    def goto(self, url: str, timeout_ms: int) -> None: ...

    def wait_for_any(self, selectors: Sequence[str], timeout_ms: int) -> None: ...

    def wait(self, delay_ms: int) -> None: ...

    def title(self) -> str: ...

    def content(self) -> str: ...


class BrowserSession(Protocol):
    """A launched browser; must be closed exactly once."""

    def new_page(self) -> PageHandle: ...

    def close(self) -> None: ...


BrowserLauncher = Callable[[], BrowserSession]


class PlaywrightPage:
    """
    PageHandle backed by a Playwright page.

    The underlying page is opened on first use, so the client identity set
    before navigation becomes part of its browser context.
    """

    def __init__(self, browser, context_options: Dict[str, Any]):
        self._browser = browser
        self._context_options = dict(context_options)
        self._page = None

    @property
    def page(self):
        if self._page is None:
            context = self._browser.new_context(**self._context_options)
            self._page = context.new_page()
        return self._page

    @property
    def url(self) -> str:
        return self._page.url if self._page is not None else "about:blank"

    def set_user_agent(self, user_agent: str) -> None:
        # Applies to both request headers and navigator.userAgent
        if self._page is not None:
            raise BrowserError("Client identity must be set before the page is opened", url=self.url)
        self._context_options["user_agent"] = user_agent

    def goto(self, url: str, timeout_ms: int) -> None:
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

        try:
            self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise PageTimeoutError(f"Navigation timeout of {timeout_ms} ms exceeded", url=url) from e

    def wait_for_any(self, selectors: Sequence[str], timeout_ms: int) -> None:
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

        try:
            self.page.wait_for_selector(", ".join(selectors), state="attached", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise PageTimeoutError(
                f"None of {len(selectors)} readiness selectors appeared within {timeout_ms} ms",
                url=self.url
            ) from e

    def wait(self, delay_ms: int) -> None:
        self.page.wait_for_timeout(delay_ms)

    def title(self) -> str:
        return self.page.title()

    def content(self) -> str:
        return self.page.content()


class PlaywrightSession:
    """Headless Chromium session driven through Playwright's sync API."""

    def __init__(self, settings: BrowserSettings):
        """
        Launch the browser.

        Args:
            settings: Browser settings (headless flag, launch arguments, viewport)

        Raises:
            BrowserError: If Playwright or Chromium cannot be started
        """
        from playwright.sync_api import Error as PlaywrightError, sync_playwright

        self.settings = settings
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=settings.headless,
                args=list(settings.launch_args)
            )
        except PlaywrightError as e:
            self._playwright.stop()
            raise BrowserError(f"Failed to launch browser: {e}") from e

    def new_page(self) -> PlaywrightPage:
        return PlaywrightPage(self._browser, {
            "viewport": {"width": self.settings.viewport_width, "height": self.settings.viewport_height},
            "user_agent": self.settings.user_agent
        })

    def close(self) -> None:
        try:
            self._browser.close()
        finally:
            self._playwright.stop()


class HttpPage:
    """PageHandle serving the static markup fetched with requests."""

    def __init__(self, session: requests.Session, timeouts: TimeoutConfig):
        self._session = session
        self._timeouts = timeouts
        self._url = "about:blank"
        self._html = ""

    @property
    def url(self) -> str:
        return self._url

    def set_user_agent(self, user_agent: str) -> None:
        self._session.headers["User-Agent"] = user_agent

    def goto(self, url: str, timeout_ms: int) -> None:
        read_timeout = max(timeout_ms / 1000.0, 0.001)
        connect_timeout = min(self._timeouts.http_connect_timeout, read_timeout)

        try:
            response = self._session.get(
                url,
                headers=_navigation_headers(url),
                timeout=(connect_timeout, read_timeout),
                allow_redirects=True
            )
        except requests.exceptions.Timeout as e:
            raise PageTimeoutError(f"Navigation timeout of {timeout_ms} ms exceeded", url=url) from e
        except requests.exceptions.RequestException as e:
            raise BrowserError(f"Request failed: {e}", url=url) from e

        if response.status_code != 200:
            raise BrowserError(f"HTTP {response.status_code}: {response.reason}", url=url)

        self._url = response.url
        self._html = response.text

    def wait_for_any(self, selectors: Sequence[str], timeout_ms: int) -> None:
        # Static markup never changes, so readiness is a single check
        soup = BeautifulSoup(self._html, "html.parser")
        if soup.select_one(", ".join(selectors)) is None:
            raise PageTimeoutError("No readiness selector present in static page", url=self._url)

    def wait(self, delay_ms: int) -> None:
        pass

    def title(self) -> str:
        soup = BeautifulSoup(self._html, "html.parser")
        return soup.title.get_text().strip() if soup.title else ""

    def content(self) -> str:
        return self._html


class HttpSession:
    """Browser stand-in that fetches pages with a single requests session."""

    def __init__(self, settings: BrowserSettings, timeouts: TimeoutConfig):
        self.timeouts = timeouts
        self.session = requests.Session()
        self.session.headers["User-Agent"] = settings.user_agent

    def new_page(self) -> HttpPage:
        return HttpPage(self.session, self.timeouts)

    def close(self) -> None:
        self.session.close()


def _navigation_headers(url: str) -> Dict[str, str]:
    """Headers a desktop browser sends on a top-level navigation."""
    domain = urlparse(url).netloc

    headers = {
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;"
            "q=0.9,image/webp,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "DNT": "1",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Cache-Control": "max-age=0"
    }

    if domain:
        headers["Referer"] = f"https://{domain}/"

    return headers


def create_browser_launcher(
    settings: BrowserSettings,
    timeouts: TimeoutConfig,
    logger: Optional[StructuredLogger] = None
) -> BrowserLauncher:
    """
    Build the launcher for the configured backend.

    Args:
        settings: Browser settings; settings.backend selects the implementation
        timeouts: Timeout configuration (used by the HTTP backend)
        logger: Structured logger

    Returns:
        Zero-argument callable returning a new BrowserSession
    """
    logger = logger or get_logger(__name__)

    if settings.backend == "http":
        def launch_http() -> BrowserSession:
            logger.debug("Opening static HTTP session")
            return HttpSession(settings, timeouts)
        return launch_http

    def launch_playwright() -> BrowserSession:
        logger.info("Launching browser", headless=settings.headless)
        started = time.time()
        session = PlaywrightSession(settings)
        logger.debug("Browser launched", duration_ms=int((time.time() - started) * 1000))
        return session
    return launch_playwright
