"""
News retrieval service.

Combines the query builder, a browser session and the article extractor into
one request/response operation: launch a session, open a page, navigate to the
query's location, wait for content, extract, truncate, and always close the
session again.
"""

import time
from typing import List, Optional

from .browser import BrowserLauncher, PageTimeoutError, create_browser_launcher
from .extractor import ArticleExtractor, ArticleRecord
from .query import NewsQuery, build_target_location
from ..config.logging import StructuredLogger, get_logger
from ..config.models import BrowserSettings
from ..config.sites import GOOGLE_NEWS_CONFIG, NewsSiteConfig
from ..config.timeouts import TimeoutConfig


class RetrievalError(Exception):
    """Raised when a news page could not be loaded or read."""

    def __init__(self, message: str, cause: Optional[BaseException] = None, url: Optional[str] = None):
        super().__init__(message)
        self.cause = cause
        self.url = url
        self.details = {
            "url": url,
            "cause_type": type(cause).__name__ if cause else None
        }


class NewsRetrievalService:
    """
    Loads a news page for a query and returns its articles.

    Each call owns exactly one browser session. Sessions are never reused and
    are closed on every exit path before the call returns or raises.
    """

    def __init__(
        self,
        launch_browser: Optional[BrowserLauncher] = None,
        extractor: Optional[ArticleExtractor] = None,
        browser_settings: Optional[BrowserSettings] = None,
        timeouts: Optional[TimeoutConfig] = None,
        site: NewsSiteConfig = GOOGLE_NEWS_CONFIG,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize retrieval service.

        Args:
            launch_browser: Callable returning a new browser session
                (built from browser_settings when None)
            extractor: Article extractor
            browser_settings: Browser settings (client identity string, backend)
            timeouts: Navigation, readiness and grace delay bounds
            site: Site location table and selector strategies
            logger: Structured logger
        """
        self.logger = logger or get_logger(__name__)
        self.browser_settings = browser_settings or BrowserSettings()
        self.timeouts = timeouts or TimeoutConfig()
        self.site = site
        self.extractor = extractor or ArticleExtractor(site=site, logger=self.logger)
        self.launch_browser = launch_browser or create_browser_launcher(
            self.browser_settings, self.timeouts, logger=self.logger
        )

    def retrieve(self, query: NewsQuery) -> List[ArticleRecord]:
        """
        Retrieve articles for a news query.

        Args:
            query: The news query

        Returns:
            At most query.max_articles records, in document order

        Raises:
            RetrievalError: If the session cannot launch or the page cannot be loaded or read
        """
        url = build_target_location(query, self.site)

        self.logger.set_context(component="news_retrieval", target_url=url)
        self.logger.info(
            "News retrieval started",
            language=query.language,
            country=query.country,
            category=query.category,
            search_query=query.search_query,
            max_articles=query.max_articles
        )

        with self.logger.timed_operation("news_retrieval"):
            try:
                session = self.launch_browser()
                try:
                    articles = self._load_and_extract(session, url, query)
                finally:
                    session.close()
                    self.logger.info("Browser session closed")
            except RetrievalError:
                raise
            except Exception as e:
                self.logger.error("Error during news retrieval", error=e, url=url)
                raise RetrievalError(str(e) or type(e).__name__, cause=e, url=url) from e

        limited = articles[:query.max_articles]

        self.logger.info(f"Successfully extracted {len(limited)} articles")
        if len(articles) > query.max_articles:
            self.logger.info(f"Limited to {query.max_articles} articles (found {len(articles)} total)")

        if limited:
            sample = limited[0]
            self.logger.debug(
                "Sample article",
                title=sample.title,
                source=sample.source,
                link=sample.link
            )

        self.logger.log_metrics({
            "articles_found": len(articles),
            "articles_returned": len(limited)
        }, "news_retrieval")

        return limited

    def _load_and_extract(self, session, url: str, query: NewsQuery) -> List[ArticleRecord]:
        page = session.new_page()
        page.set_user_agent(self.browser_settings.user_agent)

        self.logger.info(f"Navigating to {url}")
        step_start = time.time()
        page.goto(url, timeout_ms=self.timeouts.navigation_timeout_ms)
        self.logger.log_browser_step(
            "navigate", url, int((time.time() - step_start) * 1000), success=True
        )

        self._wait_for_content(page)
        self.logger.info(f"Page title: {page.title()}")

        # Search results are not a category browse even if a category was passed
        category = None if query.search_query else query.normalized_category
        return self.extractor.extract_articles(page, category=category)

    def _wait_for_content(self, page) -> None:
        """Wait for any readiness selector; on timeout, wait the grace delay and carry on."""
        self.logger.info("Waiting for articles to load")
        try:
            page.wait_for_any(self.site.readiness_selectors, timeout_ms=self.timeouts.readiness_timeout_ms)
        except PageTimeoutError:
            self.logger.warning(
                "Primary selectors not found, continuing after grace delay",
                grace_delay_ms=self.timeouts.grace_delay_ms
            )
            page.wait(self.timeouts.grace_delay_ms)
