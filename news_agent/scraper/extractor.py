"""
Article extractor with layered selector fallbacks.

This module reads a loaded news page and turns it into ArticleRecord values.
Extraction works at two levels, both driven by ordered strategy tables:

1. Container discovery: the first container strategy that matches at least
   one element wins. Results are never merged across strategies. When every
   strategy comes back empty, all hyperlinks whose target looks like an
   article or story are used instead.
2. Field extraction: for each container, every field (title, source,
   description) takes the text of the first selector that yields non-empty
   text. Titles fall back to the nearest enclosing block and finally to the
   container's own text, truncated.

A candidate that fails while being read is skipped; it never aborts the batch.
"""

import re
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from ..config.logging import StructuredLogger, get_logger
from ..config.sites import GOOGLE_NEWS_CONFIG, NewsSiteConfig


@dataclass(frozen=True)
class ArticleRecord:
    """A single article found on the page."""

    title: str
    description: str
    link: str
    image: Optional[str]
    source: str
    published_time: Optional[str]
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass(frozen=True)
class ContainerStrategy:
    """A named way of locating candidate article elements on a page."""

    name: str
    find: Callable[[BeautifulSoup], List[Tag]]


def selector_strategy(selector: str) -> ContainerStrategy:
    """Strategy that selects every element matching a CSS selector."""
    return ContainerStrategy(name=selector, find=lambda soup: soup.select(selector))


def article_link_strategy(markers: Sequence[str]) -> ContainerStrategy:
    """Strategy that keeps hyperlinks whose target textually suggests an article."""
    def find(soup: BeautifulSoup) -> List[Tag]:
        return [
            anchor for anchor in soup.select("a[href]")
            if any(marker in (anchor.get("href") or "") for marker in markers)
        ]
    return ContainerStrategy(name="article_links", find=find)


def build_container_strategies(site: NewsSiteConfig) -> Tuple[ContainerStrategy, ...]:
    """Ordered container strategies for a site."""
    return tuple(selector_strategy(selector) for selector in site.container_selectors)


class ArticleExtractor:
    """
    Extracts article records from a news page.

    Uses the site's ordered selector tables to discover article containers and
    to read each field, falling back to broader heuristics when the specific
    selectors stop matching.
    """

    def __init__(
        self,
        site: NewsSiteConfig = GOOGLE_NEWS_CONFIG,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize article extractor.

        Args:
            site: Selector tables and origin of the news site
            logger: Structured logger (module logger when None)
        """
        self.site = site
        self.logger = logger or get_logger(__name__)
        self.container_strategies = build_container_strategies(site)
        self.fallback_strategy = article_link_strategy(site.article_link_markers)

    def extract_articles(self, page: Any, category: Optional[str] = None) -> List[ArticleRecord]:
        """
        Extract every article record from a loaded page.

        The page content is read once. The result is not truncated; callers
        apply their own limit.

        Args:
            page: Loaded page exposing content()
            category: Category label stamped on each record

        Returns:
            Article records in document order
        """
        return self.extract_from_html(page.content(), category=category)

    def extract_from_html(
        self,
        html: str,
        category: Optional[str] = None
    ) -> List[ArticleRecord]:
        """
        Extract article records from raw page markup.

        Args:
            html: Page markup
            category: Category label stamped on each record

        Returns:
            Article records in document order
        """
        if not html or not html.strip():
            self.logger.warning("Empty page content, nothing to extract")
            return []

        soup = BeautifulSoup(html, "html.parser")
        strategy_name, elements = self.discover_containers(soup)

        self.logger.info(
            "Processing candidate articles",
            strategy=strategy_name,
            candidates=len(elements)
        )

        records = []
        for index, element in enumerate(elements):
            try:
                record = self._extract_record(element, category)
            except Exception as e:
                self.logger.warning(
                    f"Skipping candidate {index}",
                    error_type=type(e).__name__,
                    error_message=str(e)
                )
                continue

            if record is not None:
                records.append(record)

        if not records:
            self._log_page_diagnostics(soup)

        return records

    def discover_containers(self, soup: BeautifulSoup) -> Tuple[str, List[Tag]]:
        """
        Locate candidate article elements.

        Returns:
            Tuple of (strategy name, elements). Elements come from the first
            strategy that matched anything, or from the article link fallback.
        """
        for strategy, elements in self._evaluate_strategies(soup):
            if elements:
                self.logger.debug(
                    "Container strategy matched",
                    strategy=strategy.name,
                    matches=len(elements)
                )
                return strategy.name, elements

        self.logger.info("No articles found with standard selectors, trying broader search")
        return self.fallback_strategy.name, self.fallback_strategy.find(soup)

    def _evaluate_strategies(self, soup: BeautifulSoup) -> Iterator[Tuple[ContainerStrategy, List[Tag]]]:
        for strategy in self.container_strategies:
            yield strategy, strategy.find(soup)

    def _extract_record(self, element: Tag, category: Optional[str]) -> Optional[ArticleRecord]:
        """Read every field of one candidate; None when it has neither title nor link."""
        title = self._extract_title(element)
        link = self._extract_link(element)

        if not title and not link:
            return None

        image_element = element.select_one(self.site.image_selector)
        image = image_element.get("src") if image_element is not None else None

        return ArticleRecord(
            title=title or self.site.missing_title,
            description=self._first_text(element, self.site.description_selectors),
            link=link,
            image=image or None,
            source=self._first_text(element, self.site.source_selectors),
            published_time=self._extract_time(element),
            category=category
        )

    def _extract_title(self, element: Tag) -> str:
        title = self._first_text(element, self.site.title_selectors)
        if title:
            return title

        ancestor = element.find_parent(list(self.site.ancestor_tags))
        if ancestor is not None:
            title = self._first_text(ancestor, self.site.title_selectors)
            if title:
                return title

        own_text = self._clean_text(element.get_text())
        if own_text:
            return own_text[:self.site.title_truncate_length] + self.site.truncation_marker

        return ""

    def _extract_link(self, element: Tag) -> str:
        own_target = element.get("href") if element.name in ("a", "area") else None
        if own_target:
            link = own_target.strip()
        else:
            anchor = element.select_one(self.site.link_selector)
            link = (anchor.get("href") or "").strip() if anchor is not None else ""

        # Site-relative paths ("/articles/..", "./articles/..") resolve against the origin
        if link and not urlparse(link).scheme:
            return urljoin(self.site.origin + "/", link)
        return link

    def _extract_time(self, element: Tag) -> Optional[str]:
        time_element = element.select_one(self.site.time_selector)
        if time_element is None:
            return None
        return time_element.get("datetime") or self._clean_text(time_element.get_text()) or None

    def _first_text(self, scope: Tag, selectors: Sequence[str]) -> str:
        """Text of the first selector that yields non-empty text inside scope."""
        for selector in selectors:
            found = scope.select_one(selector)
            if found is None:
                continue
            text = self._clean_text(found.get_text())
            if text:
                return text
        return ""

    def _clean_text(self, text: str) -> str:
        """Collapse whitespace and trim."""
        if not text:
            return ""
        return re.sub(r'\s+', ' ', text).strip()

    def _log_page_diagnostics(self, soup: BeautifulSoup) -> None:
        body = soup.body or soup
        self.logger.warning(
            "No articles were extracted - checking page structure",
            has_articles=soup.find("article") is not None,
            link_count=len(soup.find_all("a")),
            body_preview=self._clean_text(body.get_text())[:200]
        )
