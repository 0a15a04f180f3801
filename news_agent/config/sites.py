"""
Site-specific configuration for the news aggregation site.

This module contains the location table (origin, topic identifiers for each
category, supported language editions) and the ordered CSS selector strategies
used to discover and read article elements. The page markup of the site is
unstable, so every list is ordered from most to least specific and is tried
until one entry succeeds.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class NewsSiteConfig:
    """Selector strategies and location table for one news aggregation site."""

    origin: str
    category_topics: Dict[str, str]
    container_selectors: Tuple[str, ...]
    title_selectors: Tuple[str, ...]
    source_selectors: Tuple[str, ...]
    description_selectors: Tuple[str, ...]
    readiness_selectors: Tuple[str, ...]
    time_selector: str = "time, [datetime]"
    image_selector: str = "img"
    link_selector: str = "a[href]"
    ancestor_tags: Tuple[str, ...] = ("div", "section", "li")
    article_link_markers: Tuple[str, ...] = ("/articles/", "/stories/", "news")
    title_truncate_length: int = 100
    truncation_marker: str = "..."
    missing_title: str = "No title available"
    languages: Dict[str, List[str]] = field(default_factory=dict)


GOOGLE_NEWS_CONFIG = NewsSiteConfig(
    origin="https://news.google.com",
    category_topics={
        "TECHNOLOGY": "topics/CAAqJggKIiBDQkFTRWdvSUwyMHZNRFZxYUdjU0FtVnVHZ0pWVXlnQVAB",
        "SPORTS": "topics/CAAqJggKIiBDQkFTRWdvSUwyMHZNRFp1ZEdvU0FtVnVHZ0pWVXlnQVAB",
        "HEALTH": "topics/CAAqJQgKIh9DQkFTRVFvSUwyMHZNR3QwTlRFU0FtVnVHZ0pWVXlnQVAB",
        "BUSINESS": "topics/CAAqJggKIiBDQkFTRWdvSUwyMHZNRGx6TVdZU0FtVnVHZ0pWVXlnQVAB",
        "ENTERTAINMENT": "topics/CAAqJggKIiBDQkFTRWdvSUwyMHZNREpxYW5RU0FtVnVHZ0pWVXlnQVAB",
        "SCIENCE": "topics/CAAqKAgKIiJDQkFTRXdvSUwyMHZNRFp0Y1RjU0FtVnVHZ0pWVXlnQVAB",
        "WORLD": "topics/CAAqJggKIiBDQkFTRWdvSUwyMHZNRGx1YlY4U0FtVnVHZ0pWVXlnQVAB",
    },
    container_selectors=(
        "article",
        "[data-n-tid]",
        ".JtKRv",
        ".xrnccd",
        ".Ft7HRd-LgbsSe",
        ".SoAPf",
        ".ipQwMb",
        ".mCBkyc",
        'a[href*="/articles/"]',
        'a[href*="/stories/"]',
    ),
    title_selectors=(
        "h3",
        "h4",
        '[role="heading"]',
        ".ipQwMb",
        ".JtKRv",
        ".mCBkyc",
        ".DY5T1d",
        ".MQsxIb",
        ".RZIKme",
    ),
    source_selectors=(
        "[data-n-tid]",
        ".QmrVtf",
        ".wEwyrc",
        ".SVJrMe",
        ".vr1PYe",
        ".CEMjEf",
        ".WlydOe",
    ),
    description_selectors=(
        ".GI74Re",
        ".st",
        ".Y3v8qd",
        ".xBjp9b",
        ".UOVeFe",
    ),
    readiness_selectors=(
        "article",
        "[data-n-tid]",
        ".JtKRv",
    ),
    languages={
        "en-US": ["US"],
        "es-ES": ["ES"],
        "fr-FR": ["FR"],
        "de-DE": ["DE"],
        "it-IT": ["IT"],
        "pt-BR": ["BR"],
        "ja-JP": ["JP"],
        "ko-KR": ["KR"],
        "zh-CN": ["CN"],
        "ru-RU": ["RU"],
    },
)


def get_available_categories() -> List[str]:
    """Get the category names accepted by the query builder."""
    return list(GOOGLE_NEWS_CONFIG.category_topics.keys())


def get_available_languages() -> Dict[str, List[str]]:
    """Get supported language editions mapped to their country codes."""
    return {lang: list(countries) for lang, countries in GOOGLE_NEWS_CONFIG.languages.items()}
