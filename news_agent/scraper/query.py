"""
News query model and target location builder.

A NewsQuery describes what the model asked for (language edition, country,
category or free-text search, article count). build_target_location turns it
into the single navigable location on the news site. Search takes precedence
over category; an unrecognized category silently falls back to the home page.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from ..config.models import NewsSourceSettings
from ..config.sites import GOOGLE_NEWS_CONFIG, NewsSiteConfig


class InvalidArgumentError(ValueError):
    """Raised when tool arguments cannot be turned into a NewsQuery."""

    def __init__(self, message: str, argument: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.argument = argument
        self.value = value
        self.details = {"argument": argument, "value": value}


@dataclass(frozen=True)
class NewsQuery:
    """Immutable description of a news request."""

    language: str = "en-US"
    country: str = "US"
    max_articles: int = 10
    category: Optional[str] = None
    search_query: Optional[str] = None

    @property
    def locale_edition(self) -> str:
        """Edition code combining country and the primary language subtag, e.g. 'US:en'."""
        return f"{self.country}:{self.language.split('-')[0]}"

    @property
    def normalized_category(self) -> Optional[str]:
        """Upper-cased category if it is a known one, otherwise None."""
        return normalize_category(self.category)

    @classmethod
    def from_arguments(
        cls,
        arguments: Mapping[str, Any],
        settings: Optional[NewsSourceSettings] = None
    ) -> 'NewsQuery':
        """
        Build a query from a model-proposed argument map.

        Missing values fall back to the configured defaults and the article
        count is capped at the configured maximum.

        Args:
            arguments: Argument map using the tool's parameter names
            settings: Query defaults (built-in defaults when None)

        Returns:
            NewsQuery

        Raises:
            InvalidArgumentError: If an argument has an unusable type or value
        """
        settings = settings or NewsSourceSettings()

        if not isinstance(arguments, Mapping):
            raise InvalidArgumentError(
                f"Tool arguments must be an object, got {type(arguments).__name__}",
                value=arguments
            )

        language = _optional_text(arguments, "language") or settings.default_language
        country = _optional_text(arguments, "country") or settings.default_country
        category = _optional_text(arguments, "category")
        search_query = _optional_text(arguments, "searchQuery")

        max_articles = _max_articles(arguments.get("maxArticles"), settings)

        return cls(
            language=language,
            country=country.upper(),
            max_articles=max_articles,
            category=category,
            search_query=search_query
        )

    def to_parameters(self) -> Dict[str, Any]:
        """Echo of the effective parameters, as reported back to the model."""
        return {
            "language": self.language,
            "country": self.country,
            "maxArticles": self.max_articles,
            "category": self.category or "general",
            "searchQuery": self.search_query or "none",
        }


def _optional_text(arguments: Mapping[str, Any], name: str) -> Optional[str]:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"Argument '{name}' must be a string, got {type(value).__name__}",
            argument=name,
            value=value
        )
    return value.strip() or None


def _max_articles(value: Any, settings: NewsSourceSettings) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError("Argument 'maxArticles' must be a number", "maxArticles", value)

    # Zero or missing means "use the default"
    if value is None or value == 0:
        return settings.default_max_articles

    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgumentError("Argument 'maxArticles' must be a whole number", "maxArticles", value)
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidArgumentError("Argument 'maxArticles' must be a number", "maxArticles", value)
    elif not isinstance(value, int):
        raise InvalidArgumentError("Argument 'maxArticles' must be a number", "maxArticles", value)

    if value < 0:
        raise InvalidArgumentError("Argument 'maxArticles' must be positive", "maxArticles", value)
    if value == 0:
        return settings.default_max_articles

    return min(value, settings.max_articles_cap)


def normalize_category(category: Optional[str], site: NewsSiteConfig = GOOGLE_NEWS_CONFIG) -> Optional[str]:
    """Return the upper-cased category when the site knows it, otherwise None."""
    if not category:
        return None
    key = category.strip().upper()
    return key if key in site.category_topics else None


def build_target_location(query: NewsQuery, site: NewsSiteConfig = GOOGLE_NEWS_CONFIG) -> str:
    """
    Build the navigable location for a news query.

    Args:
        query: The news query
        site: Site location table

    Returns:
        Absolute URL of the search, category or home page
    """
    edition = f"hl={query.language}&gl={query.country}&ceid={query.locale_edition}"

    if query.search_query:
        search_text = quote(query.search_query, safe="-_.!~*'()")
        return f"{site.origin}/search?q={search_text}&{edition}"

    category = normalize_category(query.category, site)
    if category:
        return f"{site.origin}/{site.category_topics[category]}?{edition}"

    return f"{site.origin}/home?{edition}"
