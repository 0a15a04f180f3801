"""
Tool registry and the news tool.

Tools are identified by the ToolName enumeration. The registry maps every
member to a capability with the uniform signature (arguments) -> JSON string,
together with the description published to the model. Capabilities report
their own expected failures as a JSON payload with "success": false; only an
unknown tool name is raised to the caller.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .messages import ToolInvocationRequest
from ..config.logging import StructuredLogger, get_logger
from ..config.models import NewsSourceSettings
from ..config.sites import get_available_categories
from ..scraper.extractor import ArticleRecord
from ..scraper.query import InvalidArgumentError, NewsQuery
from ..scraper.service import NewsRetrievalService, RetrievalError


class ToolName(str, Enum):
    """Tools the model may invoke."""

    FETCH_TOP_NEWS = "fetch_top_news"


class UnrecognizedCapabilityError(LookupError):
    """Raised when the model asks for a tool that is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown function: {tool_name}")
        self.tool_name = tool_name


ToolFunction = Callable[[Any], str]


@dataclass(frozen=True)
class ToolParameter:
    """One parameter of a tool's argument schema."""

    name: str
    type: str
    description: str


@dataclass(frozen=True)
class ToolDescription:
    """Name, description and argument schema published to the model."""

    name: ToolName
    description: str
    parameters: Tuple[ToolParameter, ...] = ()
    required: Tuple[str, ...] = ()

    def json_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                param.name: {"type": param.type, "description": param.description}
                for param in self.parameters
            },
            "required": list(self.required),
        }

    def to_tool_spec(self) -> Dict[str, Any]:
        """Bedrock Converse toolSpec entry."""
        return {
            "toolSpec": {
                "name": self.name.value,
                "description": self.description,
                "inputSchema": {"json": self.json_schema()},
            }
        }


TOOL_DESCRIPTIONS: Dict[ToolName, ToolDescription] = {
    ToolName.FETCH_TOP_NEWS: ToolDescription(
        name=ToolName.FETCH_TOP_NEWS,
        description=(
            "Fetch the latest top news articles from Google News. Can filter by category, "
            "search for specific topics, and specify language/country preferences."
        ),
        parameters=(
            ToolParameter("language", "string",
                          "Language code for news (e.g., 'en-US', 'es-ES', 'fr-FR'). Default is 'en-US'"),
            ToolParameter("country", "string",
                          "Country code for news (e.g., 'US', 'GB', 'CA'). Default is 'US'"),
            ToolParameter("maxArticles", "number",
                          "Maximum number of articles to fetch (1-50). Default is 10"),
            ToolParameter("category", "string",
                          "News category: " + ", ".join(get_available_categories())),
            ToolParameter("searchQuery", "string",
                          "Search for specific topics or keywords in news"),
        ),
    ),
}


def default_parameters(settings: Optional[NewsSourceSettings] = None) -> Dict[str, Any]:
    """Parameters echoed when the arguments could not be read at all."""
    settings = settings or NewsSourceSettings()
    return NewsQuery(
        language=settings.default_language,
        country=settings.default_country,
        max_articles=settings.default_max_articles
    ).to_parameters()


def echo_parameters(arguments: Any, settings: Optional[NewsSourceSettings] = None) -> Dict[str, Any]:
    """Echo raw arguments over the defaults for failure payloads."""
    parameters = default_parameters(settings)
    if isinstance(arguments, Mapping):
        for key in parameters:
            if arguments.get(key) not in (None, ""):
                parameters[key] = arguments[key]
    return parameters


def success_payload(parameters: Dict[str, Any], articles: Sequence[ArticleRecord]) -> str:
    """Serialize a successful news result."""
    return json.dumps({
        "success": True,
        "totalArticles": len(articles),
        "parameters": parameters,
        "articles": [
            {
                "id": index + 1,
                "title": article.title,
                "source": article.source,
                "link": article.link,
                "publishedTime": article.published_time,
                "description": article.description,
                "image": article.image,
                "category": article.category,
            }
            for index, article in enumerate(articles)
        ],
    }, indent=2)


def failure_payload(error: str, parameters: Dict[str, Any]) -> str:
    """Serialize a failed news result."""
    return json.dumps({
        "success": False,
        "error": error,
        "parameters": parameters,
    }, indent=2)


def decode_arguments(arguments: Any) -> Mapping[str, Any]:
    """
    Decode a model-proposed argument set.

    Arguments arrive either as an already decoded object or as JSON text.

    Raises:
        InvalidArgumentError: If the arguments are not a JSON object
    """
    if arguments is None:
        return {}
    if isinstance(arguments, str):
        if not arguments.strip():
            return {}
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(f"Tool arguments are not valid JSON: {e.msg}", value=arguments) from e
    if not isinstance(arguments, Mapping):
        raise InvalidArgumentError(
            f"Tool arguments must be an object, got {type(arguments).__name__}",
            value=arguments
        )
    return arguments


def make_fetch_top_news(
    service: NewsRetrievalService,
    settings: Optional[NewsSourceSettings] = None,
    logger: Optional[StructuredLogger] = None
) -> ToolFunction:
    """
    Build the fetch_top_news capability bound to a retrieval service.

    Args:
        service: News retrieval service
        settings: Query defaults and article cap
        logger: Structured logger

    Returns:
        Capability returning a JSON ToolResult string
    """
    settings = settings or NewsSourceSettings()
    logger = logger or get_logger(__name__)

    def fetch_top_news(arguments: Any) -> str:
        # Echo the decoded object when decoding succeeded, else the raw input
        decoded = arguments
        try:
            decoded = decode_arguments(arguments)
            query = NewsQuery.from_arguments(decoded, settings)
        except InvalidArgumentError as e:
            logger.warning("Invalid news tool arguments", error_message=str(e), **e.details)
            return failure_payload(str(e), echo_parameters(decoded, settings))

        try:
            articles = service.retrieve(query)
        except RetrievalError as e:
            logger.error("News retrieval failed", error=e)
            return failure_payload(str(e), query.to_parameters())
        except Exception as e:
            logger.error("Unexpected error in news tool", error=e)
            return failure_payload(str(e) or "Unknown error", query.to_parameters())

        logger.info(f"News tool returned {len(articles)} articles")
        return success_payload(query.to_parameters(), articles)

    return fetch_top_news


class ToolRegistry:
    """Fixed mapping from tool name to capability."""

    def __init__(
        self,
        functions: Mapping[ToolName, ToolFunction],
        descriptions: Mapping[ToolName, ToolDescription] = TOOL_DESCRIPTIONS,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize the registry.

        Raises:
            ValueError: If any ToolName lacks a capability or a description
        """
        missing = [name.value for name in ToolName if name not in functions or name not in descriptions]
        if missing:
            raise ValueError(f"Tool registry is missing entries for: {', '.join(missing)}")

        self._functions = dict(functions)
        self._descriptions = dict(descriptions)
        self.logger = logger or get_logger(__name__)

    @property
    def names(self) -> List[str]:
        return [name.value for name in ToolName]

    def describe(self) -> List[ToolDescription]:
        return [self._descriptions[name] for name in ToolName]

    def tool_specs(self) -> List[Dict[str, Any]]:
        """Tool descriptions in Bedrock toolConfig form."""
        return [description.to_tool_spec() for description in self.describe()]

    def lookup(self, tool_name: str) -> ToolFunction:
        try:
            return self._functions[ToolName(tool_name)]
        except ValueError:
            raise UnrecognizedCapabilityError(tool_name) from None

    def dispatch(self, invocation: ToolInvocationRequest) -> str:
        """
        Run one tool invocation.

        Args:
            invocation: The model-issued invocation

        Returns:
            JSON ToolResult string

        Raises:
            UnrecognizedCapabilityError: If the tool name is not registered
        """
        function = self.lookup(invocation.tool_name)
        self.logger.info(
            f'Calling function "{invocation.tool_name}"',
            tool_call_id=invocation.invocation_id,
            arguments=invocation.arguments
        )
        return function(invocation.arguments)


def create_tool_registry(
    service: NewsRetrievalService,
    settings: Optional[NewsSourceSettings] = None,
    logger: Optional[StructuredLogger] = None
) -> ToolRegistry:
    """Build the registry of all tools backed by the given retrieval service."""
    return ToolRegistry(
        {ToolName.FETCH_TOP_NEWS: make_fetch_top_news(service, settings, logger=logger)},
        logger=logger
    )


def usage_examples() -> List[Dict[str, Any]]:
    """Example argument sets for fetch_top_news."""
    return [
        {"description": "Get latest general news", "arguments": {}},
        {"description": "Get technology news", "arguments": {"category": "TECHNOLOGY", "maxArticles": 5}},
        {"description": "Search for specific topic", "arguments": {"searchQuery": "artificial intelligence", "maxArticles": 8}},
        {"description": "Get news in Spanish", "arguments": {"language": "es-ES", "country": "ES", "maxArticles": 5}},
        {"description": "Get sports news from UK", "arguments": {"category": "SPORTS", "country": "GB", "maxArticles": 7}},
    ]
