"""
Unit tests for the tool registry and the news tool.
"""

import json
import pytest
from unittest.mock import Mock

from news_agent.agent.messages import ToolInvocationRequest
from news_agent.agent.tools import (
    TOOL_DESCRIPTIONS, ToolName, ToolRegistry, UnrecognizedCapabilityError,
    create_tool_registry, decode_arguments, make_fetch_top_news, usage_examples
)
from news_agent.scraper.extractor import ArticleRecord
from news_agent.scraper.query import InvalidArgumentError, NewsQuery
from news_agent.scraper.service import RetrievalError


def record(i, category=None):
    return ArticleRecord(
        title=f"Title {i}",
        description=f"Description {i}",
        link=f"https://news.google.com/articles/{i}",
        image=None,
        source=f"Source {i}",
        published_time="2 hours ago",
        category=category
    )


class TestFetchTopNews:
    """Test cases for the fetch_top_news capability."""

    @pytest.fixture
    def service(self):
        return Mock()

    @pytest.fixture
    def fetch_top_news(self, service):
        return make_fetch_top_news(service, logger=Mock())

    def test_success_payload(self, service, fetch_top_news):
        """Test the success payload shape."""
        service.retrieve.return_value = [record(0, "TECHNOLOGY"), record(1, "TECHNOLOGY")]

        payload = json.loads(fetch_top_news({"category": "TECHNOLOGY", "maxArticles": 2}))

        assert payload == {
            "success": True,
            "totalArticles": 2,
            "parameters": {
                "language": "en-US",
                "country": "US",
                "maxArticles": 2,
                "category": "TECHNOLOGY",
                "searchQuery": "none"
            },
            "articles": [
                {
                    "id": 1,
                    "title": "Title 0",
                    "source": "Source 0",
                    "link": "https://news.google.com/articles/0",
                    "publishedTime": "2 hours ago",
                    "description": "Description 0",
                    "image": None,
                    "category": "TECHNOLOGY"
                },
                {
                    "id": 2,
                    "title": "Title 1",
                    "source": "Source 1",
                    "link": "https://news.google.com/articles/1",
                    "publishedTime": "2 hours ago",
                    "description": "Description 1",
                    "image": None,
                    "category": "TECHNOLOGY"
                }
            ]
        }
        service.retrieve.assert_called_once_with(NewsQuery(category="TECHNOLOGY", max_articles=2))

    def test_payload_is_indented_json(self, service, fetch_top_news):
        service.retrieve.return_value = []
        result = fetch_top_news({})
        assert result.startswith("{\n  \"success\": true")

    def test_json_text_arguments(self, service, fetch_top_news):
        """Test arguments delivered as JSON text."""
        service.retrieve.return_value = []

        payload = json.loads(fetch_top_news('{"searchQuery": "climate", "country": "gb"}'))

        assert payload["success"] is True
        assert payload["parameters"]["searchQuery"] == "climate"
        assert payload["parameters"]["country"] == "GB"

    def test_retrieval_error_payload(self, service, fetch_top_news):
        """Test that retrieval failures become failure payloads."""
        service.retrieve.side_effect = RetrievalError("Navigation timeout of 30000 ms exceeded")

        payload = json.loads(fetch_top_news({"searchQuery": "elections"}))

        assert payload == {
            "success": False,
            "error": "Navigation timeout of 30000 ms exceeded",
            "parameters": {
                "language": "en-US",
                "country": "US",
                "maxArticles": 10,
                "category": "general",
                "searchQuery": "elections"
            }
        }

    def test_invalid_argument_payload(self, service, fetch_top_news):
        """Test that invalid arguments are reported without retrieval."""
        payload = json.loads(fetch_top_news({"maxArticles": -3, "category": "SPORTS"}))

        assert payload["success"] is False
        assert "maxArticles" in payload["error"]
        assert payload["parameters"]["maxArticles"] == -3
        assert payload["parameters"]["category"] == "SPORTS"
        service.retrieve.assert_not_called()

    def test_invalid_json_text_arguments_echoed(self, service, fetch_top_news):
        """Test that JSON text arguments failing validation echo what was passed."""
        payload = json.loads(fetch_top_news('{"category": "SPORTS", "country": "GB", "maxArticles": -2}'))

        assert payload["success"] is False
        assert payload["parameters"] == {
            "language": "en-US",
            "country": "GB",
            "maxArticles": -2,
            "category": "SPORTS",
            "searchQuery": "none"
        }
        service.retrieve.assert_not_called()

    def test_malformed_json_arguments(self, service, fetch_top_news):
        """Test that undecodable argument text is a failure for that invocation."""
        payload = json.loads(fetch_top_news('{"category": '))

        assert payload["success"] is False
        assert "not valid JSON" in payload["error"]
        assert payload["parameters"]["category"] == "general"
        service.retrieve.assert_not_called()

    def test_unexpected_error_payload(self, service, fetch_top_news):
        """Test that unexpected faults are reported as failure payloads."""
        service.retrieve.side_effect = RuntimeError("boom")

        payload = json.loads(fetch_top_news({}))

        assert payload == {
            "success": False,
            "error": "boom",
            "parameters": NewsQuery().to_parameters()
        }


class TestDecodeArguments:
    """Test cases for argument decoding."""

    def test_mapping_passthrough(self):
        assert decode_arguments({"a": 1}) == {"a": 1}

    def test_empty_values(self):
        assert decode_arguments(None) == {}
        assert decode_arguments("  ") == {}

    def test_non_object_json(self):
        with pytest.raises(InvalidArgumentError):
            decode_arguments("[1, 2]")


class TestToolRegistry:
    """Test cases for ToolRegistry class."""

    def test_dispatch_calls_capability(self):
        capability = Mock(return_value='{"success": true}')
        registry = ToolRegistry({ToolName.FETCH_TOP_NEWS: capability}, logger=Mock())

        result = registry.dispatch(ToolInvocationRequest("call-1", "fetch_top_news", {"maxArticles": 1}))

        assert result == '{"success": true}'
        capability.assert_called_once_with({"maxArticles": 1})

    def test_unknown_tool(self):
        registry = ToolRegistry({ToolName.FETCH_TOP_NEWS: Mock()}, logger=Mock())

        with pytest.raises(UnrecognizedCapabilityError) as exc_info:
            registry.dispatch(ToolInvocationRequest("call-1", "fetch_weather", {}))

        assert exc_info.value.tool_name == "fetch_weather"

    def test_missing_name_is_unrecognized(self):
        registry = ToolRegistry({ToolName.FETCH_TOP_NEWS: Mock()}, logger=Mock())

        with pytest.raises(UnrecognizedCapabilityError):
            registry.dispatch(ToolInvocationRequest("call-1", "", {}))

    def test_registry_must_be_exhaustive(self):
        with pytest.raises(ValueError):
            ToolRegistry({}, logger=Mock())

    def test_tool_specs(self):
        registry = create_tool_registry(Mock(), logger=Mock())

        specs = registry.tool_specs()

        assert len(specs) == 1
        tool_spec = specs[0]["toolSpec"]
        assert tool_spec["name"] == "fetch_top_news"
        schema = tool_spec["inputSchema"]["json"]
        assert set(schema["properties"]) == {"language", "country", "maxArticles", "category", "searchQuery"}
        assert schema["properties"]["maxArticles"]["type"] == "number"
        assert schema["required"] == []

    def test_every_tool_described(self):
        assert set(TOOL_DESCRIPTIONS) == set(ToolName)

    def test_usage_examples_are_valid_queries(self):
        for example in usage_examples():
            NewsQuery.from_arguments(example["arguments"])
