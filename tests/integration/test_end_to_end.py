"""
End-to-end integration test for the News Agent.

Runs the dialogue loop with the real tool registry, retrieval service and
article extractor. The browser is replaced by an in-memory page and the
Bedrock client by a patched boto3 client.
"""

import json
import pytest
from unittest.mock import Mock, patch

from news_agent.agent import prompts
from news_agent.agent.messages import Role
from news_agent.cli import build_dialogue_loop
from news_agent.config.defaults import create_test_config
from news_agent.scraper.browser import PageTimeoutError


TECH_PAGE = """
<html><head><title>Technology - Google News</title></head>
<body>
  <main>
    {items}
  </main>
</body></html>
"""


def tech_page(count):
    items = "".join(
        f"""
        <article>
          <h3>Chip breakthrough {i}</h3>
          <a href="./articles/chip-{i}">Full coverage</a>
          <div class="vr1PYe">Tech Daily</div>
          <time datetime="2024-05-0{i % 9 + 1}T09:00:00Z">{i}h ago</time>
        </article>
        """
        for i in range(count)
    )
    return TECH_PAGE.format(items=items)


class InMemoryPage:
    def __init__(self, html, navigation_error=None):
        self.html = html
        self.navigation_error = navigation_error
        self.url = "about:blank"
        self.visited = []

    def set_user_agent(self, user_agent):
        pass

    def goto(self, url, timeout_ms):
        self.visited.append(url)
        if self.navigation_error:
            raise self.navigation_error
        self.url = url

    def wait_for_any(self, selectors, timeout_ms):
        pass

    def wait(self, delay_ms):
        pass

    def title(self):
        return "Technology - Google News"

    def content(self):
        return self.html


class InMemorySession:
    def __init__(self, page):
        self.page = page
        self.closed = 0

    def new_page(self):
        return self.page

    def close(self):
        self.closed += 1


def converse_text(text):
    return {"output": {"message": {"role": "assistant", "content": [{"text": text}]}}, "stopReason": "end_turn"}


def converse_tool_use(*calls):
    return {
        "output": {"message": {"role": "assistant", "content": [
            {"toolUse": {"toolUseId": call_id, "name": "fetch_top_news", "input": arguments}}
            for call_id, arguments in calls
        ]}},
        "stopReason": "tool_use"
    }


class TestEndToEndIntegration:
    """End-to-end integration tests."""

    @pytest.fixture
    def config(self):
        return create_test_config()

    def run_conversation(self, config, page, converse_responses, user_lines):
        session = InMemorySession(page)
        lines = list(user_lines)
        output = []

        with patch('boto3.client') as mock_boto3, \
                patch('news_agent.scraper.service.create_browser_launcher', return_value=lambda: session):
            bedrock = Mock()
            bedrock.converse.side_effect = list(converse_responses)
            mock_boto3.return_value = bedrock

            loop = build_dialogue_loop(config, read_user_input=lambda: lines.pop(0), write_output=output.append)
            messages = loop.run()

        return messages, output, bedrock, session

    def test_technology_news_conversation(self, config):
        """Test a full tool round trip from user question to answer."""
        page = InMemoryPage(tech_page(10))

        messages, output, bedrock, session = self.run_conversation(
            config,
            page,
            [
                converse_tool_use(("tooluse_1", {"category": "TECHNOLOGY", "maxArticles": 3})),
                converse_text("Here are three technology stories."),
            ],
            ["What's happening in tech?", "Thanks, goodbye!"]
        )

        assert output[0] == prompts.WELCOME
        assert output[1] == "Assistant: Here are three technology stories."
        assert output[-1] == prompts.END
        assert session.closed == 1
        assert "/topics/" in page.visited[0]

        tool_message = messages[3]
        assert tool_message.role is Role.TOOL
        assert tool_message.tool_call_id == "tooluse_1"
        payload = json.loads(tool_message.content)
        assert payload["success"] is True
        assert payload["totalArticles"] == 3
        assert [a["title"] for a in payload["articles"]] == [
            "Chip breakthrough 0", "Chip breakthrough 1", "Chip breakthrough 2"
        ]
        assert payload["articles"][0]["link"] == "https://news.google.com/articles/chip-0"
        assert payload["articles"][0]["category"] == "TECHNOLOGY"

        # Second model call carries the tool result back as a toolResult block
        second_call = bedrock.converse.call_args_list[1].kwargs
        tool_result = second_call["messages"][-1]["content"][0]["toolResult"]
        assert tool_result["toolUseId"] == "tooluse_1"
        assert json.loads(tool_result["content"][0]["text"]) == payload

    def test_navigation_timeout_reported_to_model(self, config):
        """Test that a retrieval failure reaches the model as a failure result."""
        page = InMemoryPage("", navigation_error=PageTimeoutError("Navigation timeout of 1000 ms exceeded"))

        messages, output, _, session = self.run_conversation(
            config,
            page,
            [
                converse_tool_use(("tooluse_1", {"searchQuery": "space launch"})),
                converse_text("I couldn't reach Google News right now."),
            ],
            ["Any space launch news?", "ok bye"]
        )

        payload = json.loads(messages[3].content)
        assert payload["success"] is False
        assert "Navigation timeout" in payload["error"]
        assert payload["parameters"]["searchQuery"] == "space launch"
        assert session.closed == 1
        assert "Assistant: I couldn't reach Google News right now." in output

    def test_two_tool_calls_in_one_turn(self, config):
        """Test that results are appended in request order."""
        page = InMemoryPage(tech_page(4))

        messages, _, _, session = self.run_conversation(
            config,
            page,
            [
                converse_tool_use(
                    ("tooluse_a", {"category": "TECHNOLOGY", "maxArticles": 1}),
                    ("tooluse_b", {"maxArticles": "many"}),
                ),
                converse_text("Done."),
            ],
            ["Compare two feeds", "goodbye"]
        )

        tool_messages = [m for m in messages if m.role is Role.TOOL]
        assert [m.tool_call_id for m in tool_messages] == ["tooluse_a", "tooluse_b"]
        assert json.loads(tool_messages[0].content)["success"] is True
        assert json.loads(tool_messages[1].content)["success"] is False
        assert session.closed == 1
