"""
Interactive console front end for the News Agent.

Loads configuration, configures logging, wires the retrieval service, tool
registry and model client into a dialogue loop, and runs it on stdin/stdout.
"""

import argparse
import json
import sys
import uuid
from typing import Callable, List, Optional

from .agent.llm_client import BedrockChatModel
from .agent.loop import DialogueLoop
from .agent.tools import create_tool_registry, usage_examples
from .config.logging import LogContext, configure_logging, get_logger
from .config.manager import ConfigManager
from .config.models import SUPPORTED_BROWSER_BACKENDS, SystemConfig
from .config.sites import get_available_categories, get_available_languages
from .config.validation import VALID_LOG_LEVELS
from .scraper.service import NewsRetrievalService


def build_dialogue_loop(
    config: SystemConfig,
    read_user_input: Callable[[], str],
    write_output: Callable[[str], None] = print,
    session_id: Optional[str] = None
) -> DialogueLoop:
    """
    Wire all components for one conversation.

    Args:
        config: System configuration
        read_user_input: Blocking call returning the next user line
        write_output: Sink for text shown to the user
        session_id: Identifier attached to every log line of the conversation

    Returns:
        Ready-to-run DialogueLoop
    """
    session_id = session_id or uuid.uuid4().hex[:12]

    def component_logger(name: str):
        return get_logger(f"news_agent.{name}", LogContext(session_id=session_id))

    logger = component_logger("cli")

    service = NewsRetrievalService(
        browser_settings=config.browser_settings,
        timeouts=config.timeouts,
        logger=component_logger("scraper")
    )
    registry = create_tool_registry(service, config.news_settings, logger=component_logger("tools"))
    model = BedrockChatModel(
        config.model_settings,
        tool_specs=registry.tool_specs(),
        timeouts=config.timeouts,
        logger=component_logger("model")
    )

    logger.info("Components initialized successfully", config=config.to_summary())

    return DialogueLoop(
        model=model,
        registry=registry,
        read_user_input=read_user_input,
        write_output=write_output,
        logger=component_logger("loop")
    )


def print_examples(write_output: Callable[[str], None] = print) -> None:
    """Print supported categories, languages and example tool arguments."""
    write_output("Available categories: " + ", ".join(get_available_categories()))
    write_output("Available languages:")
    for language, countries in get_available_languages().items():
        write_output(f"  {language}: {', '.join(countries)}")
    write_output("Usage examples:")
    for example in usage_examples():
        write_output(f"  {example['description']}: {json.dumps(example['arguments'])}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="news-agent",
        description="Conversational news agent backed by AWS Bedrock"
    )
    parser.add_argument("--log-level", choices=VALID_LOG_LEVELS, help="Override the configured log level")
    parser.add_argument("--config-dir", help="Directory containing news_agent.json")
    parser.add_argument("--browser", choices=SUPPORTED_BROWSER_BACKENDS, help="Page loading backend")
    parser.add_argument("--examples", action="store_true", help="Print usage examples and exit")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point."""
    args = parse_args(argv)

    if args.examples:
        print_examples()
        return 0

    config = ConfigManager(args.config_dir).load_configuration()
    if args.log_level:
        config.log_level = args.log_level
    if args.browser:
        config.browser_settings.backend = args.browser

    configure_logging(config.log_level, config.structured_logging)

    loop = build_dialogue_loop(config, read_user_input=lambda: input("You: "))

    try:
        loop.run()
    except (EOFError, KeyboardInterrupt):
        print()
        print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
