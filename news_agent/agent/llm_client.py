"""
Model client using the AWS Bedrock Converse API.

This module turns the dialogue history into a Converse request that carries
the published tool descriptions, and turns the reply into a ModelResponse:
plain text, an ordered list of tool invocations, or nothing.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import boto3
from botocore.config import Config

from .error_handler import (
    ModelCallError, ModelServiceError, RetryConfig, classify_model_error
)
from .messages import Message, ModelResponse, Role, ToolInvocationRequest
from ..config.logging import StructuredLogger, get_logger
from ..config.models import ModelSettings
from ..config.timeouts import TimeoutConfig


# Converse rejects blank text blocks, so empty user turns are sent as this
EMPTY_TEXT_PLACEHOLDER = "(empty message)"


def _text_blocks(content: Any) -> List[Dict[str, Any]]:
    if isinstance(content, str):
        return [{"text": content}] if content.strip() else []

    blocks = []
    for part in content or []:
        if isinstance(part, dict) and part.get("type") == "text" and (part.get("text") or "").strip():
            blocks.append({"text": part["text"]})
    return blocks


def build_converse_request(messages: Sequence[Message]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Convert the dialogue history to Converse API shape.

    System messages become the separate system parameter. Tool results are
    sent as toolResult blocks in a user message, and consecutive messages
    with the same Converse role are merged into one.

    Args:
        messages: Full ordered dialogue history

    Returns:
        Tuple of (system blocks, converse messages)
    """
    system: List[Dict[str, Any]] = []
    converse: List[Dict[str, Any]] = []

    for message in messages:
        if message.role == Role.SYSTEM:
            system.extend(_text_blocks(message.content))
            continue

        if message.role == Role.USER:
            role = "user"
            blocks = _text_blocks(message.content) or [{"text": EMPTY_TEXT_PLACEHOLDER}]
        elif message.role == Role.ASSISTANT:
            role = "assistant"
            blocks = _text_blocks(message.content)
            for call in message.tool_calls:
                blocks.append({
                    "toolUse": {
                        "toolUseId": call.invocation_id,
                        "name": call.tool_name,
                        "input": call.arguments if isinstance(call.arguments, dict) else {}
                    }
                })
            if not blocks:
                continue
        else:
            role = "user"
            blocks = [{
                "toolResult": {
                    "toolUseId": message.tool_call_id,
                    "content": [{"text": message.content}]
                }
            }]

        if converse and converse[-1]["role"] == role:
            converse[-1]["content"].extend(blocks)
        else:
            converse.append({"role": role, "content": list(blocks)})

    return system, converse


def parse_converse_response(response: Dict[str, Any]) -> ModelResponse:
    """
    Classify a Converse API response.

    Args:
        response: Raw response from bedrock-runtime converse

    Returns:
        ModelResponse with tool invocations in the order the model issued them

    Raises:
        ModelServiceError: If the response structure is not recognized
    """
    try:
        content = response["output"]["message"].get("content") or []
    except (KeyError, TypeError, AttributeError) as e:
        raise ModelServiceError(
            f"Invalid model response structure: {str(e)}",
            error_code="INVALID_RESPONSE"
        )

    texts = []
    tool_calls = []
    for block in content:
        if "toolUse" in block:
            tool_use = block["toolUse"]
            tool_calls.append(ToolInvocationRequest(
                invocation_id=tool_use.get("toolUseId", ""),
                tool_name=tool_use.get("name", ""),
                arguments=tool_use.get("input", {})
            ))
        elif "text" in block:
            texts.append(block["text"])

    text = "".join(texts).strip()
    return ModelResponse(
        text=text or None,
        tool_calls=tuple(tool_calls),
        stop_reason=response.get("stopReason")
    )


class BedrockChatModel:
    """
    Chat model backed by AWS Bedrock.

    Sends the whole history on every call; the model decides between a text
    answer and tool invocations based on the published tool specs.
    """

    def __init__(
        self,
        settings: ModelSettings,
        tool_specs: Optional[List[Dict[str, Any]]] = None,
        timeouts: Optional[TimeoutConfig] = None,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize the model client.

        Args:
            settings: Model backend settings
            tool_specs: Bedrock toolSpec entries published to the model
            timeouts: Timeout and backoff configuration
            logger: Structured logger
        """
        self.settings = settings
        self.tool_specs = list(tool_specs or [])
        self.timeouts = timeouts or TimeoutConfig()
        self.logger = logger or get_logger(__name__)
        self._bedrock_client = None
        self.retry_config = RetryConfig.from_timeouts(self.timeouts, settings.max_retries)

    @property
    def bedrock_client(self):
        """Lazy initialization of Bedrock client with timeout configuration."""
        if self._bedrock_client is None:
            config = Config(
                region_name=self.settings.region,
                retries={'max_attempts': 0},  # We handle retries manually
                read_timeout=max(self.settings.timeout_seconds, self.timeouts.model_read_timeout),
                connect_timeout=self.timeouts.model_connect_timeout
            )

            self._bedrock_client = boto3.client(
                'bedrock-runtime',
                config=config
            )
        return self._bedrock_client

    def build_request(self, messages: Sequence[Message]) -> Dict[str, Any]:
        """Build keyword arguments for the converse call."""
        system, converse_messages = build_converse_request(messages)
        if not converse_messages:
            raise ModelServiceError("No conversation messages to send", error_code="EMPTY_CONVERSATION")

        request: Dict[str, Any] = {
            "modelId": self.settings.model_id,
            "messages": converse_messages,
            "inferenceConfig": {
                "maxTokens": self.settings.max_tokens,
                "temperature": self.settings.temperature
            }
        }
        if system:
            request["system"] = system
        if self.tool_specs:
            request["toolConfig"] = {"tools": self.tool_specs}
        return request

    def complete(self, messages: Sequence[Message]) -> ModelResponse:
        """
        Ask the model for the next turn.

        Args:
            messages: Full ordered dialogue history

        Returns:
            Classified model response

        Raises:
            ModelCallError: If the call fails after retries or the reply is malformed
        """
        request = self.build_request(messages)
        start_time = time.time()

        try:
            raw_response = self._converse_with_retry(request)
            response = parse_converse_response(raw_response)
        except ModelCallError as e:
            self.logger.log_model_call(
                self.settings.model_id,
                int((time.time() - start_time) * 1000),
                success=False,
                error=str(e),
                error_code=e.error_code
            )
            raise

        self.logger.log_model_call(
            self.settings.model_id,
            int((time.time() - start_time) * 1000),
            success=True,
            stop_reason=response.stop_reason,
            tool_calls=len(response.tool_calls)
        )
        return response

    def _converse_with_retry(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Invoke the Converse API with retry logic and error handling.

        Raises:
            ModelCallError: If the call fails after retries
        """
        last_error = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                return self.bedrock_client.converse(**request)

            except Exception as e:
                classified_error = classify_model_error(e)
                last_error = classified_error

                if attempt == self.retry_config.max_retries:
                    self.logger.error(
                        f"Max retries ({self.retry_config.max_retries}) exceeded for model call",
                        error=classified_error
                    )
                    raise classified_error

                if not classified_error.retryable:
                    self.logger.error("Non-retryable model error", error=classified_error)
                    raise classified_error

                delay = self.retry_config.delay_for(attempt)

                self.logger.warning(
                    f"Model call attempt {attempt + 1}/{self.retry_config.max_retries + 1} failed: "
                    f"{classified_error}. Retrying in {delay:.2f}s"
                )

                time.sleep(delay)

        # This should never be reached
        raise last_error or ModelServiceError("Unknown retry error", error_code="UNKNOWN")
