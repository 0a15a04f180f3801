"""
Conversation messages and response classification.

The dialogue history is an ordered list of Message values: one system message,
then user turns, assistant turns and tool results. Tool results carry the id
of the invocation they answer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


# Multi-part content, e.g. [{"type": "text", "text": "..."}, {"type": "image", ...}]
ContentPart = Dict[str, Any]
Content = Union[str, List[ContentPart]]


class MalformedStateError(RuntimeError):
    """Raised when the conversation history breaks its own invariants."""
    pass


@dataclass(frozen=True)
class ToolInvocationRequest:
    """A model-issued request to run a named tool."""

    invocation_id: str
    tool_name: str
    arguments: Any = field(default_factory=dict)


@dataclass(frozen=True)
class Message:
    """One entry of the conversation history."""

    role: Role
    content: Content = ""
    tool_call_id: Optional[str] = None
    tool_calls: Tuple[ToolInvocationRequest, ...] = ()

    @classmethod
    def system(cls, content: str) -> 'Message':
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: Content) -> 'Message':
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: Optional[str] = None, tool_calls: Tuple[ToolInvocationRequest, ...] = ()) -> 'Message':
        return cls(role=Role.ASSISTANT, content=content or "", tool_calls=tuple(tool_calls))

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> 'Message':
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id)


class ResponseKind(Enum):
    """How a model response is handled by the dialogue loop."""

    TEXT = "text"
    TOOL_CALLS = "tool_calls"
    EMPTY = "empty"


@dataclass(frozen=True)
class ModelResponse:
    """Result of one model call."""

    text: Optional[str] = None
    tool_calls: Tuple[ToolInvocationRequest, ...] = ()
    stop_reason: Optional[str] = None

    @property
    def kind(self) -> ResponseKind:
        if self.tool_calls:
            return ResponseKind.TOOL_CALLS
        if self.text and self.text.strip():
            return ResponseKind.TEXT
        return ResponseKind.EMPTY


def classify_response(response: Optional[ModelResponse]) -> ResponseKind:
    """Classify a model response; a missing response counts as empty."""
    if response is None:
        return ResponseKind.EMPTY
    return response.kind


# A subset of the phrases people use to end a chat; matched as lower-case substrings
CHAT_END_SIGNALS = (
    "bye",
    "goodbye",
    "exit",
    "quit",
    "see you",
    "later",
    "farewell",
    "good night",
    "end chat",
    "close",
    "i'm done",
    "i am done",
    "that's all",
    "finish",
    "stop",
)


def first_text_segment(content: Content) -> Optional[str]:
    """
    Text used for end-of-conversation detection.

    Plain string content is returned as is. For multi-part content only the
    first part counts, and only when it is a text part: a message that starts
    with an attachment is never treated as a goodbye.
    """
    if isinstance(content, str):
        return content
    if not content:
        return None
    first = content[0]
    if isinstance(first, dict) and first.get("type") == "text":
        return first.get("text") or ""
    return None


def is_chat_ending(message: Optional[Message]) -> bool:
    """
    Check whether a message ends the conversation.

    Only user-authored messages can end the conversation.

    Args:
        message: The most recent message of the history

    Returns:
        True if the message contains an end-of-conversation phrase

    Raises:
        MalformedStateError: If there is no message to check
    """
    if message is None:
        raise MalformedStateError("Cannot find the message to check for end of conversation")

    if message.role != Role.USER:
        return False

    text = first_text_segment(message.content)
    if text is None:
        return False

    lowered = text.lower()
    return any(signal in lowered for signal in CHAT_END_SIGNALS)
