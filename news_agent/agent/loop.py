"""
Dialogue loop for the News Agent.

The loop owns the conversation history. It alternates between reading user
input, asking the model for the next turn, and running the tools the model
asks for. Tool invocations of one turn run sequentially in the order the
model issued them, so tool results always follow their assistant turn in the
same order as the requests.
"""

from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from . import prompts
from .messages import (
    MalformedStateError, Message, ModelResponse, ResponseKind,
    ToolInvocationRequest, classify_response, is_chat_ending
)
from .tools import ToolRegistry
from ..config.logging import StructuredLogger, get_logger


class ChatModel(Protocol):
    """Model-call collaborator used by the loop."""

    def complete(self, messages: Sequence[Message]) -> Optional[ModelResponse]: ...


class DialogueState(Enum):
    """States of the dialogue loop."""

    AWAITING_USER = "awaiting_user"
    AWAITING_MODEL = "awaiting_model"
    DISPATCHING_TOOLS = "dispatching_tools"
    ENDED = "ended"


class DialogueLoop:
    """
    Conversation state machine.

    A failed turn (model error, unknown tool) never ends the conversation: the
    history is rolled back to the start of the failed assistant turn, the user
    sees the fallback notice and is asked for new input. Only
    MalformedStateError escapes run().
    """

    def __init__(
        self,
        model: ChatModel,
        registry: ToolRegistry,
        read_user_input: Callable[[], str],
        write_output: Callable[[str], None] = print,
        system_prompt: str = prompts.SYSTEM_PROMPT,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize the dialogue loop.

        Args:
            model: Model-call collaborator
            registry: Tool registry used to run tool invocations
            read_user_input: Blocking call returning the next raw user text
            write_output: Sink for text shown to the user
            system_prompt: System message placed first in the history
            logger: Structured logger
        """
        self.model = model
        self.registry = registry
        self.read_user_input = read_user_input
        self.write_output = write_output
        self.system_prompt = system_prompt
        self.logger = logger or get_logger(__name__)

        self.messages: List[Message] = []
        self.state = DialogueState.AWAITING_USER

    def start(self) -> None:
        """Show the welcome notice and seed the history with the system prompt and first user turn."""
        self.logger.set_context(component="dialogue_loop")
        self.logger.info("Dialogue loop started")
        self.write_output(prompts.WELCOME)
        self.messages = [Message.system(self.system_prompt)]
        self._request_user_input()

    def run(self) -> List[Message]:
        """
        Run the conversation until the user ends it.

        Returns:
            The final conversation history

        Raises:
            MalformedStateError: If the history invariants are broken
        """
        with self.logger.timed_operation("conversation"):
            self.start()

            try:
                while self.step() is not DialogueState.ENDED:
                    pass
            finally:
                self.logger.log_metrics({"messages": len(self.messages)}, "conversation")

        self.write_output(prompts.END)
        return self.messages

    def step(self) -> DialogueState:
        """
        Run one model round.

        Returns:
            The state after the round
        """
        if is_chat_ending(self.messages[-1] if self.messages else None):
            self.logger.info("End of conversation requested")
            self.state = DialogueState.ENDED
            return self.state

        checkpoint = len(self.messages)
        self.state = DialogueState.AWAITING_MODEL

        try:
            response = self.model.complete(list(self.messages))
            kind = classify_response(response)

            if kind is ResponseKind.TOOL_CALLS:
                self.messages.append(Message.assistant(response.text, response.tool_calls))
                self.state = DialogueState.DISPATCHING_TOOLS
                self._dispatch_tools(response.tool_calls)
                # Re-invoke the model with the tool results on the next step
                self.state = DialogueState.AWAITING_MODEL
                return self.state

            if kind is ResponseKind.TEXT:
                self.messages.append(Message.assistant(response.text))
                self.write_output(f"Assistant: {response.text}")
            else:
                self.logger.warning("Model returned an empty response")
                self.write_output(prompts.FALLBACK)

        except MalformedStateError:
            raise
        except Exception as e:
            self.logger.error("Error processing conversation turn", error=e)
            del self.messages[checkpoint:]
            self.write_output(prompts.FALLBACK)

        self._request_user_input()
        return self.state

    def _dispatch_tools(self, tool_calls: Sequence[ToolInvocationRequest]) -> None:
        for invocation in tool_calls:
            result = self.registry.dispatch(invocation)
            self.messages.append(Message.tool(invocation.invocation_id, result))

    def _request_user_input(self) -> None:
        self.state = DialogueState.AWAITING_USER
        self.messages.append(Message.user(self.read_user_input()))
