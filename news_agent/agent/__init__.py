"""
Conversation module for the News Agent.

This module provides the dialogue loop, the message model, the tool registry
and the Bedrock model client.
"""

# Lazy imports to avoid loading boto3 until the model client is needed
__all__ = [
    'DialogueLoop',
    'DialogueState',
    'Message',
    'ModelResponse',
    'ToolInvocationRequest',
    'MalformedStateError',
    'is_chat_ending',
    'ToolName',
    'ToolRegistry',
    'UnrecognizedCapabilityError',
    'create_tool_registry',
    'BedrockChatModel',
    'ModelCallError'
]

_EXPORTS = {
    'DialogueLoop': 'loop',
    'DialogueState': 'loop',
    'Message': 'messages',
    'ModelResponse': 'messages',
    'ToolInvocationRequest': 'messages',
    'MalformedStateError': 'messages',
    'is_chat_ending': 'messages',
    'ToolName': 'tools',
    'ToolRegistry': 'tools',
    'UnrecognizedCapabilityError': 'tools',
    'create_tool_registry': 'tools',
    'BedrockChatModel': 'llm_client',
    'ModelCallError': 'error_handler',
}


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module
        module = import_module(f".{_EXPORTS[name]}", __name__)
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
