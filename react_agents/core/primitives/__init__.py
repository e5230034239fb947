"""
Foundational data structures shared across the framework.
"""

from .actions import AgentAction, AgentDecision, AgentFinish, AgentStep, DecisionKind
from .errors import (
    AgentCancelledError,
    AgentError,
    AgentRunError,
    ConfigurationError,
    ErrorKind,
    ParseError,
    ToolExecutionError,
    ToolInvalidError,
)
from .memory import BufferMemory, ConversationMemory
from .messages import (
    ChatMessage,
    MessageRole,
    assistant_message,
    coerce_messages,
    system_message,
    user_message,
)
from .tools import Tool, ToolCallable, ToolRegistry

__all__ = [
    "AgentAction",
    "AgentDecision",
    "AgentFinish",
    "AgentStep",
    "DecisionKind",
    "AgentCancelledError",
    "AgentError",
    "AgentRunError",
    "ConfigurationError",
    "ErrorKind",
    "ParseError",
    "ToolExecutionError",
    "ToolInvalidError",
    "BufferMemory",
    "ConversationMemory",
    "ChatMessage",
    "MessageRole",
    "assistant_message",
    "coerce_messages",
    "system_message",
    "user_message",
    "Tool",
    "ToolCallable",
    "ToolRegistry",
]
