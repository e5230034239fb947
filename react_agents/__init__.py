"""
High-level exports for the ReAct agent framework.

``initialize_agent_executor`` is the usual entry point; the agent variants,
parsers and primitives are exported for callers that assemble their own.
"""

from .core.agent import (
    AgentExecutor,
    AgentRunResult,
    ChatAgent,
    ConversationalChatAgent,
    ExecutorConfig,
    ExecutorState,
    ZeroShotAgent,
)
from .core.primitives import (
    AgentAction,
    AgentCancelledError,
    AgentError,
    AgentFinish,
    AgentRunError,
    AgentStep,
    BufferMemory,
    ChatMessage,
    ConfigurationError,
    MessageRole,
    ParseError,
    Tool,
    ToolExecutionError,
    ToolInvalidError,
    ToolRegistry,
)
from .initialize import AgentType, initialize_agent_executor

__all__ = [
    "AgentExecutor",
    "AgentRunResult",
    "ChatAgent",
    "ConversationalChatAgent",
    "ExecutorConfig",
    "ExecutorState",
    "ZeroShotAgent",
    "AgentAction",
    "AgentCancelledError",
    "AgentError",
    "AgentFinish",
    "AgentRunError",
    "AgentStep",
    "BufferMemory",
    "ChatMessage",
    "ConfigurationError",
    "MessageRole",
    "ParseError",
    "Tool",
    "ToolExecutionError",
    "ToolInvalidError",
    "ToolRegistry",
    "AgentType",
    "initialize_agent_executor",
]
