"""
Core primitives and agent components that compose the pipeline.
"""

from .primitives import (
    AgentAction,
    AgentFinish,
    AgentStep,
    BufferMemory,
    ChatMessage,
    MessageRole,
    Tool,
    ToolRegistry,
)
from .agent import AgentExecutor, ExecutorConfig

__all__ = [
    "AgentAction",
    "AgentFinish",
    "AgentStep",
    "BufferMemory",
    "ChatMessage",
    "MessageRole",
    "Tool",
    "ToolRegistry",
    "AgentExecutor",
    "ExecutorConfig",
]
