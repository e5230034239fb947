"""
Core agent orchestration components (parsing, prompting, planning, execution).
"""

from .agent import Agent, validate_tools
from .executor import AgentExecutor, AgentRunResult, ExecutorConfig, ExecutorState
from .parsers import (
    AgentOutputParser,
    ChatOutputParser,
    ConversationalOutputParser,
    ReActOutputParser,
)
from .variants import ChatAgent, ConversationalChatAgent, ZeroShotAgent

__all__ = [
    "Agent",
    "validate_tools",
    "AgentExecutor",
    "AgentRunResult",
    "ExecutorConfig",
    "ExecutorState",
    "AgentOutputParser",
    "ChatOutputParser",
    "ConversationalOutputParser",
    "ReActOutputParser",
    "ChatAgent",
    "ConversationalChatAgent",
    "ZeroShotAgent",
]
