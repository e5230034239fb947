"""
Exception types raised by agents and the executor loop.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Tuple

from .actions import AgentStep


class ErrorKind(str, Enum):
    """Categories reported on a failed run."""

    MODEL = "model"
    PARSE = "parse"
    TOOL_EXECUTION = "tool_execution"
    CANCELLED = "cancelled"


class AgentError(RuntimeError):
    """Base class for every error raised by the framework."""


class ConfigurationError(AgentError, ValueError):
    """Raised when an agent or executor is assembled with invalid settings."""


class ParseError(AgentError, ValueError):
    """Raised when model output matches none of the parser's grammars."""

    def __init__(self, message: str, llm_output: str) -> None:
        super().__init__(message)
        self.llm_output = llm_output


class ToolInvalidError(AgentError, LookupError):
    """Raised when the model names a tool that is not registered."""

    def __init__(self, tool: str, valid_tools: Iterable[str]) -> None:
        self.tool = tool
        self.valid_tools = list(valid_tools)
        super().__init__(f"{tool} is not a valid tool, try one of [{', '.join(self.valid_tools)}].")


class ToolExecutionError(AgentError):
    """Raised when a tool invocation fails."""

    def __init__(self, tool: str, message: str) -> None:
        super().__init__(f"Tool '{tool}' failed: {message}")
        self.tool = tool


class AgentRunError(AgentError):
    """
    Fatal failure of an executor run.

    Carries the error category and every step completed before the failure so
    callers can inspect how far the agent got.
    """

    def __init__(self, message: str, *, kind: ErrorKind, history: Iterable[AgentStep] = ()) -> None:
        super().__init__(message)
        self.kind = kind
        self.history: Tuple[AgentStep, ...] = tuple(history)


class AgentCancelledError(AgentRunError):
    """Raised when a run observes its cancellation signal."""

    def __init__(self, history: Iterable[AgentStep] = ()) -> None:
        super().__init__("Agent run was cancelled.", kind=ErrorKind.CANCELLED, history=history)
