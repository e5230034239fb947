"""
Utilities for registering and invoking tools in the agent loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from .errors import ConfigurationError, ToolInvalidError

ToolCallable = Callable[[str], Any]


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    func: ToolCallable
    return_direct: bool = False

    def invoke(self, tool_input: str) -> str:
        result = self.func(tool_input)
        return result if isinstance(result, str) else str(result)

    def __call__(self, tool_input: str) -> str:
        return self.invoke(tool_input)


class ToolRegistry:
    """In-memory registry responsible for resolving tool instances."""

    def __init__(self, tools: Optional[Iterable[Tool]] = None) -> None:
        self._tools: Dict[str, Tool] = {}
        if tools is not None:
            self.update(tools)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ConfigurationError(f"Tool named '{tool.name}' already registered.")
        self._tools[tool.name] = tool

    def update(self, tools: Iterable[Tool]) -> None:
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError as exc:
            raise ToolInvalidError(name, self.names()) from exc

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self):
        return iter(list(self._tools.values()))

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def describe(self) -> str:
        """Return a prompt-friendly description of registered tools."""
        return "\n".join(f"{tool.name}: {tool.description}" for tool in self._tools.values())
