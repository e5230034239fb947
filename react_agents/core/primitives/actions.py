"""
Decisions emitted by an agent and the steps recorded by the executor loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union


class DecisionKind(str, Enum):
    """Discriminator shared by every agent decision."""

    ACTION = "action"
    FINISH = "finish"


@dataclass(frozen=True)
class AgentAction:
    """
    Indicates that the agent should execute a tool invocation.

    ``log`` keeps the verbatim model text that produced the action so it can
    be replayed into the scratchpad on the next turn.
    """

    tool: str
    tool_input: str
    log: str
    kind: DecisionKind = field(default=DecisionKind.ACTION, init=False)


@dataclass(frozen=True)
class AgentFinish:
    """
    Signals that the agent has produced a final answer.
    """

    return_values: Mapping[str, str]
    log: str = ""
    kind: DecisionKind = field(default=DecisionKind.FINISH, init=False)

    @property
    def output(self) -> str:
        return self.return_values.get("output", "")


AgentDecision = Union[AgentAction, AgentFinish]


@dataclass(frozen=True)
class AgentStep:
    """One completed iteration: the action taken and what the tool returned."""

    action: AgentAction
    observation: str
