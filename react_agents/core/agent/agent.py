"""
Agent interface: one planning decision per call, driven by the executor loop.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..primitives.actions import AgentDecision, AgentFinish, AgentStep, DecisionKind
from ..primitives.errors import ConfigurationError, ParseError
from ..primitives.messages import ChatMessage, user_message
from ..primitives.tools import Tool, ToolRegistry
from ...llm import LLMClient
from .parsers import AgentOutputParser
from .prompts import FINAL_ANSWER_NUDGE

LOGGER = logging.getLogger(__name__)

EARLY_STOPPING_METHODS = ("force", "generate")
FORCE_STOP_MESSAGE = "Agent stopped due to iteration limit or time limit."


def validate_tools(tools: Sequence[Tool]) -> None:
    """
    Reject tool sets the model could not choose from sensibly.

    Descriptions are shown to the model to pick a tool, so a missing one is a
    configuration error. Duplicate names would make lookups ambiguous.
    """
    for tool in tools:
        if not (tool.description or "").strip():
            raise ConfigurationError(
                f"Got a tool {tool.name} without a description. This agent requires descriptions for all tools."
            )
    ToolRegistry(tools)


class Agent(ABC):
    """
    Maps the step history and run inputs to the next action or final answer.

    Subclasses supply the prompt layout, the scratchpad rendering and the
    output grammar; :meth:`plan` is shared and makes exactly one model call.
    """

    observation_prefix = "Observation: "
    llm_prefix = "Thought:"

    def __init__(
        self,
        llm: LLMClient,
        tools: Iterable[Tool],
        *,
        output_parser: Optional[AgentOutputParser] = None,
    ) -> None:
        tools = list(tools)
        validate_tools(tools)
        self.llm = llm
        self.tools = tuple(tools)
        self.output_parser = output_parser or self.default_output_parser()

    @property
    def allowed_tools(self) -> List[str]:
        return [tool.name for tool in self.tools]

    @property
    def tool_descriptions(self) -> str:
        return "\n".join(f"{tool.name}: {tool.description}" for tool in self.tools)

    @property
    def stop(self) -> List[str]:
        return [self.observation_prefix.rstrip()]

    @classmethod
    @abstractmethod
    def default_output_parser(cls) -> AgentOutputParser:
        raise NotImplementedError

    @abstractmethod
    def construct_scratchpad(self, steps: Sequence[AgentStep]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def build_prompt(self, steps: Sequence[AgentStep], inputs: Mapping[str, Any]) -> List[ChatMessage]:
        raise NotImplementedError

    def plan(self, steps: Sequence[AgentStep], inputs: Mapping[str, Any]) -> AgentDecision:
        messages = self.build_prompt(steps, inputs)
        response = self.llm.chat(messages, stop=self.stop)
        return self.output_parser.parse(response.content)

    def return_stopped_response(
        self,
        early_stopping_method: str,
        steps: Sequence[AgentStep],
        inputs: Mapping[str, Any],
    ) -> AgentFinish:
        """Best-effort answer once the executor stops before a final answer."""
        if early_stopping_method == "force":
            if steps:
                return AgentFinish(return_values={"output": steps[-1].observation}, log=FORCE_STOP_MESSAGE)
            return AgentFinish(return_values={"output": FORCE_STOP_MESSAGE}, log=FORCE_STOP_MESSAGE)
        if early_stopping_method == "generate":
            messages = self.build_prompt(steps, inputs)
            messages.append(user_message(FINAL_ANSWER_NUDGE))
            response = self.llm.chat(messages, stop=self.stop)
            try:
                decision = self.output_parser.parse(response.content)
            except ParseError:
                LOGGER.debug("Final-answer request did not match the grammar; returning raw text.")
                return AgentFinish(return_values={"output": response.content.strip()}, log=response.content)
            if decision.kind is DecisionKind.FINISH:
                return decision
            return AgentFinish(return_values={"output": response.content.strip()}, log=response.content)
        raise ConfigurationError(
            f"Got unsupported early_stopping_method '{early_stopping_method}'. "
            f"Expected one of {EARLY_STOPPING_METHODS}."
        )
