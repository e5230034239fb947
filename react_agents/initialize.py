"""
Factory that assembles an agent variant and its executor from a type tag.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from .core.agent.agent import Agent
from .core.agent.executor import AgentExecutor, ExecutorConfig, ParsingErrorHandler
from .core.agent.variants import ChatAgent, ConversationalChatAgent, ZeroShotAgent
from .core.primitives.errors import ConfigurationError
from .core.primitives.memory import BufferMemory
from .core.primitives.tools import Tool
from .llm import LLMClient

LOGGER = logging.getLogger(__name__)


class AgentType(str, Enum):
    ZERO_SHOT_REACT_DESCRIPTION = "zero-shot-react-description"
    CHAT_ZERO_SHOT_REACT_DESCRIPTION = "chat-zero-shot-react-description"
    CHAT_CONVERSATIONAL_REACT_DESCRIPTION = "chat-conversational-react-description"


def _resolve_agent_type(agent_type: Union[str, AgentType]) -> AgentType:
    try:
        return AgentType(agent_type)
    except ValueError as exc:
        valid = ", ".join(member.value for member in AgentType)
        raise ConfigurationError(f"Unknown agent type '{agent_type}'. Expected one of: {valid}.") from exc


def initialize_agent_executor(
    tools: Iterable[Tool],
    llm: LLMClient,
    agent_type: Union[str, AgentType] = AgentType.ZERO_SHOT_REACT_DESCRIPTION,
    *,
    max_iterations: Optional[int] = 15,
    max_execution_time: Optional[float] = None,
    return_intermediate_steps: Optional[bool] = None,
    early_stopping_method: str = "force",
    handle_parsing_errors: ParsingErrorHandler = True,
    max_parse_retries: int = 3,
    propagate_tool_errors: bool = False,
    memory: Optional[BufferMemory] = None,
    verbose: bool = False,
    agent_kwargs: Optional[Mapping[str, Any]] = None,
) -> AgentExecutor:
    """
    Build an :class:`AgentExecutor` for one of the :class:`AgentType` tags.

    The zero-shot variants return intermediate steps unless told otherwise.
    The conversational variant gets a ``BufferMemory`` keyed on
    ``chat_history`` when no memory is supplied; the other variants only use
    memory when one is passed in.
    """
    resolved = _resolve_agent_type(agent_type)
    tools = list(tools)
    extra = dict(agent_kwargs or {})

    agent: Agent
    if resolved is AgentType.ZERO_SHOT_REACT_DESCRIPTION:
        agent = ZeroShotAgent(llm, tools, **extra)
    elif resolved is AgentType.CHAT_ZERO_SHOT_REACT_DESCRIPTION:
        agent = ChatAgent(llm, tools, **extra)
    else:
        if memory is None:
            memory = BufferMemory(memory_key=extra.get("memory_key", "chat_history"), input_key="input")
        extra.setdefault("memory_key", memory.memory_key)
        agent = ConversationalChatAgent(llm, tools, **extra)

    if return_intermediate_steps is None:
        return_intermediate_steps = resolved is not AgentType.CHAT_CONVERSATIONAL_REACT_DESCRIPTION

    config = ExecutorConfig(
        max_iterations=max_iterations,
        max_execution_time=max_execution_time,
        early_stopping_method=early_stopping_method,
        return_intermediate_steps=return_intermediate_steps,
        handle_parsing_errors=handle_parsing_errors,
        max_parse_retries=max_parse_retries,
        propagate_tool_errors=propagate_tool_errors,
        verbose=verbose,
    )
    LOGGER.debug("Initialized %s agent with tools %s", resolved.value, agent.allowed_tools)
    return AgentExecutor(agent, tools, memory=memory, config=config)
