"""
Concrete agents: zero-shot ReAct, chat zero-shot ReAct, and conversational chat.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..primitives.actions import AgentStep
from ..primitives.messages import ChatMessage, MessageRole, system_message, user_message
from ..primitives.tools import Tool
from ...llm import LLMClient
from .agent import Agent
from .parsers import AgentOutputParser, ChatOutputParser, ConversationalOutputParser, ReActOutputParser
from .prompts import (
    CHAT_PREFIX,
    CHAT_SCRATCHPAD_INTRO,
    CHAT_SUFFIX,
    CONVERSATIONAL_PREFIX,
    CONVERSATIONAL_SUFFIX,
    ZERO_SHOT_PREFIX,
    ZERO_SHOT_SUFFIX,
    build_message_scratchpad,
    build_text_scratchpad,
    history_messages,
    render,
)


class ZeroShotAgent(Agent):
    """ReAct agent that sends the whole prompt as a single text turn."""

    def __init__(
        self,
        llm: LLMClient,
        tools: Iterable[Tool],
        *,
        output_parser: Optional[AgentOutputParser] = None,
        prefix: str = ZERO_SHOT_PREFIX,
        suffix: str = ZERO_SHOT_SUFFIX,
    ) -> None:
        super().__init__(llm, tools, output_parser=output_parser)
        self.prefix = prefix
        self.suffix = suffix

    @classmethod
    def default_output_parser(cls) -> AgentOutputParser:
        return ReActOutputParser()

    @property
    def stop(self) -> List[str]:
        return [f"\n{self.observation_prefix.rstrip()}"]

    def construct_scratchpad(self, steps: Sequence[AgentStep]) -> str:
        return build_text_scratchpad(
            steps,
            observation_prefix=self.observation_prefix,
            llm_prefix=self.llm_prefix,
        )

    def build_prompt(self, steps: Sequence[AgentStep], inputs: Mapping[str, Any]) -> List[ChatMessage]:
        text = "\n\n".join(
            [
                render(self.prefix, tools=self.tool_descriptions),
                self.output_parser.get_format_instructions(),
                render(
                    self.suffix,
                    input=str(inputs.get("input", "")),
                    agent_scratchpad=self.construct_scratchpad(steps),
                ),
            ]
        )
        return [user_message(text)]


class ChatAgent(Agent):
    """ReAct agent for chat models: instructions in the system turn, work in the user turn."""

    def __init__(
        self,
        llm: LLMClient,
        tools: Iterable[Tool],
        *,
        output_parser: Optional[AgentOutputParser] = None,
        prefix: str = CHAT_PREFIX,
        suffix: str = CHAT_SUFFIX,
    ) -> None:
        super().__init__(llm, tools, output_parser=output_parser)
        self.prefix = prefix
        self.suffix = suffix

    @classmethod
    def default_output_parser(cls) -> AgentOutputParser:
        return ChatOutputParser()

    def construct_scratchpad(self, steps: Sequence[AgentStep]) -> str:
        scratchpad = build_text_scratchpad(
            steps,
            observation_prefix=self.observation_prefix,
            llm_prefix=self.llm_prefix,
        )
        if not scratchpad:
            return ""
        return f"{CHAT_SCRATCHPAD_INTRO}{scratchpad}"

    def build_prompt(self, steps: Sequence[AgentStep], inputs: Mapping[str, Any]) -> List[ChatMessage]:
        system_text = "\n\n".join(
            [
                render(self.prefix, tools=self.tool_descriptions),
                self.output_parser.get_format_instructions(),
                self.suffix,
            ]
        )
        human_text = str(inputs.get("input", ""))
        scratchpad = self.construct_scratchpad(steps)
        if scratchpad:
            human_text = f"{human_text}\n\n{scratchpad}"
        return [system_message(system_text), user_message(human_text)]


class ConversationalChatAgent(Agent):
    """
    Chat agent that keeps a running conversation.

    Prior turns come in through ``inputs[memory_key]``; each completed step is
    replayed as the assistant's own message followed by a tool-response turn.
    """

    def __init__(
        self,
        llm: LLMClient,
        tools: Iterable[Tool],
        *,
        output_parser: Optional[AgentOutputParser] = None,
        system_message: str = CONVERSATIONAL_PREFIX,
        human_message: str = CONVERSATIONAL_SUFFIX,
        memory_key: str = "chat_history",
    ) -> None:
        super().__init__(llm, tools, output_parser=output_parser)
        self.system_message = system_message
        self.human_message = human_message
        self.memory_key = memory_key

    @classmethod
    def default_output_parser(cls) -> AgentOutputParser:
        return ConversationalOutputParser()

    def construct_scratchpad(self, steps: Sequence[AgentStep]) -> List[ChatMessage]:
        return build_message_scratchpad(steps)

    def build_prompt(self, steps: Sequence[AgentStep], inputs: Mapping[str, Any]) -> List[ChatMessage]:
        human_text = render(
            self.human_message,
            tools=self.tool_descriptions,
            format_instructions=self.output_parser.get_format_instructions(),
            input=str(inputs.get("input", "")),
        )
        messages: List[ChatMessage] = [ChatMessage(role=MessageRole.SYSTEM, content=self.system_message)]
        messages.extend(history_messages(inputs, self.memory_key))
        messages.append(user_message(human_text))
        messages.extend(self.construct_scratchpad(steps))
        return messages
