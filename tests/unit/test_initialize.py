"""
Tests for initialize_agent_executor.
"""

import pytest

from react_agents import AgentType, initialize_agent_executor
from react_agents.core.agent import ChatAgent, ConversationalChatAgent, ZeroShotAgent
from react_agents.core.primitives import BufferMemory, ConfigurationError, Tool


class TestAgentSelection:
    @pytest.mark.parametrize(
        "agent_type, agent_cls",
        [
            ("zero-shot-react-description", ZeroShotAgent),
            ("chat-zero-shot-react-description", ChatAgent),
            ("chat-conversational-react-description", ConversationalChatAgent),
            (AgentType.CHAT_CONVERSATIONAL_REACT_DESCRIPTION, ConversationalChatAgent),
        ],
    )
    def test_tag_selects_variant(self, agent_type, agent_cls, fake_llm, search_tool):
        executor = initialize_agent_executor([search_tool], fake_llm(), agent_type)
        assert isinstance(executor.agent, agent_cls)

    def test_default_is_zero_shot(self, fake_llm, search_tool):
        executor = initialize_agent_executor([search_tool], fake_llm())
        assert isinstance(executor.agent, ZeroShotAgent)

    def test_unknown_agent_type(self, fake_llm, search_tool):
        with pytest.raises(ConfigurationError, match="Unknown agent type"):
            initialize_agent_executor([search_tool], fake_llm(), "self-ask-with-search")

    def test_missing_description_fails_before_model_call(self, fake_llm):
        llm = fake_llm("unused")
        tool = Tool(name="search", description="", func=lambda q: q)
        with pytest.raises(ConfigurationError):
            initialize_agent_executor([tool], llm, "chat-conversational-react-description")
        assert llm.call_count == 0


class TestDefaults:
    def test_zero_shot_returns_intermediate_steps(self, fake_llm, search_tool):
        executor = initialize_agent_executor([search_tool], fake_llm(), "zero-shot-react-description")
        assert executor.config.return_intermediate_steps is True
        assert executor.memory is None

    def test_conversational_gets_buffer_memory(self, fake_llm, search_tool):
        executor = initialize_agent_executor([search_tool], fake_llm(), "chat-conversational-react-description")
        assert executor.config.return_intermediate_steps is False
        assert isinstance(executor.memory, BufferMemory)
        assert executor.memory.memory_key == "chat_history"
        assert executor.memory.input_key == "input"

    def test_custom_memory_key_is_shared(self, fake_llm, search_tool):
        memory = BufferMemory(memory_key="history")
        executor = initialize_agent_executor(
            [search_tool], fake_llm(), "chat-conversational-react-description", memory=memory
        )
        assert executor.memory is memory
        assert executor.agent.memory_key == "history"

    def test_options_are_forwarded(self, fake_llm, search_tool):
        executor = initialize_agent_executor(
            [search_tool],
            fake_llm(),
            "chat-zero-shot-react-description",
            max_iterations=3,
            early_stopping_method="generate",
            return_intermediate_steps=False,
            verbose=True,
        )
        assert executor.config.max_iterations == 3
        assert executor.config.early_stopping_method == "generate"
        assert executor.config.return_intermediate_steps is False
        assert executor.config.verbose is True

    def test_agent_kwargs(self, fake_llm, search_tool):
        executor = initialize_agent_executor(
            [search_tool],
            fake_llm(),
            "zero-shot-react-description",
            agent_kwargs={"prefix": "Tools available:\n{tools}"},
        )
        prompt = executor.agent.build_prompt([], {"input": "q"})[0].content
        assert prompt.startswith("Tools available:\nsearch: searches the web")


class TestZeroShotEndToEnd:
    def test_react_grammar_run(self, fake_llm, search_tool):
        llm = fake_llm(
            " I should look this up.\nAction: search\nAction Input: capital of France",
            " I now know the final answer\nFinal Answer: Paris",
        )
        executor = initialize_agent_executor([search_tool], llm)

        result = executor.run("What is the capital of France?")

        assert result.output == "Paris"
        assert len(result.intermediate_steps) == 1
        assert llm.calls[0].stop == ("\nObservation:",)
        second_prompt = llm.calls[1].messages[0].content
        assert second_prompt.endswith(
            "Action Input: capital of France\nObservation: Paris\nThought:"
        )
