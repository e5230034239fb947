"""
Tests for tools, the tool registry, memory, decisions and errors.
"""

import dataclasses

import pytest

from react_agents.core.primitives import (
    AgentAction,
    AgentFinish,
    AgentRunError,
    AgentStep,
    BufferMemory,
    ConfigurationError,
    ConversationMemory,
    DecisionKind,
    ErrorKind,
    MessageRole,
    Tool,
    ToolInvalidError,
    ToolRegistry,
    coerce_messages,
    user_message,
)


class TestTool:
    def test_invoke_returns_string(self):
        tool = Tool(name="count", description="counts characters", func=len)
        assert tool.invoke("abcd") == "4"
        assert tool("ab") == "2"


class TestToolRegistry:
    def test_register_and_get(self, search_tool):
        registry = ToolRegistry([search_tool])
        assert registry.get("search") is search_tool
        assert "search" in registry
        assert len(registry) == 1
        assert registry.names() == ["search"]

    def test_duplicate_rejected(self, search_tool):
        registry = ToolRegistry([search_tool])
        with pytest.raises(ConfigurationError):
            registry.register(search_tool)

    def test_unknown_tool(self, search_tool):
        registry = ToolRegistry([search_tool])
        with pytest.raises(ToolInvalidError) as excinfo:
            registry.get("lookup")
        assert excinfo.value.tool == "lookup"
        assert excinfo.value.valid_tools == ["search"]

    def test_describe(self, search_tool, failing_tool):
        registry = ToolRegistry([search_tool, failing_tool])
        assert registry.describe() == "search: searches the web\nflaky: always fails"


class TestDecisions:
    def test_kinds(self):
        assert AgentAction(tool="t", tool_input="i", log="l").kind is DecisionKind.ACTION
        assert AgentFinish(return_values={"output": "x"}).kind is DecisionKind.FINISH

    def test_steps_are_immutable(self):
        step = AgentStep(action=AgentAction(tool="t", tool_input="i", log="l"), observation="o")
        with pytest.raises(dataclasses.FrozenInstanceError):
            step.observation = "changed"

    def test_finish_output_defaults_to_empty(self):
        assert AgentFinish(return_values={}).output == ""


class TestBufferMemory:
    def test_empty_session(self):
        assert BufferMemory().load_memory_variables("missing") == {"chat_history": []}

    def test_save_and_load(self):
        memory = BufferMemory(memory_key="history", input_key="question", output_key="answer")
        memory.save_context("s1", {"question": "hi"}, {"answer": "hello"})
        history = memory.load_memory_variables("s1")["history"]
        assert [(m.role, m.content) for m in history] == [
            (MessageRole.USER, "hi"),
            (MessageRole.ASSISTANT, "hello"),
        ]

    def test_loaded_history_is_a_copy(self):
        memory = BufferMemory()
        memory.save_context("s1", {"input": "hi"}, {"output": "hello"})
        memory.load_memory_variables("s1")["chat_history"].clear()
        assert len(memory.load_memory_variables("s1")["chat_history"]) == 2

    def test_clear(self):
        memory = BufferMemory()
        memory.save_context("a", {"input": "1"}, {"output": "2"})
        memory.save_context("b", {"input": "3"}, {"output": "4"})
        memory.clear("a")
        assert memory.sessions() == ["b"]
        memory.clear()
        assert memory.sessions() == []


class TestConversationMemory:
    def test_snapshot_is_a_copy(self):
        memory = ConversationMemory()
        assert memory.snapshot() == []
        memory.extend([user_message("hi")])
        snapshot = memory.snapshot()
        snapshot.clear()
        assert [message.content for message in memory.snapshot()] == ["hi"]


class TestMessages:
    def test_coerce_messages(self):
        assert coerce_messages([user_message("hi")]) == [{"role": "user", "content": "hi"}]


class TestErrors:
    def test_run_error_keeps_history(self):
        step = AgentStep(action=AgentAction(tool="t", tool_input="i", log="l"), observation="o")
        error = AgentRunError("boom", kind=ErrorKind.PARSE, history=[step])
        assert error.history == (step,)
        assert error.kind is ErrorKind.PARSE
        assert str(error) == "boom"

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_error_kinds(self):
        assert {kind.value for kind in ErrorKind} == {"model", "parse", "tool_execution", "cancelled"}
