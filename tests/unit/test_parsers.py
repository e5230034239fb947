"""
Tests for the output parsers.
"""

import json

import pytest

from react_agents.core.agent.parsers import (
    ChatOutputParser,
    ConversationalOutputParser,
    ReActOutputParser,
    extract_json_object,
)
from react_agents.core.primitives import AgentAction, AgentFinish, DecisionKind, ParseError


def conversational_reply(action: str, action_input: str) -> str:
    blob = json.dumps({"action": action, "action_input": action_input})
    return f"Thought: I should decide what to do.\nAction:\n```json\n{blob}\n```"


class TestConversationalOutputParser:
    """Tests for the fenced JSON grammar."""

    @pytest.mark.parametrize(
        "tool, tool_input",
        [
            ("search", "capital of France"),
            ("calculator", "(24 + 18) * 0.75"),
            ("lookup", "line one\nline two"),
            ("echo", ""),
        ],
    )
    def test_action_fields_match_json(self, tool, tool_input):
        """Tool and input come straight from the JSON fields."""
        text = conversational_reply(tool, tool_input)
        decision = ConversationalOutputParser().parse(text)
        assert isinstance(decision, AgentAction)
        assert decision.kind is DecisionKind.ACTION
        assert decision.tool == tool
        assert decision.tool_input == tool_input
        assert decision.log == text

    def test_final_answer(self):
        """'Final Answer' becomes an AgentFinish with the input as output."""
        text = 'Action: {"action": "Final Answer", "action_input": "42"}'
        decision = ConversationalOutputParser().parse(text)
        assert isinstance(decision, AgentFinish)
        assert decision.kind is DecisionKind.FINISH
        assert decision.return_values["output"] == "42"
        assert decision.output == "42"

    def test_plain_fence_without_json_tag(self):
        text = '```\n{"action": "search", "action_input": "weather"}\n```'
        decision = ConversationalOutputParser().parse(text)
        assert decision.tool == "search"
        assert decision.tool_input == "weather"

    @pytest.mark.parametrize("leading", ["", "Action:\n", "Thought: next step.\nAction:\n"])
    def test_marker_text_inside_input(self, leading):
        """'Action:' inside the JSON payload is data, not a marker."""
        blob = json.dumps({"action": "Final Answer", "action_input": "Next Action: buy milk"})
        text = f"{leading}```json\n{blob}\n```"
        decision = ConversationalOutputParser().parse(text)
        assert isinstance(decision, AgentFinish)
        assert decision.output == "Next Action: buy milk"

    def test_marker_text_inside_bare_object(self):
        text = '{"action": "search", "action_input": "Action: items"}'
        decision = ConversationalOutputParser().parse(text)
        assert decision.tool == "search"
        assert decision.tool_input == "Action: items"

    def test_non_string_input_is_serialized(self):
        text = '```json\n{"action": "search", "action_input": {"q": "x"}}\n```'
        decision = ConversationalOutputParser().parse(text)
        assert decision.tool_input == '{"q": "x"}'

    @pytest.mark.parametrize(
        "text",
        [
            "I think the answer is Paris.",
            "```json\n{not json}\n```",
            '```json\n{"action_input": "x"}\n```',
            '```json\n{"action": "search"}\n```',
            '```json\n["search", "x"]\n```',
            '```json\n{"action": "", "action_input": "x"}\n```',
            "",
        ],
    )
    def test_malformed_output_raises(self, text):
        """Malformed replies raise ParseError carrying the text."""
        with pytest.raises(ParseError) as excinfo:
            ConversationalOutputParser().parse(text)
        assert excinfo.value.llm_output == text

    def test_format_instructions_describe_both_options(self):
        instructions = ConversationalOutputParser().get_format_instructions()
        assert '"action": "Final Answer"' in instructions
        assert '"action_input"' in instructions


class TestChatOutputParser:
    """Tests for the chat zero-shot grammar."""

    def test_final_answer_marker(self):
        decision = ChatOutputParser().parse("Thought: done\nFinal Answer: Paris")
        assert isinstance(decision, AgentFinish)
        assert decision.output == "Paris"

    def test_json_blob_action(self):
        text = 'Thought: look it up\nAction:\n```\n{"action": "search", "action_input": "capital of France"}\n```'
        decision = ChatOutputParser().parse(text)
        assert isinstance(decision, AgentAction)
        assert decision.tool == "search"
        assert decision.tool_input == "capital of France"

    def test_missing_blob_raises(self):
        with pytest.raises(ParseError):
            ChatOutputParser().parse("Thought: hmm, not sure what to do")


class TestReActOutputParser:
    """Tests for the plain-text ReAct grammar."""

    def test_action_lines(self):
        text = " I should search.\nAction: search\nAction Input: capital of France"
        decision = ReActOutputParser().parse(text)
        assert isinstance(decision, AgentAction)
        assert decision.tool == "search"
        assert decision.tool_input == "capital of France"
        assert decision.log == text

    def test_quoted_input_is_unwrapped(self):
        decision = ReActOutputParser().parse('Action: search\nAction Input: "Paris"')
        assert decision.tool_input == "Paris"

    def test_final_answer(self):
        decision = ReActOutputParser().parse(" I now know the final answer\nFinal Answer: Paris")
        assert isinstance(decision, AgentFinish)
        assert decision.output == "Paris"

    def test_missing_action_input_raises(self):
        with pytest.raises(ParseError):
            ReActOutputParser().parse("Action: search")

    def test_format_instructions_mention_markers(self):
        instructions = ReActOutputParser().get_format_instructions()
        assert "Action Input:" in instructions
        assert "Final Answer:" in instructions


class TestExtractJsonObject:
    def test_prefers_fenced_block(self):
        text = 'Some {noise}\n```json\n{"a": 1}\n```'
        assert extract_json_object(text) == '{"a": 1}'

    def test_bare_object(self):
        assert extract_json_object('prefix {"a": 1} suffix') == '{"a": 1}'

    def test_no_object(self):
        assert extract_json_object("no braces here") is None
