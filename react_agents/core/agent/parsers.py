"""
Parsers for interpreting LLM responses within the ReAct loop.

Each parser owns one response grammar and exposes the instructions that
describe it, so the prompt shown to the model and the parser reading the
answer always agree.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from textwrap import dedent
from typing import Any, Optional

from ..primitives.actions import AgentAction, AgentDecision, AgentFinish
from ..primitives.errors import ParseError


LOGGER = logging.getLogger(__name__)

FINAL_ANSWER_ACTION = "Final Answer"
FINAL_ANSWER_MARKER = "Final Answer:"

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_ACTION_LINES = re.compile(
    r"Action\s*\d*\s*:\s*(.*?)\s*\n\s*Action\s*\d*\s*Input\s*\d*\s*:\s*(.*)",
    re.DOTALL,
)


class AgentOutputParser(ABC):
    """Turns raw model text into exactly one :data:`AgentDecision`."""

    @abstractmethod
    def parse(self, text: str) -> AgentDecision:
        raise NotImplementedError

    @abstractmethod
    def get_format_instructions(self) -> str:
        raise NotImplementedError


def _stringify_input(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def extract_json_object(text: str) -> Optional[str]:
    """
    Locate the JSON object in a model response.

    Prefers the first fenced block whose body looks like an object and falls
    back to the outermost brace pair in the text.
    """
    for match in _FENCED_BLOCK.finditer(text):
        candidate = match.group(1).strip()
        if candidate.startswith("{"):
            return candidate
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def _json_start(text: str) -> int:
    """Offset of the first fence or opening brace, or ``len(text)`` if neither."""
    positions = [index for index in (text.find("```"), text.find("{")) if index != -1]
    return min(positions) if positions else len(text)


def _load_action_blob(text: str, blob: Optional[str]) -> dict:
    if blob is None:
        raise ParseError(f"Could not find a JSON action block in model output: {text!r}", text)
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Could not parse JSON action block: {exc}", text) from exc
    if not isinstance(data, dict):
        raise ParseError("JSON action block must be an object.", text)
    for key in ("action", "action_input"):
        if key not in data:
            raise ParseError(f"JSON action block is missing the '{key}' field.", text)
    if not isinstance(data["action"], str) or not data["action"].strip():
        raise ParseError("The 'action' field must be a non-empty string.", text)
    return data


class ConversationalOutputParser(AgentOutputParser):
    """
    Expects a fenced JSON blob, optionally introduced by an ``Action:`` marker::

        Action:
        ```json
        {"action": "search", "action_input": "capital of France"}
        ```

    ``"action": "Final Answer"`` ends the run with ``action_input`` as output.
    """

    def parse(self, text: str) -> AgentDecision:
        body = text.strip()
        # Only a marker ahead of the JSON counts; inside the blob it is payload.
        marker = body.find("Action:")
        if marker != -1 and marker < _json_start(body):
            body = body[marker + len("Action:") :]
        data = _load_action_blob(text, extract_json_object(body))
        action = data["action"].strip()
        action_input = _stringify_input(data["action_input"])
        if action == FINAL_ANSWER_ACTION:
            LOGGER.debug("Parser constructed AgentFinish with output length %d", len(action_input))
            return AgentFinish(return_values={"output": action_input}, log=text)
        LOGGER.debug("Parser constructed AgentAction: tool=%s input=%s", action, action_input)
        return AgentAction(tool=action, tool_input=action_input, log=text)

    def get_format_instructions(self) -> str:
        return dedent(
            """
            RESPONSE FORMAT INSTRUCTIONS
            ----------------------------

            Reply with exactly one markdown code snippet containing a JSON object, in one of two forms.

            Option 1 - use this when you want the human to run a tool for you:

            ```json
            {
                "action": string, \\ the tool to use, must be one of the tool names listed above
                "action_input": string \\ the input to pass to the tool
            }
            ```

            Option 2 - use this when you want to respond directly to the human:

            ```json
            {
                "action": "Final Answer",
                "action_input": string \\ your complete answer for the human
            }
            ```
            """
        ).strip()


class ChatOutputParser(AgentOutputParser):
    """
    Reads ``Final Answer:`` lines, or a fenced JSON action blob otherwise.
    """

    def parse(self, text: str) -> AgentDecision:
        if FINAL_ANSWER_MARKER in text:
            output = text.split(FINAL_ANSWER_MARKER)[-1].strip()
            LOGGER.debug("Parser constructed AgentFinish with output length %d", len(output))
            return AgentFinish(return_values={"output": output}, log=text)
        data = _load_action_blob(text, extract_json_object(text))
        action = data["action"].strip()
        action_input = _stringify_input(data["action_input"])
        if action == FINAL_ANSWER_ACTION:
            return AgentFinish(return_values={"output": action_input}, log=text)
        LOGGER.debug("Parser constructed AgentAction: tool=%s input=%s", action, action_input)
        return AgentAction(tool=action, tool_input=action_input, log=text)

    def get_format_instructions(self) -> str:
        return dedent(
            """
            To use a tool, specify a JSON blob with an `action` key (the tool name) and an
            `action_input` key (the input to the tool). The only values allowed in `action`
            are the tool names listed above. Provide a single action per blob, like this:

            ```
            {
              "action": $TOOL_NAME,
              "action_input": $INPUT
            }
            ```

            ALWAYS use the following format:

            Question: the input question you must answer
            Thought: think about what to do next
            Action:
            ```
            $JSON_BLOB
            ```
            Observation: the result of the action
            ... (Thought/Action/Observation may repeat several times)
            Thought: I now know the final answer
            Final Answer: the final answer to the original input question
            """
        ).strip()


class ReActOutputParser(AgentOutputParser):
    """
    Reads the plain-text ReAct grammar: ``Action:`` and ``Action Input:``
    lines, or a ``Final Answer:`` line.
    """

    def parse(self, text: str) -> AgentDecision:
        if FINAL_ANSWER_MARKER in text:
            output = text.split(FINAL_ANSWER_MARKER)[-1].strip()
            LOGGER.debug("Parser constructed AgentFinish with output length %d", len(output))
            return AgentFinish(return_values={"output": output}, log=text)
        match = _ACTION_LINES.search(text)
        if not match:
            raise ParseError(f"Could not parse LLM output: {text!r}", text)
        tool = match.group(1).strip()
        if not tool:
            raise ParseError("Action line names no tool.", text)
        tool_input = match.group(2).strip()
        if len(tool_input) >= 2 and tool_input[0] == tool_input[-1] == '"':
            tool_input = tool_input[1:-1]
        LOGGER.debug("Parser constructed AgentAction: tool=%s input=%s", tool, tool_input)
        return AgentAction(tool=tool, tool_input=tool_input, log=text)

    def get_format_instructions(self) -> str:
        return dedent(
            """
            Use the following format:

            Question: the input question you must answer
            Thought: think about what to do next
            Action: the action to take, must be one of the tool names listed above
            Action Input: the input to the action
            Observation: the result of the action
            ... (Thought/Action/Action Input/Observation may repeat several times)
            Thought: I now know the final answer
            Final Answer: the final answer to the original input question
            """
        ).strip()
