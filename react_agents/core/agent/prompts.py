"""
Prompt templates for the ReAct agent variants.

Templates are rendered with ``str.format`` in a single pass, so they only
contain the placeholders listed next to each constant and no literal braces.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Mapping, Sequence

from ..primitives.messages import assistant_message, user_message
from ..primitives.actions import AgentStep


# Placeholders: {tools}
ZERO_SHOT_PREFIX = dedent(
    """
    Answer the following questions as best you can. You have access to the following tools:

    {tools}
    """
).strip()

# Placeholders: {input}, {agent_scratchpad}
ZERO_SHOT_SUFFIX = dedent(
    """
    Begin!

    Question: {input}
    Thought:{agent_scratchpad}
    """
).strip()

# Placeholders: {tools}
CHAT_PREFIX = dedent(
    """
    Answer the following questions as best you can. You have access to the following tools:

    {tools}
    """
).strip()

CHAT_SUFFIX = "Begin! Reminder to always use the exact characters `Final Answer` when responding."

CHAT_SCRATCHPAD_INTRO = (
    "This was your previous work (but I haven't seen any of it! I only see what you return as final answer):\n"
)

# Placeholders: none
CONVERSATIONAL_PREFIX = dedent(
    """
    Assistant is a large language model trained to help with a wide range of tasks, from answering
    simple questions to providing in-depth explanations and discussion on many topics. Assistant can
    hold a natural conversation and give coherent, relevant answers.

    Assistant keeps learning from the tools it is given and uses their results to ground its answers.
    When a question needs information Assistant does not have, it asks the human to run a tool.
    """
).strip()

# Placeholders: {tools}, {format_instructions}, {input}
CONVERSATIONAL_SUFFIX = dedent(
    """
    TOOLS
    ------
    Assistant can ask the user to use tools to look up information that may be helpful in answering
    the user's original question. The tools the human can use are:

    {tools}

    {format_instructions}

    USER'S INPUT
    --------------------
    Here is the user's input (remember to respond with a markdown code snippet of a json blob with a
    single action, and NOTHING else):

    {input}
    """
).strip()

# Placeholders: {observation}
TEMPLATE_TOOL_RESPONSE = dedent(
    """
    TOOL RESPONSE:
    ---------------------
    {observation}

    USER'S INPUT
    --------------------

    Okay, so what is the response to my last comment? If using information obtained from the tools you
    must mention it explicitly without mentioning the tool names - I have forgotten all TOOL RESPONSES!
    Remember to respond with a markdown code snippet of a json blob with a single action, and NOTHING else.
    """
).strip()

FINAL_ANSWER_NUDGE = "I now need to return a final answer based on the previous steps:"


def render(template: str, **values: str) -> str:
    return template.format(**values)


def build_text_scratchpad(
    steps: Sequence[AgentStep],
    *,
    observation_prefix: str,
    llm_prefix: str,
) -> str:
    """
    Replay ``steps`` as ``log`` / ``Observation:`` pairs, ending on the
    thought prefix so the model continues with its next thought.
    """
    thoughts = ""
    for step in steps:
        thoughts += step.action.log
        thoughts += f"\n{observation_prefix}{step.observation}\n{llm_prefix}"
    return thoughts


def build_message_scratchpad(steps: Sequence[AgentStep]) -> list:
    """Replay ``steps`` as alternating assistant/user messages."""
    messages: list = []
    for step in steps:
        messages.append(assistant_message(step.action.log))
        messages.append(user_message(render(TEMPLATE_TOOL_RESPONSE, observation=step.observation)))
    return messages


def history_messages(inputs: Mapping[str, object], key: str) -> list:
    """Return the chat history stored under ``key``, or an empty list."""
    history = inputs.get(key) or []
    if not isinstance(history, (list, tuple)):
        raise TypeError(f"Input '{key}' must be a sequence of ChatMessage objects.")
    return list(history)
