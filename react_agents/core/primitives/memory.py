"""
Conversation history storage used by the conversational agent.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .messages import ChatMessage, assistant_message, user_message


@dataclass
class ConversationMemory:
    """
    Container that records the messages exchanged in a single conversation.
    """

    messages: List[ChatMessage] = field(default_factory=list)

    def extend(self, new_messages: Iterable[ChatMessage]) -> None:
        self.messages.extend(list(new_messages))

    def snapshot(self) -> List[ChatMessage]:
        return list(self.messages)


class BufferMemory:
    """
    Session-keyed store of full conversation buffers.

    The executor loads the buffer for a session before a run (exposed to the
    prompt under ``memory_key``) and saves the input/output pair afterwards.
    """

    def __init__(
        self,
        *,
        memory_key: str = "chat_history",
        input_key: str = "input",
        output_key: str = "output",
    ) -> None:
        self.memory_key = memory_key
        self.input_key = input_key
        self.output_key = output_key
        self._sessions: Dict[str, ConversationMemory] = {}
        self._lock = threading.Lock()

    def load_memory_variables(self, session_id: str) -> Dict[str, List[ChatMessage]]:
        with self._lock:
            conversation = self._sessions.get(session_id)
            history = conversation.snapshot() if conversation else []
        return {self.memory_key: history}

    def save_context(
        self,
        session_id: str,
        inputs: Mapping[str, str],
        outputs: Mapping[str, str],
    ) -> None:
        human = inputs.get(self.input_key, "")
        ai = outputs.get(self.output_key, "")
        with self._lock:
            conversation = self._sessions.setdefault(session_id, ConversationMemory())
            conversation.extend([user_message(human), assistant_message(ai)])

    def clear(self, session_id: Optional[str] = None) -> None:
        with self._lock:
            if session_id is None:
                self._sessions.clear()
            else:
                self._sessions.pop(session_id, None)

    def sessions(self) -> List[str]:
        with self._lock:
            return list(self._sessions.keys())
