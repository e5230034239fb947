"""
Scripted client that replays canned responses, for tests and offline demos.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..core.primitives.messages import ChatMessage
from .base import LLMClient, LLMError, LLMResponse


@dataclass(frozen=True)
class RecordedCall:
    messages: Tuple[ChatMessage, ...]
    stop: Tuple[str, ...]


class FakeListClient(LLMClient):
    """
    Returns ``responses`` one at a time and records every request.

    Raises :class:`LLMError` once the script is exhausted, so a test that
    expects the loop to stop earlier fails loudly instead of hanging.
    """

    def __init__(self, responses: Iterable[str], *, model: str = "fake-list") -> None:
        super().__init__(model)
        self.responses: List[str] = list(responses)
        self.calls: List[RecordedCall] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        stop: Optional[Sequence[str]] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        index = len(self.calls)
        self.calls.append(RecordedCall(messages=tuple(messages), stop=tuple(stop or ())))
        if index >= len(self.responses):
            raise LLMError(f"FakeListClient ran out of responses after {len(self.responses)} calls.")
        return LLMResponse(content=self.responses[index], finish_reason="stop")
