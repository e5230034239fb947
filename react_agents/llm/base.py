"""
Base interfaces for LLM chat clients.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..core.primitives.messages import ChatMessage, coerce_messages


class LLMError(RuntimeError):
    """Raised when an LLM request fails."""


@dataclass
class LLMResponse:
    content: str
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    raw: Optional[Dict[str, Any]] = None


class LLMClient(ABC):
    """
    Abstract base class for all chat-completion clients.

    Agents call :meth:`chat` exactly once per planning step and pass their
    stop sequences through ``stop`` so generation halts before the model can
    write its own observation.
    """

    def __init__(
        self,
        model: str,
        *,
        temperature: float = 0.0,
        max_output_tokens: Optional[int] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    @abstractmethod
    def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        stop: Optional[Sequence[str]] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        raise NotImplementedError

    def _resolve_kwargs(
        self,
        *,
        temperature: Optional[float],
        max_output_tokens: Optional[int],
        stop: Optional[Sequence[str]],
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "temperature": temperature if temperature is not None else self.temperature,
        }
        final_max_tokens = max_output_tokens if max_output_tokens is not None else self.max_output_tokens
        if final_max_tokens is not None:
            payload["max_tokens"] = final_max_tokens
        if stop:
            payload["stop"] = list(stop)
        return payload

    def chat_as_dicts(self, messages: Sequence[ChatMessage], **kwargs: Any) -> Dict[str, Any]:
        """
        Utility for subclasses that send HTTP requests with JSON bodies.
        """
        payload = self._resolve_kwargs(
            temperature=kwargs.pop("temperature", None),
            max_output_tokens=kwargs.pop("max_output_tokens", None),
            stop=kwargs.pop("stop", None),
        )
        payload.update(kwargs)
        messages_payload: List[Dict[str, Any]] = coerce_messages(messages)
        payload["messages"] = messages_payload
        return payload
