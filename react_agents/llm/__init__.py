"""
Convenience exports for built-in LLM clients.
"""

from .base import LLMClient, LLMError, LLMResponse
from .fake import FakeListClient
from .providers import (
    OpenAICompatibleClient,
    ProviderSpec,
    create_chat_completion_client,
    list_providers,
    register_provider,
)

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMResponse",
    "FakeListClient",
    "OpenAICompatibleClient",
    "ProviderSpec",
    "create_chat_completion_client",
    "list_providers",
    "register_provider",
]
