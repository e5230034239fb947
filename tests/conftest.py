"""
Pytest configuration and fixtures shared by the unit tests.
"""

from typing import Callable, List

import pytest

from react_agents.core.primitives import Tool
from react_agents.llm import FakeListClient


@pytest.fixture
def search_calls() -> List[str]:
    return []


@pytest.fixture
def search_tool(search_calls: List[str]) -> Tool:
    """A search tool that always answers 'Paris' and records its inputs."""

    def search(query: str) -> str:
        search_calls.append(query)
        return "Paris"

    return Tool(name="search", description="searches the web", func=search)


@pytest.fixture
def failing_tool() -> Tool:
    def explode(_: str) -> str:
        raise RuntimeError("backend unavailable")

    return Tool(name="flaky", description="always fails", func=explode)


@pytest.fixture
def fake_llm() -> Callable[..., FakeListClient]:
    """Factory for scripted model clients."""

    def build(*responses: str) -> FakeListClient:
        return FakeListClient(list(responses))

    return build
