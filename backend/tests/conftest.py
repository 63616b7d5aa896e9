"""
Shared test fixtures and configuration.
"""

import os
from typing import List, Optional, Sequence, Tuple

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")
os.environ.setdefault("LLM_ENDPOINT", "http://localhost:1234/v1/chat/completions")

from sales_practice.core.exceptions import GatewayError  # noqa: E402
from sales_practice.llm.base import CompletionGateway, CompletionOptions, LLMMessage  # noqa: E402


class FakeGateway(CompletionGateway):
    """In-memory gateway that records calls and replays canned replies."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[GatewayError] = None):
        super().__init__(model="fake-model", endpoint="http://fake-llm/v1/chat/completions")
        self.replies = list(replies or ["What problems does it solve for me?"])
        self.error = error
        self.calls: List[Tuple[List[LLMMessage], CompletionOptions]] = []

    async def complete(self, messages: Sequence[LLMMessage], options: CompletionOptions) -> str:
        self.calls.append((list(messages), options))
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def anyio_backend():
    return "asyncio"
