"""
Completion Gateway Base - Abstract boundary to a chat-completion service.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Sequence


@dataclass
class LLMMessage:
    """A single chat message as sent to the completion service."""
    role: str  # "system", "user", "assistant"
    content: str

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        """Create a text message."""
        return LLMMessage(role=role, content=text)


@dataclass(frozen=True)
class CompletionOptions:
    """Sampling options for one completion call."""
    temperature: float = 0.7
    max_tokens: int = 500


class CompletionGateway(ABC):
    """
    Abstract base class for chat-completion gateways.
    Implementations send an ordered message list and return the reply text,
    raising a GatewayError subclass on failure. No retries are performed.
    """

    def __init__(self, model: str, endpoint: str, timeout: float = 30.0):
        self.model = model
        self.endpoint = endpoint
        self.timeout = timeout

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[LLMMessage],
        options: CompletionOptions,
    ) -> str:
        """
        Send a chat completion request.

        Args:
            messages: Ordered conversation messages
            options: Temperature and max output tokens

        Returns:
            The reply text of the first candidate

        Raises:
            ServiceUnavailableError, UpstreamError, TransportError
        """
        pass

    def _format_messages(self, messages: Sequence[LLMMessage]) -> List[Dict[str, str]]:
        """Convert LLMMessage list to API-compatible format."""
        return [{"role": m.role, "content": m.content} for m in messages]
