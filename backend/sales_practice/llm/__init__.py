"""LLM module - the gateway to the external chat-completion service."""

from .base import CompletionGateway, CompletionOptions, LLMMessage
from .openai_compatible import OpenAICompatibleGateway

__all__ = [
    'CompletionGateway',
    'CompletionOptions',
    'LLMMessage',
    'OpenAICompatibleGateway',
]
