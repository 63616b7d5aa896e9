"""
OpenAI-compatible Completion Gateway.
Talks to any server exposing the chat/completions endpoint (LM Studio, Ollama,
llama.cpp server, OpenAI itself) and maps transport failures onto the
gateway error taxonomy.
"""

import httpx
import logging
import time
from typing import Optional, Dict, Any, Sequence

from .base import CompletionGateway, CompletionOptions, LLMMessage
from ..core.exceptions import ServiceUnavailableError, TransportError, UpstreamError

logger = logging.getLogger(__name__)


class OpenAICompatibleGateway(CompletionGateway):
    """
    Gateway for OpenAI-style chat/completions endpoints.
    A fresh httpx.AsyncClient is opened per call, so no state is held between calls.
    """

    def __init__(
        self,
        endpoint: str = "http://localhost:1234/v1/chat/completions",
        model: str = "mistral-7b-instruct",
        timeout: float = 30.0,
        api_key: Optional[str] = None,
    ):
        super().__init__(model=model, endpoint=endpoint, timeout=timeout)
        self.api_key = api_key

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _build_payload(
        self, messages: Sequence[LLMMessage], options: CompletionOptions
    ) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": self._format_messages(messages),
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
            "stream": False,
        }

    async def complete(
        self,
        messages: Sequence[LLMMessage],
        options: CompletionOptions,
    ) -> str:
        """Send request to the chat/completions endpoint and return the reply text."""
        start_time = time.time()
        payload = self._build_payload(messages, options)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"LLM API call starting: endpoint={self.endpoint}, model={self.model}, "
                f"temperature={options.temperature}, max_tokens={options.max_tokens}, "
                f"{len(messages)} messages"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.endpoint, json=payload, headers=self._get_headers())
                logger.debug(f"LLM API response status: {resp.status_code}")
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _extract_error_detail(e.response)
            self._log_failure(start_time, f"status {e.response.status_code}: {detail}")
            raise UpstreamError(e.response.status_code, detail) from e
        except httpx.ConnectError as e:
            self._log_failure(start_time, f"could not connect to {self.endpoint}: {e}")
            raise ServiceUnavailableError(self.endpoint) from e
        except httpx.HTTPError as e:
            self._log_failure(start_time, f"{type(e).__name__}: {e}")
            raise TransportError(str(e) or type(e).__name__) from e

        try:
            data = resp.json()
        except ValueError as e:
            self._log_failure(start_time, "response body is not JSON")
            raise UpstreamError(resp.status_code, "Response body is not valid JSON") from e

        content = _extract_reply(data)
        if content is None:
            self._log_failure(start_time, "response contained no completion choices")
            raise UpstreamError(resp.status_code, "Response contained no completion choices")

        usage = data.get("usage")
        usage = usage if isinstance(usage, dict) else {}
        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "LLM API call completed",
            extra={"extra_fields": {
                "endpoint": self.endpoint,
                "model": data.get("model", self.model),
                "prompt_tokens": usage.get("prompt_tokens", 0),
                "completion_tokens": usage.get("completion_tokens", 0),
                "total_tokens": usage.get("total_tokens", 0),
                "duration_ms": round(duration_ms, 2),
            }}
        )
        return content

    def _log_failure(self, start_time: float, error: str) -> None:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"LLM API call failed: {error}",
            extra={"extra_fields": {
                "endpoint": self.endpoint,
                "model": self.model,
                "duration_ms": round(duration_ms, 2),
                "error": error,
            }}
        )


def _extract_reply(data: Any) -> Optional[str]:
    """Return choices[0].message.content, or None when the body lacks it."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def _extract_error_detail(response: httpx.Response) -> str:
    """Pull a readable message out of an error body ({"error": "..."} or {"error": {"message": "..."}})."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:500] or response.reason_phrase
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if error:
            return str(error)
        if payload.get("message"):
            return str(payload["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
