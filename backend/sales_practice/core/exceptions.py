"""
Error taxonomy for the sales practice backend.

Client-input failures (ValidationError, SessionNotFoundError) are kept apart from
model-service failures (the GatewayError family) so the HTTP layer can tell the
user whether their input was wrong, the session is gone, or the model server is
unreachable. ``status_code`` is only read by the HTTP translation boundary.
"""

from typing import Optional


class SalesPracticeError(Exception):
    """Base class for all sales practice errors."""

    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred."):
        self.message = message
        super().__init__(message)


class ValidationError(SalesPracticeError):
    """Raised when a required input is missing or empty."""

    status_code = 400


class SessionNotFoundError(SalesPracticeError):
    """Raised when a session identifier is unknown."""

    status_code = 404

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__("Session not found. Please start a new session.")


class GatewayError(SalesPracticeError):
    """Base class for failures talking to the chat-completion service."""

    status_code = 502


class ServiceUnavailableError(GatewayError):
    """
    No connection could be made to the completion endpoint. Usually the model
    server is not running; a wrong host in LLM_ENDPOINT lands here too, so the
    message names the endpoint.
    """

    status_code = 503

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        super().__init__(
            f"LM Studio server is not running at {endpoint}. "
            "Please start LM Studio and load a model, or check LLM_ENDPOINT."
        )


class UpstreamError(GatewayError):
    """The completion service answered with a non-success status or an unusable body."""

    def __init__(self, upstream_status: Optional[int], detail: str):
        self.upstream_status = upstream_status
        self.detail = detail
        super().__init__(f"LLM API Error: {detail}")


class TransportError(GatewayError):
    """Any other network failure, including timeouts."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(
            "Failed to communicate with LLM. Please check your connection."
        )
