"""Core module - session store, prompts and the error taxonomy."""

from .exceptions import (
    SalesPracticeError,
    ValidationError,
    SessionNotFoundError,
    GatewayError,
    ServiceUnavailableError,
    UpstreamError,
    TransportError,
)
from .session_store import SessionStore

__all__ = [
    'SalesPracticeError',
    'ValidationError',
    'SessionNotFoundError',
    'GatewayError',
    'ServiceUnavailableError',
    'UpstreamError',
    'TransportError',
    'SessionStore',
]
