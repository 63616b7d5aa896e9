"""API module."""

from .errors import register_exception_handlers
from .sessions import router as sessions_router

__all__ = ['register_exception_handlers', 'sessions_router']
