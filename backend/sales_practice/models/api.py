"""
API Models - Request and response bodies of the HTTP layer.
Field names travel in camelCase on the wire (sessionId, customerProfile, ...).
"""

from typing import List, Optional

from .session import CamelModel, HistoryEntry, SessionContext, SessionSummary


class StartSessionRequest(CamelModel):
    """Start a practice session."""
    product: Optional[str] = None
    customer_profile: Optional[str] = None
    scenario: Optional[str] = None


class ChatRequest(CamelModel):
    """Send one salesperson message."""
    session_id: Optional[str] = None
    user_message: Optional[str] = None


class UpdateContextRequest(CamelModel):
    """Change product, customer profile or scenario mid-session."""
    session_id: Optional[str] = None
    product: Optional[str] = None
    customer_profile: Optional[str] = None
    scenario: Optional[str] = None


class AnalyzeRequest(CamelModel):
    """Request a critique of the session so far."""
    session_id: Optional[str] = None


class StartSessionResponse(CamelModel):
    session_id: str
    message: str
    context: SessionContext


class SessionInfo(CamelModel):
    message_count: int
    session_duration: int  # milliseconds


class ChatResponse(CamelModel):
    reply: str
    session_info: SessionInfo


class UpdateContextResponse(CamelModel):
    message: str
    context: SessionContext


class SessionStats(CamelModel):
    duration: int  # milliseconds
    message_count: int
    context: SessionContext


class AnalyzeResponse(CamelModel):
    analysis: str
    session_stats: SessionStats


class HistoryResponse(CamelModel):
    history: List[HistoryEntry]
    context: SessionContext


class MessageResponse(CamelModel):
    message: str


class SessionListResponse(CamelModel):
    active_sessions: List[SessionSummary]
