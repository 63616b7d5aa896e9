"""
Session Models - Defines structures for practice sessions.
"""

from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Serializes field names in camelCase, accepts either spelling on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Message(BaseModel):
    """One entry of a session's message log."""
    role: Literal["system", "user", "assistant"]
    content: str
    created_at: datetime = Field(default_factory=utc_now)


class SessionContext(CamelModel):
    """Product, customer profile and scenario shaping the persona, plus counters."""
    product: str
    customer_profile: str
    scenario: Optional[str] = None
    start_time: datetime = Field(default_factory=utc_now)
    message_count: int = 0
    last_activity: Optional[datetime] = None


class HistoryEntry(CamelModel):
    """A non-system message as returned by a history read."""
    id: int
    role: str
    content: str
    timestamp: datetime  # when the message was appended
    read_at: datetime  # when this history list was materialized


class SessionSummary(CamelModel):
    """Row of the active-session listing."""
    session_id: str
    context: SessionContext
    turn_count: int  # log length without the system message


class TurnResult(BaseModel):
    """Outcome of a completed roleplay turn."""
    reply: str
    message_count: int
    session_duration_ms: int


class AnalysisResult(BaseModel):
    """Outcome of a post-session critique."""
    analysis: str
    duration_ms: int
    message_count: int
    context: SessionContext
