"""
Session API endpoints - Start, converse, re-target, analyze and inspect practice sessions.
Routes only unpack the request and delegate to the SessionStore; errors are
translated by the handlers in api.errors.
"""

from fastapi import APIRouter, Depends, Request

from ..core import SessionStore, ValidationError
from ..models import (
    AnalyzeRequest,
    AnalyzeResponse,
    ChatRequest,
    ChatResponse,
    HistoryResponse,
    MessageResponse,
    SessionInfo,
    SessionListResponse,
    SessionStats,
    StartSessionRequest,
    StartSessionResponse,
    UpdateContextRequest,
    UpdateContextResponse,
)

router = APIRouter(prefix="/api", tags=["sessions"])


def get_session_store(request: Request) -> SessionStore:
    """Dependency returning the store attached to the running application."""
    return request.app.state.session_store


@router.post("/session/start", response_model=StartSessionResponse)
async def start_session(
    body: StartSessionRequest,
    store: SessionStore = Depends(get_session_store)
):
    """
    Start a new practice session.

    Args:
        body: product, customerProfile and optional scenario

    Returns:
        The new session id and its context
    """
    session_id, context = store.start_session(body.product, body.customer_profile, body.scenario)
    return StartSessionResponse(
        session_id=session_id,
        message="Session started successfully. You can now begin the sales conversation.",
        context=context,
    )


@router.post("/chat", response_model=ChatResponse)
async def send_message(
    body: ChatRequest,
    store: SessionStore = Depends(get_session_store)
):
    """Send a salesperson message and get the simulated customer's reply."""
    if not body.session_id or not body.user_message:
        raise ValidationError("Session ID and user message are required")

    turn = await store.append_turn(body.session_id, body.user_message)
    return ChatResponse(
        reply=turn.reply,
        session_info=SessionInfo(
            message_count=turn.message_count,
            session_duration=turn.session_duration_ms,
        ),
    )


@router.post("/session/update-context", response_model=UpdateContextResponse)
async def update_context(
    body: UpdateContextRequest,
    store: SessionStore = Depends(get_session_store)
):
    """Change product, customer profile or scenario of a running session."""
    if not body.session_id:
        raise ValidationError("Session ID is required")

    context = await store.update_context(
        body.session_id,
        product=body.product,
        customer_profile=body.customer_profile,
        scenario=body.scenario,
    )
    return UpdateContextResponse(message="Context updated successfully", context=context)


@router.post("/session/analyze", response_model=AnalyzeResponse)
async def analyze_session(
    body: AnalyzeRequest,
    store: SessionStore = Depends(get_session_store)
):
    """Get a coach's critique of the conversation so far."""
    if not body.session_id:
        raise ValidationError("Session ID is required")

    result = await store.analyze(body.session_id)
    return AnalyzeResponse(
        analysis=result.analysis,
        session_stats=SessionStats(
            duration=result.duration_ms,
            message_count=result.message_count,
            context=result.context,
        ),
    )


@router.get("/session/{session_id}/history", response_model=HistoryResponse)
async def get_history(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Get the conversation of a session, system message excluded."""
    return HistoryResponse(
        history=store.get_history(session_id),
        context=store.get_context(session_id),
    )


@router.delete("/session/{session_id}", response_model=MessageResponse)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete_session(session_id)
    return MessageResponse(message="Session deleted successfully")


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(store: SessionStore = Depends(get_session_store)):
    """List all active sessions (operational inspection only)."""
    return SessionListResponse(active_sessions=store.list_sessions())
