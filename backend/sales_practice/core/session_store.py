"""
Session Store - In-memory owner of practice sessions.

Each session is one record holding the message log and the context together,
so a session can never exist with one and not the other. Read-modify-write
sequences on a session (a roleplay turn, a context change) run under that
session's asyncio.Lock; different sessions proceed concurrently.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import GatewayError, SessionNotFoundError, ValidationError
from .prompts import COACH_SYSTEM_PROMPT, build_analysis_prompt, build_persona_prompt, render_transcript
from ..llm.base import CompletionGateway, CompletionOptions, LLMMessage
from ..models.session import (
    AnalysisResult, HistoryEntry, Message, SessionContext, SessionSummary, TurnResult, utc_now
)

logger = logging.getLogger(__name__)


@dataclass
class _SessionRecord:
    messages: List[Message]
    context: SessionContext
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() * 1000)


class SessionStore:
    """
    Process-wide session registry.
    Construct one per application and hand it to whatever serves requests.
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        chat_options: Optional[CompletionOptions] = None,
        analysis_options: Optional[CompletionOptions] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            gateway: Completion gateway used for roleplay turns and analysis
            chat_options: Sampling options for roleplay turns
            analysis_options: Sampling options for the critique call
            clock: Source of timezone-aware "now" values
        """
        self._gateway = gateway
        self._chat_options = chat_options or CompletionOptions(temperature=0.7, max_tokens=500)
        self._analysis_options = analysis_options or CompletionOptions(temperature=0.3, max_tokens=1000)
        self._clock = clock
        self._sessions: Dict[str, _SessionRecord] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def _get_record(self, session_id: str) -> _SessionRecord:
        record = self._sessions.get(session_id) if session_id else None
        if record is None:
            raise SessionNotFoundError(session_id)
        return record

    def _ensure_live(self, session_id: str, record: _SessionRecord) -> None:
        """Raise if the record was removed after it was looked up."""
        if self._sessions.get(session_id) is not record:
            raise SessionNotFoundError(session_id)

    def _system_message(self, context: SessionContext) -> Message:
        prompt = build_persona_prompt(context.product, context.customer_profile, context.scenario)
        return Message(role="system", content=prompt, created_at=self._clock())

    def start_session(
        self,
        product: Optional[str],
        customer_profile: Optional[str],
        scenario: Optional[str] = None,
    ) -> Tuple[str, SessionContext]:
        """
        Create a session seeded with the persona system message.

        Returns:
            (session_id, snapshot of the new context)
        """
        if _is_blank(product) or _is_blank(customer_profile):
            raise ValidationError("Product and customer profile are required")

        session_id = str(uuid.uuid4())
        context = SessionContext(
            product=product,
            customer_profile=customer_profile,
            scenario=scenario or None,
            start_time=self._clock(),
        )
        self._sessions[session_id] = _SessionRecord(
            messages=[self._system_message(context)],
            context=context,
        )

        logger.info(
            f"Session started: {session_id}",
            extra={"extra_fields": {
                "session_id": session_id,
                "product": product,
                "scenario": context.scenario,
            }}
        )
        return session_id, context.model_copy()

    async def append_turn(self, session_id: str, user_text: Optional[str]) -> TurnResult:
        """
        Run one roleplay turn.

        The user message is appended before the gateway call and stays in the
        log if the call fails; the reply and counters are only written on success.
        """
        record = self._get_record(session_id)
        if _is_blank(user_text):
            raise ValidationError("User message is required")

        async with record.lock:
            record.messages.append(Message(role="user", content=user_text, created_at=self._clock()))
            llm_messages = [LLMMessage.text(m.role, m.content) for m in record.messages]

            try:
                reply = await self._gateway.complete(llm_messages, self._chat_options)
            except GatewayError as e:
                logger.warning(
                    f"Turn failed for session {session_id}, user message kept: {e.message}",
                    extra={"extra_fields": {"session_id": session_id, "error": type(e).__name__}}
                )
                raise

            # Deleted while the gateway call was in flight
            self._ensure_live(session_id, record)

            now = self._clock()
            record.messages.append(Message(role="assistant", content=reply, created_at=now))
            record.context.message_count += 1
            record.context.last_activity = now

            logger.debug(
                f"Turn completed for session {session_id}: message_count={record.context.message_count}"
            )
            return TurnResult(
                reply=reply,
                message_count=record.context.message_count,
                session_duration_ms=_elapsed_ms(record.context.start_time, now),
            )

    async def update_context(
        self,
        session_id: str,
        product: Optional[str] = None,
        customer_profile: Optional[str] = None,
        scenario: Optional[str] = None,
    ) -> SessionContext:
        """
        Overwrite the provided context fields and regenerate the system message.
        Omitted (None, empty or whitespace-only) fields keep their current value.
        """
        record = self._get_record(session_id)

        async with record.lock:
            self._ensure_live(session_id, record)
            context = record.context
            if not _is_blank(product):
                context.product = product
            if not _is_blank(customer_profile):
                context.customer_profile = customer_profile
            if not _is_blank(scenario):
                context.scenario = scenario
            record.messages[0] = self._system_message(context)

        logger.info(
            f"Context updated for session {session_id}",
            extra={"extra_fields": {
                "session_id": session_id,
                "product": context.product,
                "scenario": context.scenario,
            }}
        )
        return context.model_copy()

    async def analyze(self, session_id: str) -> AnalysisResult:
        """
        Ask the model, acting as a sales coach, to critique the conversation.
        Uses a separate two-message request instead of the session's log.
        """
        record = self._get_record(session_id)
        transcript = render_transcript(list(record.messages))
        context = record.context.model_copy()

        messages = [
            LLMMessage.text("system", COACH_SYSTEM_PROMPT),
            LLMMessage.text("user", build_analysis_prompt(transcript, context)),
        ]
        analysis = await self._gateway.complete(messages, self._analysis_options)

        logger.info(
            f"Analysis generated for session {session_id}",
            extra={"extra_fields": {
                "session_id": session_id,
                "message_count": context.message_count,
                "analysis_length": len(analysis),
            }}
        )
        return AnalysisResult(
            analysis=analysis,
            duration_ms=_elapsed_ms(context.start_time, self._clock()),
            message_count=context.message_count,
            context=context,
        )

    def get_history(self, session_id: str) -> List[HistoryEntry]:
        """Return the conversation without the system message."""
        record = self._get_record(session_id)
        read_at = self._clock()
        conversation = [m for m in record.messages if m.role != "system"]
        return [
            HistoryEntry(
                id=index,
                role=msg.role,
                content=msg.content,
                timestamp=msg.created_at,
                read_at=read_at,
            )
            for index, msg in enumerate(conversation)
        ]

    def get_context(self, session_id: str) -> SessionContext:
        return self._get_record(session_id).context.model_copy()

    def delete_session(self, session_id: str) -> None:
        """Remove a session's log and context together."""
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info(f"Session deleted: {session_id}")

    def list_sessions(self) -> List[SessionSummary]:
        """Snapshot of every active session, for operational inspection."""
        return [
            SessionSummary(
                session_id=session_id,
                context=record.context.model_copy(),
                turn_count=len(record.messages) - 1,
            )
            for session_id, record in self._sessions.items()
        ]
