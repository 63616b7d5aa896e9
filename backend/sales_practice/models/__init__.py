"""Models module."""

from .session import (
    Message, SessionContext, HistoryEntry, SessionSummary, TurnResult, AnalysisResult
)
from .api import (
    StartSessionRequest, ChatRequest, UpdateContextRequest, AnalyzeRequest,
    StartSessionResponse, ChatResponse, SessionInfo, UpdateContextResponse,
    AnalyzeResponse, SessionStats, HistoryResponse, MessageResponse, SessionListResponse
)

__all__ = [
    'Message', 'SessionContext', 'HistoryEntry', 'SessionSummary', 'TurnResult', 'AnalysisResult',
    'StartSessionRequest', 'ChatRequest', 'UpdateContextRequest', 'AnalyzeRequest',
    'StartSessionResponse', 'ChatResponse', 'SessionInfo', 'UpdateContextResponse',
    'AnalyzeResponse', 'SessionStats', 'HistoryResponse', 'MessageResponse', 'SessionListResponse'
]
