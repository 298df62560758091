"""Services for GPTIQX."""

from .llm import ScoringServiceFactory, AnalysisError
from .history import ConversationHistory, HistoryError

__all__ = [
    "ScoringServiceFactory",
    "AnalysisError",
    "ConversationHistory",
    "HistoryError",
]
