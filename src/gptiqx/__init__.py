"""GPTIQX - AI conversation quality scoring and insights."""

__version__ = "1.0.0"
__author__ = "GPTIQX Team"

from .core.models import *
from .core.config import settings
from .services.llm import ScoringServiceFactory
from .services.history import ConversationHistory

__all__ = [
    "settings",
    "ScoringServiceFactory",
    "ConversationHistory",
]
