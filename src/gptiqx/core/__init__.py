"""Core modules for GPTIQX."""

from .models import *
from .config import settings
from .insights import *
from .trends import *

__all__ = [
    "settings",
    "ScoreSnapshot",
    "TrendDelta",
    "Insight",
    "PrimaryInsight",
    "FocusArea",
    "Conversation",
    "select_insights",
    "select_primary_insight",
    "summarize_status",
    "select_focus_area",
    "generate_takeaway",
    "weekly_trends",
]
