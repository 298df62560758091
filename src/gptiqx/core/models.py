"""Data models for GPTIQX."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any


class InsightKind(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    INFO = "info"
    WARNING = "warning"


class FactorCategory(Enum):
    CLARITY = "clarity"
    DEPTH = "depth"
    CREATIVITY = "creativity"
    SYNERGY = "synergy"
    FLOW = "flow"
    GENERAL = "general"


class Confidence(Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


def _to_int(value: Any) -> Optional[int]:
    """Coerce a loosely-typed score to int, None when absent or unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass
class ScoreSnapshot:
    """Scores attached to one analyzed conversation."""
    user_iq: int
    gpt_iq: int
    conversation_iq: int
    user_clarity: Optional[int] = None
    user_depth: Optional[int] = None
    user_creativity: Optional[int] = None
    gpt_clarity: Optional[int] = None
    gpt_depth: Optional[int] = None
    gpt_flow: Optional[int] = None
    conversation_flow: Optional[int] = None
    conversation_synergy: Optional[int] = None
    justification: Optional[str] = None

    @property
    def composite_average(self) -> float:
        return (self.user_iq + self.gpt_iq + self.conversation_iq) / 3

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreSnapshot":
        """Build a snapshot from gateway JSON or a stored row.

        Missing composite scores become 0, missing sub-scores stay None and
        unknown keys are ignored.
        """
        data = data or {}
        kwargs = {}
        for f in fields(cls):
            if f.name == "justification":
                text = data.get("justification")
                kwargs[f.name] = str(text) if text is not None else None
            elif f.name in ("user_iq", "gpt_iq", "conversation_iq"):
                kwargs[f.name] = _to_int(data.get(f.name)) or 0
            else:
                kwargs[f.name] = _to_int(data.get(f.name))
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class TrendDelta:
    """Week-over-week comparison for one composite score."""
    current: float
    previous: float
    diff: int
    has_previous: bool

    @classmethod
    def empty(cls) -> "TrendDelta":
        return cls(current=0, previous=0, diff=0, has_previous=False)


@dataclass
class Insight:
    """One generated observation."""
    kind: InsightKind
    title: str
    description: str
    priority: int
    recommendation: Optional[str] = None


@dataclass
class PrimaryInsight:
    """Single best recommendation for the latest conversation."""
    problem: str
    reason: str
    action: str
    category: FactorCategory
    confidence: Confidence


@dataclass
class FocusArea:
    """Factor to work on next, with its expected point impact."""
    name: str
    description: str
    impact_range: str
    priority: int


@dataclass
class Conversation:
    """A stored, analyzed conversation."""
    id: str
    title: str
    transcript: str
    created_at: datetime
    scores: ScoreSnapshot

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Conversation":
        created = data.get("created_at")
        if isinstance(created, str):
            created = datetime.fromisoformat(created.replace("Z", "+00:00"))
        elif created is None:
            created = datetime.now(timezone.utc)
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "New Analysis",
            transcript=data.get("transcript") or "",
            created_at=created,
            scores=ScoreSnapshot.from_dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        row = {
            "id": self.id,
            "title": self.title,
            "transcript": self.transcript,
            "created_at": self.created_at.isoformat(),
        }
        row.update(self.scores.to_dict())
        return row


@dataclass
class ProfileStats:
    """Aggregate statistics over a user's conversation history."""
    total: int
    avg_user_iq: int
    avg_gpt_iq: int
    avg_conversation_iq: int
    best_score: int
    last_active: datetime
    first_conversation: Dict[str, Any]
    first_above_80: Optional[Dict[str, Any]]
    best_conversation: Dict[str, Any]
    initial_avg_iq: int
    current_avg_iq: int
    improvement: int
    strongest_area: str
    weakest_area: str
    area_averages: Dict[str, float] = field(default_factory=dict)
