"""Trend and history analytics over stored conversations."""

import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from .constants import TrendConstants
from .insights import generate_takeaway
from .models import Conversation, TrendDelta, ProfileStats

COMPOSITE_METRICS = ("user_iq", "gpt_iq", "conversation_iq")

__all__ = [
    "COMPOSITE_METRICS",
    "weekly_trend",
    "weekly_trends",
    "filter_by_range",
    "best_session_index",
    "learning_timeline",
    "chart_rows",
    "profile_stats",
]


def _now(now: Optional[datetime] = None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _round(value: float) -> int:
    # halves round up
    return int(math.floor(value + 0.5))


def weekly_trend(conversations: List[Conversation], metric: str, now: Optional[datetime] = None) -> TrendDelta:
    """Compare this week's mean of `metric` with the week before.

    `has_previous` is False unless both weeks hold at least one conversation;
    the diff is then not meaningful and insight rules ignore it.
    """
    now = _now(now)
    window = timedelta(days=TrendConstants.WINDOW_DAYS)
    week_start = now - window
    prev_start = week_start - window

    current_values, previous_values = [], []
    for conv in conversations:
        value = getattr(conv.scores, metric)
        if week_start < conv.created_at <= now:
            current_values.append(value)
        elif prev_start < conv.created_at <= week_start:
            previous_values.append(value)

    current = _round(_mean(current_values))
    previous = _round(_mean(previous_values))
    return TrendDelta(
        current=current,
        previous=previous,
        diff=current - previous,
        # a quiet current week has nothing to compare
        has_previous=bool(current_values) and bool(previous_values),
    )


def weekly_trends(conversations: List[Conversation], now: Optional[datetime] = None) -> Dict[str, TrendDelta]:
    """Trends for the three composite scores, keyed by metric name."""
    return {metric: weekly_trend(conversations, metric, now) for metric in COMPOSITE_METRICS}


def filter_by_range(conversations: List[Conversation], date_range: str = "all",
                    now: Optional[datetime] = None) -> List[Conversation]:
    """Conversations inside a `7d` / `30d` / `all` window, oldest first."""
    if date_range not in TrendConstants.DATE_RANGES:
        raise ValueError(f"Unknown date range: {date_range}")
    days = TrendConstants.DATE_RANGES[date_range]
    ordered = sorted(conversations, key=lambda c: c.created_at)
    if days is None:
        return ordered
    cutoff = _now(now) - timedelta(days=days)
    return [c for c in ordered if c.created_at >= cutoff]


def best_session_index(conversations: List[Conversation]) -> Optional[int]:
    """Index of the conversation with the highest composite total."""
    if not conversations:
        return None
    best_index, best_total = 0, 0
    for index, conv in enumerate(conversations):
        s = conv.scores
        total = s.user_iq + s.gpt_iq + s.conversation_iq
        if total > best_total:
            best_index, best_total = index, total
    return best_index


def learning_timeline(conversations: List[Conversation],
                      limit: int = TrendConstants.TIMELINE_LIMIT) -> List[Tuple[Conversation, str]]:
    """Newest conversations with a takeaway against their chronological predecessor."""
    ordered = sorted(conversations, key=lambda c: c.created_at, reverse=True)
    timeline = []
    for index, conv in enumerate(ordered[:limit]):
        previous = ordered[index + 1] if index + 1 < len(ordered) else None
        timeline.append((conv, generate_takeaway(conv, previous)))
    return timeline


def chart_rows(conversations: List[Conversation]) -> List[Dict[str, object]]:
    """Rows for the progress chart, oldest first."""
    return [
        {
            "date": conv.created_at.date().isoformat(),
            "UserIQ": conv.scores.user_iq,
            "GPTIQ": conv.scores.gpt_iq,
            "ConversationIQ": conv.scores.conversation_iq,
        }
        for conv in sorted(conversations, key=lambda c: c.created_at)
    ]


def profile_stats(conversations: List[Conversation]) -> Optional[ProfileStats]:
    """Aggregate statistics for the profile page; None when there is no history."""
    if not conversations:
        return None
    ordered = sorted(conversations, key=lambda c: c.created_at)
    total = len(ordered)
    window = TrendConstants.PROFILE_WINDOW

    best = ordered[0]
    for conv in ordered:
        if conv.scores.conversation_iq > best.scores.conversation_iq:
            best = conv

    above = next((c for c in ordered if c.scores.conversation_iq >= TrendConstants.MILESTONE_SCORE), None)

    initial = _round(_mean([c.scores.conversation_iq for c in ordered[:window]]))
    current = _round(_mean([c.scores.conversation_iq for c in ordered[-window:]]))

    # Absent sub-scores count as zero in these averages
    areas = [
        ("clarity", _mean([c.scores.user_clarity or 0 for c in ordered])),
        ("depth", _mean([c.scores.user_depth or 0 for c in ordered])),
        ("creativity", _mean([c.scores.user_creativity or 0 for c in ordered])),
    ]
    strongest = max(areas, key=lambda a: a[1])
    weakest = min(areas, key=lambda a: a[1])

    return ProfileStats(
        total=total,
        avg_user_iq=_round(_mean([c.scores.user_iq for c in ordered])),
        avg_gpt_iq=_round(_mean([c.scores.gpt_iq for c in ordered])),
        avg_conversation_iq=_round(_mean([c.scores.conversation_iq for c in ordered])),
        best_score=best.scores.conversation_iq,
        last_active=ordered[-1].created_at,
        first_conversation={"date": ordered[0].created_at, "score": ordered[0].scores.conversation_iq},
        first_above_80={"date": above.created_at, "score": above.scores.conversation_iq} if above else None,
        best_conversation={"date": best.created_at, "score": best.scores.conversation_iq},
        initial_avg_iq=initial,
        current_avg_iq=current,
        improvement=current - initial,
        strongest_area=strongest[0],
        weakest_area=weakest[0],
        area_averages=dict(areas),
    )
