"""Rule-based insight selection over conversation scores.

Every selector here is a pure function of its arguments: no I/O, no logging,
no module state that changes between calls.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .constants import InsightConstants, DefaultScoreConstants
from .models import (
    ScoreSnapshot, TrendDelta, Insight, InsightKind, PrimaryInsight,
    FocusArea, FactorCategory, Confidence, Conversation,
)

__all__ = [
    "select_insights",
    "select_primary_insight",
    "summarize_status",
    "select_focus_area",
    "generate_takeaway",
]

Factor = Tuple[str, int]


def _value(score: Optional[int], missing: int) -> int:
    return missing if score is None else score


def _weakest(factors: List[Factor]) -> Factor:
    # min/max keep the first element on ties
    return min(factors, key=lambda f: f[1])


def _strongest(factors: List[Factor]) -> Factor:
    return max(factors, key=lambda f: f[1])


# --- Ranked insight list ---

def select_insights(
    snapshot: Optional[ScoreSnapshot],
    user_trend: TrendDelta,
    gpt_trend: TrendDelta,
    conv_trend: TrendDelta,
    conversation_count: int,
) -> List[Insight]:
    """Pick up to three observations for the latest conversation.

    Rules append candidates in a fixed order; the result is stably sorted by
    priority and truncated, so equal priorities keep rule order.
    """
    if snapshot is None:
        return [Insight(
            kind=InsightKind.INFO,
            title="Get Started",
            description="Analyze your first conversation to receive personalized insights and recommendations.",
            priority=1,
        )]

    c = InsightConstants
    insights: List[Insight] = []

    # Trend-based insights
    if user_trend.has_previous:
        if user_trend.diff >= c.TREND_SURGE_POINTS:
            insights.append(Insight(
                kind=InsightKind.POSITIVE,
                title="UserIQ Surge Detected",
                description=f"Your prompt quality improved by {user_trend.diff} points this week. "
                            "Your questions are becoming more focused and effective.",
                recommendation="Keep refining your prompting style. Specificity and context are paying off.",
                priority=1,
            ))
        elif user_trend.diff <= c.TREND_DROP_POINTS:
            insights.append(Insight(
                kind=InsightKind.WARNING,
                title="UserIQ Decline Noticed",
                description=f"Your prompt quality dropped {abs(user_trend.diff)} points compared to last week.",
                recommendation="Try adding more context to your prompts and be specific about desired outcomes.",
                priority=1,
            ))

    if gpt_trend.has_previous and gpt_trend.diff <= c.TREND_DROP_POINTS:
        insights.append(Insight(
            kind=InsightKind.NEGATIVE,
            title="AI Response Quality Dip",
            description=f"GPT responses declined {abs(gpt_trend.diff)} points this week.",
            recommendation="Consider breaking complex questions into smaller, focused prompts for better AI responses.",
            priority=2,
        ))

    if conv_trend.has_previous and conv_trend.diff >= c.TREND_SURGE_POINTS:
        insights.append(Insight(
            kind=InsightKind.POSITIVE,
            title="Conversation Synergy Improving",
            description=f"Your overall dialogue quality is up {conv_trend.diff} points. "
                        "Conversations are flowing more naturally.",
            priority=2,
        ))

    # Score-based insights (a zero sub-score counts as not reported)
    clarity, depth = snapshot.user_clarity, snapshot.user_depth
    if clarity and depth and abs(clarity - depth) > c.CLARITY_DEPTH_GAP:
        if clarity > depth:
            insights.append(Insight(
                kind=InsightKind.INFO,
                title="Depth Opportunity",
                description="Your prompts are clear but could go deeper. "
                            "Adding 'why' and 'how' questions can unlock richer responses.",
                recommendation="Try layered questions: start broad, then drill into specifics.",
                priority=3,
            ))
        else:
            insights.append(Insight(
                kind=InsightKind.INFO,
                title="Clarity Enhancement Needed",
                description="Your questions are deep but could be clearer. "
                            "Simplifying structure will help AI understand your intent.",
                recommendation="Lead with your main question, then add context and constraints.",
                priority=3,
            ))

    if snapshot.conversation_synergy and snapshot.conversation_synergy < c.LOW_SYNERGY:
        insights.append(Insight(
            kind=InsightKind.WARNING,
            title="Low Synergy Alert",
            description="The back-and-forth isn't building momentum. "
                        "Responses may not be connecting well with prompts.",
            recommendation="Reference AI's previous points in follow-ups to create more cohesive dialogue.",
            priority=2,
        ))

    if snapshot.gpt_flow and snapshot.gpt_flow > c.HIGH_CONTEXT_FLOW:
        insights.append(Insight(
            kind=InsightKind.POSITIVE,
            title="Excellent Context Retention",
            description="The AI is maintaining context exceptionally well across your conversation threads.",
            priority=4,
        ))

    if conversation_count < c.BASELINE_CONVERSATIONS:
        remaining = c.BASELINE_CONVERSATIONS - conversation_count
        insights.append(Insight(
            kind=InsightKind.NEUTRAL,
            title="Building Your Baseline",
            description=f"{remaining} more conversations needed for meaningful trend analysis.",
            priority=5,
        ))

    if snapshot.composite_average >= c.EXPERT_AVERAGE:
        insights.append(Insight(
            kind=InsightKind.POSITIVE,
            title="Expert-Level Interactions",
            description="You're in the top tier of conversation quality. "
                        "Your prompting skills demonstrate mastery.",
            priority=1,
        ))

    return sorted(insights, key=lambda i: i.priority)[:c.MAX_INSIGHTS]


# --- Primary insight ---

@dataclass(frozen=True)
class _PrimaryTemplate:
    problem: str
    reason: str  # formatted with {score}
    action: str


PRIMARY_TEMPLATES = {
    FactorCategory.CLARITY: _PrimaryTemplate(
        problem="Your prompts could be clearer",
        reason="Your clarity score is {score}. The AI may struggle to understand exactly what you're asking for.",
        action="Start with your main question first, then add context. "
               "Be specific about what format you want the answer in.",
    ),
    FactorCategory.DEPTH: _PrimaryTemplate(
        problem="Your questions lack depth",
        reason="Your depth score is {score}. Simple questions often get surface-level answers.",
        action="Add 'why' or 'how' to your questions. "
               "Ask the AI to explain its reasoning or consider alternatives.",
    ),
    FactorCategory.CREATIVITY: _PrimaryTemplate(
        problem="Your prompts are too predictable",
        reason="Your creativity score is {score}. Standard questions get standard answers.",
        action="Try asking from a different angle. "
               "Use 'what if' scenarios or ask the AI to challenge assumptions.",
    ),
    FactorCategory.SYNERGY: _PrimaryTemplate(
        problem="The conversation isn't building momentum",
        reason="Your synergy score is {score}. Each exchange feels disconnected from the previous one.",
        action="Reference what the AI said in your follow-ups. "
               "Build on previous answers instead of starting fresh.",
    ),
    FactorCategory.FLOW: _PrimaryTemplate(
        problem="The conversation flow is choppy",
        reason="Your flow score is {score}. The dialogue doesn't progress naturally.",
        action="Guide the conversation step by step. "
               "After each response, ask a logical follow-up question.",
    ),
}

DOING_GREAT = PrimaryInsight(
    problem="You're doing great!",
    reason="All your scores are above 80. Your conversation quality is excellent.",
    action="Keep experimenting with complex topics. "
           "Try multi-step reasoning or creative challenges to push further.",
    category=FactorCategory.GENERAL,
    confidence=Confidence.HIGH,
)


def _confidence(gap: int) -> Confidence:
    if gap >= InsightConstants.HIGH_CONFIDENCE_GAP:
        return Confidence.HIGH
    if gap >= InsightConstants.MODERATE_CONFIDENCE_GAP:
        return Confidence.MODERATE
    return Confidence.LOW


def select_primary_insight(snapshot: ScoreSnapshot) -> PrimaryInsight:
    """Recommend one improvement, targeting the weakest of five factors.

    Confidence reflects how far the weakest factor sits below the next one.
    """
    missing = DefaultScoreConstants.PRIMARY_INSIGHT_MISSING
    factors: List[Tuple[FactorCategory, int]] = [
        (FactorCategory.CLARITY, _value(snapshot.user_clarity, missing)),
        (FactorCategory.DEPTH, _value(snapshot.user_depth, missing)),
        (FactorCategory.CREATIVITY, _value(snapshot.user_creativity, missing)),
        (FactorCategory.SYNERGY, _value(snapshot.conversation_synergy, missing)),
        (FactorCategory.FLOW, _value(snapshot.conversation_flow, missing)),
    ]

    weakest_index = min(range(len(factors)), key=lambda i: factors[i][1])
    category, score = factors[weakest_index]
    others = factors[:weakest_index] + factors[weakest_index + 1:]
    _, second_score = _weakest(others)

    if score >= InsightConstants.STRONG_FACTOR:
        return DOING_GREAT

    template = PRIMARY_TEMPLATES[category]
    return PrimaryInsight(
        problem=template.problem,
        reason=template.reason.format(score=score),
        action=template.action,
        category=category,
        confidence=_confidence(second_score - score),
    )


# --- Status summary ---

def summarize_status(snapshot: ScoreSnapshot) -> str:
    """One-line summary of overall quality naming the weakest or strongest area."""
    missing = DefaultScoreConstants.STATUS_SUMMARY_MISSING
    factors: List[Factor] = [
        ("prompt clarity", _value(snapshot.user_clarity, missing)),
        ("question depth", _value(snapshot.user_depth, missing)),
        ("creativity", _value(snapshot.user_creativity, missing)),
        ("response quality", _value(snapshot.gpt_clarity, missing)),
        ("conversation flow", _value(snapshot.conversation_flow, missing)),
        ("synergy", _value(snapshot.conversation_synergy, missing)),
    ]
    weakest_name, weakest_value = _weakest(factors)
    strongest_name, _ = _strongest(factors)
    avg = snapshot.composite_average
    c = InsightConstants

    if avg >= c.STATUS_EXCELLENT:
        return f"Excellent conversation quality. Your {strongest_name} is particularly strong."
    if avg >= c.STATUS_GOOD:
        if weakest_value < c.STATUS_LIMITING_FACTOR:
            return f"Good overall performance, but {weakest_name} is limiting further improvement."
        return f"Solid conversation quality with room to grow in {weakest_name}."
    if avg >= c.STATUS_AVERAGE:
        return f"Average performance. Focus on improving {weakest_name} for the biggest impact."
    return f"Your {weakest_name} needs attention. Small improvements here will raise all scores."


# --- Improvement focus ---

@dataclass(frozen=True)
class _FocusTemplate:
    name: str
    description: str
    impact: str


FOCUS_TEMPLATES = {
    FactorCategory.CLARITY: _FocusTemplate(
        "Prompt Clarity",
        "Clear, well-structured prompts help AI understand your intent precisely.",
        "8–12",
    ),
    FactorCategory.DEPTH: _FocusTemplate(
        "Question Depth",
        "Deeper questions unlock more comprehensive and valuable responses.",
        "6–10",
    ),
    FactorCategory.CREATIVITY: _FocusTemplate(
        "Creative Framing",
        "Unique perspectives lead to more insightful and novel answers.",
        "5–8",
    ),
    FactorCategory.FLOW: _FocusTemplate(
        "Conversation Flow",
        "Building on previous responses creates richer dialogue.",
        "7–11",
    ),
    FactorCategory.SYNERGY: _FocusTemplate(
        "Synergy Building",
        "Strong back-and-forth creates compounding value in conversations.",
        "8–14",
    ),
}

STRONG_FUNDAMENTALS = "Your fundamentals are strong. Push synergy for peak performance."


def select_focus_area(snapshot: ScoreSnapshot) -> FocusArea:
    """Choose the factor to work on next.

    Once every factor is at least 80 the recommendation is always synergy,
    which has the largest upside once the fundamentals are in place.
    """
    missing = DefaultScoreConstants.FOCUS_AREA_MISSING
    factors: List[Tuple[FactorCategory, int]] = [
        (FactorCategory.CLARITY, _value(snapshot.user_clarity, missing)),
        (FactorCategory.DEPTH, _value(snapshot.user_depth, missing)),
        (FactorCategory.CREATIVITY, _value(snapshot.user_creativity, missing)),
        (FactorCategory.FLOW, _value(snapshot.conversation_flow, missing)),
        (FactorCategory.SYNERGY, _value(snapshot.conversation_synergy, missing)),
    ]
    category, score = _weakest(factors)

    if score >= InsightConstants.STRONG_FACTOR:
        synergy = FOCUS_TEMPLATES[FactorCategory.SYNERGY]
        return FocusArea(
            name=synergy.name,
            description=STRONG_FUNDAMENTALS,
            impact_range=synergy.impact,
            priority=1,
        )

    template = FOCUS_TEMPLATES[category]
    if score < InsightConstants.FOCUS_CRITICAL:
        priority = 1
    elif score < InsightConstants.FOCUS_MODERATE:
        priority = 2
    else:
        priority = 3
    return FocusArea(
        name=template.name,
        description=template.description,
        impact_range=template.impact,
        priority=priority,
    )


# --- Learning timeline takeaway ---

def _takeaway_factors(scores: ScoreSnapshot) -> List[Factor]:
    missing = DefaultScoreConstants.TAKEAWAY_MISSING
    return [
        ("clarity", _value(scores.user_clarity, missing)),
        ("depth", _value(scores.user_depth, missing)),
        ("creativity", _value(scores.user_creativity, missing)),
        ("flow", _value(scores.conversation_flow, missing)),
        ("synergy", _value(scores.conversation_synergy, missing)),
    ]


def _as_scores(item: Union[Conversation, ScoreSnapshot]) -> ScoreSnapshot:
    return item.scores if isinstance(item, Conversation) else item


def generate_takeaway(
    conversation: Union[Conversation, ScoreSnapshot],
    previous: Optional[Union[Conversation, ScoreSnapshot]] = None,
) -> str:
    """Short caption for a timeline entry, comparing with the previous one when given."""
    factors = _takeaway_factors(_as_scores(conversation))
    c = InsightConstants

    if previous is not None:
        prev_factors = _takeaway_factors(_as_scores(previous))
        improved = [name for (name, value), (_, before) in zip(factors, prev_factors)
                    if value > before + c.TAKEAWAY_CHANGE_POINTS]
        declined = [name for (name, value), (_, before) in zip(factors, prev_factors)
                    if value < before - c.TAKEAWAY_CHANGE_POINTS]
        if improved and declined:
            return f"{improved[0]} improved, {declined[0]} dropped"
        if improved:
            return f"Notable {improved[0]} improvement"
        if declined:
            return f"{declined[0]} needs attention"

    strongest_name, strongest_value = _strongest(factors)
    weakest_name, weakest_value = _weakest(factors)

    if strongest_value >= c.BALANCED_STRONGEST and weakest_value >= c.BALANCED_WEAKEST:
        return "Well-balanced conversation"
    if strongest_value >= c.STANDOUT_STRENGTH:
        return f"Strong {strongest_name}, work on {weakest_name}"
    if weakest_value < c.FOCUS_NEEDED:
        return f"Focus needed on {weakest_name}"
    return f"Good {strongest_name}, improve {weakest_name}"
