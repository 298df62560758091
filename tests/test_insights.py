"""Tests for the ranked insight list."""

import copy

import pytest

from gptiqx.core.insights import select_insights
from gptiqx.core.models import ScoreSnapshot, TrendDelta, InsightKind


def trend(diff, has_previous=True):
    return TrendDelta(current=60 + diff, previous=60, diff=diff, has_previous=has_previous)


NO_TREND = TrendDelta.empty()


def snapshot(**kwargs):
    values = {"user_iq": 70, "gpt_iq": 70, "conversation_iq": 70}
    values.update(kwargs)
    return ScoreSnapshot(**values)


def titles(insights):
    return [i.title for i in insights]


def test_no_snapshot_returns_get_started():
    """Without a snapshot only the onboarding insight is returned."""
    insights = select_insights(None, trend(30), trend(-30), trend(30), 0)
    assert len(insights) == 1
    assert insights[0].kind == InsightKind.INFO
    assert insights[0].title == "Get Started"


def test_no_snapshot_ignores_other_arguments():
    a = select_insights(None, NO_TREND, NO_TREND, NO_TREND, 0)
    b = select_insights(None, trend(50), trend(-50), trend(50), 100)
    assert a == b


def test_at_most_three_sorted_by_priority():
    """Many rules fire; output is capped and ordered."""
    s = snapshot(user_iq=95, gpt_iq=90, conversation_iq=90,
                 user_clarity=95, user_depth=40, conversation_synergy=50, gpt_flow=90)
    insights = select_insights(s, trend(15), trend(-15), trend(15), 1)
    assert len(insights) == 3
    priorities = [i.priority for i in insights]
    assert priorities == sorted(priorities)


def test_ties_keep_rule_order():
    s = snapshot(user_iq=95, gpt_iq=90, conversation_iq=90)
    insights = select_insights(s, trend(15), NO_TREND, NO_TREND, 10)
    # Both priority 1; surge is evaluated before expert-level
    assert titles(insights) == ["UserIQ Surge Detected", "Expert-Level Interactions"]


def test_user_surge():
    user_trend = TrendDelta(current=80, previous=65, diff=15, has_previous=True)
    insights = select_insights(snapshot(), user_trend, NO_TREND, NO_TREND, 10)
    assert insights[0].title == "UserIQ Surge Detected"
    assert insights[0].kind == InsightKind.POSITIVE
    assert "15 points" in insights[0].description


@pytest.mark.parametrize("diff", [9, 0, -9])
def test_user_trend_inside_band_emits_nothing(diff):
    insights = select_insights(snapshot(), trend(diff), NO_TREND, NO_TREND, 10)
    assert insights == []


def test_user_decline_uses_absolute_value():
    insights = select_insights(snapshot(), trend(-12), NO_TREND, NO_TREND, 10)
    assert titles(insights) == ["UserIQ Decline Noticed"]
    assert insights[0].kind == InsightKind.WARNING
    assert "dropped 12 points" in insights[0].description


def test_trend_rules_skipped_without_previous_week():
    """Diff is not evaluated when there is no baseline."""
    insights = select_insights(
        snapshot(), trend(40, has_previous=False), trend(-40, has_previous=False),
        trend(40, has_previous=False), 10,
    )
    assert insights == []


def test_gpt_dip_and_synergy_improving():
    insights = select_insights(snapshot(), NO_TREND, trend(-10), trend(10), 10)
    assert titles(insights) == ["AI Response Quality Dip", "Conversation Synergy Improving"]
    assert insights[0].kind == InsightKind.NEGATIVE
    assert all(i.priority == 2 for i in insights)


def test_depth_opportunity_when_clarity_leads():
    insights = select_insights(snapshot(user_clarity=90, user_depth=60), NO_TREND, NO_TREND, NO_TREND, 10)
    assert titles(insights) == ["Depth Opportunity"]
    assert insights[0].priority == 3


def test_clarity_enhancement_when_depth_leads():
    insights = select_insights(snapshot(user_clarity=50, user_depth=80), NO_TREND, NO_TREND, NO_TREND, 10)
    assert titles(insights) == ["Clarity Enhancement Needed"]


def test_clarity_depth_gap_must_exceed_twenty():
    insights = select_insights(snapshot(user_clarity=80, user_depth=60), NO_TREND, NO_TREND, NO_TREND, 10)
    assert insights == []


def test_gap_rule_needs_both_sub_scores():
    insights = select_insights(snapshot(user_clarity=90), NO_TREND, NO_TREND, NO_TREND, 10)
    assert insights == []


def test_low_synergy_and_context_retention():
    s = snapshot(conversation_synergy=59, gpt_flow=86)
    insights = select_insights(s, NO_TREND, NO_TREND, NO_TREND, 10)
    assert titles(insights) == ["Low Synergy Alert", "Excellent Context Retention"]


def test_boundaries_of_synergy_and_flow_rules():
    s = snapshot(conversation_synergy=60, gpt_flow=85)
    assert select_insights(s, NO_TREND, NO_TREND, NO_TREND, 10) == []


def test_building_baseline_counts_remaining():
    insights = select_insights(snapshot(), NO_TREND, NO_TREND, NO_TREND, 2)
    assert titles(insights) == ["Building Your Baseline"]
    assert insights[0].kind == InsightKind.NEUTRAL
    assert insights[0].description.startswith("3 more conversations")
    assert select_insights(snapshot(), NO_TREND, NO_TREND, NO_TREND, 5) == []


def test_expert_level_threshold():
    at_threshold = snapshot(user_iq=85, gpt_iq=85, conversation_iq=85)
    below = snapshot(user_iq=85, gpt_iq=85, conversation_iq=84)
    assert titles(select_insights(at_threshold, NO_TREND, NO_TREND, NO_TREND, 10)) == ["Expert-Level Interactions"]
    assert select_insights(below, NO_TREND, NO_TREND, NO_TREND, 10) == []


def test_idempotent_on_equal_copies():
    s = snapshot(user_clarity=95, user_depth=40, conversation_synergy=50)
    first = select_insights(s, trend(15), NO_TREND, NO_TREND, 3)
    second = select_insights(copy.deepcopy(s), trend(15), NO_TREND, NO_TREND, 3)
    assert first == second
    assert select_insights(s, trend(15), NO_TREND, NO_TREND, 3) == first
