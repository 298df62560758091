"""Tests for the primary insight selector."""

import pytest

from gptiqx.core.insights import select_primary_insight, DOING_GREAT, PRIMARY_TEMPLATES
from gptiqx.core.models import ScoreSnapshot, FactorCategory, Confidence


def snapshot(clarity=None, depth=None, creativity=None, synergy=None, flow=None):
    return ScoreSnapshot(
        user_iq=70, gpt_iq=70, conversation_iq=70,
        user_clarity=clarity, user_depth=depth, user_creativity=creativity,
        conversation_synergy=synergy, conversation_flow=flow,
    )


class TestPrimaryInsight:
    """Weakest-factor recommendation."""

    def test_clarity_weakest_with_high_confidence(self):
        result = select_primary_insight(snapshot(40, 90, 90, 90, 90))
        assert result.category == FactorCategory.CLARITY
        assert result.confidence == Confidence.HIGH
        assert result.problem == "Your prompts could be clearer"
        assert "40" in result.reason

    def test_all_strong_returns_doing_great(self):
        result = select_primary_insight(snapshot(85, 85, 85, 85, 85))
        assert result == DOING_GREAT
        assert result.confidence == Confidence.HIGH
        assert result.category == FactorCategory.GENERAL

    def test_weakest_exactly_eighty_is_strong(self):
        assert select_primary_insight(snapshot(80, 95, 90, 99, 81)) == DOING_GREAT

    def test_missing_factors_are_not_weaknesses(self):
        """Absent sub-scores count as 100."""
        result = select_primary_insight(snapshot(flow=70))
        assert result.category == FactorCategory.FLOW
        assert result.confidence == Confidence.HIGH

    def test_empty_snapshot_is_doing_great(self):
        assert select_primary_insight(snapshot()) == DOING_GREAT

    @pytest.mark.parametrize("second, expected", [
        (75, Confidence.HIGH),
        (74, Confidence.MODERATE),
        (65, Confidence.MODERATE),
        (64, Confidence.LOW),
        (60, Confidence.LOW),
    ])
    def test_confidence_bands(self, second, expected):
        result = select_primary_insight(snapshot(60, second, 95, 95, 95))
        assert result.category == FactorCategory.CLARITY
        assert result.confidence == expected

    def test_ties_pick_first_in_factor_order(self):
        result = select_primary_insight(snapshot(90, 90, 50, 50, 90))
        assert result.category == FactorCategory.CREATIVITY
        assert result.confidence == Confidence.LOW

    def test_second_weakest_excludes_weakest_when_depth_lowest(self):
        result = select_primary_insight(snapshot(90, 40, 70, 95, 95))
        assert result.category == FactorCategory.DEPTH
        # gap to creativity (70) is 30
        assert result.confidence == Confidence.HIGH

    @pytest.mark.parametrize("category, kwargs", [
        (FactorCategory.DEPTH, {"depth": 30}),
        (FactorCategory.CREATIVITY, {"creativity": 30}),
        (FactorCategory.SYNERGY, {"synergy": 30}),
        (FactorCategory.FLOW, {"flow": 30}),
    ])
    def test_each_category_uses_its_template(self, category, kwargs):
        result = select_primary_insight(snapshot(**kwargs))
        template = PRIMARY_TEMPLATES[category]
        assert result.category == category
        assert result.problem == template.problem
        assert result.reason == template.reason.format(score=30)
        assert result.action == template.action

    def test_repeated_calls_are_identical(self):
        s = snapshot(55, 60, 70, 80, 90)
        assert select_primary_insight(s) == select_primary_insight(s)
