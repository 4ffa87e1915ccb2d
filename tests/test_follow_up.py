"""Tests for follow-up strategy selection."""

import pytest
from lead_scoring.follow_up import FollowUpPriority, generate_follow_up_strategy
from lead_scoring.scoring_model import (
    Qualification,
    QualificationResult,
    ScoreBreakdown,
    calculate_score,
)


def _result(tier: Qualification, total: int = 50) -> QualificationResult:
    return QualificationResult(
        total=total,
        breakdown=ScoreBreakdown(interest=total),
        qualification=tier,
    )


class TestFollowUpStrategy:
    @pytest.mark.parametrize("tier,priority", [
        (Qualification.HOT, FollowUpPriority.IMMEDIATE),
        (Qualification.WARM, FollowUpPriority.WITHIN_24H),
        (Qualification.COLD, FollowUpPriority.NURTURE),
    ])
    def test_priority_by_tier(self, tier, priority):
        assert generate_follow_up_strategy(_result(tier)).priority == priority

    def test_depends_only_on_tier(self):
        # Breakdown and total disagree with the tier on purpose
        strategy = generate_follow_up_strategy(_result(Qualification.HOT, total=3))
        assert strategy.priority == FollowUpPriority.IMMEDIATE

    def test_within_week_never_produced(self):
        produced = {generate_follow_up_strategy(_result(t)).priority for t in Qualification}
        assert FollowUpPriority.WITHIN_WEEK not in produced

    def test_name_interpolated(self, hot_lead_data):
        score = calculate_score(hot_lead_data)
        strategy = generate_follow_up_strategy(score, {"nome": "Anna"})
        assert "Anna" in strategy.message_template
        assert "Cliente" not in strategy.message_template

    def test_default_name(self):
        strategy = generate_follow_up_strategy(_result(Qualification.HOT), {})
        assert "Cliente" in strategy.message_template

    def test_empty_name_uses_default(self):
        strategy = generate_follow_up_strategy(_result(Qualification.WARM), {"nome": ""})
        assert "Cliente" in strategy.message_template

    def test_no_lead_data(self):
        strategy = generate_follow_up_strategy(_result(Qualification.COLD))
        assert "Cliente" in strategy.message_template

    def test_approaches_differ(self):
        approaches = {generate_follow_up_strategy(_result(t)).approach for t in Qualification}
        assert len(approaches) == 3

    def test_deterministic(self, cold_lead_data):
        score = calculate_score(cold_lead_data)
        assert generate_follow_up_strategy(score, cold_lead_data) == \
            generate_follow_up_strategy(score, cold_lead_data)

    def test_to_dict(self):
        data = generate_follow_up_strategy(_result(Qualification.WARM), {"nome": "Luca"}).to_dict()
        assert data["priority"] == "within_24h"
        assert "Luca" in data["message_template"]
        assert data["approach"]
