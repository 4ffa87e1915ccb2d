"""
Lead Scoring Module for the funnel lead service.

This module provides lead qualification and follow-up planning:
- Field normalization of raw funnel submissions
- Dimension scoring (interest, authority, need, timing, budget)
- Lead scoring (0-100 scale) with hot/warm/cold tiers
- Follow-up strategy selection per tier
"""

from .field_normalizer import LeadAttributes, normalize_lead_data
from .dimension_scorers import DimensionScore
from .scoring_model import (
    Qualification,
    QualificationResult,
    ScoreBreakdown,
    calculate_score,
    classify_total,
)
from .follow_up import FollowUpPriority, FollowUpStrategy, generate_follow_up_strategy

__all__ = [
    "LeadAttributes",
    "normalize_lead_data",
    "DimensionScore",
    "Qualification",
    "QualificationResult",
    "ScoreBreakdown",
    "calculate_score",
    "classify_total",
    "FollowUpPriority",
    "FollowUpStrategy",
    "generate_follow_up_strategy",
]
