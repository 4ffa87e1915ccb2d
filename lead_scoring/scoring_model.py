"""
Lead Qualification Scoring for funnel submissions.

Sums the five dimension scores into a 0-100 total and buckets the lead
into a qualification tier.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Union

from .dimension_scorers import DIMENSION_SCORERS
from .field_normalizer import LeadAttributes

logger = logging.getLogger(__name__)

HOT_THRESHOLD = 70
WARM_THRESHOLD = 40


class Qualification(str, Enum):
    """Lead qualification tiers."""
    HOT = "hot"      # Score >= 70
    WARM = "warm"    # Score 40-69
    COLD = "cold"    # Score < 40


TIER_SUMMARIES = {
    Qualification.HOT: "🔥 LEAD CALDO - Priorità alta per follow-up",
    Qualification.WARM: "🟡 LEAD TIEPIDO - Buon potenziale",
    Qualification.COLD: "🔵 LEAD FREDDO - Nurturing richiesto",
}


@dataclass(frozen=True)
class ScoreBreakdown:
    """Points per dimension."""
    interest: int = 0
    authority: int = 0
    need: int = 0
    timing: int = 0
    budget: int = 0

    @property
    def total(self) -> int:
        return self.interest + self.authority + self.need + self.timing + self.budget

    def to_dict(self) -> Dict[str, int]:
        return {
            "interest": self.interest,
            "authority": self.authority,
            "need": self.need,
            "timing": self.timing,
            "budget": self.budget,
        }


@dataclass(frozen=True)
class QualificationResult:
    """Lead score result."""
    total: int  # 0-100
    breakdown: ScoreBreakdown
    qualification: Qualification
    insights: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "breakdown": self.breakdown.to_dict(),
            "qualification": self.qualification.value,
            "insights": list(self.insights),
        }


def classify_total(total: int) -> Qualification:
    """Map a total score to its qualification tier."""
    if total >= HOT_THRESHOLD:
        return Qualification.HOT
    elif total >= WARM_THRESHOLD:
        return Qualification.WARM
    return Qualification.COLD


def calculate_score(
    lead_data: Union[LeadAttributes, Mapping[str, Any], None]
) -> QualificationResult:
    """
    Score a lead across interest, authority, need, timing and budget.

    Args:
        lead_data: Raw submission dict or LeadAttributes

    Returns:
        QualificationResult with total, breakdown, tier and insights
    """
    attributes = LeadAttributes.from_submission(lead_data)

    points: Dict[str, int] = {}
    insights = []
    for dimension, field_name, scorer in DIMENSION_SCORERS:
        result = scorer(getattr(attributes, field_name))
        points[dimension] = result.points
        if result.insight:
            insights.append(result.insight)

    breakdown = ScoreBreakdown(**points)
    total = breakdown.total
    qualification = classify_total(total)
    insights.append(TIER_SUMMARIES[qualification])

    logger.debug(f"Lead scored {total} ({qualification.value}): {points}")

    return QualificationResult(
        total=total,
        breakdown=breakdown,
        qualification=qualification,
        insights=tuple(insights),
    )
