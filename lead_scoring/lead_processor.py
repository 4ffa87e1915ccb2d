"""
Intelligent lead processing for funnel submissions.

Combines every step a visitor submitted in one session into a single
lead profile, scores it, picks a follow-up strategy and stores the
result as a consolidated lead plus its enhanced analysis.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from database.repositories import (
    FunnelRepository,
    SubmissionRepository,
    ConsolidatedLeadRepository,
    LeadAnalysisRepository,
)
from .field_normalizer import LeadAttributes
from .follow_up import FollowUpPriority, FollowUpStrategy, generate_follow_up_strategy
from .scoring_model import Qualification, QualificationResult, calculate_score

logger = logging.getLogger(__name__)

IMMEDIATE_CONTACT_DELAY = timedelta(hours=2)
DEFAULT_CONTACT_DELAY = timedelta(hours=24)
TOP_INSIGHTS_LIMIT = 5


class LeadProcessingError(Exception):
    """Base error for lead processing."""


class MissingEmailError(LeadProcessingError):
    """No email in the combined submission data or the request."""


class FunnelNotFoundError(LeadProcessingError):
    """Submission references a funnel that does not exist."""


@dataclass
class ProcessedLead:
    """Outcome of processing a funnel submission."""
    consolidated_lead_id: str
    lead_score: int
    qualification: str
    insights: List[str]
    follow_up_strategy: FollowUpStrategy
    next_action: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consolidated_lead_id": self.consolidated_lead_id,
            "lead_score": self.lead_score,
            "qualification": self.qualification,
            "insights": self.insights,
            "follow_up_strategy": self.follow_up_strategy.to_dict(),
            "next_action": self.next_action,
        }


@dataclass
class LeadAnalytics:
    """Qualification summary for a funnel's leads."""
    total_leads: int = 0
    qualification_breakdown: Dict[str, int] = field(
        default_factory=lambda: {q.value: 0 for q in Qualification}
    )
    average_score: int = 0
    conversion_rate: float = 0.0
    top_insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_leads": self.total_leads,
            "qualification_breakdown": self.qualification_breakdown,
            "average_score": self.average_score,
            "conversion_rate": self.conversion_rate,
            "top_insights": self.top_insights,
        }


def _payload(submission: Any) -> Any:
    if isinstance(submission, dict):
        return submission.get("submission_data")
    return getattr(submission, "submission_data", None)


def merge_submission_data(submissions: Iterable[Any]) -> Dict[str, Any]:
    """
    Merge the payloads of a session's submissions, oldest first.

    Later steps overwrite earlier keys. Payloads that are not dicts
    are skipped.
    """
    combined: Dict[str, Any] = {}
    for submission in submissions:
        data = _payload(submission)
        if isinstance(data, dict):
            combined.update(data)
    return combined


def build_ai_analysis(
    score: QualificationResult,
    strategy: FollowUpStrategy,
    combined: Dict[str, Any],
) -> Dict[str, Any]:
    """Scoring summary stored on the consolidated lead."""
    return {
        "score_breakdown": score.breakdown.to_dict(),
        "qualification": score.qualification.value,
        "follow_up_priority": strategy.priority.value,
        "business_context": {
            "ruolo": combined.get("ruolo_aziendale"),
            "dimensione": combined.get("dimensione_business"),
            "sfida": combined.get("principale_sfida"),
            "timeline": combined.get("timeline_implementazione"),
            "budget": combined.get("budget_indicativo"),
        },
    }


def suggested_contact_time(priority: FollowUpPriority, now: datetime) -> datetime:
    if priority == FollowUpPriority.IMMEDIATE:
        return now + IMMEDIATE_CONTACT_DELAY
    return now + DEFAULT_CONTACT_DELAY


def _attr(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _iso(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


def build_enhanced_analysis(
    score: QualificationResult,
    strategy: FollowUpStrategy,
    combined: Dict[str, Any],
    submissions: Sequence[Any],
    funnel_id: str,
    funnel_name: Optional[str],
    step_id: Optional[str],
    now: datetime,
) -> Dict[str, Any]:
    """
    Build the enhanced analysis record for a scored lead.

    Args:
        score: Qualification result
        strategy: Chosen follow-up strategy
        combined: Merged submission data
        submissions: The session's submissions, oldest first
        funnel_id: Funnel the lead came from
        funnel_name: Funnel display name
        step_id: Step that triggered processing
        now: Reference time for contact timing

    Returns:
        Column values for EnhancedLeadAnalysis
    """
    conversion_probability = score.total / 100
    attributes = LeadAttributes.from_submission(combined)

    return {
        "funnel_context": {
            "funnel_name": funnel_name,
            "funnel_id": funnel_id,
            "completion_step": step_id,
        },
        "behavioral_analysis": {
            "interaction_pattern": [
                {
                    "step": _attr(s, "step_id"),
                    "timestamp": _iso(_attr(s, "created_at")),
                    "completion_time": _attr(s, "completion_time"),
                }
                for s in submissions
            ],
            "engagement_level": score.qualification.value,
        },
        "engagement_patterns": {
            "form_completion_rate": len(submissions) or 1,
            "time_to_complete": combined.get("completion_time") or 0,
        },
        "predictive_insights": {
            "conversion_probability": conversion_probability,
            "recommended_actions": [strategy.approach],
            "optimal_contact_timing": strategy.priority.value,
        },
        "personalized_strategy": {
            "messaging_tone": "urgent" if score.qualification == Qualification.HOT else "consultative",
            "content_focus": "problem_solving" if attributes.principale_sfida else "value_demonstration",
            "preferred_channel": "phone" if attributes.telefono else "email",
        },
        "optimal_contact_timing": {
            "priority": strategy.priority.value,
            "suggested_time": suggested_contact_time(strategy.priority, now).isoformat(),
        },
        "conversion_probability": conversion_probability,
        "engagement_score": score.total,
        "confidence_score": 0.8 if score.total > 50 else 0.5,
        "lead_temperature": score.qualification.value,
        "next_action_recommendation": strategy.approach,
    }


def summarize_lead_analytics(leads: Sequence[Any]) -> LeadAnalytics:
    """Summarize qualification, score and insights across leads."""
    analytics = LeadAnalytics(total_leads=len(leads))
    if not leads:
        return analytics

    for lead in leads:
        level = _attr(lead, "priority_level")
        if level in analytics.qualification_breakdown:
            analytics.qualification_breakdown[level] += 1

    average = sum(_attr(lead, "lead_score") or 0 for lead in leads) / len(leads)
    # Round half up
    analytics.average_score = int(math.floor(average + 0.5))

    hot = analytics.qualification_breakdown[Qualification.HOT.value]
    analytics.conversion_rate = hot / len(leads) * 100

    insights: List[str] = []
    for lead in leads:
        insights.extend(_attr(lead, "ai_insights") or [])
    analytics.top_insights = insights[:TOP_INSIGHTS_LIMIT]
    return analytics


class IntelligentLeadService:
    """
    Processes funnel submissions into scored, consolidated leads.

    Flow:
    1. Load all submissions of the visitor's session
    2. Merge them into one lead profile
    3. Score and pick a follow-up strategy
    4. Create or update the consolidated lead for (email, funnel owner)
    5. Store the enhanced analysis (best effort)
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.funnels = FunnelRepository(session)
        self.submissions = SubmissionRepository(session)
        self.leads = ConsolidatedLeadRepository(session)
        self.analyses = LeadAnalysisRepository(session)

    async def process_submission(
        self,
        funnel_id: str,
        session_id: str,
        step_id: Optional[str] = None,
        user_email: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> ProcessedLead:
        """
        Score a visitor's session and persist the consolidated lead.

        Raises:
            FunnelNotFoundError: funnel_id is unknown
            MissingEmailError: no email available for the lead
        """
        submissions = await self.submissions.list_for_session(session_id, funnel_id)
        combined = merge_submission_data(submissions)

        score = calculate_score(combined)
        strategy = generate_follow_up_strategy(score, combined)
        logger.info(
            f"Session {session_id} scored {score.total} ({score.qualification.value}), "
            f"follow-up: {strategy.priority.value}"
        )

        email = combined.get("email") or user_email
        if not email:
            raise MissingEmailError("Email is required for lead processing")

        funnel = await self.funnels.get_by_id(funnel_id)
        if funnel is None:
            raise FunnelNotFoundError(f"Funnel not found: {funnel_id}")

        now = datetime.utcnow()
        fields = {
            "name": combined.get("nome") or combined.get("name") or user_name,
            "phone": combined.get("telefono") or combined.get("phone"),
            "company": combined.get("nome_azienda") or combined.get("company"),
            "lead_score": score.total,
            "priority_level": score.qualification.value,
            "ai_insights": list(score.insights),
            "ai_recommendations": [strategy.approach],
            "last_interaction_at": now,
            "ai_analysis": build_ai_analysis(score, strategy, combined),
        }

        existing = await self.leads.get_by_owner_email(funnel.created_by, email)
        if existing:
            lead = await self.leads.update(existing.id, **fields)
            logger.info(f"Consolidated lead updated: {lead.id}")
        else:
            lead = await self.leads.create(
                user_id=funnel.created_by,
                source_funnel_id=funnel_id,
                email=email,
                status="new",
                **fields,
            )
            logger.info(f"Consolidated lead created: {lead.id}")

        analysis = build_enhanced_analysis(
            score, strategy, combined, submissions,
            funnel_id=funnel_id,
            funnel_name=funnel.name,
            step_id=step_id,
            now=now,
        )
        try:
            async with self.session.begin_nested():
                await self.analyses.upsert(lead.id, **analysis)
        except Exception as e:
            # Analysis is auxiliary; the lead itself is already stored
            logger.error(f"Error storing enhanced analysis for lead {lead.id}: {e}")

        return ProcessedLead(
            consolidated_lead_id=lead.id,
            lead_score=score.total,
            qualification=score.qualification.value,
            insights=list(score.insights),
            follow_up_strategy=strategy,
            next_action=strategy.approach,
        )

    async def get_lead_analytics(self, funnel_id: str) -> LeadAnalytics:
        """Summarize the leads captured by a funnel."""
        leads = await self.leads.list_by_funnel(funnel_id)
        return summarize_lead_analytics(leads)
