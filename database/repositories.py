"""
Repository classes for the funnel lead data access layer.

Each repository encapsulates CRUD operations for a specific model.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    InteractiveFunnel, FunnelSubmission, ConsolidatedLead, EnhancedLeadAnalysis,
)

logger = logging.getLogger(__name__)


class FunnelRepository:
    """Data access for interactive funnels."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> InteractiveFunnel:
        funnel = InteractiveFunnel(**kwargs)
        self.session.add(funnel)
        await self.session.flush()
        return funnel

    async def get_by_id(self, funnel_id: str) -> Optional[InteractiveFunnel]:
        result = await self.session.execute(
            select(InteractiveFunnel).where(InteractiveFunnel.id == funnel_id)
        )
        return result.scalar_one_or_none()


class SubmissionRepository:
    """Data access for funnel step submissions."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> FunnelSubmission:
        submission = FunnelSubmission(**kwargs)
        self.session.add(submission)
        await self.session.flush()
        return submission

    async def list_for_session(
        self, session_id: str, funnel_id: str
    ) -> List[FunnelSubmission]:
        result = await self.session.execute(
            select(FunnelSubmission)
            .where(
                FunnelSubmission.session_id == session_id,
                FunnelSubmission.funnel_id == funnel_id,
            )
            .order_by(FunnelSubmission.created_at.asc())
        )
        return list(result.scalars().all())


class ConsolidatedLeadRepository:
    """Data access for consolidated leads."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> ConsolidatedLead:
        lead = ConsolidatedLead(**kwargs)
        self.session.add(lead)
        await self.session.flush()
        return lead

    async def update(self, lead_id: str, **kwargs) -> Optional[ConsolidatedLead]:
        lead = await self.get_by_id(lead_id)
        if not lead:
            return None
        for k, v in kwargs.items():
            if hasattr(lead, k):
                setattr(lead, k, v)
        await self.session.flush()
        return lead

    async def get_by_id(self, lead_id: str) -> Optional[ConsolidatedLead]:
        result = await self.session.execute(
            select(ConsolidatedLead).where(ConsolidatedLead.id == lead_id)
        )
        return result.scalar_one_or_none()

    async def get_by_owner_email(
        self, user_id: str, email: str
    ) -> Optional[ConsolidatedLead]:
        result = await self.session.execute(
            select(ConsolidatedLead)
            .where(ConsolidatedLead.user_id == user_id, ConsolidatedLead.email == email)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_by_funnel(self, funnel_id: str) -> List[ConsolidatedLead]:
        result = await self.session.execute(
            select(ConsolidatedLead)
            .where(ConsolidatedLead.source_funnel_id == funnel_id)
            .order_by(ConsolidatedLead.created_at.asc())
        )
        return list(result.scalars().all())

    async def set_gpt_analysis(self, email: str, analysis: Dict[str, Any]) -> int:
        """Attach an LLM analysis to every lead with this email. Returns rows updated."""
        result = await self.session.execute(
            update(ConsolidatedLead)
            .where(ConsolidatedLead.email == email)
            .values(gpt_analysis=analysis, analyzed_at=datetime.utcnow())
        )
        await self.session.flush()
        return result.rowcount or 0


class LeadAnalysisRepository:
    """Data access for enhanced lead analysis."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_lead(self, lead_id: str) -> Optional[EnhancedLeadAnalysis]:
        result = await self.session.execute(
            select(EnhancedLeadAnalysis)
            .where(EnhancedLeadAnalysis.consolidated_lead_id == lead_id)
        )
        return result.scalar_one_or_none()

    async def upsert(self, lead_id: str, **kwargs) -> EnhancedLeadAnalysis:
        analysis = await self.get_for_lead(lead_id)
        if analysis is None:
            analysis = EnhancedLeadAnalysis(consolidated_lead_id=lead_id, **kwargs)
            self.session.add(analysis)
        else:
            for k, v in kwargs.items():
                setattr(analysis, k, v)
        await self.session.flush()
        return analysis
