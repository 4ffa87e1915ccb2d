"""
Funnel submission and lead analytics routes.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database.repositories import FunnelRepository, SubmissionRepository
from database.session import get_db
from lead_scoring.lead_processor import (
    FunnelNotFoundError,
    IntelligentLeadService,
    MissingEmailError,
    ProcessedLead,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# Models
class FunnelCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    created_by: str = Field(..., min_length=1, max_length=36)


class FunnelResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    created_by: str
    status: str


class SubmissionCreate(BaseModel):
    """One funnel step submitted by a visitor."""
    session_id: str = Field(..., min_length=1, max_length=64)
    step_id: Optional[str] = None
    submission_data: Dict[str, Any] = Field(default_factory=dict)
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    completion_time: Optional[int] = Field(None, ge=0)


class ProcessRequest(BaseModel):
    step_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None


class ProcessedLeadResponse(BaseModel):
    consolidated_lead_id: str
    lead_score: int
    qualification: str
    insights: List[str]
    follow_up_strategy: Dict[str, str]
    next_action: str


class SubmissionResponse(BaseModel):
    submission_id: str
    lead: Optional[ProcessedLeadResponse] = None


class LeadAnalyticsResponse(BaseModel):
    total_leads: int
    qualification_breakdown: Dict[str, int]
    average_score: int
    conversion_rate: float
    top_insights: List[str]


def _funnel_response(funnel) -> FunnelResponse:
    return FunnelResponse(
        id=funnel.id,
        name=funnel.name,
        description=funnel.description,
        created_by=funnel.created_by,
        status=funnel.status or "draft",
    )


def _lead_response(processed: ProcessedLead) -> ProcessedLeadResponse:
    return ProcessedLeadResponse(**processed.to_dict())


async def _require_funnel(db: AsyncSession, funnel_id: str):
    funnel = await FunnelRepository(db).get_by_id(funnel_id)
    if funnel is None:
        raise HTTPException(status_code=404, detail="Funnel not found")
    return funnel


@router.post("/funnels", response_model=FunnelResponse)
async def create_funnel(request: FunnelCreate, db: AsyncSession = Depends(get_db)):
    """Create an interactive funnel."""
    funnel = await FunnelRepository(db).create(
        name=request.name,
        description=request.description,
        created_by=request.created_by,
        status="draft",
    )
    logger.info(f"Funnel created: {funnel.id}")
    return _funnel_response(funnel)


@router.get("/funnels/{funnel_id}", response_model=FunnelResponse)
async def get_funnel(funnel_id: str, db: AsyncSession = Depends(get_db)):
    """Get a specific funnel."""
    return _funnel_response(await _require_funnel(db, funnel_id))


@router.post("/funnels/{funnel_id}/submissions", response_model=SubmissionResponse)
async def submit_step(
    funnel_id: str,
    request: SubmissionCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Record a funnel step and refresh the visitor's consolidated lead.

    Steps submitted before the visitor has given an email are stored
    but not turned into a lead yet.
    """
    await _require_funnel(db, funnel_id)

    submission = await SubmissionRepository(db).create(
        funnel_id=funnel_id,
        step_id=request.step_id,
        session_id=request.session_id,
        submission_data=request.submission_data,
        user_email=request.user_email,
        user_name=request.user_name,
        completion_time=request.completion_time,
    )

    service = IntelligentLeadService(db)
    try:
        processed = await service.process_submission(
            funnel_id=funnel_id,
            session_id=request.session_id,
            step_id=request.step_id,
            user_email=request.user_email,
            user_name=request.user_name,
        )
    except MissingEmailError:
        logger.info(f"Session {request.session_id} has no email yet, lead processing deferred")
        return SubmissionResponse(submission_id=submission.id)

    return SubmissionResponse(submission_id=submission.id, lead=_lead_response(processed))


@router.post(
    "/funnels/{funnel_id}/sessions/{session_id}/process",
    response_model=ProcessedLeadResponse,
)
async def process_session(
    funnel_id: str,
    session_id: str,
    request: ProcessRequest,
    db: AsyncSession = Depends(get_db),
):
    """Re-run lead processing for a visitor session."""
    service = IntelligentLeadService(db)
    try:
        processed = await service.process_submission(
            funnel_id=funnel_id,
            session_id=session_id,
            step_id=request.step_id,
            user_email=request.user_email,
            user_name=request.user_name,
        )
    except FunnelNotFoundError:
        raise HTTPException(status_code=404, detail="Funnel not found")
    except MissingEmailError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _lead_response(processed)


@router.get("/funnels/{funnel_id}/lead-analytics", response_model=LeadAnalyticsResponse)
async def funnel_lead_analytics(funnel_id: str, db: AsyncSession = Depends(get_db)):
    """Qualification summary of the leads captured by a funnel."""
    await _require_funnel(db, funnel_id)
    analytics = await IntelligentLeadService(db).get_lead_analytics(funnel_id)
    return LeadAnalyticsResponse(**analytics.to_dict())
