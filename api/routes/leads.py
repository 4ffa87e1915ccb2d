"""
Lead Scoring API Routes for the funnel lead service.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from database.repositories import ConsolidatedLeadRepository
from database.session import get_optional_db
from lead_scoring import calculate_score, generate_follow_up_strategy
from llm.lead_analyzer import LeadAnalysisError, LeadProfile
from ..services import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


# Models
class LeadDataRequest(BaseModel):
    """Raw lead attributes collected by a funnel."""
    model_config = ConfigDict(extra="allow")

    interesse_iniziale: Optional[str] = None
    ruolo_aziendale: Optional[str] = None
    principale_sfida: Optional[str] = None
    timeline_implementazione: Optional[str] = None
    budget_indicativo: Optional[str] = None
    nome: Optional[str] = None


class ScoreBreakdownResponse(BaseModel):
    interest: int
    authority: int
    need: int
    timing: int
    budget: int


class QualificationResponse(BaseModel):
    """Lead score with tier and insights."""
    total: int
    breakdown: ScoreBreakdownResponse
    qualification: str
    insights: List[str]


class FollowUpStrategyResponse(BaseModel):
    priority: str
    approach: str
    message_template: str


class FollowUpResponse(BaseModel):
    score: QualificationResponse
    strategy: FollowUpStrategyResponse


class AnalyzeLeadRequest(BaseModel):
    """Prospect details for LLM analysis."""
    nome: Optional[str] = None
    email: str
    servizio: Optional[str] = None
    bio: Optional[str] = None


class AnalyzeLeadResponse(BaseModel):
    success: bool
    analysis: Dict[str, Any]
    message: str
    leads_updated: int = 0


@router.post("/leads/score", response_model=QualificationResponse)
async def score_lead(request: LeadDataRequest):
    """Score raw lead attributes."""
    result = calculate_score(request.model_dump())
    return QualificationResponse(**result.to_dict())


@router.post("/leads/follow-up", response_model=FollowUpResponse)
async def lead_follow_up(request: LeadDataRequest):
    """Score a lead and pick its follow-up strategy."""
    data = request.model_dump()
    result = calculate_score(data)
    strategy = generate_follow_up_strategy(result, data)
    return FollowUpResponse(
        score=QualificationResponse(**result.to_dict()),
        strategy=FollowUpStrategyResponse(**strategy.to_dict()),
    )


@router.post("/leads/analyze", response_model=AnalyzeLeadResponse)
async def analyze_lead(
    request: AnalyzeLeadRequest,
    services: Services = Depends(get_services),
    db: Optional[AsyncSession] = Depends(get_optional_db),
):
    """
    Generate an LLM customer profile for a lead.

    The analysis is stored on every consolidated lead with the same
    email when a database is configured.
    """
    if services.lead_analyzer is None:
        raise HTTPException(status_code=503, detail="Lead analysis is not configured")

    profile = LeadProfile(
        nome=request.nome,
        email=request.email,
        servizio=request.servizio,
        bio=request.bio,
    )
    try:
        analysis = await services.lead_analyzer.analyze(profile)
    except LeadAnalysisError as e:
        raise HTTPException(status_code=502, detail=f"Lead analysis failed: {e}")

    updated = 0
    if db is not None:
        updated = await ConsolidatedLeadRepository(db).set_gpt_analysis(request.email, analysis)

    logger.info(f"Lead analyzed: {request.email}, leads updated: {updated}")

    return AnalyzeLeadResponse(
        success=True,
        analysis=analysis,
        message="Lead analizzato con successo",
        leads_updated=updated,
    )
