"""
SQLAlchemy ORM models for the funnel lead service.

Funnels, their step submissions, consolidated leads and the enhanced
analysis attached to each lead.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Float, DateTime, Text, ForeignKey, JSON, Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class InteractiveFunnel(Base):
    __tablename__ = "interactive_funnels"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(String(36), nullable=False, index=True)
    status = Column(String(20), default="draft")  # draft, active, archived
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    submissions = relationship("FunnelSubmission", back_populates="funnel", cascade="all, delete-orphan")


class FunnelSubmission(Base):
    __tablename__ = "funnel_submissions"

    id = Column(String(36), primary_key=True, default=_uuid)
    funnel_id = Column(String(36), ForeignKey("interactive_funnels.id", ondelete="CASCADE"), nullable=False, index=True)
    step_id = Column(String(36), nullable=True)
    session_id = Column(String(64), nullable=False)
    submission_data = Column(JSON, default=dict)
    user_email = Column(String(255), nullable=True)
    user_name = Column(String(255), nullable=True)
    completion_time = Column(Integer, nullable=True)  # seconds
    created_at = Column(DateTime, default=datetime.utcnow)

    funnel = relationship("InteractiveFunnel", back_populates="submissions")

    __table_args__ = (
        Index("ix_submission_session_funnel", "session_id", "funnel_id"),
    )


class ConsolidatedLead(Base):
    __tablename__ = "consolidated_leads"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False, index=True)  # funnel owner
    source_funnel_id = Column(String(36), ForeignKey("interactive_funnels.id"), nullable=True, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    company = Column(String(255), nullable=True)
    lead_score = Column(Integer, default=0)
    priority_level = Column(String(10), default="cold")  # hot, warm, cold
    status = Column(String(20), default="new")  # new, contacted, qualified, converted, lost
    ai_insights = Column(JSON, default=list)
    ai_recommendations = Column(JSON, default=list)
    ai_analysis = Column(JSON, default=dict)
    gpt_analysis = Column(JSON, nullable=True)
    analyzed_at = Column(DateTime, nullable=True)
    last_interaction_at = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    analysis = relationship(
        "EnhancedLeadAnalysis", back_populates="lead", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_lead_owner_email", "user_id", "email"),
        Index("ix_lead_priority", "priority_level"),
    )


class EnhancedLeadAnalysis(Base):
    __tablename__ = "enhanced_lead_analysis"

    id = Column(String(36), primary_key=True, default=_uuid)
    consolidated_lead_id = Column(
        String(36), ForeignKey("consolidated_leads.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    funnel_context = Column(JSON, default=dict)
    behavioral_analysis = Column(JSON, default=dict)
    engagement_patterns = Column(JSON, default=dict)
    predictive_insights = Column(JSON, default=dict)
    personalized_strategy = Column(JSON, default=dict)
    optimal_contact_timing = Column(JSON, default=dict)
    conversion_probability = Column(Float, default=0.0)
    engagement_score = Column(Integer, default=0)
    confidence_score = Column(Float, default=0.0)
    lead_temperature = Column(String(10), default="cold")
    next_action_recommendation = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lead = relationship("ConsolidatedLead", back_populates="analysis")
