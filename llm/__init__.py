"""
LLM Module for the funnel lead service.

This module handles:
- OpenAI provider wrapper
- Customer profile analysis of captured leads
"""

from .lead_analyzer import LeadAnalyzer, LeadAnalysisError, LeadProfile

__all__ = [
    "LeadAnalyzer",
    "LeadAnalysisError",
    "LeadProfile",
]
