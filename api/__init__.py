"""
API Module for the funnel lead service.

FastAPI application with routes for:
- Lead scoring and follow-up strategy
- Funnel submissions and lead analytics
- LLM lead analysis
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
