"""
API Routes for the funnel lead service.
"""

from . import leads, funnels

__all__ = ["leads", "funnels"]
