"""
Service initialization and dependency injection for the funnel lead API.

Creates and manages the service instances used by the API.
"""

import logging
from typing import Optional

from config.settings import get_settings, Settings
from llm.lead_analyzer import LeadAnalyzer
from llm.providers import OpenAIProvider

logger = logging.getLogger(__name__)


class Services:
    """Container for application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.lead_analyzer: Optional[LeadAnalyzer] = None
        self._initialized = False

    def initialize(self):
        """Initialize all services."""
        if self._initialized:
            return

        self.settings = get_settings()

        try:
            self._init_lead_analyzer()
            logger.info("All services initialized successfully")
        except Exception as e:
            logger.error(f"Service initialization failed: {e}")
            # Scoring works without the LLM
            logger.warning("API starting in degraded mode")
        self._initialized = True

    def _init_lead_analyzer(self):
        """Initialize the LLM lead analyzer."""
        s = self.settings

        if not s.llm_enabled:
            logger.warning("OPENAI_API_KEY not set, lead analysis disabled")
            return

        provider = OpenAIProvider(
            api_key=s.openai_api_key,
            model_id=s.openai_llm_model,
            max_tokens=s.max_tokens,
            temperature=s.temperature,
        )
        self.lead_analyzer = LeadAnalyzer(provider)
        logger.info("Lead analyzer ready")

    def reset(self):
        """Drop all service instances (used on shutdown and in tests)."""
        self.settings = None
        self.lead_analyzer = None
        self._initialized = False

    @property
    def is_ready(self) -> bool:
        return self._initialized

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "lead_scoring": True,
            "lead_analyzer": self.lead_analyzer is not None,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def initialize_services():
    """Initialize all services (called at startup)."""
    _services.initialize()
