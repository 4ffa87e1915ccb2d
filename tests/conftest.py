"""Shared fixtures for funnel lead service tests."""

import os
from typing import Optional

import pytest
from fastapi.testclient import TestClient

# Keep the LLM disabled unless a test installs a stub
os.environ["OPENAI_API_KEY"] = ""
os.environ.pop("DATABASE_URL", None)

from config.settings import get_settings


class StubProvider:
    """Stands in for OpenAIProvider; records prompts."""

    def __init__(self, response: str = "", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls = []

    async def agenerate(self, prompt: str, system: Optional[str] = None) -> str:
        self.calls.append({"prompt": prompt, "system": system})
        if self.error:
            raise self.error
        return self.response


def _make_client():
    get_settings.cache_clear()
    from api.main import create_app
    return TestClient(create_app())


@pytest.fixture
def client(tmp_path, monkeypatch):
    """FastAPI test client backed by a throwaway SQLite database."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'leads.db'}")
    with _make_client() as c:
        yield c
    get_settings.cache_clear()


@pytest.fixture
def client_no_db(monkeypatch):
    """FastAPI test client without a database."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with _make_client() as c:
        yield c
    get_settings.cache_clear()


@pytest.fixture
def hot_lead_data():
    return {
        "nome": "Anna",
        "email": "anna@example.com",
        "interesse_iniziale": "Aumentare l'efficienza operativa",
        "ruolo_aziendale": "CEO",
        "principale_sfida": "problema urgente con i fornitori",
        "timeline_implementazione": "Immediatamente",
        "budget_indicativo": "Oltre €2500 al mese",
    }


@pytest.fixture
def cold_lead_data():
    return {
        "interesse_iniziale": "Non specificato",
        "ruolo_aziendale": "Impiegato",
        "principale_sfida": "ok",
        "timeline_implementazione": "non sappiamo",
        "budget_indicativo": "non specificato",
    }


@pytest.fixture
def make_provider():
    """Factory for stub LLM providers."""
    return StubProvider
