"""
LLM-backed customer profile analysis for captured leads.

Asks the model for a structured (JSON) profile of a prospect and falls
back to a default structure when the answer cannot be parsed.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def agenerate(self, prompt: str, system: Optional[str] = None) -> str:
        ...


class LeadAnalysisError(Exception):
    """The LLM call for a lead analysis failed."""


@dataclass(frozen=True)
class LeadProfile:
    """Prospect details sent to the model."""
    nome: Optional[str] = None
    email: Optional[str] = None
    servizio: Optional[str] = None
    bio: Optional[str] = None


SYSTEM_PROMPT = (
    "Sei un esperto di marketing e analisi clienti. "
    "Rispondi sempre in italiano con analisi precise e actionable."
)

ANALYSIS_PROMPT = """Analizza i seguenti dati di un potenziale cliente e crea un profilo personalizzato:

Nome: {nome}
Email: {email}
Servizio di interesse: {servizio}
Bio/Descrizione: {bio}

Basandoti su questi dati, fornisci:
1. Un'analisi semantica del profilo del cliente
2. Suggerimenti per un funnel personalizzato
3. Strategie di approccio consigliate
4. Punti di dolore potenziali identificati
5. Opportunità di business

Rispondi in formato JSON con questa struttura:
{{
  "analisi_profilo": "...",
  "funnel_personalizzato": ["step1", "step2", "step3"],
  "strategie_approccio": ["strategia1", "strategia2"],
  "punti_dolore": ["punto1", "punto2"],
  "opportunita": ["opportunita1", "opportunita2"],
  "priorita": "alta/media/bassa",
  "categoria_cliente": "...",
  "next_steps": ["azione1", "azione2"]
}}"""

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def build_analysis_prompt(profile: LeadProfile) -> str:
    return ANALYSIS_PROMPT.format(
        nome=profile.nome or "",
        email=profile.email or "",
        servizio=profile.servizio or "",
        bio=profile.bio or "Non fornita",
    )


def fallback_analysis(raw_text: str) -> Dict[str, Any]:
    """Default analysis used when the model did not return JSON."""
    return {
        "analisi_profilo": raw_text,
        "funnel_personalizzato": ["Contatto iniziale", "Presentazione servizi", "Proposta personalizzata"],
        "strategie_approccio": ["Approccio consultivo", "Focus sui benefici"],
        "punti_dolore": ["Da identificare nel colloquio"],
        "opportunita": ["Potenziale collaborazione"],
        "priorita": "media",
        "categoria_cliente": "Prospect qualificato",
        "next_steps": ["Chiamata di discovery", "Preparazione proposta"],
    }


def parse_analysis(raw_text: str) -> Dict[str, Any]:
    """
    Parse the model answer into an analysis dict.

    Accepts bare JSON or JSON wrapped in prose / code fences.
    """
    match = _JSON_OBJECT.search(raw_text or "")
    if match:
        try:
            data = json.loads(match.group())
            if isinstance(data, dict):
                return data
        except json.JSONDecodeError:
            pass
    logger.info("Could not parse lead analysis as JSON, using structured fallback")
    return fallback_analysis(raw_text)


class LeadAnalyzer:
    """Generates a customer profile analysis for a lead."""

    def __init__(self, provider: TextGenerator):
        self.provider = provider

    async def analyze(self, profile: LeadProfile) -> Dict[str, Any]:
        """
        Analyze a lead profile.

        Args:
            profile: Prospect details

        Returns:
            Analysis dict (parsed model output or fallback)

        Raises:
            LeadAnalysisError: if the provider call fails
        """
        prompt = build_analysis_prompt(profile)
        try:
            raw = await self.provider.agenerate(prompt, system=SYSTEM_PROMPT)
        except Exception as e:
            logger.error(f"Lead analysis failed for {profile.email}: {e}")
            raise LeadAnalysisError(str(e)) from e

        return parse_analysis(raw)
