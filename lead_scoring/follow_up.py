"""
Follow-up strategy selection for qualified leads.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Union

from .field_normalizer import LeadAttributes
from .scoring_model import Qualification, QualificationResult

DEFAULT_NAME = "Cliente"


class FollowUpPriority(str, Enum):
    """How soon a lead should be contacted."""
    IMMEDIATE = "immediate"
    WITHIN_24H = "within_24h"
    WITHIN_WEEK = "within_week"  # not produced by the current tier mapping
    NURTURE = "nurture"


@dataclass(frozen=True)
class FollowUpStrategy:
    priority: FollowUpPriority
    approach: str
    message_template: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "priority": self.priority.value,
            "approach": self.approach,
            "message_template": self.message_template,
        }


# tier -> (priority, approach, message template)
_PLAYBOOK = {
    Qualification.HOT: (
        FollowUpPriority.IMMEDIATE,
        "Chiamata diretta entro 2 ore",
        "Ciao {nome}, ho visto il tuo interesse per la nostra soluzione. "
        "Sono disponibile per una chiamata oggi stesso per discutere come "
        "possiamo aiutarti immediatamente.",
    ),
    Qualification.WARM: (
        FollowUpPriority.WITHIN_24H,
        "Email personalizzata + chiamata programmata",
        "Ciao {nome}, grazie per il tuo interesse. Ti invio alcune informazioni "
        "aggiuntive e ti contatterò domani per discutere come possiamo "
        "supportare la tua attività.",
    ),
    Qualification.COLD: (
        FollowUpPriority.NURTURE,
        "Sequenza email educativa",
        "Ciao {nome}, ti ringrazio per l'interesse. Ti invierò del materiale "
        "utile per il tuo business e resterò disponibile per quando sarai "
        "pronto ad approfondire.",
    ),
}


def generate_follow_up_strategy(
    score: QualificationResult,
    lead_data: Union[LeadAttributes, Mapping[str, Any], None] = None,
) -> FollowUpStrategy:
    """
    Pick the follow-up playbook for a scored lead.

    Only the qualification tier drives the choice; the lead's name is
    used for the message template.

    Args:
        score: Result of calculate_score
        lead_data: Raw submission dict or LeadAttributes (for "nome")

    Returns:
        FollowUpStrategy with priority, approach and message
    """
    attributes = LeadAttributes.from_submission(lead_data)
    nome = attributes.nome or DEFAULT_NAME

    priority, approach, template = _PLAYBOOK[Qualification(score.qualification)]
    return FollowUpStrategy(
        priority=priority,
        approach=approach,
        message_template=template.format(nome=nome),
    )
