"""
Dimension scorers for funnel lead qualification.

Each scorer maps one raw lead field to a bounded number of points plus
an optional insight. Branches are checked top to bottom and the first
match wins, so a role containing both "CEO" and "Responsabile" scores
as a CEO.

Max points per dimension:
- interest: 25
- authority: 25
- need: 20
- timing: 20
- budget: 10
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple


@dataclass(frozen=True)
class DimensionScore:
    """Points awarded on a single dimension."""
    dimension: str
    points: int
    insight: Optional[str] = None


# (substrings, points, insight)
Rule = Tuple[Sequence[str], int, str]

INTEREST_RULES: Tuple[Rule, ...] = (
    (("Aumentare l'efficienza",), 25, "Alto interesse per l'efficienza operativa"),
    (("Ridurre i costi",), 20, "Focalizzato sulla riduzione dei costi"),
    (("Risparmiare tempo",), 18, "Interessato al risparmio di tempo"),
    (("Migliorare la qualità",), 15, "Interessato al miglioramento qualitativo"),
)

AUTHORITY_RULES: Tuple[Rule, ...] = (
    (("Proprietario", "CEO"), 25, "Decision maker principale"),
    (("Direttore", "Manager"), 20, "Ruolo manageriale con autorità decisionale"),
    (("Responsabile",), 15, "Responsabile operativo"),
)

TIMING_RULES: Tuple[Rule, ...] = (
    (("Immediatamente",), 20, "Pronto per implementazione immediata"),
    (("1 mese",), 15, "Timeline a breve termine"),
    (("3 mesi",), 10, "Timeline medio termine"),
    (("6 mesi",), 5, "Timeline lungo termine"),
)

BUDGET_RULES: Tuple[Rule, ...] = (
    (("Oltre €2500",), 10, "Budget elevato disponibile"),
    (("€1000-2500",), 8, "Budget medio-alto"),
    (("€500-1000",), 6, "Budget medio"),
    (("Sotto €500",), 3, "Budget limitato"),
)

URGENCY_KEYWORDS = ("urgent", "problema", "difficoltà")

MAX_POINTS = {
    "interest": 25,
    "authority": 25,
    "need": 20,
    "timing": 20,
    "budget": 10,
}


def _match(
    dimension: str,
    value: Optional[str],
    rules: Sequence[Rule],
    fallback_points: int,
    fallback_insight: Optional[str],
) -> DimensionScore:
    text = value or ""
    for needles, points, insight in rules:
        if any(needle in text for needle in needles):
            return DimensionScore(dimension, points, insight)
    return DimensionScore(dimension, fallback_points, fallback_insight)


def score_interest(value: Optional[str]) -> DimensionScore:
    """Score the lead's initial interest."""
    return _match("interest", value, INTEREST_RULES, 0, None)


def score_authority(value: Optional[str]) -> DimensionScore:
    """Score decision-making authority from the company role."""
    return _match(
        "authority", value, AUTHORITY_RULES,
        5, "Potrebbe necessitare approvazione superiore",
    )


def score_need(value: Optional[str]) -> DimensionScore:
    """
    Score the stated main challenge.

    Urgency keywords beat length; otherwise longer descriptions are
    taken as a clearer need.
    """
    text = (value or "").lower()
    if any(keyword in text for keyword in URGENCY_KEYWORDS):
        return DimensionScore("need", 20, "Necessità urgente identificata")
    if len(text) > 50:
        return DimensionScore("need", 15, "Sfida ben articolata, bisogno chiaro")
    if len(text) > 20:
        return DimensionScore("need", 10, "Bisogno presente ma non urgente")
    return DimensionScore("need", 0)


def score_timing(value: Optional[str]) -> DimensionScore:
    """Score the implementation timeline."""
    return _match("timing", value, TIMING_RULES, 2, "Solo in fase esplorativa")


def score_budget(value: Optional[str]) -> DimensionScore:
    """Score the indicative monthly budget."""
    return _match("budget", value, BUDGET_RULES, 0, "Budget non specificato")


# Evaluation order matters: insights are emitted in this order.
DIMENSION_SCORERS: Tuple[Tuple[str, str, Callable[[Optional[str]], DimensionScore]], ...] = (
    ("interest", "interesse_iniziale", score_interest),
    ("authority", "ruolo_aziendale", score_authority),
    ("need", "principale_sfida", score_need),
    ("timing", "timeline_implementazione", score_timing),
    ("budget", "budget_indicativo", score_budget),
)
