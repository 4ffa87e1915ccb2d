"""
Field normalizer for funnel lead submissions.

Turns the loosely-typed dict collected by a funnel step into a
LeadAttributes record the dimension scorers can read directly.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Union


@dataclass(frozen=True)
class LeadAttributes:
    """Lead fields recognised by the scoring engine."""

    # Scored fields
    interesse_iniziale: Optional[str] = None
    ruolo_aziendale: Optional[str] = None
    principale_sfida: Optional[str] = None
    timeline_implementazione: Optional[str] = None
    budget_indicativo: Optional[str] = None

    # Templating / context only
    nome: Optional[str] = None
    dimensione_business: Optional[str] = None
    email: Optional[str] = None
    telefono: Optional[str] = None
    nome_azienda: Optional[str] = None

    @classmethod
    def from_submission(
        cls,
        data: Union["LeadAttributes", Mapping[str, Any], None],
    ) -> "LeadAttributes":
        """
        Build attributes from a raw submission payload.

        Unknown keys are ignored, missing keys become None.
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            return cls()

        values = {}
        for f in fields(cls):
            values[f.name] = _coerce(data.get(f.name))
        return cls(**values)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _coerce(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return None
    return str(value)


def normalize_lead_data(
    data: Union[LeadAttributes, Mapping[str, Any], None]
) -> LeadAttributes:
    """Shortcut for LeadAttributes.from_submission."""
    return LeadAttributes.from_submission(data)
