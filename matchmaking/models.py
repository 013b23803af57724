#!/usr/bin/env python3
"""
Actor Models - Profiles of the companies, investors and developers being matched.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Dict, FrozenSet, Optional, Tuple

from dateutil import parser as date_parser

from matchmaking.utils import FingerprintGenerator, normalize_labels

logger = logging.getLogger(__name__)

SET_FIELDS = ('industries', 'platforms', 'markets', 'technologies', 'capabilities', 'needs')
NUMERIC_FIELDS = ('revenue', 'employee_count', 'last_funding_amount')


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.parse(str(value)).date()
    except (ValueError, OverflowError) as e:
        logger.warning(f"Could not parse date {value!r}: {e}")
        return None


def _parse_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Could not parse numeric value {value!r}")
        return None


CONSENT_TRUE_VALUES = frozenset({"true", "1", "yes"})


def _parse_consent(value: Any) -> bool:
    """Only an explicit yes counts as consent; anything else opts out."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in CONSENT_TRUE_VALUES
    if isinstance(value, int):
        return value == 1
    return False


@dataclass(frozen=True)
class ActorProfile:
    """
    One company or individual taking part in matchmaking.

    Set attributes are normalized to frozensets of lowercase strings, so two
    profiles with the same content compare (and hash) equal. Optional scalars
    use None for "unknown"; signals that depend on them are excluded rather
    than scored as zero.

    `capabilities` are what this actor offers, `needs` what it seeks. Matching
    between them is directional.
    """
    id: str
    name: str = ""
    actor_type: str = "company"
    consent: bool = False

    founded: Optional[date] = None
    revenue: Optional[float] = None
    employee_count: Optional[float] = None
    last_funding_amount: Optional[float] = None
    stage: Optional[str] = None

    industries: FrozenSet[str] = field(default_factory=frozenset)
    platforms: FrozenSet[str] = field(default_factory=frozenset)
    markets: FrozenSet[str] = field(default_factory=frozenset)
    technologies: FrozenSet[str] = field(default_factory=frozenset)
    capabilities: FrozenSet[str] = field(default_factory=frozenset)
    needs: FrozenSet[str] = field(default_factory=frozenset)

    pitch: str = ""
    looking_for: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'consent', _parse_consent(self.consent))
        for name in SET_FIELDS:
            object.__setattr__(self, name, normalize_labels(getattr(self, name)))
        for name in NUMERIC_FIELDS:
            object.__setattr__(self, name, _parse_number(getattr(self, name)))
        object.__setattr__(self, 'founded', _parse_date(self.founded))
        if self.stage is not None:
            object.__setattr__(self, 'stage', str(self.stage).strip().lower() or None)
        object.__setattr__(self, 'name', (self.name or "").strip())
        object.__setattr__(self, 'pitch', (self.pitch or "").strip())
        object.__setattr__(self, 'looking_for', (self.looking_for or "").strip())

    @property
    def text(self) -> str:
        """Free text used for semantic similarity (pitch + looking-for)."""
        return " ".join(t for t in (self.pitch, self.looking_for) if t)

    def fingerprint(self, fields: Tuple[str, ...]) -> str:
        """Content hash of the given fields, used to qualify cache keys."""
        return _field_fingerprint(self, tuple(fields))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActorProfile":
        """
        Build a profile from a loose repository record.

        Accepts either flat keys or the nested `numeric` / `dates` / `text`
        groups used by upload records, e.g.
        {"id": "a1", "numeric": {"revenue": 1e6}, "dates": {"founded": "2020-03-01"}}.
        """
        numeric = data.get('numeric') or {}
        dates = data.get('dates') or {}
        text = data.get('text') or {}
        consent = data.get('consent', False)
        if isinstance(consent, dict):
            consent = consent.get('matchmaking', False)

        return cls(
            id=str(data['id']),
            name=data.get('name') or "",
            actor_type=data.get('actor_type') or data.get('type') or "company",
            consent=consent,
            founded=data.get('founded') or dates.get('founded'),
            revenue=_parse_number(data.get('revenue', numeric.get('revenue'))),
            employee_count=_parse_number(data.get('employee_count', numeric.get('employee_count'))),
            last_funding_amount=_parse_number(
                data.get('last_funding_amount', numeric.get('last_funding_amount'))
            ),
            stage=data.get('stage') or data.get('funding_stage'),
            industries=data.get('industries') or data.get('industry') or (),
            platforms=data.get('platforms') or (),
            markets=data.get('markets') or (),
            technologies=data.get('technologies') or (),
            capabilities=data.get('capabilities') or (),
            needs=data.get('needs') or (),
            pitch=data.get('pitch') or text.get('pitch') or "",
            looking_for=data.get('looking_for') or text.get('looking_for') or "",
        )


@lru_cache(maxsize=8192)
def _field_fingerprint(actor: ActorProfile, fields: Tuple[str, ...]) -> str:
    return FingerprintGenerator.generate({name: getattr(actor, name) for name in fields})
