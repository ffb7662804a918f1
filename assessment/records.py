from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

FIELDS = ("handel", "lager", "metall", "elektro")
FIELD_LABELS = {"handel": "Handel", "lager": "Lager", "metall": "Metall", "elektro": "Elektro"}


class Domain(str, Enum):
    SCHOOL_BASICS = "school_basics"
    SELF_FOREIGN = "self_foreign"
    VOCATIONAL_CHOICE = "vocational_choice"
    FIELD_TRIAL = "field_trial"
    SELF_ASSESSMENT_FIELDS = "self_assessment_fields"
    RESOURCE_NOTES = "resource_notes"


DOMAIN_TITLES = {
    Domain.SCHOOL_BASICS: "Schulische Basiskompetenzen",
    Domain.SELF_FOREIGN: "Selbst- und Fremdeinschätzung",
    Domain.VOCATIONAL_CHOICE: "Berufswahl",
    Domain.FIELD_TRIAL: "Erprobung",
    Domain.SELF_ASSESSMENT_FIELDS: "Selbsteinschätzung Berufsfelder",
    Domain.RESOURCE_NOTES: "Ressourcen und Anmerkungen",
}


@dataclass(frozen=True)
class ParticipantIdentity:
    id: str
    name: str = ""
    birthdate: str = ""
    assessment_date: str = ""
    author: str = ""
    measure_name: str = ""


@dataclass
class SchoolBasics:
    competencies: Dict[str, int] = field(default_factory=dict)
    notes: str = ""


@dataclass
class ScorePair:
    self: float = 0.0
    foreign: float = 0.0


@dataclass
class FieldRatings:
    """Free-text interest / prior-knowledge rating per vocational field."""

    handel: str = ""
    lager: str = ""
    metall: str = ""
    elektro: str = ""


@dataclass
class FieldScores:
    """Numeric 1-6 score per vocational field; 1 is best."""

    handel: float = 0.0
    lager: float = 0.0
    metall: float = 0.0
    elektro: float = 0.0


@dataclass
class ResourceNotes:
    comments: str = ""
    resources: str = ""
    hindrances: str = ""


@dataclass
class CanonicalRecordSet:
    school_basics: Dict[str, SchoolBasics] = field(default_factory=dict)
    self_foreign: Dict[str, Dict[str, Dict[str, ScorePair]]] = field(default_factory=dict)
    vocational_choice: Dict[str, Dict[str, FieldRatings]] = field(default_factory=dict)
    field_trial: Dict[str, Dict[str, FieldScores]] = field(default_factory=dict)
    self_assessment_fields: Dict[str, Dict[str, FieldScores]] = field(default_factory=dict)
    resource_notes: Dict[str, ResourceNotes] = field(default_factory=dict)

    def domain_map(self, domain: Domain) -> dict:
        return getattr(self, Domain(domain).value)

    def entry_counts(self) -> Dict[str, int]:
        return {d.value: len(self.domain_map(d)) for d in Domain}
