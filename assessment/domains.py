"""Normalizers turning header-keyed domain sheets into identifier-keyed maps.

Each function receives the rows of one sheet (as produced by
``Workbook.records``) and returns the canonical map for its domain. Rows
without an identifier are skipped; errors raised while processing propagate
and abort the ingestion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from assessment.cells import cell_text, has_any, normalize_identifier, pick, to_int, to_number
from assessment.config import FieldAliases
from assessment.records import (
    FIELDS,
    FieldRatings,
    FieldScores,
    ResourceNotes,
    SchoolBasics,
    ScorePair,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


def _identifier(row: Row, aliases: FieldAliases):
    return normalize_identifier(pick(row, aliases.identifier))


# ---------------- School basics ----------------
def normalize_school_basics(rows: Iterable[Row], aliases: FieldAliases) -> Dict[str, SchoolBasics]:
    out: Dict[str, SchoolBasics] = {}
    reserved = set(aliases.identifier) | set(aliases.notes)
    for row in rows:
        participant_id = _identifier(row, aliases)
        if participant_id is None:
            continue
        entry = out.setdefault(participant_id, SchoolBasics())
        for key, value in row.items():
            if key in reserved:
                continue
            score = to_int(value)
            if score is None:
                logger.debug("school basics %s: non-numeric score for %r ignored", participant_id, key)
                continue
            entry.competencies[key] = score
        notes = pick(row, aliases.notes)
        if notes is not None:
            entry.notes = cell_text(notes)
    return out


# ---------------- Self / foreign assessment ----------------
def normalize_self_foreign(rows: Iterable[Row], aliases: FieldAliases) -> Dict[str, Dict[str, Dict[str, ScorePair]]]:
    out: Dict[str, Dict[str, Dict[str, ScorePair]]] = {}
    for row in rows:
        participant_id = _identifier(row, aliases)
        area = cell_text(pick(row, aliases.area))
        category = cell_text(pick(row, aliases.category))
        if participant_id is None or not area or not category:
            continue
        areas = out.setdefault(participant_id, {})
        areas.setdefault(area, {})[category] = ScorePair(
            self=to_number(pick(row, aliases.self_score)),
            foreign=to_number(pick(row, aliases.foreign_score)),
        )
    return out


# ---------------- Vocational triad ----------------
class VocationalKind(str, Enum):
    CHOICE = "choice"
    FIELD_TRIAL = "field_trial"
    SELF_ASSESSMENT = "self_assessment"
    UNCLASSIFIED = "unclassified"


def classify_vocational_row(row: Row, aliases: FieldAliases) -> VocationalKind:
    """Assign a vocational-sheet row to one sub-domain; the first matching branch wins."""
    area = cell_text(pick(row, aliases.area)).lower()
    if "berufswahl" in area or has_any(row, aliases.interests) or has_any(row, aliases.prior_knowledge):
        return VocationalKind.CHOICE
    if "erprobung" in area or has_any(row, aliases.trial):
        return VocationalKind.FIELD_TRIAL
    if "self" in area or has_any(row, aliases.self_marker):
        return VocationalKind.SELF_ASSESSMENT
    return VocationalKind.UNCLASSIFIED


def _field_keys(field_name: str, *, prefixes: Tuple[str, ...]) -> List[str]:
    label = field_name.capitalize()
    keys: List[str] = []
    for prefix in prefixes:
        keys.extend([f"{prefix}{label}", f"{prefix.lower()}{field_name}"] if prefix else [label, field_name])
    return keys


_GENERIC = ("",)
_SELF_PREFIXED = ("Selbst_", "self_")

CHOICE_KEYS = {f: _field_keys(f, prefixes=_GENERIC) for f in FIELDS}
TRIAL_KEYS = {f: _field_keys(f, prefixes=_GENERIC + _SELF_PREFIXED) for f in FIELDS}
SELF_ASSESSMENT_KEYS = {f: _field_keys(f, prefixes=_SELF_PREFIXED + _GENERIC) for f in FIELDS}


@dataclass
class VocationalMaps:
    choice: Dict[str, Dict[str, FieldRatings]]
    field_trial: Dict[str, Dict[str, FieldScores]]
    self_assessment: Dict[str, Dict[str, FieldScores]]
    unclassified: int = 0


def _ratings(row: Row) -> FieldRatings:
    return FieldRatings(**{f: cell_text(pick(row, CHOICE_KEYS[f])) for f in FIELDS})


def _scores(row: Row, keys: Dict[str, List[str]]) -> FieldScores:
    return FieldScores(**{f: to_number(pick(row, keys[f])) for f in FIELDS})


def normalize_vocational(rows: Iterable[Row], aliases: FieldAliases) -> VocationalMaps:
    maps = VocationalMaps(choice={}, field_trial={}, self_assessment={})
    for row in rows:
        participant_id = _identifier(row, aliases)
        category = cell_text(pick(row, aliases.category))
        if participant_id is None or not category:
            continue
        kind = classify_vocational_row(row, aliases)
        if kind is VocationalKind.CHOICE:
            maps.choice.setdefault(participant_id, {})[category] = _ratings(row)
        elif kind is VocationalKind.FIELD_TRIAL:
            maps.field_trial.setdefault(participant_id, {})[category] = _scores(row, TRIAL_KEYS)
        elif kind is VocationalKind.SELF_ASSESSMENT:
            maps.self_assessment.setdefault(participant_id, {})[category] = _scores(row, SELF_ASSESSMENT_KEYS)
        else:
            maps.unclassified += 1
    if maps.unclassified:
        logger.debug("vocational sheet: %d rows matched no sub-domain", maps.unclassified)
    return maps


# ---------------- Resource notes ----------------
def normalize_resource_notes(rows: Iterable[Row], aliases: FieldAliases) -> Dict[str, ResourceNotes]:
    out: Dict[str, ResourceNotes] = {}
    for row in rows:
        participant_id = _identifier(row, aliases)
        if participant_id is None:
            continue
        out[participant_id] = ResourceNotes(
            comments=cell_text(pick(row, aliases.comments)),
            resources=cell_text(pick(row, aliases.resources)),
            hindrances=cell_text(pick(row, aliases.hindrances)),
        )
    return out
