from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from assessment.config import IngestSettings
from assessment.domains import (
    normalize_resource_notes,
    normalize_school_basics,
    normalize_self_foreign,
    normalize_vocational,
)
from assessment.errors import StructuralError
from assessment.records import CanonicalRecordSet, ParticipantIdentity
from assessment.resolve import resolve_sheet
from assessment.roster import parse_roster
from assessment.workbook import Workbook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestSummary:
    participants: int = 0
    entries: Dict[str, int] = field(default_factory=dict)
    unclassified_rows: int = 0
    sheets: Dict[str, Optional[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class IngestResult:
    roster: List[ParticipantIdentity]
    records: CanonicalRecordSet
    summary: IngestSummary


def resolve_sheets(sheet_names: List[str], settings: IngestSettings) -> Dict[str, Optional[str]]:
    aliases = settings.sheets
    return {
        "identity": resolve_sheet(sheet_names, aliases.identity),
        "school_basics": resolve_sheet(sheet_names, aliases.school_basics),
        "self_foreign": resolve_sheet(sheet_names, aliases.self_foreign),
        "vocational": resolve_sheet(sheet_names, aliases.vocational),
        "resources": resolve_sheet(sheet_names, aliases.resources),
    }


def build_record_set(workbook: Workbook, settings: Optional[IngestSettings] = None) -> IngestResult:
    """Normalize a decoded workbook into roster + canonical record set. Pure: no session state is touched."""
    settings = settings or IngestSettings()
    sheets = resolve_sheets(workbook.sheet_names, settings)
    identity_sheet = sheets["identity"]
    if identity_sheet is None:
        raise StructuralError("Keine Teilnehmerliste gefunden.")

    roster = parse_roster(workbook.grid(identity_sheet), settings.roster, sheet_name=identity_sheet)

    aliases = settings.aliases
    records = CanonicalRecordSet()
    if sheets["school_basics"]:
        records.school_basics = normalize_school_basics(workbook.records(sheets["school_basics"]), aliases)
    if sheets["self_foreign"]:
        records.self_foreign = normalize_self_foreign(workbook.records(sheets["self_foreign"]), aliases)
    unclassified = 0
    if sheets["vocational"]:
        vocational = normalize_vocational(workbook.records(sheets["vocational"]), aliases)
        records.vocational_choice = vocational.choice
        records.field_trial = vocational.field_trial
        records.self_assessment_fields = vocational.self_assessment
        unclassified = vocational.unclassified
    if sheets["resources"]:
        records.resource_notes = normalize_resource_notes(workbook.records(sheets["resources"]), aliases)

    summary = IngestSummary(
        participants=len(roster),
        entries=records.entry_counts(),
        unclassified_rows=unclassified,
        sheets=sheets,
    )
    logger.info(
        "ingested %d participants from %r; entries=%s unclassified=%d",
        summary.participants,
        identity_sheet,
        summary.entries,
        unclassified,
    )
    return IngestResult(roster=roster, records=records, summary=summary)
