from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from assessment.cells import cell_text, normalize_identifier
from assessment.config import RosterColumns
from assessment.dates import normalize_date
from assessment.errors import StructuralError
from assessment.records import ParticipantIdentity
from assessment.resolve import resolve_column

logger = logging.getLogger(__name__)


def _cell(row: Sequence[Any], idx: Optional[int]) -> Any:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def parse_roster(grid: Sequence[Sequence[Any]], columns: RosterColumns, *, sheet_name: str = "") -> List[ParticipantIdentity]:
    """Build participants from the identity sheet's raw grid (header row first)."""
    if len(grid) < 2:
        raise StructuralError(f"Die Teilnehmerliste '{sheet_name}' enthält keine Datenzeilen.")
    header = grid[0]
    col_id = resolve_column(header, columns.identifier)
    if col_id is None:
        raise StructuralError(
            f"Keine Spalte für die Teilnehmer-ID in '{sheet_name}' gefunden (gesucht: {', '.join(columns.identifier)})."
        )
    col_name = resolve_column(header, columns.name)
    col_birth = resolve_column(header, columns.birthdate)
    col_date = resolve_column(header, columns.assessment_date)
    col_author = resolve_column(header, columns.author)
    col_measure = resolve_column(header, columns.measure)

    participants: List[ParticipantIdentity] = []
    skipped = 0
    for row in grid[1:]:
        if len(row) <= col_id:
            skipped += 1
            continue
        participant_id = normalize_identifier(row[col_id])
        if participant_id is None:
            skipped += 1
            continue
        participants.append(
            ParticipantIdentity(
                id=participant_id,
                name=cell_text(_cell(row, col_name)),
                birthdate=normalize_date(_cell(row, col_birth)),
                assessment_date=normalize_date(_cell(row, col_date)),
                author=cell_text(_cell(row, col_author)),
                measure_name=cell_text(_cell(row, col_measure)),
            )
        )
    if skipped:
        logger.debug("roster %r: skipped %d rows without identifier", sheet_name, skipped)
    return participants
