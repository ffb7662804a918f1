"""First-match alias resolution for sheet names and header cells.

Candidates are tried in order; for each candidate the names are scanned in
their given order and the first one containing the candidate (case-insensitive)
wins. A later, more specific candidate never overrides an earlier match.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence


def resolve_sheet(sheet_names: Sequence[str], candidates: Iterable[str]) -> Optional[str]:
    for candidate in candidates:
        needle = candidate.lower()
        for name in sheet_names:
            if needle in name.lower():
                return name
    return None


def resolve_column(header_row: Sequence[object], candidates: Iterable[str]) -> Optional[int]:
    for candidate in candidates:
        needle = candidate.lower()
        for idx, cell in enumerate(header_row):
            if not isinstance(cell, str):
                continue
            if needle in cell.lower():
                return idx
    return None
