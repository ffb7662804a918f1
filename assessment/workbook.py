"""Decoded workbook: ordered sheet names plus raw-grid and header-keyed row access."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from assessment.cells import is_blank
from assessment.errors import WorkbookDecodeError

Grid = List[List[Any]]
Record = Dict[str, Any]


def clean_cell(value: Any) -> Any:
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, str):
        return value
    if is_blank(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def trim_grid(rows: Iterable[Sequence[Any]]) -> Grid:
    """Clean every cell, then drop trailing blank cells per row and trailing empty rows."""
    grid: Grid = []
    for row in rows:
        cells = [clean_cell(v) for v in row]
        while cells and is_blank(cells[-1]):
            cells.pop()
        grid.append(cells)
    while grid and not grid[-1]:
        grid.pop()
    return grid


def frame_to_grid(df: pd.DataFrame) -> Grid:
    return trim_grid(df.itertuples(index=False, name=None))


def _header_keys(header: Sequence[Any]) -> List[str]:
    keys: List[str] = []
    seen: Dict[str, int] = {}
    for cell in header:
        base = "__EMPTY" if is_blank(cell) else str(cell).strip()
        if isinstance(cell, float) and cell.is_integer():
            base = str(int(cell))
        key = base
        if base in seen:
            seen[base] += 1
            key = f"{base}_{seen[base]}"
        else:
            seen[base] = 0
        keys.append(key)
    return keys


def grid_to_records(grid: Grid) -> List[Record]:
    if not grid:
        return []
    keys = _header_keys(grid[0])
    records: List[Record] = []
    for row in grid[1:]:
        record: Record = {}
        for idx, value in enumerate(row):
            if idx >= len(keys) or is_blank(value):
                continue
            record[keys[idx]] = value
        if record:
            records.append(record)
    return records


class Workbook:
    def __init__(self, grids: Mapping[str, Grid]):
        self._grids: Dict[str, Grid] = {str(name): [list(r) for r in rows] for name, rows in grids.items()}

    @property
    def sheet_names(self) -> List[str]:
        return list(self._grids.keys())

    def grid(self, name: str) -> Grid:
        return [list(r) for r in self._grids[name]]

    def records(self, name: str) -> List[Record]:
        return grid_to_records(self._grids[name])

    @classmethod
    def from_grids(cls, grids: Mapping[str, Sequence[Sequence[Any]]]) -> "Workbook":
        return cls({name: trim_grid(rows) for name, rows in grids.items()})

    @classmethod
    def from_frames(cls, frames: Mapping[str, pd.DataFrame]) -> "Workbook":
        """Frames are expected to be read with header=None (header row as data)."""
        return cls({name: frame_to_grid(df) for name, df in frames.items()})

    @classmethod
    def from_excel(cls, source: Union[bytes, str, Path, BinaryIO], *, engine: Optional[str] = None) -> "Workbook":
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        try:
            frames = pd.read_excel(source, sheet_name=None, header=None, engine=engine)
        except Exception as exc:
            raise WorkbookDecodeError(f"Fehler beim Verarbeiten der Datei: {exc}") from exc
        return cls.from_frames(frames)
