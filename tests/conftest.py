"""Shared fixtures: a small but complete assessment workbook."""

from __future__ import annotations

import io
from datetime import datetime
from typing import Any, Dict, List

import pandas as pd
import pytest

from assessment.workbook import Workbook

ROSTER_HEADER = ["TN-ID", "Name", "Geburtsdatum", "Einschätzungsdatum", "Verfasser", "Maßnahme"]


def sample_grids() -> Dict[str, List[List[Any]]]:
    return {
        "Teilnehmerliste": [
            ROSTER_HEADER,
            ["T1", "Alice", datetime(2000, 1, 1), 45000, "Frau Meier", "BvB 2023"],
            ["T2", "Bob", "05.05.2001", None, None, None],
            [None, "Ghost", None, None, None, None],
            ["T3"],
        ],
        "Schulische_Basiskompetenzen": [
            ["TN-ID", "Lesen", "Schreiben", "Rechnen", "Notes"],
            ["T1", 2, 3, "4", "ok"],
            ["T1", None, None, 1, None],
            [None, 5, 5, 5, "ignored"],
        ],
        "Selbst_Fremdeinschaetzung": [
            ["TN-ID", "Bereich", "Kategorie", "Selbst", "Fremd"],
            ["T1", "Sozial", "Teamfähigkeit", 4, 3],
            ["T1", "Sozial", "Pünktlichkeit", 5, None],
            ["T1", "Methodisch", "Sorgfalt", 3, 4],
            ["T1", None, "Ohne Bereich", 1, 1],
            ["T1", "Sozial", "Teamfähigkeit", 2, 2],
        ],
        "Berufsorientierung": [
            [
                "TN-ID", "Bereich", "Kategorie", "Handel", "Lager", "Metall", "Elektro",
                "Erprobung", "Selbst_Handel", "Selbst_Lager", "Selbst_Metall", "Selbst_Elektro",
            ],
            ["T1", "Berufswahl", "Interesse", "hoch", "mittel", "gering", "hoch"],
            ["T1", "Berufswahl", "Vorkenntnisse", "keine", "etwas", "keine", "keine", "x"],
            ["T1", "Erprobung", "Praxis", 1, 2, 3, 4],
            ["T1", "Selbst", "Arbeitstempo", None, None, None, None, None, 2, 3, 4, 5],
            ["T1", "Sonstiges", "Unbekannt", 1],
        ],
        "Anmerkungen_Ressourcen": [
            ["TN-ID", "Anmerkungen", "Ressourcen", "Hemmende Faktoren"],
            ["T1", "erste", "Familie", "Anfahrt"],
            ["T1", "zweite", "Sport"],
        ],
    }


def grids_to_xlsx(grids: Dict[str, List[List[Any]]]) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, rows in grids.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
    return buffer.getvalue()


@pytest.fixture
def grids() -> Dict[str, List[List[Any]]]:
    return sample_grids()


@pytest.fixture
def workbook(grids) -> Workbook:
    return Workbook.from_grids(grids)


@pytest.fixture
def xlsx_bytes(grids) -> bytes:
    return grids_to_xlsx(grids)
