"""Per-participant table rows and chart series derived from the canonical record set.

All functions here are pure reads of the record set; calling them repeatedly
yields equal results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union

import pandas as pd

from assessment.cells import format_number
from assessment.records import FIELD_LABELS, FIELDS, CanonicalRecordSet, Domain

NO_DATA_TEXT = "Keine Daten vorhanden"

ROW_DATA = "data"
ROW_SECTION = "section"
ROW_EMPTY = "empty"

TABLE_COLUMNS: Dict[Domain, Tuple[str, ...]] = {
    Domain.SCHOOL_BASICS: ("Kompetenz", "Bewertung"),
    Domain.SELF_FOREIGN: ("Kategorie", "Selbst", "Fremd"),
    Domain.VOCATIONAL_CHOICE: ("Kategorie",) + tuple(FIELD_LABELS[f] for f in FIELDS),
    Domain.FIELD_TRIAL: ("Kategorie",) + tuple(FIELD_LABELS[f] for f in FIELDS),
    Domain.SELF_ASSESSMENT_FIELDS: ("Kategorie",) + tuple(FIELD_LABELS[f] for f in FIELDS),
    Domain.RESOURCE_NOTES: ("Bereich", "Inhalt"),
}

Value = Union[float, str]


@dataclass(frozen=True)
class TableRow:
    cells: Tuple[str, ...]
    kind: str = ROW_DATA


@dataclass(frozen=True)
class TableView:
    domain: Domain
    columns: Tuple[str, ...]
    rows: Tuple[TableRow, ...]

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 1 and self.rows[0].kind == ROW_EMPTY

    def to_frame(self) -> pd.DataFrame:
        width = len(self.columns)
        data = [list(r.cells) + [""] * (width - len(r.cells)) for r in self.rows]
        return pd.DataFrame(data, columns=list(self.columns))


@dataclass(frozen=True)
class ChartSeries:
    """Ordered labels plus one or more aligned series. Empty means: release the chart slot.

    ``groups`` optionally names the area each label belongs to, so a category
    repeated under two areas still gets its own axis position.
    """

    domain: Domain
    labels: Tuple[str, ...] = ()
    series: Dict[str, Tuple[Value, ...]] = field(default_factory=dict)
    groups: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.labels

    @property
    def is_numeric(self) -> bool:
        return all(isinstance(v, (int, float)) for values in self.series.values() for v in values)

    @property
    def keys(self) -> Tuple[str, ...]:
        """Axis keys: the label, qualified by its group when groups are set."""
        if not self.groups:
            return self.labels
        return tuple(f"{group} · {label}" for group, label in zip(self.groups, self.labels))

    def to_long_frame(self) -> pd.DataFrame:
        base = pd.DataFrame(
            {"position": range(len(self.labels)), "key": list(self.keys), "label": list(self.labels)}
        )
        for name, values in self.series.items():
            base[name] = list(values)
        return base.melt(id_vars=["position", "key", "label"], var_name="series", value_name="value")


def _no_data(domain: Domain, no_data_text: str) -> TableView:
    return TableView(domain, TABLE_COLUMNS[domain], (TableRow((no_data_text,), ROW_EMPTY),))


def build_table_view(
    records: CanonicalRecordSet,
    participant_id: str,
    domain: Domain,
    *,
    no_data_text: str = NO_DATA_TEXT,
) -> TableView:
    domain = Domain(domain)
    entry = records.domain_map(domain).get(participant_id)
    if not entry:
        return _no_data(domain, no_data_text)

    rows: List[TableRow] = []
    if domain is Domain.SCHOOL_BASICS:
        rows = [TableRow((name, str(score))) for name, score in entry.competencies.items()]
        if entry.notes:
            rows.append(TableRow(("Anmerkungen", entry.notes)))
        if not rows:
            return _no_data(domain, no_data_text)
    elif domain is Domain.SELF_FOREIGN:
        for area, categories in entry.items():
            rows.append(TableRow((area, "", ""), ROW_SECTION))
            for category, pair in categories.items():
                rows.append(TableRow((category, format_number(pair.self), format_number(pair.foreign))))
    elif domain is Domain.VOCATIONAL_CHOICE:
        rows = [TableRow((category,) + tuple(getattr(r, f) for f in FIELDS)) for category, r in entry.items()]
    elif domain in (Domain.FIELD_TRIAL, Domain.SELF_ASSESSMENT_FIELDS):
        rows = [
            TableRow((category,) + tuple(format_number(getattr(s, f)) for f in FIELDS)) for category, s in entry.items()
        ]
    elif domain is Domain.RESOURCE_NOTES:
        rows = [
            TableRow(("Anmerkungen", entry.comments)),
            TableRow(("Ressourcen", entry.resources)),
            TableRow(("Hemmende Faktoren", entry.hindrances)),
        ]
    return TableView(domain, TABLE_COLUMNS[domain], tuple(rows))


def build_chart_series(records: CanonicalRecordSet, participant_id: str, domain: Domain) -> ChartSeries:
    domain = Domain(domain)
    entry = records.domain_map(domain).get(participant_id)
    if not entry or domain is Domain.RESOURCE_NOTES:
        return ChartSeries(domain)

    if domain is Domain.SCHOOL_BASICS:
        labels = tuple(entry.competencies.keys())
        return ChartSeries(domain, labels, {"Bewertung": tuple(float(v) for v in entry.competencies.values())})
    if domain is Domain.SELF_FOREIGN:
        pairs = [
            (area, category, pair)
            for area, categories in entry.items()
            for category, pair in categories.items()
        ]
        return ChartSeries(
            domain,
            tuple(c for _, c, _ in pairs),
            {"Selbst": tuple(p.self for _, _, p in pairs), "Fremd": tuple(p.foreign for _, _, p in pairs)},
            groups=tuple(a for a, _, _ in pairs),
        )
    labels = tuple(entry.keys())
    series = {FIELD_LABELS[f]: tuple(getattr(v, f) for v in entry.values()) for f in FIELDS}
    return ChartSeries(domain, labels, series)
