"""Printable composite report for one participant.

``compose_report`` builds a format-agnostic nesting of titled sections holding
the same tables as the dashboard views; ``render_report_html`` turns it into a
self-contained HTML document.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import List, Tuple

from assessment.records import DOMAIN_TITLES, CanonicalRecordSet, Domain, ParticipantIdentity
from assessment.views import NO_DATA_TEXT, ROW_EMPTY, ROW_SECTION, TableView, build_table_view


@dataclass(frozen=True)
class ReportTable:
    title: str
    table: TableView


@dataclass(frozen=True)
class ReportSection:
    title: str
    tables: Tuple[ReportTable, ...] = ()


@dataclass(frozen=True)
class Report:
    title: str
    identity: Tuple[Tuple[str, str], ...]
    sections: Tuple[ReportSection, ...] = field(default_factory=tuple)


SECTION_LAYOUT: Tuple[Tuple[str, Tuple[Domain, ...]], ...] = (
    ("Schulische Basiskompetenzen", (Domain.SCHOOL_BASICS,)),
    ("Selbst- und Fremdeinschätzung", (Domain.SELF_FOREIGN,)),
    ("Berufsorientierung", (Domain.VOCATIONAL_CHOICE, Domain.FIELD_TRIAL, Domain.SELF_ASSESSMENT_FIELDS)),
    ("Ressourcen und Anmerkungen", (Domain.RESOURCE_NOTES,)),
)


def identity_fields(identity: ParticipantIdentity) -> Tuple[Tuple[str, str], ...]:
    return (
        ("TN-ID", identity.id),
        ("Name", identity.name),
        ("Geburtsdatum", identity.birthdate),
        ("Datum der Einschätzung", identity.assessment_date),
        ("Verfasser", identity.author),
        ("Maßnahme", identity.measure_name),
    )


def compose_report(
    records: CanonicalRecordSet,
    identity: ParticipantIdentity,
    *,
    no_data_text: str = NO_DATA_TEXT,
    unnamed_text: str = "Unbenannt",
) -> Report:
    sections: List[ReportSection] = []
    for title, domains in SECTION_LAYOUT:
        tables = tuple(
            ReportTable(DOMAIN_TITLES[d], build_table_view(records, identity.id, d, no_data_text=no_data_text))
            for d in domains
        )
        sections.append(ReportSection(title, tables))
    return Report(
        title=f"Kompetenzfeststellung: {identity.name or unnamed_text}",
        identity=identity_fields(identity),
        sections=tuple(sections),
    )


REPORT_CSS = """
body {font-family: Arial, Helvetica, sans-serif; color: #111827; margin: 24px;}
h1 {font-size: 1.5rem; border-bottom: 2px solid #0f766e; padding-bottom: 4px;}
h2 {font-size: 1.2rem; color: #0f766e; margin-top: 24px;}
h3 {font-size: 1.0rem; margin: 12px 0 4px;}
table {border-collapse: collapse; width: 100%; margin-bottom: 12px;}
th, td {border: 1px solid #d1d5db; padding: 4px 8px; text-align: left; font-size: 0.9rem;}
th {background: #f3f4f6;}
tr.section td {font-weight: 600; background: #f9fafb;}
tr.empty td {color: #6b7280; font-style: italic;}
table.identity th {width: 30%;}
@media print {body {margin: 0;} h2 {page-break-after: avoid;} table {page-break-inside: avoid;}}
"""


def _e(text: str) -> str:
    return html.escape(text or "")


def identity_chips_html(identity: ParticipantIdentity) -> str:
    """Escaped chip row markup for the dashboard header."""
    chips = [
        ("TN-ID", identity.id),
        ("Geburtsdatum", identity.birthdate or "–"),
        ("Einschätzung", identity.assessment_date or "–"),
        ("Maßnahme", identity.measure_name or "–"),
    ]
    return "".join(f"<span class='chip'>{_e(label)}: {_e(value)}</span>" for label, value in chips)


def _render_table(table: TableView) -> str:
    head = "".join(f"<th>{_e(c)}</th>" for c in table.columns)
    body: List[str] = []
    width = len(table.columns)
    for row in table.rows:
        if row.kind == ROW_EMPTY:
            body.append(f"<tr class='empty'><td colspan='{width}'>{_e(row.cells[0])}</td></tr>")
        elif row.kind == ROW_SECTION:
            body.append(f"<tr class='section'><td colspan='{width}'>{_e(row.cells[0])}</td></tr>")
        else:
            body.append("<tr>" + "".join(f"<td>{_e(c)}</td>" for c in row.cells) + "</tr>")
    return f"<table><thead><tr>{head}</tr></thead><tbody>{''.join(body)}</tbody></table>"


def render_report_html(report: Report) -> str:
    identity_rows = "".join(f"<tr><th>{_e(k)}</th><td>{_e(v)}</td></tr>" for k, v in report.identity)
    parts = [
        "<!DOCTYPE html>",
        "<html lang='de'><head><meta charset='utf-8'>",
        f"<title>{_e(report.title)}</title>",
        f"<style>{REPORT_CSS}</style></head><body>",
        f"<h1>{_e(report.title)}</h1>",
        f"<table class='identity'><tbody>{identity_rows}</tbody></table>",
    ]
    for section in report.sections:
        parts.append(f"<section><h2>{_e(section.title)}</h2>")
        for item in section.tables:
            if len(section.tables) > 1:
                parts.append(f"<h3>{_e(item.title)}</h3>")
            parts.append(_render_table(item.table))
        parts.append("</section>")
    parts.append("</body></html>")
    return "\n".join(parts)
