from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Iterable, Optional, Tuple


IDENTIFIER_ALIASES = ("TN-ID", "TNID", "ID", "Teilnehmer-ID")


@dataclass(frozen=True)
class SheetAliases:
    identity: Tuple[str, ...] = ("Teilnehmerliste", "Teilnehmer")
    school_basics: Tuple[str, ...] = ("Schulische_Basiskompetenzen", "Schulisch")
    self_foreign: Tuple[str, ...] = ("Selbst_Fremdeinschaetzung", "Selbst")
    vocational: Tuple[str, ...] = ("Berufsorientierung", "Berufe")
    resources: Tuple[str, ...] = ("Anmerkungen_Ressourcen", "Anmerkungen")


@dataclass(frozen=True)
class RosterColumns:
    identifier: Tuple[str, ...] = IDENTIFIER_ALIASES
    name: Tuple[str, ...] = ("Name", "Teilnehmername", "Nachname")
    birthdate: Tuple[str, ...] = ("Geburtsdatum", "Geb.", "Geburtstag")
    assessment_date: Tuple[str, ...] = ("Einschätzungsdatum", "Erhebungsdatum", "Datum der Einschätzung")
    author: Tuple[str, ...] = ("Verfasser", "Autor", "Erstellt von")
    measure: Tuple[str, ...] = ("Maßnahme", "Massnahme", "Measure")


@dataclass(frozen=True)
class FieldAliases:
    """Header aliases for the header-keyed domain sheets (exact key lookup, first non-empty wins)."""

    identifier: Tuple[str, ...] = IDENTIFIER_ALIASES
    notes: Tuple[str, ...] = ("Notes", "Anmerkungen", "Bemerkungen")
    area: Tuple[str, ...] = ("Bereich", "Area", "Kompetenzbereich")
    category: Tuple[str, ...] = ("Kategorie", "Category", "Kompetenz")
    self_score: Tuple[str, ...] = ("Selbst", "Selbsteinschätzung", "self")
    foreign_score: Tuple[str, ...] = ("Fremd", "Fremdeinschätzung", "foreign")
    interests: Tuple[str, ...] = ("Interessen", "interests")
    prior_knowledge: Tuple[str, ...] = ("Vorkenntnisse", "prior_knowledge")
    trial: Tuple[str, ...] = ("Erprobung", "trial")
    self_marker: Tuple[str, ...] = ("Selbst_Handel", "self_handel")
    comments: Tuple[str, ...] = ("Anmerkungen", "Kommentare", "comments")
    resources: Tuple[str, ...] = ("Ressourcen", "resources")
    hindrances: Tuple[str, ...] = ("Hemmende Faktoren", "Hindernisse", "hindrances")


@dataclass(frozen=True)
class IngestSettings:
    sheets: SheetAliases = field(default_factory=SheetAliases)
    roster: RosterColumns = field(default_factory=RosterColumns)
    aliases: FieldAliases = field(default_factory=FieldAliases)
    no_data_text: str = "Keine Daten vorhanden"
    unnamed_text: str = "Unbenannt"


def _as_str_tuple(values: Optional[Iterable[object]], fallback: Tuple[str, ...]) -> Tuple[str, ...]:
    if values is None:
        return fallback
    if isinstance(values, str):
        values = [values]
    out = tuple(str(v).strip() for v in values if v is not None and str(v).strip())
    return out or fallback


def _merge_aliases(current, raw: Optional[dict]):
    if not raw:
        return current
    changes = {}
    for f in fields(current):
        if f.name in raw:
            changes[f.name] = _as_str_tuple(raw.get(f.name), getattr(current, f.name))
    return replace(current, **changes)


def normalize_settings(raw: Optional[dict]) -> IngestSettings:
    """Build settings from a partial override dict; unknown keys are ignored."""
    raw = raw or {}
    base = IngestSettings()
    no_data_text = str(raw.get("no_data_text") or base.no_data_text)
    unnamed_text = str(raw.get("unnamed_text") or base.unnamed_text)
    return IngestSettings(
        sheets=_merge_aliases(base.sheets, raw.get("sheets")),
        roster=_merge_aliases(base.roster, raw.get("roster")),
        aliases=_merge_aliases(base.aliases, raw.get("aliases")),
        no_data_text=no_data_text,
        unnamed_text=unnamed_text,
    )
