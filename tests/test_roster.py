"""Tests for roster parsing from the identity sheet grid."""

from datetime import datetime

import pytest

from assessment.config import RosterColumns
from assessment.errors import StructuralError
from assessment.records import ParticipantIdentity
from assessment.roster import parse_roster
from tests.conftest import ROSTER_HEADER


class TestParseRoster:
    def test_one_participant_per_identified_row_in_order(self, grids) -> None:
        roster = parse_roster(grids["Teilnehmerliste"], RosterColumns())
        assert [p.id for p in roster] == ["T1", "T2", "T3"]

    def test_fields_are_normalized(self, grids) -> None:
        first = parse_roster(grids["Teilnehmerliste"], RosterColumns())[0]
        assert first == ParticipantIdentity(
            id="T1",
            name="Alice",
            birthdate="1.1.2000",
            assessment_date="15.3.2023",
            author="Frau Meier",
            measure_name="BvB 2023",
        )

    def test_short_rows_default_to_empty(self, grids) -> None:
        third = parse_roster(grids["Teilnehmerliste"], RosterColumns())[2]
        assert third == ParticipantIdentity(id="T3")

    def test_unresolved_optional_columns_default_to_empty(self) -> None:
        grid = [["Teilnehmer-ID", "Name"], ["A7", "Eva"]]
        roster = parse_roster(grid, RosterColumns())
        assert roster == [ParticipantIdentity(id="A7", name="Eva")]

    def test_numeric_identifiers_are_stringified(self) -> None:
        grid = [["TN-ID", "Name"], [12.0, "Zoe"], [13, "Max"]]
        assert [p.id for p in parse_roster(grid, RosterColumns())] == ["12", "13"]

    def test_rows_shorter_than_identifier_column_are_skipped(self) -> None:
        grid = [["Name", "Geburtsdatum", "TN-ID"], ["Kurz"], ["Lang", datetime(1999, 2, 3), "X1"]]
        roster = parse_roster(grid, RosterColumns())
        assert roster == [ParticipantIdentity(id="X1", name="Lang", birthdate="3.2.1999")]

    def test_missing_identifier_column_is_structural(self) -> None:
        with pytest.raises(StructuralError, match="Teilnehmer-ID"):
            parse_roster([["Name", "Vorname"], ["A", "B"]], RosterColumns(), sheet_name="Teilnehmer")

    def test_header_only_sheet_is_structural(self) -> None:
        with pytest.raises(StructuralError, match="keine Datenzeilen"):
            parse_roster([ROSTER_HEADER], RosterColumns(), sheet_name="Teilnehmerliste")

    def test_rows_with_only_blank_identifiers_yield_empty_roster(self) -> None:
        assert parse_roster([ROSTER_HEADER, ["", "Niemand"]], RosterColumns()) == []
