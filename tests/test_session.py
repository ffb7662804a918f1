"""Tests for ingestion and the session context."""

import asyncio

import pytest

from assessment.config import IngestSettings, SheetAliases
from assessment.errors import IngestInProgressError, StructuralError, UnknownParticipantError, WorkbookDecodeError
from assessment.ingest import build_record_set
from assessment.records import Domain, SchoolBasics
from assessment.session import AssessmentSession, ChartSlots
from assessment.workbook import Workbook
from tests.conftest import ROSTER_HEADER


class TestBuildRecordSet:
    def test_summary(self, workbook) -> None:
        summary = build_record_set(workbook).summary
        assert summary.participants == 3
        assert summary.entries["school_basics"] == 1
        assert summary.entries["field_trial"] == 1
        assert summary.unclassified_rows == 1
        assert summary.sheets["vocational"] == "Berufsorientierung"

    def test_missing_identity_sheet(self) -> None:
        wb = Workbook.from_grids({"Schulisch": [["TN-ID", "Lesen"], ["T1", 1]]})
        with pytest.raises(StructuralError, match="Keine Teilnehmerliste gefunden"):
            build_record_set(wb)

    def test_roster_only_workbook(self) -> None:
        wb = Workbook.from_grids(
            {"Teilnehmerliste": [ROSTER_HEADER, ["T1", "Alice", "01.01.2000", "", "", ""], ["", "", "", "", "", ""]]}
        )
        result = build_record_set(wb)
        assert [p.id for p in result.roster] == ["T1"]
        assert result.roster[0].birthdate == "01.01.2000"
        assert sum(result.records.entry_counts().values()) == 0

    def test_sparse_join(self, workbook) -> None:
        records = build_record_set(workbook).records
        assert "T1" in records.school_basics
        assert "T2" not in records.school_basics

    def test_custom_sheet_aliases(self) -> None:
        settings = IngestSettings(sheets=SheetAliases(identity=("Liste",)))
        wb = Workbook.from_grids({"TN Liste": [["TN-ID"], ["A"]]})
        assert [p.id for p in build_record_set(wb, settings).roster] == ["A"]

    def test_error_in_optional_sheet_aborts(self, workbook, monkeypatch) -> None:
        def boom(rows, aliases):
            raise ValueError("kaputt")

        monkeypatch.setattr("assessment.ingest.normalize_resource_notes", boom)
        with pytest.raises(ValueError, match="kaputt"):
            build_record_set(workbook)


class TestAssessmentSession:
    def test_ingest_and_select(self, workbook) -> None:
        session = AssessmentSession()
        summary = session.ingest(workbook)
        assert summary.participants == 3
        assert session.select("T2").name == "Bob"
        assert session.current_id == "T2"

    def test_failed_ingestion_keeps_previous_state(self, workbook) -> None:
        session = AssessmentSession()
        session.ingest(workbook)
        records, roster = session.records, session.roster
        with pytest.raises(StructuralError):
            session.ingest(Workbook.from_grids({"Tabelle1": [["x"], [1]]}))
        assert session.records is records
        assert session.roster is roster
        assert session.table_view("T1", Domain.SCHOOL_BASICS).rows[0].cells == ("Lesen", "2")

    def test_failed_first_ingestion_leaves_session_empty(self) -> None:
        session = AssessmentSession()
        with pytest.raises(StructuralError):
            session.ingest(Workbook.from_grids({"Teilnehmerliste": [ROSTER_HEADER]}))
        assert not session.loaded
        assert session.participants() == []

    def test_reingestion_replaces_wholesale(self, workbook) -> None:
        session = AssessmentSession()
        session.ingest(workbook)
        session.select("T1")
        session.charts.render("school_basics", {"mark": "bar"})
        session.ingest(Workbook.from_grids({"Teilnehmerliste": [["TN-ID", "Name"], ["N1", "Neu"]]}))
        assert [p.id for p in session.participants()] == ["N1"]
        assert session.records.school_basics == {}
        assert session.current_id is None
        assert len(session.charts) == 0

    def test_concurrent_upload_rejected_while_decoding(self, workbook) -> None:
        session = AssessmentSession()

        async def read():
            return b"payload"

        async def run():
            release = asyncio.Event()

            async def decode(payload):
                await release.wait()
                return workbook

            first = asyncio.create_task(session.ingest_upload(read, decode))
            for _ in range(3):
                await asyncio.sleep(0)
            assert session.ingesting
            with pytest.raises(IngestInProgressError):
                await session.ingest_upload(read, decode)
            with pytest.raises(IngestInProgressError):
                session.ingest(workbook)
            release.set()
            return await first

        summary = asyncio.run(run())
        assert summary.participants == 3
        assert session.loaded
        assert not session.ingesting

    def test_failed_decode_clears_in_flight_flag(self, workbook) -> None:
        session = AssessmentSession()
        session.ingest(workbook)
        records = session.records

        async def read():
            return b"garbage"

        async def decode(payload):
            raise WorkbookDecodeError("Fehler beim Verarbeiten der Datei: kaputt")

        with pytest.raises(WorkbookDecodeError):
            asyncio.run(session.ingest_upload(read, decode))
        assert not session.ingesting
        assert session.records is records
        assert session.ingest(workbook).participants == 3

    def test_unknown_participant(self, workbook) -> None:
        session = AssessmentSession()
        session.ingest(workbook)
        with pytest.raises(UnknownParticipantError):
            session.select("nope")
        with pytest.raises(KeyError):
            session.table_view("nope", Domain.SCHOOL_BASICS)

    def test_views_are_repeatable(self, workbook) -> None:
        session = AssessmentSession()
        session.ingest(workbook)
        assert session.chart_series("T1", Domain.SELF_FOREIGN) == session.chart_series("T1", Domain.SELF_FOREIGN)
        assert session.table_view("T3", Domain.SCHOOL_BASICS).is_empty

    def test_ingest_excel(self, xlsx_bytes) -> None:
        session = AssessmentSession()
        session.ingest_excel(xlsx_bytes)
        assert session.records.school_basics["T1"] == SchoolBasics({"Lesen": 2, "Schreiben": 3, "Rechnen": 1}, "ok")
        assert session.participant("T1").assessment_date == "15.3.2023"


class TestChartSlots:
    def test_render_releases_previous(self) -> None:
        slots = ChartSlots()
        assert slots.render("a", "chart-1") is None
        assert slots.render("a", "chart-2") == "chart-1"
        assert slots.get("a") == "chart-2"

    def test_render_none_only_releases(self) -> None:
        slots = ChartSlots()
        slots.render("a", "chart-1")
        assert slots.render("a", None) == "chart-1"
        assert "a" not in slots
