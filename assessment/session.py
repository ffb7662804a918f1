from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional

from assessment.config import IngestSettings
from assessment.errors import IngestInProgressError, UnknownParticipantError
from assessment.ingest import IngestResult, IngestSummary, build_record_set
from assessment.records import CanonicalRecordSet, Domain, ParticipantIdentity
from assessment.report import Report, compose_report
from assessment.views import ChartSeries, TableView, build_chart_series, build_table_view
from assessment.workbook import Workbook

logger = logging.getLogger(__name__)


class ChartSlots:
    """Rendered chart per view slot; a slot holds at most one chart at a time."""

    def __init__(self) -> None:
        self._slots: Dict[str, Any] = {}

    def render(self, slot: str, chart: Any) -> Optional[Any]:
        """Store ``chart`` for ``slot``; returns the released previous chart, if any."""
        previous = self.release(slot)
        if chart is not None:
            self._slots[slot] = chart
        return previous

    def release(self, slot: str) -> Optional[Any]:
        return self._slots.pop(slot, None)

    def release_all(self) -> None:
        self._slots.clear()

    def get(self, slot: str) -> Optional[Any]:
        return self._slots.get(slot)

    def __contains__(self, slot: str) -> bool:
        return slot in self._slots

    def __len__(self) -> int:
        return len(self._slots)


class AssessmentSession:
    """Holds the one live record set plus selection and chart state for the app shell."""

    def __init__(self, settings: Optional[IngestSettings] = None):
        self.settings = settings or IngestSettings()
        self.roster: List[ParticipantIdentity] = []
        self.records: Optional[CanonicalRecordSet] = None
        self.summary: Optional[IngestSummary] = None
        self.current_id: Optional[str] = None
        self.charts = ChartSlots()
        self._ingesting = False

    @property
    def loaded(self) -> bool:
        return self.records is not None

    @property
    def ingesting(self) -> bool:
        return self._ingesting

    @contextmanager
    def _in_flight(self) -> Iterator[None]:
        if self._ingesting:
            raise IngestInProgressError("Es läuft bereits ein Import.")
        self._ingesting = True
        try:
            yield
        except Exception:
            logger.warning("ingestion failed; previous record set kept")
            raise
        finally:
            self._ingesting = False

    def _commit(self, result: IngestResult) -> IngestSummary:
        self.roster = result.roster
        self.records = result.records
        self.summary = result.summary
        self.current_id = None
        self.charts.release_all()
        return result.summary

    def ingest(self, workbook: Workbook) -> IngestSummary:
        with self._in_flight():
            result = build_record_set(workbook, self.settings)
        return self._commit(result)

    def ingest_excel(self, source: Any) -> IngestSummary:
        with self._in_flight():
            result = build_record_set(Workbook.from_excel(source), self.settings)
        return self._commit(result)

    async def ingest_upload(
        self,
        read: Callable[[], Awaitable[bytes]],
        decode: Callable[[bytes], Awaitable[Workbook]],
    ) -> IngestSummary:
        """Read, decode and normalize an upload; the session counts as busy from the first await on."""
        with self._in_flight():
            payload = await read()
            workbook = await decode(payload)
            result = build_record_set(workbook, self.settings)
        return self._commit(result)

    def participants(self) -> List[ParticipantIdentity]:
        return list(self.roster)

    def participant(self, participant_id: str) -> ParticipantIdentity:
        for p in self.roster:
            if p.id == participant_id:
                return p
        raise UnknownParticipantError(participant_id)

    def select(self, participant_id: str) -> ParticipantIdentity:
        participant = self.participant(participant_id)
        self.current_id = participant.id
        return participant

    def _records(self) -> CanonicalRecordSet:
        return self.records if self.records is not None else CanonicalRecordSet()

    def table_view(self, participant_id: str, domain: Domain) -> TableView:
        self.participant(participant_id)
        return build_table_view(self._records(), participant_id, domain, no_data_text=self.settings.no_data_text)

    def chart_series(self, participant_id: str, domain: Domain) -> ChartSeries:
        self.participant(participant_id)
        return build_chart_series(self._records(), participant_id, domain)

    def report(self, participant_id: str) -> Report:
        identity = self.participant(participant_id)
        return compose_report(
            self._records(),
            identity,
            no_data_text=self.settings.no_data_text,
            unnamed_text=self.settings.unnamed_text,
        )
