from __future__ import annotations


class IngestError(Exception):
    """Base class for errors that abort a whole ingestion."""


class StructuralError(IngestError):
    """A required sheet or column is missing, or the identity sheet holds no data rows."""


class WorkbookDecodeError(IngestError):
    """The uploaded bytes could not be decoded into a workbook."""


class IngestInProgressError(IngestError):
    pass


class UnknownParticipantError(KeyError):
    def __init__(self, participant_id: str):
        super().__init__(participant_id)
        self.participant_id = participant_id

    def __str__(self) -> str:
        return f"Teilnehmer '{self.participant_id}' nicht gefunden."
