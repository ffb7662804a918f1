from __future__ import annotations

from dataclasses import asdict
import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool
import uvicorn

from api.schemas import (
    ChartSeriesModel,
    IngestResponse,
    ParticipantModel,
    ParticipantsResponse,
    TableRowModel,
    TableViewModel,
    ViewResponse,
)
from assessment.charts import chart_spec
from assessment.config import IngestSettings, normalize_settings
from assessment.errors import IngestError, IngestInProgressError, UnknownParticipantError
from assessment.records import Domain
from assessment.report import render_report_html
from assessment.session import AssessmentSession
from assessment.workbook import Workbook

SETTINGS_ENV = "ASSESSMENT_SETTINGS"

logger = logging.getLogger(__name__)


def load_settings() -> IngestSettings:
    path = os.environ.get(SETTINGS_ENV)
    if not path:
        return IngestSettings()
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return normalize_settings(raw)


app = FastAPI(title="Kompetenzfeststellung API", version="0.1.0")
app.state.session = AssessmentSession(load_settings())

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _session() -> AssessmentSession:
    return app.state.session


def _json(data: object) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(data))


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


async def _decode_upload(payload: bytes) -> Workbook:
    return await run_in_threadpool(Workbook.from_excel, payload)


@app.post("/ingest")
async def ingest(file: UploadFile = File(...)):
    session = _session()
    try:
        summary = await session.ingest_upload(file.read, _decode_upload)
        return _json(IngestResponse(**asdict(summary)))
    except IngestInProgressError as exc:
        logger.warning("ingest rejected: %s", exc)
        return _error(409, exc)
    except IngestError as exc:
        logger.warning("ingest rejected: %s", exc)
        return _error(422, exc)
    except Exception as exc:
        logger.exception("ingest failed")
        return _error(500, exc)


@app.get("/summary")
def summary():
    session = _session()
    if session.summary is None:
        return _json(IngestResponse())
    return _json(IngestResponse(**asdict(session.summary)))


@app.get("/participants")
def participants():
    try:
        people = [ParticipantModel(**asdict(p)) for p in _session().participants()]
        return _json(ParticipantsResponse(participants=people))
    except Exception as exc:
        logger.exception("participants failed")
        return _error(500, exc)


@app.get("/participants/{participant_id}/views/{domain}")
def participant_view(participant_id: str, domain: Domain):
    session = _session()
    try:
        session.select(participant_id)
        table = session.table_view(participant_id, domain)
        series = session.chart_series(participant_id, domain)
        spec = chart_spec(series)
        session.charts.render(domain.value, spec)
        return _json(
            ViewResponse(
                participant_id=participant_id,
                domain=domain.value,
                table=TableViewModel(
                    columns=list(table.columns),
                    rows=[TableRowModel(cells=list(r.cells), kind=r.kind) for r in table.rows],
                    is_empty=table.is_empty,
                ),
                series=ChartSeriesModel(
                    labels=list(series.labels),
                    groups=list(series.groups),
                    series={k: list(v) for k, v in series.series.items()},
                    is_empty=series.is_empty,
                ),
                chart=spec,
            )
        )
    except UnknownParticipantError as exc:
        return _error(404, exc)
    except Exception as exc:
        logger.exception("participant_view failed")
        return _error(500, exc)


@app.get("/participants/{participant_id}/report")
def participant_report(participant_id: str):
    try:
        report = _session().report(participant_id)
        return HTMLResponse(content=render_report_html(report))
    except UnknownParticipantError as exc:
        return _error(404, exc)
    except Exception as exc:
        logger.exception("participant_report failed")
        return _error(500, exc)


def serve(host: str = "127.0.0.1", port: int = 8000) -> None:
    uvicorn.run(app, host=host, port=port)
