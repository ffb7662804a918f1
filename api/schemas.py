from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ParticipantModel(BaseModel):
    id: str
    name: str = ""
    birthdate: str = ""
    assessment_date: str = ""
    author: str = ""
    measure_name: str = ""


class ParticipantsResponse(BaseModel):
    participants: List[ParticipantModel] = Field(default_factory=list)


class IngestResponse(BaseModel):
    participants: int = 0
    entries: Dict[str, int] = Field(default_factory=dict)
    unclassified_rows: int = 0
    sheets: Dict[str, Optional[str]] = Field(default_factory=dict)


class TableRowModel(BaseModel):
    cells: List[str]
    kind: str = "data"


class TableViewModel(BaseModel):
    columns: List[str]
    rows: List[TableRowModel]
    is_empty: bool = False


class ChartSeriesModel(BaseModel):
    labels: List[str] = Field(default_factory=list)
    groups: List[str] = Field(default_factory=list)
    series: Dict[str, List[Union[float, str]]] = Field(default_factory=dict)
    is_empty: bool = True


class ViewResponse(BaseModel):
    participant_id: str
    domain: str
    table: TableViewModel
    series: ChartSeriesModel
    chart: Optional[Dict[str, Any]] = None
