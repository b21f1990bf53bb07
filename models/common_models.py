from enum import Enum
from typing import List, Dict, Optional, Literal
from pydantic import BaseModel, Field, field_validator

ChartType = Literal["bar", "pie", "line"]

class ErrorCode(str, Enum):
    """Stable string codes for every failure the backend reports.

    Decode and file-type errors are per-upload: they fail one file and leave
    the rest of the session untouched. ``E_UNKNOWN_SESSION`` is an upload aimed
    at a session that does not exist. ``E_LOAD_FAILED`` covers anything else.
    """

    E_UNSUPPORTED_FILE_TYPE = "E_UNSUPPORTED_FILE_TYPE"
    E_DECODE_TEXT = "E_DECODE_TEXT"
    E_DECODE_SPREADSHEET = "E_DECODE_SPREADSHEET"
    E_EMPTY_FILE = "E_EMPTY_FILE"
    E_FILE_TOO_LARGE = "E_FILE_TOO_LARGE"

    E_UNKNOWN_SESSION = "E_UNKNOWN_SESSION"
    E_LOAD_FAILED = "E_LOAD_FAILED"


# Cells are always text once a table is loaded
Row = List[str]


class Table(BaseModel):
    dataset_id: str
    file_name: str
    headers: List[str]
    rows: List[Row] = []


class DatasetInfo(BaseModel):
    dataset_id: str
    file_name: str
    n_rows: int
    n_cols: int
    headers: List[str]


class ChartSpec(BaseModel):
    id: str
    name: str
    type: ChartType = "bar"
    x_column: str
    y_column: Optional[str] = None  # None -> count mode
    dataset_id: str

    @field_validator("y_column", mode="before")
    @classmethod
    def _blank_y_is_count_mode(cls, value):
        if value is not None and str(value).strip() == "":
            return None
        return value


class AggregatedPoint(BaseModel):
    name: str
    value: float
    date_range: str = ""


class DetailView(BaseModel):
    item_name: str
    records: List[Row]
    headers: List[str]
    dataset_id: str


class DatasetRequest(BaseModel):
    session_id: str
    dataset_id: Optional[str] = None


class PreviewRequest(BaseModel):
    session_id: str
    dataset_id: str
    n_rows: Optional[int] = None


class ChartRequest(BaseModel):
    session_id: str
    chart_id: str


class AddChartRequest(BaseModel):
    session_id: str
    dataset_id: str
    name: str = Field(min_length=1)
    type: ChartType = "bar"
    x_column: str = Field(min_length=1)
    y_column: Optional[str] = None


class PresetChartRequest(BaseModel):
    session_id: str
    dataset_id: str
    preset: Optional[str] = None  # None -> quick analysis


class DetailRequest(BaseModel):
    session_id: str
    chart_id: str
    item_name: str


class ChartDataResponse(BaseModel):
    chart: ChartSpec
    points: List[AggregatedPoint]
    display_values: Dict[str, str] = {}


class PreviewResponse(BaseModel):
    columns: List[str]
    rows: List[Row]
