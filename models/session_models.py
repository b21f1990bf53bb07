from typing import Dict, List, Optional
from pydantic import BaseModel

from models.common_models import ChartSpec, DatasetInfo, ErrorCode, Table


class DashboardSession(BaseModel):
    session_id: str
    tables: Dict[str, Table] = {}   # dataset_id -> Table, insertion ordered
    charts: List[ChartSpec] = []


class LoadError(BaseModel):
    """One failed upload, as reported back to the caller."""

    code: ErrorCode
    message: str
    file_name: str


class LoadResult(BaseModel):
    file_name: str
    dataset: Optional[DatasetInfo] = None
    charts: List[ChartSpec] = []
    error: Optional[LoadError] = None


class UploadResponse(BaseModel):
    session_id: str
    datasets: List[DatasetInfo]
    charts: List[ChartSpec]
    errors: List[LoadError]
