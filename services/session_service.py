"""
In-memory dashboard sessions.

A session owns the loaded tables and the chart specs drawn from them. Every
mutation swaps in a new dict/list instead of editing one in place, so a
reader holding the previous collection always sees a consistent snapshot.
Charts refer to their table by dataset_id only; removing or replacing a
table drops its charts by that id.
"""
from typing import Dict, List, Optional, Sequence, Tuple
import asyncio
import logging
import uuid

from fastapi.concurrency import run_in_threadpool

from config import FALLBACK_CHART_ENABLED, MAX_UPLOAD_BYTES
from models.common_models import ChartSpec, DatasetInfo, ErrorCode, Table
from models.session_models import DashboardSession, LoadError, LoadResult
from services.default_chart_service import derive_default_charts
from services.errors import FileTooLargeError, UnknownSessionError, load_error
from services.table_service import load_table

logger = logging.getLogger(__name__)

_SESSIONS: Dict[str, DashboardSession] = {}


def create_session() -> DashboardSession:
    session = DashboardSession(session_id=uuid.uuid4().hex)
    _SESSIONS[session.session_id] = session
    logger.info("Created session %s", session.session_id)
    return session


def get_session(session_id: str) -> DashboardSession:
    if session_id not in _SESSIONS:
        raise UnknownSessionError(f"Session '{session_id}' not found.")
    return _SESSIONS[session_id]


def get_or_create_session(session_id: Optional[str] = None) -> DashboardSession:
    if session_id:
        return get_session(session_id)
    return create_session()


def drop_session(session_id: str) -> None:
    _SESSIONS.pop(session_id, None)


def dataset_info(table: Table) -> DatasetInfo:
    return DatasetInfo(
        dataset_id=table.dataset_id,
        file_name=table.file_name,
        n_rows=len(table.rows),
        n_cols=len(table.headers),
        headers=list(table.headers),
    )


# -------------------------------------------------------------------
# Tables
# -------------------------------------------------------------------
def list_tables(session_id: str) -> List[Table]:
    return list(get_session(session_id).tables.values())


def get_table(session_id: str, dataset_id: str) -> Table:
    tables = get_session(session_id).tables
    if dataset_id not in tables:
        raise KeyError(f"Dataset '{dataset_id}' not found.")
    return tables[dataset_id]


def add_table(session_id: str, table: Table) -> Table:
    """Add a table; an existing table with the same dataset_id is replaced and its charts dropped."""
    session = get_session(session_id)
    if table.dataset_id in session.tables:
        session.charts = [c for c in session.charts if c.dataset_id != table.dataset_id]
        logger.info("Replacing dataset %s with '%s'", table.dataset_id, table.file_name)
    session.tables = {**session.tables, table.dataset_id: table}
    return table


def remove_table(session_id: str, dataset_id: str) -> Table:
    session = get_session(session_id)
    table = get_table(session_id, dataset_id)
    session.tables = {k: v for k, v in session.tables.items() if k != dataset_id}
    session.charts = [c for c in session.charts if c.dataset_id != dataset_id]
    logger.info("Removed dataset %s ('%s') and its charts", dataset_id, table.file_name)
    return table


# -------------------------------------------------------------------
# Charts
# -------------------------------------------------------------------
def list_charts(session_id: str, dataset_id: Optional[str] = None) -> List[ChartSpec]:
    charts = get_session(session_id).charts
    if dataset_id is None:
        return list(charts)
    return [c for c in charts if c.dataset_id == dataset_id]


def get_chart(session_id: str, chart_id: str) -> ChartSpec:
    for chart in get_session(session_id).charts:
        if chart.id == chart_id:
            return chart
    raise KeyError(f"Chart '{chart_id}' not found.")


def add_charts(session_id: str, specs: Sequence[ChartSpec]) -> List[ChartSpec]:
    session = get_session(session_id)
    for spec in specs:
        if spec.dataset_id not in session.tables:
            raise KeyError(f"Dataset '{spec.dataset_id}' not found.")
    session.charts = [*session.charts, *specs]
    return list(specs)


def add_chart(session_id: str, spec: ChartSpec) -> ChartSpec:
    add_charts(session_id, [spec])
    return spec


def new_chart(
    session_id: str,
    dataset_id: str,
    name: str,
    chart_type: str,
    x_column: str,
    y_column: Optional[str] = None,
) -> ChartSpec:
    spec = ChartSpec(
        id=uuid.uuid4().hex,
        name=name,
        type=chart_type,
        x_column=x_column,
        y_column=y_column,
        dataset_id=dataset_id,
    )
    return add_chart(session_id, spec)


def remove_chart(session_id: str, chart_id: str) -> ChartSpec:
    session = get_session(session_id)
    chart = get_chart(session_id, chart_id)
    session.charts = [c for c in session.charts if c.id != chart_id]
    return chart


# -------------------------------------------------------------------
# Loading
# -------------------------------------------------------------------
async def load_file(
    session_id: str,
    file_name: str,
    content: bytes,
    dataset_id: Optional[str] = None,
    include_fallback: bool = FALLBACK_CHART_ENABLED,
) -> Tuple[Optional[Table], List[ChartSpec]]:
    """
    Decode one file off the event loop, then add it to the session and
    derive its default charts. Nothing in the session changes if decoding fails.
    Returns (None, []) for a file without any rows.
    """
    get_session(session_id)
    if len(content) > MAX_UPLOAD_BYTES:
        raise FileTooLargeError(f"File '{file_name}' exceeds {MAX_UPLOAD_BYTES} bytes.")

    table = await run_in_threadpool(load_table, file_name, content, dataset_id)
    if table is None:
        return None, []

    add_table(session_id, table)
    charts = add_charts(session_id, derive_default_charts(table, include_fallback=include_fallback))
    return table, charts


async def load_files(
    session_id: str,
    uploads: Sequence[Tuple[str, bytes]],
    dataset_id: Optional[str] = None,
) -> List[LoadResult]:
    """
    Load several (file_name, content) pairs concurrently.
    Each file succeeds or fails on its own; failures become LoadResult.error.
    """
    results = await asyncio.gather(
        *(load_file(session_id, name, content, dataset_id) for name, content in uploads),
        return_exceptions=True,
    )

    report: List[LoadResult] = []
    for (file_name, _), outcome in zip(uploads, results):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.warning("Failed to load '%s': %s", file_name, outcome)
            report.append(LoadResult(file_name=file_name, error=load_error(file_name, outcome)))
            continue

        table, charts = outcome
        if table is None:
            report.append(
                LoadResult(
                    file_name=file_name,
                    error=LoadError(code=ErrorCode.E_EMPTY_FILE, message="File contains no rows.", file_name=file_name),
                )
            )
        else:
            report.append(LoadResult(file_name=file_name, dataset=dataset_info(table), charts=charts))
    return report
