"""Shared fixtures: sample tables, generated .xlsx bytes and a clean session registry."""

from __future__ import annotations

import datetime
import io

import openpyxl
import pytest

from models.common_models import ChartSpec, Table
from services import session_service


@pytest.fixture(autouse=True)
def clean_sessions():
    """Every test starts with an empty in-memory session registry."""
    session_service._SESSIONS.clear()
    yield
    session_service._SESSIONS.clear()


def make_xlsx(rows: list[list], extra_sheet: list[list] | None = None) -> bytes:
    """Build an .xlsx workbook in memory; the first sheet holds ``rows``."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Data"
    for row in rows:
        ws.append(row)
    if extra_sheet is not None:
        other = wb.create_sheet("Other")
        for row in extra_sheet:
            other.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    wb.close()
    return buffer.getvalue()


@pytest.fixture()
def parts_usage_xlsx() -> bytes:
    return make_xlsx(
        [
            ["No", "Area Usage", "Part Model 1", "Total Price Part 1", "Created"],
            [1, "Boiler Room", "PX-1", 1500, datetime.datetime(2024, 1, 5)],
            [2, "Boiler Room", "PX-2", 500, datetime.datetime(2024, 2, 10)],
            [3, "Workshop", "PX-1", 750.5, datetime.datetime(2024, 1, 20)],
        ]
    )


@pytest.fixture()
def pm_csv() -> bytes:
    return (
        "Preventive maintenance part,Type Activity,Total Minutes,Start Time\n"
        "Compressor,Inspection,30,2024-03-01 08:00\n"
        "Compressor,Cleaning,45,2024-03-04 09:30\n"
        "Pump,Inspection,20,2024-03-02 10:00\n"
        ",Inspection,15,2024-03-05 10:00\n"
    ).encode("utf-8")


@pytest.fixture()
def simple_table() -> Table:
    return Table(
        dataset_id="ds1",
        file_name="work orders.csv",
        headers=["Cat", "Amount"],
        rows=[["A", "1"], ["A", "2"], ["B", "5"], ["", "9"], ["Unknown", "4"], ["C", "1"]],
    )


def chart(x_column: str, y_column: str | None = None, dataset_id: str = "ds1") -> ChartSpec:
    return ChartSpec(
        id="chart-1",
        name="Test chart",
        type="bar",
        x_column=x_column,
        y_column=y_column,
        dataset_id=dataset_id,
    )
