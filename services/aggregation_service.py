"""
Group a table's rows into chart-ready points.

Each category of the chart's x column accumulates either a row count or the
sum of the numeric y column, plus the earliest and latest date seen in the
table's implicit date column. Points are rebuilt from the table on every call.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional
import re

import pandas as pd

from models.common_models import AggregatedPoint, ChartSpec, Table
from services.column_heuristics_service import COLUMN_ROLES, first_matching_index
from services.default_chart_service import date_role_for

UNKNOWN_CATEGORY = "Unknown"

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_FLOAT = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")


@dataclass
class GroupAccumulator:
    total: float = 0.0
    min_date: Optional[pd.Timestamp] = None
    max_date: Optional[pd.Timestamp] = None

    def add(self, value: float, date: Optional[pd.Timestamp]) -> None:
        self.total += value
        if date is None:
            return
        if self.min_date is None or date < self.min_date:
            self.min_date = date
        if self.max_date is None or date > self.max_date:
            self.max_date = date

    def date_range(self) -> str:
        if self.min_date is None or self.max_date is None:
            return ""
        if self.min_date == self.max_date:
            return format_date(self.min_date)
        return f"{format_date(self.min_date)} - {format_date(self.max_date)}"


_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_date(date: pd.Timestamp) -> str:
    # "Jan 5, 2024", independent of the process locale
    return f"{_MONTHS[date.month - 1]} {date.day}, {date.year}"


def format_number(value: float) -> str:
    """en-US style thousands grouping, at most three decimals."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def parse_number(raw: str) -> Optional[float]:
    """
    Lenient numeric read of a cell: drop everything but digits, dots and
    minus signs, then take the longest leading number ("1.2.3" -> 1.2).
    """
    cleaned = _NON_NUMERIC.sub("", raw).replace(",", "")
    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return None
    return float(match.group(0))


def cell_value(raw: Optional[str]) -> float:
    if raw is None or raw == "":
        return 0.0
    number = parse_number(str(raw))
    # non-numeric text still counts as one occurrence
    return 1.0 if number is None else number


def parse_date(raw: Optional[str]) -> Optional[pd.Timestamp]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        parsed = pd.to_datetime(str(raw), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)
    return parsed


def resolve_date_index(table: Table) -> int:
    role = date_role_for(table.file_name)
    if role is None:
        return -1
    return first_matching_index(table.headers, COLUMN_ROLES[role])


def _column_index(headers: List[str], column: Optional[str]) -> int:
    if not column:
        return -1
    try:
        return headers.index(column)
    except ValueError:
        return -1


def _cell(row: List[str], idx: int) -> Optional[str]:
    if idx < 0 or idx >= len(row):
        return None
    return row[idx]


def aggregate(table: Table, spec: ChartSpec) -> List[AggregatedPoint]:
    """
    Aggregated points for one chart, sorted by value (descending).
    Returns [] when the chart's x column is not in the table.
    """
    x_index = _column_index(table.headers, spec.x_column)
    if x_index == -1:
        return []

    # a y column that is missing from the table falls back to counting
    y_index = _column_index(table.headers, spec.y_column)
    date_index = resolve_date_index(table)

    groups: Dict[str, GroupAccumulator] = {}

    for row in table.rows:
        raw_category = _cell(row, x_index)
        category = str(raw_category) if raw_category else UNKNOWN_CATEGORY
        if not category.strip() or category == UNKNOWN_CATEGORY:
            continue

        date = parse_date(_cell(row, date_index)) if date_index != -1 else None
        value = cell_value(_cell(row, y_index)) if y_index != -1 else 1.0

        groups.setdefault(category, GroupAccumulator()).add(value, date)

    points = [
        AggregatedPoint(name=name, value=acc.total, date_range=acc.date_range())
        for name, acc in groups.items()
        if acc.total > 0
    ]
    # sorted() is stable, so ties keep first-seen order
    return sorted(points, key=lambda p: p.value, reverse=True)


def display_values(points: List[AggregatedPoint]) -> Dict[str, str]:
    return {p.name: format_number(p.value) for p in points}
