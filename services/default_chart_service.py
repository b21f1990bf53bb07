"""
Default and preset chart specs for a freshly loaded table.

Recognised maintenance exports are identified by a fragment of their file
name. Each file rule lists the charts to build for it. DATE_ROLE_RULES picks
the header role holding the date used for per-category date ranges.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging
import uuid

from models.common_models import ChartSpec, ChartType, Table
from services.column_heuristics_service import (
    COLUMN_ROLES,
    detect_maintenance_columns,
    find_column,
    find_role_column,
    matching_columns,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartRule:
    name: str
    type: ChartType
    x_role: str
    y_role: Optional[str] = None  # None -> count mode


@dataclass(frozen=True)
class FileRule:
    name_fragment: str
    charts: List[ChartRule] = field(default_factory=list)

    def matches(self, file_name: str) -> bool:
        return self.name_fragment in (file_name or "").lower()


FILE_RULES: List[FileRule] = [
    FileRule(
        name_fragment="parts usage",
        charts=[ChartRule(name="Cost Part", type="bar", x_role="area", y_role="price")],
    ),
    FileRule(
        name_fragment="preventive maintenance report",
        charts=[
            ChartRule(name="Time Consume", type="bar", x_role="part", y_role="minutes"),
            ChartRule(name="Activity", type="pie", x_role="activity"),
        ],
    ),
]

FALLBACK_CHART_NAME = "Data Distribution"


def matching_rules(file_name: str) -> List[FileRule]:
    return [rule for rule in FILE_RULES if rule.matches(file_name)]


# First matching fragment wins; a name with both tracks the start time.
DATE_ROLE_RULES: List[Tuple[str, str]] = [
    ("preventive maintenance report", "pm_start_time"),
    ("parts usage", "parts_created"),
]


def date_role_for(file_name: str) -> Optional[str]:
    lowered = (file_name or "").lower()
    for fragment, role in DATE_ROLE_RULES:
        if fragment in lowered:
            return role
    return None


def _new_chart_id() -> str:
    return uuid.uuid4().hex


def _build_from_rule(table: Table, rule: ChartRule) -> Optional[ChartSpec]:
    x_column = find_role_column(table.headers, rule.x_role)
    if not x_column:
        return None

    y_column = None
    if rule.y_role:
        y_column = find_role_column(table.headers, rule.y_role)
        # value charts need both columns
        if not y_column:
            return None

    return ChartSpec(
        id=_new_chart_id(),
        name=rule.name,
        type=rule.type,
        x_column=x_column,
        y_column=y_column,
        dataset_id=table.dataset_id,
    )


def derive_default_charts(table: Table, include_fallback: bool = True) -> List[ChartSpec]:
    """
    Starting charts for a table, chosen from its file name and headers.
    When no rule yields a chart and include_fallback is set, a count chart
    over the first non-blank header is returned instead.
    """
    charts: List[ChartSpec] = []
    for file_rule in matching_rules(table.file_name):
        for chart_rule in file_rule.charts:
            spec = _build_from_rule(table, chart_rule)
            if spec is not None:
                charts.append(spec)

    if not charts and include_fallback:
        first_header = next((h for h in table.headers if h and h.strip()), None)
        if first_header:
            charts.append(
                ChartSpec(
                    id=_new_chart_id(),
                    name=FALLBACK_CHART_NAME,
                    type="bar",
                    x_column=first_header,
                    dataset_id=table.dataset_id,
                )
            )

    logger.debug(
        "Derived %d default chart(s) for '%s': %s",
        len(charts), table.file_name, [c.name for c in charts],
    )
    return charts


# Maintenance presets: name -> (chart type, detected role, secondary fragment, fallback header position)
MAINTENANCE_PRESETS = {
    "Status Distribution": ("pie", "status", "status", 0),
    "Equipment Analysis": ("bar", "equipment", "equipment", 1),
    "Approval Workflow": ("bar", "approver", "approved", 0),
    "Monthly Trends": ("line", None, None, 0),
}

PRESET_DESCRIPTIONS = {
    "Status Distribution": "Shows distribution of approval/status values",
    "Equipment Analysis": "Analyzes equipment types or models",
    "Approval Workflow": "Shows approver activity and workload",
    "Monthly Trends": "Time-based analysis of maintenance activities",
}


def _positional_header(headers: List[str], position: int) -> Optional[str]:
    if position < len(headers):
        return headers[position]
    return headers[0] if headers else None


def build_preset_chart(table: Table, preset_name: str) -> Optional[ChartSpec]:
    """
    Chart spec for one of MAINTENANCE_PRESETS.
    Raises KeyError for an unknown preset; returns None for a table without headers.
    """
    chart_type, role, secondary, position = MAINTENANCE_PRESETS[preset_name]
    headers = table.headers

    x_column = None
    if role is not None:
        detected = detect_maintenance_columns(headers)[role]
        x_column = detected[0] if detected else find_column(headers, [secondary])
    else:
        dated = matching_columns(headers, COLUMN_ROLES["date"])
        x_column = dated[0] if dated else None

    if not x_column:
        x_column = _positional_header(headers, position)
    if x_column is None:
        return None

    return ChartSpec(
        id=_new_chart_id(),
        name=preset_name,
        type=chart_type,
        x_column=x_column,
        dataset_id=table.dataset_id,
    )


def build_quick_chart(table: Table) -> Optional[ChartSpec]:
    """A status pie if a status/approval column exists, else an equipment bar, else None."""
    status_columns = matching_columns(table.headers, COLUMN_ROLES["quick_status"])
    if status_columns:
        return ChartSpec(
            id=_new_chart_id(),
            name="Quick Status Analysis",
            type="pie",
            x_column=status_columns[0],
            dataset_id=table.dataset_id,
        )

    equipment_columns = matching_columns(table.headers, COLUMN_ROLES["quick_equipment"])
    if equipment_columns:
        return ChartSpec(
            id=_new_chart_id(),
            name="Quick Equipment Analysis",
            type="bar",
            x_column=equipment_columns[0],
            dataset_id=table.dataset_id,
        )
    return None
