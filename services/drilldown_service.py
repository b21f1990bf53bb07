from typing import List

from models.common_models import ChartSpec, DetailView, Row, Table


def details_for(table: Table, spec: ChartSpec, item_name: str) -> List[Row]:
    """Rows whose x-column cell equals item_name exactly."""
    if not table.rows or spec.x_column not in table.headers:
        return []
    x_index = table.headers.index(spec.x_column)

    matches: List[Row] = []
    for row in table.rows:
        if x_index >= len(row):
            continue
        cell = row[x_index]
        value = str(cell) if cell is not None else ""
        if value == item_name:
            matches.append(row)
    return matches


def build_detail_view(table: Table, spec: ChartSpec, item_name: str) -> DetailView:
    return DetailView(
        item_name=item_name,
        records=details_for(table, spec, item_name),
        headers=list(table.headers),
        dataset_id=table.dataset_id,
    )
