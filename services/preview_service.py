from typing import Dict, Any
from models.common_models import Table


def preview_rows(table: Table, n_rows: int = 20) -> Dict[str, Any]:
    return {
        "columns": list(table.headers),
        "rows": [list(row) for row in table.rows[:n_rows]],
    }
