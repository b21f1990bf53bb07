from typing import List, Optional, Sequence
import os
import uuid
import logging

from models.common_models import Table, Row
from services.csv_parser_service import decode_text, parse_csv
from services.excel_reader_service import decode_spreadsheet
from services.errors import UnsupportedFileTypeError

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {".csv"}
SPREADSHEET_EXTENSIONS = {".xlsx", ".xls"}


def normalize_rows(rows: Sequence[Sequence[str]], header_count: int) -> List[Row]:
    """Pad short rows with "" and truncate long ones to exactly header_count cells."""
    normalized: List[Row] = []
    for row in rows:
        cells = ["" if cell is None else str(cell) for cell in row[:header_count]]
        if len(cells) < header_count:
            cells.extend([""] * (header_count - len(cells)))
        normalized.append(cells)
    return normalized


def normalize_table(
    raw_rows: Sequence[Sequence[str]], file_name: str, dataset_id: Optional[str] = None
) -> Optional[Table]:
    """
    Build a Table from parsed rows (first row = headers).
    Returns None when there is nothing at all to load.
    """
    if not raw_rows:
        return None

    headers = ["" if h is None else str(h) for h in raw_rows[0]]
    rows = normalize_rows(raw_rows[1:], len(headers))

    return Table(
        dataset_id=dataset_id or uuid.uuid4().hex,
        file_name=file_name,
        headers=headers,
        rows=rows,
    )


def file_extension(file_name: str) -> str:
    return os.path.splitext(file_name)[1].lower()


def read_raw_rows(file_name: str, content: bytes) -> List[List[str]]:
    ext = file_extension(file_name)
    if ext in CSV_EXTENSIONS:
        return parse_csv(decode_text(content))
    if ext in SPREADSHEET_EXTENSIONS:
        return decode_spreadsheet(content)
    raise UnsupportedFileTypeError(
        f"Unsupported file type '{ext or file_name}'. Only .csv, .xlsx and .xls files are supported."
    )


def load_table(file_name: str, content: bytes, dataset_id: Optional[str] = None) -> Optional[Table]:
    """Decode one uploaded file into a normalized Table (None for an empty file)."""
    raw_rows = read_raw_rows(file_name, content)
    table = normalize_table(raw_rows, file_name, dataset_id)
    if table is None:
        logger.info("File '%s' contained no rows; nothing loaded", file_name)
    else:
        logger.info(
            "Loaded '%s' as dataset %s (%d rows, %d cols)",
            file_name, table.dataset_id, len(table.rows), len(table.headers),
        )
    return table
