from typing import Any, List
import io
import datetime
import logging

import pandas as pd

from models.common_models import ErrorCode
from services.errors import DecodeError

logger = logging.getLogger(__name__)


def _cell_to_text(value: Any) -> str:
    """
    Render one decoded cell the way it reads in the sheet:
    - blanks become ""
    - whole floats lose their ".0"
    - midnight datetimes become plain dates
    """
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (pd.Timestamp, datetime.datetime)):
        if value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0:
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def decode_spreadsheet(content: bytes) -> List[List[str]]:
    """
    Decode .xlsx / .xls bytes into rows of text cells.
    Only the first sheet is read; the first row is not treated specially here.
    """
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=object)
    except Exception as e:
        raise DecodeError(f"Could not read spreadsheet: {e}", code=ErrorCode.E_DECODE_SPREADSHEET) from e

    rows = [[_cell_to_text(v) for v in record] for record in df.itertuples(index=False, name=None)]
    logger.debug("Decoded spreadsheet: %d rows x %d cols", df.shape[0], df.shape[1])
    return rows
