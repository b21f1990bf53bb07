from typing import List

from config import CSV_ENCODING
from models.common_models import ErrorCode
from services.errors import DecodeError


def decode_text(content: bytes, encoding: str = CSV_ENCODING) -> str:
    try:
        return content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise DecodeError(f"Could not decode CSV text as {encoding}: {e}", code=ErrorCode.E_DECODE_TEXT) from e


def _clean_field(field: str) -> str:
    field = field.strip()
    if field.startswith('"'):
        field = field[1:]
    if field.endswith('"'):
        field = field[:-1]
    return field


def parse_line(line: str) -> List[str]:
    """
    Split one CSV line into fields.
    A quote toggles the in-quotes state, so a doubled quote ("") is an empty
    quoted span rather than an escaped quote character.
    """
    fields: List[str] = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append(_clean_field("".join(current)))
            current = []
        else:
            current.append(char)

    fields.append(_clean_field("".join(current)))
    return fields


def parse_csv(text: str) -> List[List[str]]:
    """
    Turn raw CSV text into rows of string fields.
    Blank lines are dropped; empty fields inside a line are kept.
    """
    rows: List[List[str]] = []
    for line in text.split("\n"):
        if not line.strip():
            continue
        rows.append(parse_line(line.rstrip("\r")))
    return rows
