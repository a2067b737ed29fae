"""Tabular parsing of statement text and spreadsheet cells into raw row tables."""

import logging
import re
from datetime import date, datetime, time
from typing import Any, Iterable, List, Sequence, Tuple

from .models import Cell, RawRow, RawTable

logger = logging.getLogger(__name__)

# "$1,250.00", "1250", "1,250." -- no sign, at least one leading digit.
NUMERIC_LITERAL = re.compile(r"^\$?\d[\d,]*\.?\d*$")


def _split_line(line: str) -> List[str]:
    return [value.strip().replace('"', "") for value in line.split(",")]


def _infer_cell(value: str) -> Cell:
    if NUMERIC_LITERAL.match(value):
        return float(value.replace("$", "").replace(",", ""))
    return value


def _warn_duplicate_headers(headers: Sequence[str]) -> None:
    seen, duplicates = set(), []
    for header in headers:
        if header in seen and header not in duplicates:
            duplicates.append(header)
        seen.add(header)
    if duplicates:
        logger.warning(f"Duplicate column headers {duplicates}: the last column wins on lookup")


def _zip_rows(headers: Sequence[str], rows: Iterable[Sequence[Cell]]) -> RawTable:
    table = []
    for values in rows:
        record: RawRow = {}
        for index, header in enumerate(headers):
            record[header] = values[index] if index < len(values) else ""
        table.append(record)
    return table


def parse_csv(content: str, skip_rows: int = 0) -> RawTable:
    """
        Parse comma-delimited text into a list of rows keyed by header.

        The first ``skip_rows`` lines (bank preamble, disclaimers) are dropped and
        the next line supplies the headers. Currency-looking values become floats.
        Returns an empty table when no data line remains after the header.
    """
    if skip_rows < 0:
        raise ValueError(f"skip_rows must be non-negative, got {skip_rows}")

    lines = content.strip().split("\n")
    if len(lines) < skip_rows + 2:
        return []

    lines = lines[skip_rows:]
    headers = _split_line(lines[0])
    _warn_duplicate_headers(headers)

    rows = ([_infer_cell(value) for value in _split_line(line)] for line in lines[1:])
    return _zip_rows(headers, rows)


def cell_to_text(value: Any) -> str:
    """Render a decoded spreadsheet cell as raw text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_cells(rows: Sequence[Sequence[Any]], skip_rows: int = 0) -> RawTable:
    """
        Build a raw table from an already-decoded grid of cells (e.g. a worksheet).

        Skip and header rules match ``parse_csv``, but every value is kept as text;
        numeric coercion is left to the normalizers.
    """
    if skip_rows < 0:
        raise ValueError(f"skip_rows must be non-negative, got {skip_rows}")

    if len(rows) < skip_rows + 2:
        return []

    rows = rows[skip_rows:]
    headers = [cell_to_text(value).replace('"', "") for value in rows[0]]
    _warn_duplicate_headers(headers)

    body = ([cell_to_text(value) for value in row] for row in rows[1:])
    return _zip_rows(headers, body)


def preview(table: RawTable, max_rows: int = 5) -> Tuple[List[str], RawTable]:
    """Column names of the first row and the leading ``max_rows`` rows."""
    if not table:
        return [], []
    return list(table[0].keys()), table[:max_rows]
