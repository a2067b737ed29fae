import logging
from pathlib import Path

import xlrd
from openpyxl import load_workbook

from rent_recon.core.models import RawTable
from rent_recon.core.parser import parse_cells, parse_csv

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = (".csv", ".txt")
WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")
LEGACY_WORKBOOK_EXTENSIONS = (".xls",)
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS + WORKBOOK_EXTENSIONS + LEGACY_WORKBOOK_EXTENSIONS


def read_text(path: Path) -> str:
    raw = path.read_bytes()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Spreadsheet apps commonly save CSV as Latin-1
        return raw.decode("latin-1")


def _is_blank(row) -> bool:
    return all(value is None or (isinstance(value, str) and not value.strip()) for value in row)


def drop_blank_rows(rows, skip_rows: int = 0):
    """Remove spacer rows and formatted-but-empty rows below the skipped preamble."""
    return rows[:skip_rows] + [row for row in rows[skip_rows:] if not _is_blank(row)]


def read_workbook(path: Path, skip_rows: int = 0) -> RawTable:
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.active
        rows = [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    return parse_cells(drop_blank_rows(rows, skip_rows), skip_rows)


def _xls_cell(cell, datemode):
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    return cell.value


def read_legacy_workbook(path: Path, skip_rows: int = 0) -> RawTable:
    """Read the first sheet of an Excel 97-2003 ``.xls`` file."""
    book = xlrd.open_workbook(str(path), on_demand=True)
    try:
        sheet = book.sheet_by_index(0)
        rows = [
            [_xls_cell(cell, book.datemode) for cell in sheet.row(index)]
            for index in range(sheet.nrows)
        ]
    finally:
        book.release_resources()
    return parse_cells(drop_blank_rows(rows, skip_rows), skip_rows)


def load_table(path, skip_rows: int = 0) -> RawTable:
    """Read a statement file into a raw table, choosing the decoder by extension."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file does not exist: {path}")

    suffix = path.suffix.lower()
    if suffix in TEXT_EXTENSIONS:
        table = parse_csv(read_text(path), skip_rows)
    elif suffix in WORKBOOK_EXTENSIONS:
        table = read_workbook(path, skip_rows)
    elif suffix in LEGACY_WORKBOOK_EXTENSIONS:
        table = read_legacy_workbook(path, skip_rows)
    else:
        raise ValueError(
            f"Unsupported file type '{suffix}' for {path.name}; "
            f"expected one of {SUPPORTED_EXTENSIONS}"
        )

    if table:
        logger.info(f"Loaded {len(table)} rows from {path.name}")
    else:
        logger.warning(f"No data rows found in {path.name} (skip_rows={skip_rows})")
    return table


class StatementProcessor:
    def __init__(
        self,
        tenant_path,
        bank_path=None,
        other_path=None,
        bank_skip_rows: int = 0,
    ):
        self.tenant_path = tenant_path
        self.bank_path = bank_path
        self.other_path = other_path
        self.bank_skip_rows = bank_skip_rows

    def read_tenant_rows(self) -> RawTable:
        return load_table(self.tenant_path)

    def read_bank_rows(self) -> RawTable:
        # Bank exports carry preamble lines before the header.
        if not self.bank_path:
            return []
        return load_table(self.bank_path, self.bank_skip_rows)

    def read_other_rows(self) -> RawTable:
        if not self.other_path:
            return []
        return load_table(self.other_path)

    def source_files(self) -> dict:
        paths = {
            "tenants": self.tenant_path,
            "bank": self.bank_path,
            "other": self.other_path,
        }
        return {name: Path(path).name for name, path in paths.items() if path}
