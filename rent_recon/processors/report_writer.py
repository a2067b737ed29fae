import csv
import logging
from pathlib import Path

from openpyxl import Workbook

from rent_recon.core.models import ReconciliationReport
from rent_recon.core.report import GROUP_FIRST_SEEN, build_export_rows, export_table, summary_table

logger = logging.getLogger(__name__)


def _write_workbook(path: Path, rows, summary_rows) -> None:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Reconciliation"
    for row in rows:
        sheet.append(row)

    summary_sheet = workbook.create_sheet("Summary")
    for row in summary_rows:
        summary_sheet.append(row)

    workbook.save(path)


def _write_csv(path: Path, rows) -> None:
    with open(path, "w", newline="", encoding="utf-8") as handle:
        csv.writer(handle).writerows(rows)


def write_report(report: ReconciliationReport, output_path, group_order: str = GROUP_FIRST_SEEN) -> Path:
    """
        Write the apartment-grouped report to ``output_path``.

        ``.xlsx`` files get a Reconciliation sheet and a Summary sheet; ``.csv`` files
        hold the grouped rows only.
    """
    path = Path(output_path)
    rows = export_table(build_export_rows(report.matches, group_order))

    suffix = path.suffix.lower()
    if suffix not in (".xlsx", ".csv"):
        raise ValueError(f"Unsupported report type '{suffix}', expected .xlsx or .csv")

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".xlsx":
        _write_workbook(path, rows, summary_table(report.summary))
    else:
        _write_csv(path, rows)

    logger.info(f"Wrote {len(rows) - 1} report rows to {path}")
    return path
