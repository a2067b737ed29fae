import csv

import pytest
from openpyxl import load_workbook

from rent_recon.core.reconciliation import run_reconciliation
from rent_recon.processors.report_writer import write_report


@pytest.fixture
def report(tenant_rows, bank_rows, other_rows):
    return run_reconciliation(tenant_rows, bank_rows, other_rows)


def test_xlsx_has_report_and_summary_sheets(report, tmp_path):
    path = write_report(report, tmp_path / "out" / "recon.xlsx")

    workbook = load_workbook(path)
    assert workbook.sheetnames == ["Reconciliation", "Summary"]

    rows = list(workbook["Reconciliation"].iter_rows(values_only=True))
    assert rows[0][:3] == ("Apt", "Tenant Name", "Pays As")
    # Apt A: John Smith, Ken Ito, subtotal; Apt B: Maria Lopez, subtotal
    assert [row[1] for row in rows[1:]] == ["John Smith", "Ken Ito", "Subtotal A", "Maria Lopez", "Subtotal B"]
    assert rows[3][7] == 1900.0

    summary = {label: value for label, value in workbook["Summary"].iter_rows(values_only=True)}
    assert summary["Matched"] == 2
    assert summary["Not Matched"] == 1


def test_alphabetical_group_order(report, tmp_path):
    path = write_report(report, tmp_path / "recon.csv", group_order="alphabetical")

    with open(path, newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))

    assert [row[0] for row in rows[1:]] == ["A", "A", "A", "B", "B"]


def test_csv_holds_rows_only(report, tmp_path):
    path = write_report(report, tmp_path / "recon.csv")

    with open(path, newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))

    assert rows[0][-1] == "Status"
    assert len(rows) == 6
    assert rows[1][-1] == "match"


def test_unsupported_report_type(report, tmp_path):
    with pytest.raises(ValueError, match="Unsupported report type"):
        write_report(report, tmp_path / "recon.json")

    assert not (tmp_path / "recon.json").exists()
