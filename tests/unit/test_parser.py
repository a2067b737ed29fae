"""Tests for the tabular parser."""
from datetime import datetime

import pytest

from rent_recon.core.parser import cell_to_text, parse_cells, parse_csv, preview


class TestParseCsv:
    """Tests for comma-delimited text parsing."""

    def test_headers_and_values_are_zipped_by_position(self):
        table = parse_csv("Name,Pays as,Apt\nJohn Smith,John Smith,A\nMaria,Maria L,B")

        assert table == [
            {"Name": "John Smith", "Pays as": "John Smith", "Apt": "A"},
            {"Name": "Maria", "Pays as": "Maria L", "Apt": "B"},
        ]

    def test_currency_values_become_floats(self):
        table = parse_csv("Description,Amount,Balance\nRent,$1250.50,1000\nFee,12.,$7")

        assert table[0]["Amount"] == 1250.5
        assert table[0]["Balance"] == 1000.0
        assert table[1]["Amount"] == 12.0
        assert table[1]["Balance"] == 7.0

    def test_quoted_comma_still_splits_the_field(self):
        table = parse_csv('Description,Amount,Balance\nRent,"$1,250.50",1000')

        assert table == [{"Description": "Rent", "Amount": 1.0, "Balance": 250.5}]

    def test_non_numeric_values_stay_text(self):
        table = parse_csv("Date,Amount,Memo\n05/01/2024,-50.00,Apt 4B")

        assert table[0]["Date"] == "05/01/2024"
        assert table[0]["Amount"] == "-50.00"
        assert table[0]["Memo"] == "Apt 4B"

    def test_headers_and_values_are_trimmed_and_unquoted(self):
        table = parse_csv(' "Name" , "Pays as" \r\n "Ann" ,  Ann B \r\n')

        assert table == [{"Name": "Ann", "Pays as": "Ann B"}]

    def test_missing_trailing_fields_default_to_empty(self):
        table = parse_csv("Name,Email,Phone\nAnn")

        assert table == [{"Name": "Ann", "Email": "", "Phone": ""}]

    def test_surplus_fields_are_ignored(self):
        table = parse_csv("Name\nAnn,extra,more")

        assert table == [{"Name": "Ann"}]

    def test_skip_rows_discards_preamble(self):
        content = "Chase Statement\nAccount ending 1234\nDescription,Amount\nZelle payment from Ann,100"

        table = parse_csv(content, skip_rows=2)

        assert table == [{"Description": "Zelle payment from Ann", "Amount": 100.0}]

    def test_header_only_after_skip_yields_empty_table(self):
        assert parse_csv("Preamble\nDescription,Amount", skip_rows=1) == []

    def test_single_line_yields_empty_table(self):
        assert parse_csv("Description,Amount") == []

    def test_empty_content_yields_empty_table(self):
        assert parse_csv("") == []
        assert parse_csv("   \n  ") == []

    def test_negative_skip_rows_is_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            parse_csv("A\n1", skip_rows=-1)

    def test_duplicate_header_last_column_wins(self, caplog):
        table = parse_csv("Amount,Amount\n1,2")

        assert table == [{"Amount": 2.0}]
        assert "Duplicate column headers" in caplog.text


class TestParseCells:
    """Tests for spreadsheet-sourced grids."""

    def test_values_are_kept_as_text(self):
        rows = [
            ("Name", "ExpectedRent", "Apt"),
            ("Ann", 1250, 101.0),
            ("Bob", 999.5, None),
        ]

        table = parse_cells(rows)

        assert table == [
            {"Name": "Ann", "ExpectedRent": "1250", "Apt": "101"},
            {"Name": "Bob", "ExpectedRent": "999.5", "Apt": ""},
        ]

    def test_currency_text_is_not_coerced(self):
        table = parse_cells([["Amount"], ["$1,000.00"]])

        assert table == [{"Amount": "$1,000.00"}]

    def test_skip_rows_and_short_rows(self):
        rows = [["Bank export"], ["Description", "Amount", "Date"], ["Zelle payment from Ann", "100"]]

        table = parse_cells(rows, skip_rows=1)

        assert table == [{"Description": "Zelle payment from Ann", "Amount": "100", "Date": ""}]

    def test_not_enough_rows_yields_empty_table(self):
        assert parse_cells([["Description", "Amount"]]) == []
        assert parse_cells([["x"], ["Description", "Amount"]], skip_rows=1) == []


def test_cell_to_text_renders_dates():
    assert cell_to_text(datetime(2024, 5, 1)) == "2024-05-01"
    assert cell_to_text(datetime(2024, 5, 1, 9, 30)) == "2024-05-01 09:30:00"


def test_preview_limits_rows():
    table = [{"A": str(i), "B": i} for i in range(8)]

    columns, rows = preview(table, max_rows=3)

    assert columns == ["A", "B"]
    assert rows == table[:3]


def test_preview_of_empty_table():
    assert preview([]) == ([], [])
