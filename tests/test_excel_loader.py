"""
Tests for utils/excel_loader.py

Workbooks are written to tmp_path with pandas/openpyxl.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd

from utils.excel_loader import (
    DataLoadError,
    DataShapeError,
    FileAccessError,
    load_records,
)

COLUMNS = [
    "employer_identification_number",
    "company_name",
    "sector",
    "company_address",
    "automation_tool",
    "annual_automation_saving",
    "date_of_first_project",
]


def _row(i):
    return {
        "employer_identification_number": f"10-{i:07d}",
        "company_name": f"Company {i}",
        "sector": "Retail" if i % 2 else "Energy",
        "company_address": f"{i} Main St",
        "automation_tool": "UiPath",
        "annual_automation_saving": 1000 * i,
        "date_of_first_project": "2020-01-15",
    }


# ============ Fixtures ============

@pytest.fixture
def workbook_51(tmp_path):
    """A 51-row sheet named 'data' plus an unrelated sheet."""
    path = tmp_path / "challenge.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame([_row(i) for i in range(1, 52)], columns=COLUMNS).to_excel(
            writer, sheet_name="data", index=False
        )
        pd.DataFrame({"note": ["ignore me"]}).to_excel(writer, sheet_name="notes", index=False)
    return path


@pytest.fixture
def workbook_with_gaps(tmp_path):
    path = tmp_path / "gaps.xlsx"
    rows = [_row(1), _row(2)]
    rows[0]["sector"] = None
    rows[1]["annual_automation_saving"] = None
    pd.DataFrame(rows, columns=COLUMNS).to_excel(path, sheet_name="data", index=False)
    return path


# ============ Loading ============

class TestLoadRecords:

    def test_caps_at_max_rows_in_file_order(self, workbook_51):
        """51 data rows in, 50 records out, first 50 in order."""
        records = load_records(workbook_51, "data", 50)

        assert len(records) == 50
        assert [r["company_name"] for r in records] == [f"Company {i}" for i in range(1, 51)]
        assert all(len(r) == 7 for r in records)
        assert list(records[0].keys()) == COLUMNS

    def test_fewer_rows_than_cap(self, workbook_with_gaps):
        records = load_records(workbook_with_gaps, "data", 50)

        assert len(records) == 2

    def test_values_keep_types(self, workbook_51):
        record = load_records(workbook_51, "data", 1)[0]

        assert record["employer_identification_number"] == "10-0000001"
        assert record["annual_automation_saving"] == 1000

    def test_empty_cells_become_empty_string(self, workbook_with_gaps):
        records = load_records(workbook_with_gaps, "data", 50)

        assert records[0]["sector"] == ""
        assert records[1]["annual_automation_saving"] == ""
        assert records[1]["sector"] == "Energy"

    def test_records_are_read_only(self, workbook_51):
        record = load_records(workbook_51, "data", 1)[0]

        with pytest.raises(TypeError):
            record["company_name"] = "changed"

    def test_accepts_str_path(self, workbook_51):
        assert len(load_records(str(workbook_51), "data", 3)) == 3


# ============ Errors ============

class TestLoadErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileAccessError):
            load_records(tmp_path / "nope.xlsx", "data", 50)

    def test_not_a_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_text("this is not a zip file")

        with pytest.raises(FileAccessError):
            load_records(path, "data", 50)

    def test_missing_sheet(self, workbook_51):
        with pytest.raises(DataShapeError) as exc_info:
            load_records(workbook_51, "Sheet1", 50)

        assert "Sheet1" in str(exc_info.value)
        assert "notes" in str(exc_info.value)

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(DataLoadError):
            load_records(tmp_path / "nope.xlsx", "data", 50)
