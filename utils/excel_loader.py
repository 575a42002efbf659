# utils/excel_loader.py
"""
Spreadsheet loading for the challenge data.

Reads the first N data rows of a sheet into read-only records
(column header -> cell value). Empty cells come back as "" so downstream
code never sees NaN or None.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Union

import pandas as pd

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


class DataLoadError(Exception):
    """Base class for input loading failures."""


class FileAccessError(DataLoadError):
    """Spreadsheet missing, unreadable or not a workbook."""


class DataShapeError(DataLoadError):
    """Spreadsheet opened but does not contain the expected sheet."""


def _open_workbook(path: Path) -> pd.ExcelFile:
    try:
        return pd.ExcelFile(path, engine="openpyxl")
    except Exception as e:
        # OSError, or zipfile.BadZipFile / InvalidFileException for non-workbooks
        raise FileAccessError(f"Cannot open spreadsheet {path}: {e}") from e


def load_records(path: Union[str, Path], sheet_name: str, max_rows: int) -> List[Record]:
    """
    Load up to max_rows records from a sheet, in file order.

    Raises:
        FileAccessError: the file cannot be opened
        DataShapeError: the sheet does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileAccessError(f"Spreadsheet not found: {path}")

    with _open_workbook(path) as workbook:
        if sheet_name not in workbook.sheet_names:
            raise DataShapeError(
                f"Sheet '{sheet_name}' not found in {path.name} (available: {', '.join(workbook.sheet_names)})"
            )
        df = workbook.parse(sheet_name=sheet_name, nrows=max_rows, dtype=object)

    df = df.astype(object).where(pd.notna(df), "")
    records = [MappingProxyType(row) for row in df.to_dict(orient="records")]

    logger.info("📄 Loaded %d records from %s [%s]", len(records), path.name, sheet_name)
    return records
