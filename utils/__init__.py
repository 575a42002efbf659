# utils/__init__.py
from .excel_loader import (
    DataLoadError,
    DataShapeError,
    FileAccessError,
    Record,
    load_records,
)
