"""
Run Summary Logger

Records one batch run:
- Source spreadsheet and sheet
- Per-record fields filled and skipped
- Errors encountered
- Final status (completed, aborted)

The summary is written as JSON under logs/runs/ when the run ends. Nothing
reads it back; it exists for post-mortem inspection only.
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .form_page import FillResult


@dataclass
class RecordLog:
    """Log entry for a single submitted (or attempted) record."""
    index: int
    filled: List[str]
    skipped: Dict[str, str]
    submitted: bool = False


@dataclass
class RunLog:
    """Complete log for a batch run."""
    timestamp: str
    source: str
    sheet: str
    status: str  # started, completed, aborted

    records_total: int = 0
    records_submitted: int = 0
    popups_dismissed: int = 0

    records: List[RecordLog] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    duration_seconds: float = 0.0


class RunLogger:
    """Collects per-record outcomes and saves the run summary."""

    def __init__(self, log_dir: Path, enabled: bool = True):
        self.log_dir = Path(log_dir)
        self.enabled = enabled
        self.current_log: Optional[RunLog] = None
        self.start_time: Optional[datetime] = None

    def start_run(self, source: str, sheet: str) -> RunLog:
        self.start_time = datetime.now()
        self.current_log = RunLog(
            timestamp=self.start_time.isoformat(),
            source=str(source),
            sheet=sheet,
            status="started",
        )
        return self.current_log

    def set_total(self, total: int):
        if self.current_log:
            self.current_log.records_total = total

    def log_fill(self, index: int, result: FillResult) -> RecordLog:
        entry = RecordLog(index=index, filled=list(result.filled), skipped=dict(result.skipped))
        if self.current_log:
            self.current_log.records.append(entry)
        return entry

    def log_submitted(self, entry: RecordLog):
        entry.submitted = True
        if self.current_log:
            self.current_log.records_submitted += 1

    def log_popup(self, dismissed: bool):
        if dismissed and self.current_log:
            self.current_log.popups_dismissed += 1

    def log_error(self, error: str):
        if self.current_log:
            self.current_log.errors.append(error)

    def end_run(self, status: str = "completed") -> Optional[Path]:
        """
        End the run and save the summary.

        Returns the log file path, or None when disabled or no run was started.
        """
        if self.current_log is None:
            return None

        self.current_log.status = status
        if self.start_time:
            self.current_log.duration_seconds = (datetime.now() - self.start_time).total_seconds()

        filepath = None
        if self.enabled:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            filepath, f = self._create_summary_file(f"{stamp}_{status}")
            with f:
                json.dump(asdict(self.current_log), f, indent=2)

        self.current_log = None
        return filepath

    def _create_summary_file(self, stem: str):
        """Open a new summary file, suffixing _1, _2 ... if the name is taken."""
        suffix = 0
        while True:
            name = f"{stem}.json" if suffix == 0 else f"{stem}_{suffix}.json"
            filepath = self.log_dir / name
            try:
                return filepath, open(filepath, "x", encoding="utf-8")
            except FileExistsError:
                suffix += 1
