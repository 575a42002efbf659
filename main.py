"""
Automation challenge runner.

Logs into the challenge application, then submits every spreadsheet record
into the regenerating Bubble form, one at a time:

    wait for form -> popup check -> fill -> popup check -> submit -> popup check

Any unrecovered error abandons the rest of the batch; the browser is closed
either way.

Usage:
    python main.py
    python main.py --excel data/challenge.xlsx --sheet data --headless
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

from browser.client import BrowserClient
from browser.config import ConfigError, Credentials, RunConfig, load_credentials
from browser.form_page import DynamicFormPage
from browser.login_page import LoginPage
from browser.popup import PopupReconciler
from browser.run_logger import RunLogger
from utils.excel_loader import DataLoadError, Record, load_records

logger = logging.getLogger("challenge")

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_CONFIG = 2

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def process_records(
    records: List[Record],
    form: DynamicFormPage,
    popups: PopupReconciler,
    run_log: RunLogger,
) -> int:
    """
    Submit records one by one. Returns the number submitted.

    Errors propagate; records after the failing one are never attempted.
    """
    submitted = 0
    total = len(records)

    for i, record in enumerate(records, start=1):
        logger.info("Processing row %d of %d", i, total)
        logger.debug("Row data: %s", dict(record))

        form.wait_for_form_ready()
        run_log.log_popup(popups.reconcile())

        result = form.fill_row(record)
        entry = run_log.log_fill(i, result)
        if result.skipped:
            logger.info("Row %d: filled %d fields, skipped %s", i, len(result.filled), result.skipped)

        run_log.log_popup(popups.reconcile())

        form.submit()

        run_log.log_popup(popups.reconcile())

        run_log.log_submitted(entry)
        submitted += 1
        logger.info("✅ Row %d submitted", i)

    return submitted


def run(
    config: RunConfig,
    credentials: Credentials,
    client_factory: Callable[..., BrowserClient] = BrowserClient,
) -> int:
    """Run the whole batch. Returns a process exit code."""
    logger.info("🚀 Starting automation process")

    run_log = RunLogger(config.run_log_dir, enabled=config.write_run_log)
    run_log.start_run(config.excel_path, config.sheet_name)

    try:
        records = load_records(config.excel_path, config.sheet_name, config.max_rows)
    except DataLoadError as e:
        logger.error("❌ Could not load input data: %s", e)
        run_log.log_error(str(e))
        run_log.end_run("aborted")
        return EXIT_ABORTED

    run_log.set_total(len(records))
    logger.info("Total rows to process: %d", len(records))

    status = "aborted"
    submitted = 0
    try:
        with client_factory(headless=config.headless, slow_mo=config.slow_mo) as browser:
            page = browser.page
            login = LoginPage(page, config)
            form = DynamicFormPage(page, config.timeouts, config.id_patterns)
            popups = PopupReconciler(page, config.timeouts)

            login.goto()
            login.login(credentials.email, credentials.password)
            login.click_start()

            submitted = process_records(records, form, popups, run_log)
            status = "completed"
    except Exception as e:
        logger.exception("❌ Unexpected error during execution, abandoning remaining rows")
        run_log.log_error(f"{type(e).__name__}: {e}")

    summary_path = run_log.end_run(status)
    logger.info("Submitted %d of %d rows (%s)", submitted, len(records), status)
    if summary_path:
        logger.info("Run summary: %s", summary_path)

    return EXIT_OK if status == "completed" else EXIT_ABORTED


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Fill the automation challenge form from a spreadsheet")
    ap.add_argument("--excel", dest="excel_path", help="Path to the .xlsx input file")
    ap.add_argument("--sheet", dest="sheet_name", help="Sheet name inside the workbook")
    ap.add_argument("--max-rows", type=int, help="Maximum number of rows to submit")
    ap.add_argument("--base-url", help="Override challenge URL")
    ap.add_argument("--headless", action="store_true", default=None, help="Run without a browser window")
    ap.add_argument("--slow-mo", type=int, help="Delay in ms between browser actions")
    ap.add_argument("--no-run-log", dest="write_run_log", action="store_false", default=None,
                    help="Do not write the JSON run summary")
    ap.add_argument("--log-level", help="Logging level (default: LOG_LEVEL env or INFO)")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = RunConfig.from_env(
            excel_path=args.excel_path,
            sheet_name=args.sheet_name,
            max_rows=args.max_rows,
            base_url=args.base_url,
            headless=args.headless,
            slow_mo=args.slow_mo,
            write_run_log=args.write_run_log,
        )
        credentials = load_credentials()
    except ConfigError as e:
        logger.error("❌ Configuration error: %s", e)
        return EXIT_CONFIG

    return run(config, credentials)


if __name__ == "__main__":
    sys.exit(main())
