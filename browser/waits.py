"""
Bounded polling waits.

Every interaction with the rendered page that depends on timing goes through
wait_until(): poll a condition every `poll_ms` until it holds or `timeout_ms`
elapses. The result says which one happened; require() turns a timeout into
WaitTimeoutError for callers that cannot continue without the condition.

Usage:
    result = wait_until(lambda: button.is_visible(), timeout_ms=5000)
    if not result:
        ...

    require(lambda: popup.is_hidden(), 5000, "popup to close")
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError

logger = logging.getLogger(__name__)

DEFAULT_POLL_MS = 50

# Playwright errors meaning the page is gone for good; polling cannot recover.
FATAL_ERROR_MARKERS = (
    "has been closed",
    "Target closed",
    "Browser closed",
)


class WaitTimeoutError(TimeoutError):
    """A bounded wait expired before its condition held."""

    def __init__(self, description: str, timeout_ms: int):
        super().__init__(f"Timed out after {timeout_ms}ms waiting for {description}")
        self.description = description
        self.timeout_ms = timeout_ms


@dataclass
class WaitResult:
    ok: bool
    elapsed_ms: float
    attempts: int
    last_error: Optional[BaseException] = None

    def __bool__(self) -> bool:
        return self.ok


def is_fatal_error(error: BaseException) -> bool:
    """True for Playwright errors raised because the page, context or browser closed."""
    message = str(error)
    return any(marker in message for marker in FATAL_ERROR_MARKERS)


def _check(condition: Callable[[], bool]) -> Tuple[bool, Optional[PlaywrightError]]:
    try:
        return bool(condition()), None
    except PlaywrightError as e:
        if is_fatal_error(e):
            raise
        # Elements detach while Bubble re-renders; treat as "not yet".
        logger.debug("Wait condition raised %s: %s", type(e).__name__, e)
        return False, e


def wait_until(
    condition: Callable[[], bool],
    timeout_ms: int,
    poll_ms: int = DEFAULT_POLL_MS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitResult:
    """
    Poll `condition` until it returns truthy or the deadline passes.

    The condition is always evaluated at least once, and once more at the
    deadline, so a zero timeout is a single check.

    Playwright errors from a closed page/browser are re-raised at once;
    other Playwright errors count as "not yet" and the last one is kept on
    the result.
    """
    start = clock()
    deadline = start + timeout_ms / 1000.0
    attempts = 0
    last_error = None

    while True:
        attempts += 1
        ok, error = _check(condition)
        if ok:
            return WaitResult(True, (clock() - start) * 1000.0, attempts)
        if error is not None:
            last_error = error

        remaining = deadline - clock()
        if remaining <= 0:
            return WaitResult(False, (clock() - start) * 1000.0, attempts, last_error)

        sleep(min(poll_ms / 1000.0, remaining))


def require(
    condition: Callable[[], bool],
    timeout_ms: int,
    description: str,
    poll_ms: int = DEFAULT_POLL_MS,
) -> WaitResult:
    """
    Like wait_until() but raises WaitTimeoutError on timeout, chained to the
    last Playwright error seen while polling (if any).
    """
    result = wait_until(condition, timeout_ms, poll_ms)
    if not result:
        raise WaitTimeoutError(description, timeout_ms) from result.last_error
    return result


def pause(ms: int, sleep: Callable[[float], None] = time.sleep) -> None:
    """Fixed settling delay."""
    if ms > 0:
        sleep(ms / 1000.0)
