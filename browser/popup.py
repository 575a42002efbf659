"""
Simulated reCAPTCHA popup handling.

Bubble renders several popup elements into the DOM and only ever shows one of
them: the last one in document order. Earlier instances are stale and hidden.
Dismissed popups are hidden, not removed, and a grey overlay may linger for a
moment after the popup closes.

reconcile() is safe to call at any point in the workflow. When no popup is
present or visible it returns immediately without waiting.
"""

import logging
from typing import Optional

from playwright.sync_api import Page

from .config import GREYOUT_SELECTOR, POPUP_CONFIRM_SELECTOR, POPUP_SELECTOR, Timeouts
from .waits import require

logger = logging.getLogger(__name__)


class PopupReconciler:
    """Detects and dismisses the verification popup before it blocks input."""

    def __init__(self, page: Page, timeouts: Optional[Timeouts] = None):
        self.page = page
        self.timeouts = timeouts or Timeouts()

    def reconcile(self) -> bool:
        """
        Dismiss the active popup if one is showing.

        Returns True if a popup was dismissed, False if there was nothing to do.
        Raises WaitTimeoutError if the popup does not resolve in time.
        """
        popups = self.page.locator(POPUP_SELECTOR)
        count = popups.count()
        if count == 0:
            return False

        popup = popups.nth(count - 1)
        if not popup.is_visible():
            return False

        logger.info("🤖 Recaptcha popup detected, resolving")
        timeout = self.timeouts.default
        poll = self.timeouts.poll_interval

        button = popup.locator(POPUP_CONFIRM_SELECTOR)
        require(lambda: button.is_visible(), timeout, "popup confirm button", poll)

        # Bubble's overlay styling intercepts pointer events without force.
        button.click(force=True)

        require(lambda: popup.is_hidden(), timeout, "popup to close", poll)

        greyout = self.page.locator(f"{GREYOUT_SELECTOR}:visible")
        if greyout.count() > 0:
            require(lambda: greyout.count() == 0, timeout, "grey overlay to clear", poll)

        logger.info("✅ Recaptcha popup resolved")
        return True


def handle_recaptcha(page: Page, timeouts: Optional[Timeouts] = None) -> bool:
    """Shortcut for PopupReconciler(page, timeouts).reconcile()."""
    return PopupReconciler(page, timeouts).reconcile()
