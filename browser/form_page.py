"""
DynamicFormPage - fills the regenerating Bubble form.

The form is rebuilt after every submission and each input gets a fresh id
such as `ein_input_field_2`, then `ein_input_field_9`. The prefix is stable,
so fields are located with `[id^="<prefix>"]`. Bubble also keeps hidden
copies of inputs from earlier form generations in the DOM; only visible
matches are ever written to.

Field-level problems (no prefix for a column, field absent from this form
generation, prefix matching a non-input element) are logged and skipped.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from playwright.sync_api import Locator, Page

from .config import ID_PATTERNS, INPUT_TAGS, VISIBLE_INPUT_SELECTOR, Timeouts
from .waits import pause, require

logger = logging.getLogger(__name__)

SUBMIT_LABEL = re.compile("submit", re.IGNORECASE)

# Skip reasons
SKIP_NO_PATTERN = "no_pattern"
SKIP_NOT_PRESENT = "not_present"
SKIP_NOT_INPUT = "not_input"

CLEAR_SELECT_JS = """el => {
    el.selectedIndex = -1;
    el.dispatchEvent(new Event("input", { bubbles: true }));
    el.dispatchEvent(new Event("change", { bubbles: true }));
}"""


@dataclass
class FillResult:
    """Which columns of a record were written and which were skipped."""
    filled: List[str] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)  # column -> reason

    @property
    def complete(self) -> bool:
        return not self.skipped


def to_field_text(value: Any) -> str:
    """
    Coerce a cell value to the text typed into the form.

    None / NaN / empty become "" rather than a "None" or "nan" literal.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class DynamicFormPage:
    """Page object for the challenge form."""

    def __init__(
        self,
        page: Page,
        timeouts: Optional[Timeouts] = None,
        id_patterns: Optional[Mapping[str, str]] = None,
    ):
        self.page = page
        self.timeouts = timeouts or Timeouts()
        self.id_patterns = dict(ID_PATTERNS if id_patterns is None else id_patterns)

    def submit_button(self) -> Locator:
        return self.page.get_by_role("button", name=SUBMIT_LABEL)

    def wait_for_form_ready(self) -> None:
        """
        Block until the regenerated form can be filled.

        Waits for a visible Submit button and at least one visible input, then
        gives Bubble a short settling delay to finish its render animations.
        """
        timeout = self.timeouts.form_ready
        poll = self.timeouts.poll_interval

        submit = self.submit_button()
        require(lambda: submit.first.is_visible(), timeout, "Submit button", poll)

        inputs = self.page.locator(VISIBLE_INPUT_SELECTOR)
        require(lambda: inputs.count() > 0, timeout, "a visible input", poll)

        pause(self.timeouts.settle)

    def find_visible_field(self, prefix: str) -> Optional[Locator]:
        """
        Return a locator for the first visible element whose id starts with prefix.

        The locator keeps the :visible filter, so every later action resolves
        to whichever match is visible at that moment, not to a fixed index.
        """
        visible = self.page.locator(f'[id^="{prefix}"]:visible')
        if visible.count() == 0:
            return None
        return visible.first

    def fill_field(self, column: str, value: Any) -> Tuple[bool, Optional[str]]:
        """
        Fill one logical field.

        Returns (filled, skip_reason).
        """
        prefix = self.id_patterns.get(column)
        if not prefix:
            logger.info("No ID pattern found for column: %s", column)
            return False, SKIP_NO_PATTERN

        element = self.find_visible_field(prefix)
        if element is None:
            logger.info("Field not present in this form: %s", column)
            return False, SKIP_NOT_PRESENT

        tag = element.evaluate("el => el.tagName.toLowerCase()")
        if tag not in INPUT_TAGS:
            logger.warning("Field %s is not a valid input element (found %s). Skipping.", column, tag)
            return False, SKIP_NOT_INPUT

        text = to_field_text(value)
        if tag == "select":
            if text:
                element.select_option(label=text)
            else:
                # No blank option to pick; clear the selection instead.
                element.evaluate(CLEAR_SELECT_JS)
        else:
            element.fill(text)

        logger.debug("  ✏️ %s = %r", column, text)
        return True, None

    def fill_row(self, record: Mapping[str, Any]) -> FillResult:
        """Fill every column of a record into the current form generation."""
        result = FillResult()
        for column, value in record.items():
            filled, reason = self.fill_field(column, value)
            if filled:
                result.filled.append(column)
            else:
                result.skipped[column] = reason
        return result

    def submit(self) -> None:
        self.submit_button().click()
