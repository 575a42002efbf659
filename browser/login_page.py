"""
LoginPage - authentication flow for the challenge application.

Landing page -> Start -> "Sign up" screen -> OR LOGIN -> "Log in" screen ->
credentials -> Log in. Login is confirmed when the pre-login
"SIGN UP OR LOGIN" button disappears.
"""

import logging
import re
from typing import Optional

from playwright.sync_api import Page

from .config import RunConfig
from .waits import require, wait_until

logger = logging.getLogger(__name__)

START_LABEL = re.compile("start", re.IGNORECASE)
SIGN_UP_HEADING = re.compile("sign up", re.IGNORECASE)
LOG_IN_LABEL = re.compile("log in", re.IGNORECASE)
OR_LOGIN_LABEL = "OR LOGIN"
PRE_LOGIN_LABEL = "SIGN UP OR LOGIN"


class AuthenticationError(Exception):
    """Login was submitted but never confirmed."""


class LoginPage:

    def __init__(self, page: Page, config: Optional[RunConfig] = None):
        self.page = page
        self.config = config or RunConfig()

    def goto(self) -> None:
        logger.info("🌐 Opening: %s", self.config.base_url)
        self.page.goto(self.config.base_url, wait_until="networkidle")

    def click_start(self) -> None:
        """Click the landing page Start button (opens signup, or the challenge once logged in)."""
        self.page.get_by_role("button", name=START_LABEL).click()

    def login(self, email: str, password: str) -> None:
        """
        Run the full login sequence.

        Raises:
            WaitTimeoutError: a login screen never showed up
            AuthenticationError: credentials were submitted but login not confirmed
        """
        timeouts = self.config.timeouts
        poll = timeouts.poll_interval

        self.click_start()
        sign_up = self.page.get_by_role("heading", name=SIGN_UP_HEADING)
        require(lambda: sign_up.first.is_visible(), timeouts.default, "sign up screen", poll)

        self.page.get_by_role("button", name=OR_LOGIN_LABEL, exact=True).click()
        log_in = self.page.get_by_role("heading", name=LOG_IN_LABEL)
        require(lambda: log_in.first.is_visible(), timeouts.default, "log in screen", poll)

        self.page.get_by_placeholder("Email").first.fill(email)
        self.page.get_by_placeholder("Password").first.fill(password)
        self.page.get_by_role("button", name=LOG_IN_LABEL).click()

        pre_login = self.page.get_by_role("button", name=PRE_LOGIN_LABEL)
        result = wait_until(lambda: pre_login.count() == 0 or pre_login.first.is_hidden(), timeouts.login, poll)
        if not result:
            raise AuthenticationError(
                f"Login not confirmed: '{PRE_LOGIN_LABEL}' still visible after {timeouts.login}ms"
            ) from result.last_error

        logger.info("✅ Logged in")
