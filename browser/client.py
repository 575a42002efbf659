"""
Browser client for the challenge run.

Usage:
    from browser import BrowserClient

    with BrowserClient(headless=False) as browser:
        browser.page.goto("https://...")
"""

import logging
from typing import Optional

from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext, Playwright

from .config import VIEWPORT

logger = logging.getLogger(__name__)


class BrowserClient:
    """Owns one Chromium browser, context and page."""

    def __init__(self, headless: bool = False, slow_mo: int = 0):
        """
        Args:
            headless: Run without a visible window
            slow_mo: Delay in ms between Playwright actions
        """
        self.headless = headless
        self.slow_mo = slow_mo
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def start(self) -> Page:
        """Start browser instance."""
        self.playwright = sync_playwright().start()
        try:
            self.browser = self.playwright.chromium.launch(
                headless=self.headless,
                slow_mo=self.slow_mo,
            )
            self.context = self.browser.new_context(viewport=VIEWPORT)
            self.page = self.context.new_page()
        except Exception:
            self.close()
            raise

        logger.info("✅ Browser started")
        return self.page

    def close(self):
        """
        Close browser and cleanup. Safe to call more than once.

        The Playwright driver is stopped even if closing the browser fails;
        that failure is re-raised afterwards.
        """
        browser, playwright = self.browser, self.playwright
        self.browser = None
        self.context = None
        self.page = None
        self.playwright = None

        try:
            if browser:
                browser.close()
                logger.info("✅ Browser closed")
        finally:
            if playwright:
                playwright.stop()
