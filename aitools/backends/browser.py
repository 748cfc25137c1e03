from __future__ import annotations

import logging

from playwright.sync_api import sync_playwright


class ScreenshotBrowser:
    """Headless Chromium that loads one page and returns a PNG screenshot."""

    def __init__(self, *, logger: logging.Logger | None = None):
        self.logger = logger

    def capture(
        self,
        url: str,
        *,
        width: int,
        height: int,
        full_page: bool = True,
        wait_ms: int = 0,
    ) -> bytes:
        with sync_playwright() as p:
            browser = p.chromium.launch()
            try:
                page = browser.new_page(viewport={"width": width, "height": height})
                if self.logger:
                    self.logger.debug("Navigating to %s (viewport=%dx%d)", url, width, height)
                page.goto(url, wait_until="networkidle")
                if wait_ms > 0:
                    page.wait_for_timeout(wait_ms)
                return page.screenshot(full_page=full_page, type="png")
            finally:
                browser.close()
