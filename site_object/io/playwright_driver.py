"""
Playwright-based BrowserDriver implementation (sync API).

Conforms to io/driver.py's BrowserDriver Protocol:
- current_url() / navigate(url) / refresh()
- is_open() / close()
- handle -> the Playwright `Page`, given to element functions

A browser started with launch() owns its Playwright instance, browser and
context and tears all of them down on close(). A wrapped, caller-provided Page
only has the page itself closed.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.sync_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    sync_playwright,
)

from ..core.settings import BrowserOptions

logger = logging.getLogger(__name__)

BROWSER_TYPES = ("chromium", "firefox", "webkit")


class PlaywrightBrowser:
    """
    A BrowserDriver over one Playwright `Page`.
    """

    def __init__(
        self,
        page: Page,
        *,
        playwright: Optional[Playwright] = None,
        browser: Optional[Browser] = None,
        context: Optional[BrowserContext] = None,
        default_timeout_ms: int = 30_000,
    ) -> None:
        self._page = page
        self._pw = playwright
        self._browser = browser
        self._context = context
        self.default_timeout_ms = default_timeout_ms

    # ---------------- lifecycle ----------------

    @classmethod
    def launch(
        cls, browser_type: str = "chromium", *, options: Optional[BrowserOptions] = None
    ) -> "PlaywrightBrowser":
        """Start Playwright, launch a browser and open one page in a fresh context."""
        if browser_type not in BROWSER_TYPES:
            raise ValueError(
                f"Unsupported Playwright browser type {browser_type!r}; "
                f"expected one of {', '.join(BROWSER_TYPES)}"
            )
        opts = options or BrowserOptions()
        pw = sync_playwright().start()
        try:
            launcher = getattr(pw, browser_type)
            browser = launcher.launch(headless=opts.headless, slow_mo=opts.slow_mo_ms)
            context = browser.new_context()
            # sensible default operation timeout for the whole context
            context.set_default_timeout(opts.default_timeout_ms)
            page = context.new_page()
        except BaseException:
            pw.stop()
            raise
        logger.debug("launched playwright %s (headless=%s)", browser_type, opts.headless)
        return cls(
            page,
            playwright=pw,
            browser=browser,
            context=context,
            default_timeout_ms=opts.default_timeout_ms,
        )

    def is_open(self) -> bool:
        return not self._page.is_closed()

    def close(self) -> None:
        """Close the page, then whatever launch() started."""
        try:
            if not self._page.is_closed():
                self._page.close()
            if self._context is not None:
                self._context.close()
            if self._browser is not None:
                self._browser.close()
        finally:
            if self._pw is not None:
                self._pw.stop()
            self._pw = None
            self._browser = None
            self._context = None

    # ---------------- primitives ----------------

    @property
    def handle(self) -> Page:
        return self._page

    def current_url(self) -> str:
        return self._page.url

    def navigate(self, url: str) -> None:
        self._page.goto(url, timeout=self.default_timeout_ms, wait_until="load")

    def refresh(self) -> None:
        self._page.reload(timeout=self.default_timeout_ms, wait_until="load")

    def __repr__(self) -> str:
        return f"<PlaywrightBrowser url={self._page.url!r}>"
