"""
Selenium WebDriver-based BrowserDriver implementation.

Same surface as PlaywrightBrowser; `handle` is the WebDriver itself so element
functions can call find_element() & co. directly.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from selenium import webdriver

from ..core.settings import BrowserOptions

logger = logging.getLogger(__name__)


def _chrome(options: BrowserOptions) -> Any:
    opts = webdriver.ChromeOptions()
    if options.headless:
        opts.add_argument("--headless=new")
    return webdriver.Chrome(options=opts)


def _firefox(options: BrowserOptions) -> Any:
    opts = webdriver.FirefoxOptions()
    if options.headless:
        opts.add_argument("-headless")
    return webdriver.Firefox(options=opts)


def _edge(options: BrowserOptions) -> Any:
    opts = webdriver.EdgeOptions()
    if options.headless:
        opts.add_argument("--headless=new")
    return webdriver.Edge(options=opts)


def _safari(options: BrowserOptions) -> Any:
    # safaridriver has no headless mode
    return webdriver.Safari()


_LAUNCHERS = {
    "chrome": _chrome,
    "chromium": _chrome,
    "firefox": _firefox,
    "edge": _edge,
    "safari": _safari,
}


class SeleniumBrowser:
    """A BrowserDriver over one Selenium WebDriver session."""

    def __init__(self, driver: Any) -> None:
        self._driver = driver
        self._closed = False

    @classmethod
    def launch(
        cls, browser_type: str = "chrome", *, options: Optional[BrowserOptions] = None
    ) -> "SeleniumBrowser":
        try:
            launcher = _LAUNCHERS[browser_type]
        except KeyError as e:
            raise ValueError(
                f"Unsupported Selenium browser type {browser_type!r}; "
                f"expected one of {', '.join(sorted(_LAUNCHERS))}"
            ) from e
        opts = options or BrowserOptions()
        driver = launcher(opts)
        driver.set_page_load_timeout(opts.default_timeout_ms / 1000)
        logger.debug("launched selenium %s (headless=%s)", browser_type, opts.headless)
        return cls(driver)

    # ---------------- lifecycle ----------------

    def is_open(self) -> bool:
        return not self._closed

    def close(self) -> None:
        """End the WebDriver session (all windows)."""
        self._closed = True
        self._driver.quit()

    # ---------------- primitives ----------------

    @property
    def handle(self) -> Any:
        return self._driver

    def current_url(self) -> str:
        return self._driver.current_url

    def navigate(self, url: str) -> None:
        self._driver.get(url)

    def refresh(self) -> None:
        self._driver.refresh()

    def __repr__(self) -> str:
        return f"<SeleniumBrowser {type(self._driver).__name__}>"
