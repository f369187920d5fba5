"""
Browser driver protocol (abstraction).

The page/site core only needs four things from a browser: read the current
URL, navigate, reload and close. This Protocol is that surface; the
Playwright and Selenium adapters implement it over their native objects.

Notes:
- Site objects accept either an adapter or a raw library object
  (`playwright.sync_api.Page`, Selenium `WebDriver`); wrap_browser() turns the
  latter into the former.
- `handle` is the raw library object. Element functions receive it so page
  authors keep writing native Playwright/Selenium lookups.
- Every call blocks until the underlying driver returns.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol, runtime_checkable

from playwright.sync_api import Page as PlaywrightPage
from selenium.webdriver.remote.webdriver import WebDriver

from ..core.errors import BrowserLibraryNotSupportedError
from ..core.settings import BrowserOptions, settings
from .playwright_driver import PlaywrightBrowser
from .selenium_driver import SeleniumBrowser

Platform = Literal["playwright", "selenium"]
PLATFORMS: tuple[str, ...] = ("playwright", "selenium")


@runtime_checkable
class BrowserDriver(Protocol):
    @property
    def handle(self) -> Any: ...

    # -------- navigation --------
    def current_url(self) -> str: ...
    def navigate(self, url: str) -> None: ...
    def refresh(self) -> None: ...

    # -------- lifecycle --------
    def is_open(self) -> bool: ...
    def close(self) -> None: ...


def wrap_browser(browser: Any) -> BrowserDriver:
    """Adapter for a raw browser object, or BrowserLibraryNotSupportedError."""
    if isinstance(browser, (PlaywrightBrowser, SeleniumBrowser)):
        return browser
    if isinstance(browser, PlaywrightPage):
        return PlaywrightBrowser(browser)
    if isinstance(browser, WebDriver):
        return SeleniumBrowser(browser)
    raise BrowserLibraryNotSupportedError(
        "Only Playwright (sync API) and Selenium WebDriver are supported. "
        f"Class of browser object: {type(browser).__name__}"
    )


def unwrap_browser(browser: Any) -> Any:
    """Raw library object behind an adapter; raw objects pass through."""
    if isinstance(browser, (PlaywrightBrowser, SeleniumBrowser)):
        return browser.handle
    return browser


def open_browser(
    platform: str | None = None, browser_type: str | None = None, **options: Any
) -> BrowserDriver:
    """
    Start a new browser.
    - platform: "playwright" or "selenium" (anything else is a ValueError),
      settings.platform when omitted
    - browser_type: "chromium"/"firefox"/"webkit" for Playwright,
      "chrome"/"firefox"/"edge"/"safari" for Selenium; settings.browser_type
      when omitted
    - options: see BrowserOptions (headless, slow_mo_ms, default_timeout_ms)
    """
    platform = platform or settings.platform
    browser_type = browser_type or settings.browser_type
    if platform not in PLATFORMS:
        raise ValueError(
            f"Platform argument must be either 'playwright' or 'selenium', got {platform!r}"
        )
    opts = BrowserOptions(**options)
    if platform == "playwright":
        return PlaywrightBrowser.launch(browser_type, options=opts)
    return SeleniumBrowser.launch(browser_type, options=opts)
