"""
Project-level exception types.
- SiteObjectError: base class for every error raised by site-object
- PageConfigError: invalid page declaration (attribute, matcher, template)
- PageInitError: page arguments missing or not accepted
- PageNavigationNotAllowedError: navigation on a page declared navigation_disabled
- WrongPageError: the browser is not showing the expected page
- BrowserLibraryNotSupportedError: browser handle of an unknown library
"""
# @file purpose: Define error taxonomy for site-object.

from typing import Any


class SiteObjectError(Exception):
    """Base class for all custom errors in site-object."""


class _ContextError(SiteObjectError):
    """
    Error carrying the page name, the browser URL and extra details.
    __str__ renders them on one line so test failures show what was compared.
    """

    def __init__(
        self,
        message: str,
        *,
        page: str | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.page: str | None = page
        self.url: str | None = url
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.page:
            parts.append(f"page={self.page}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.details:
            kv = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"details={{ {kv} }}")
        return " | ".join(parts)


class SiteInitError(SiteObjectError):
    """Raised when a site is constructed with something other than a mapping."""


class PageConfigError(_ContextError):
    """Raised for an invalid page declaration."""


class TemplateSyntaxError(PageConfigError):
    """Raised when a URL template cannot be parsed."""


class TemplateExpansionError(SiteObjectError):
    """Raised when a URL template is expanded without all placeholder values."""


class PageInitError(_ContextError):
    """Raised when page arguments cannot be resolved or are not accepted."""


class PageNavigationError(_ContextError):
    """Base class for navigation failures."""


class PageNavigationNotAllowedError(PageNavigationError):
    """Raised when navigating to a page declared with navigation_disabled."""


class WrongPageError(_ContextError):
    """Raised when the browser is not displaying the expected page."""


class BrowserLibraryNotSupportedError(SiteObjectError):
    """Raised when the browser handle is not a Playwright or Selenium object."""
