"""
Element accessors for pages and page features.

    class SignupPage(MySite.Page):
        first_name = element(lambda b: b.locator("#signup-first-name"))

The function receives the raw browser handle (Playwright Page or Selenium
WebDriver) each time the attribute is read, so element lookups are never cached.
"""
# @file purpose: Declare named element accessors.

from __future__ import annotations

from typing import Any, Callable, Optional

ElementFn = Callable[[Any], Any]


class element:
    """Descriptor calling `fn(owner.browser)` on attribute access."""

    def __init__(self, fn: ElementFn) -> None:
        if not callable(fn):
            raise TypeError(f"element() expects a callable, got {type(fn).__name__}")
        self.fn = fn
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.fn(instance.browser)

    def __repr__(self) -> str:
        return f"<element {self.name}>"


# shorter alias, reads well in long element lists
el = element


def declared_elements(cls: type) -> list[str]:
    """Element names declared on cls and its parents, parents first."""
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            if isinstance(value, element) and attr not in names:
                names.append(attr)
    return names
