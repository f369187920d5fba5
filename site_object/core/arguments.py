"""
Argument sources for templated page URLs.

A page whose URL has placeholders looks each value up in, in order:
1) the mapping or object given at the call site
2) the site's own initialization arguments / attributes

Every source implements get(name) -> value | None, so the page never has to
ask whether something "responds to" a name.
"""
# @file purpose: ArgumentSource protocol and its adapters.

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol

if TYPE_CHECKING:
    from .site import Site


class ArgumentSource(Protocol):
    def get(self, name: str) -> Any | None: ...


def _takes_no_arguments(fn: Any) -> bool:
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    return all(
        p.default is not p.empty or p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD) for p in params
    )


class MappingSource:
    """Keyed lookup by placeholder name."""

    def __init__(self, mapping: Mapping[Any, Any]) -> None:
        self.mapping = mapping

    def get(self, name: str) -> Any | None:
        return self.mapping.get(name)

    def __repr__(self) -> str:
        return f"MappingSource({dict(self.mapping)!r})"


class ObjectSource:
    """
    Attribute lookup on an arbitrary object (e.g. a domain model with a
    `language` field). A method that takes no arguments is called and its
    result used; other callables count as missing.
    """

    def __init__(self, obj: Any) -> None:
        self.obj = obj

    def get(self, name: str) -> Any | None:
        value = getattr(self.obj, name, None)
        if inspect.ismethod(value) and _takes_no_arguments(value):
            return value()
        return None if callable(value) else value

    def __repr__(self) -> str:
        return f"ObjectSource({type(self.obj).__name__})"


class SiteSource:
    """
    Fallback lookup on the site: first its stored init arguments, then plain
    attributes set on the site instance or class. Never triggers page delegation
    and never calls site methods (page accessors would navigate).
    """

    def __init__(self, site: "Site") -> None:
        self.site = site

    def get(self, name: str) -> Any | None:
        value = self.site.arguments.get(name)
        if value is not None:
            return value
        try:
            # object.__getattribute__ bypasses Site.__getattr__ (page delegation)
            value = object.__getattribute__(self.site, name)
        except AttributeError:
            return None
        return None if callable(value) else value


def as_argument_source(args: Any) -> Optional[ArgumentSource]:
    """Wrap whatever was passed to a page accessor; None stays None."""
    if args is None:
        return None
    if isinstance(args, (MappingSource, ObjectSource, SiteSource)):
        return args
    if isinstance(args, Mapping):
        return MappingSource(args)
    return ObjectSource(args)
