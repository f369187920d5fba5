"""
Page and page-feature registries:
- each Site subclass owns a PageRegistry keyed by page accessor name
- page features register globally under their accessor name
- unique_methods() feeds the site's delegation fast path
"""
# @file purpose: Provide page registry, feature registry and method uniqueness.

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Dict, Iterator, List, Type

if TYPE_CHECKING:
    from .feature import PageFeature
    from .page import PageDescriptor


class PageRegistry:
    """Insertion-ordered accessor name -> PageDescriptor mapping for one site type."""

    def __init__(self, site_name: str = "") -> None:
        self.site_name = site_name
        self._pages: Dict[str, "PageDescriptor"] = {}

    def register(self, descriptor: "PageDescriptor") -> None:
        # re-registering (set_url & co. after class creation) keeps the original position
        self._pages[descriptor.name] = descriptor

    def get(self, name: str) -> "PageDescriptor":
        try:
            return self._pages[name]
        except KeyError as e:
            raise KeyError(f"Page not registered for {self.site_name or 'site'}: {name}") from e

    def __contains__(self, name: object) -> bool:
        return name in self._pages

    def __iter__(self) -> Iterator["PageDescriptor"]:
        return iter(list(self._pages.values()))

    def __len__(self) -> int:
        return len(self._pages)

    def all(self) -> List["PageDescriptor"]:
        return list(self._pages.values())

    def navigable(self) -> List["PageDescriptor"]:
        """Pages that get site accessors; page templates are left out."""
        return [d for d in self._pages.values() if not d.is_page_template]

    def unique_methods(self) -> frozenset[str]:
        """
        Names declared by exactly one navigable page: its own methods, its
        elements and its feature accessors. Library methods shared by every
        page never count.
        """
        counts: Counter[str] = Counter()
        for d in self.navigable():
            counts.update(d.public_names())
        return frozenset(name for name, n in counts.items() if n == 1)


# Global feature registry: accessor name -> PageFeature subclass
_FEATURES: Dict[str, Type["PageFeature"]] = {}


def register_feature(name: str, cls: Type["PageFeature"]) -> None:
    _FEATURES[name] = cls


def unregister_feature(name: str) -> None:
    _FEATURES.pop(name, None)


def get_feature(name: str) -> Type["PageFeature"]:
    try:
        return _FEATURES[name]
    except KeyError as e:
        raise KeyError(f"Page feature not registered: {name}") from e


def list_features() -> Dict[str, Type["PageFeature"]]:
    """Return a shallow copy, for debugging/display."""
    return dict(_FEATURES)


# For tests only: reset the feature registry
def _reset_features_for_tests() -> None:
    _FEATURES.clear()
