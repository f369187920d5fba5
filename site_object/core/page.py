"""
Page objects.

A page is declared as a subclass of a site's Page base and bound to a URL:

    class AccountEditPage(MySite.Page):
        URL = "/accounts/{account_code}/edit"

        first_name = element(lambda b: b.find_element(By.ID, "fname"))
        save = element(lambda b: b.find_element(By.ID, "save"))

        def update(self, fname):
            self.first_name.send_keys(fname)
            self.save.click()

    site.account_edit_page({"account_code": 12345})

Declarations (URL, URL_MATCHER, ATTRIBUTES, FEATURES, elements) are folded into
an immutable PageDescriptor when the class is created. URL, matcher and
attributes belong to the class that declares them; features and elements
accumulate from parent pages, so a page marked "page_template" can carry
shared features without becoming navigable itself.

Constructing a page (normally through a site accessor) resolves its URL
arguments, records it as the site's most recent page and navigates to it
unless it is already displayed.
"""
# @file purpose: PageDescriptor declarations and the page instance lifecycle.

from __future__ import annotations

import inspect
import logging
import re
import warnings
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, Optional, Type, Union

from . import registry
from .arguments import SiteSource, as_argument_source
from .element import declared_elements, element
from .errors import (
    BrowserLibraryNotSupportedError,
    PageConfigError,
    PageInitError,
    PageNavigationNotAllowedError,
    WrongPageError,
)
from .feature import PageFeature
from .naming import underscore
from .template import URLTemplate
from ..io.driver import BrowserDriver, unwrap_browser

if TYPE_CHECKING:
    from .site import Site

__all__ = ["Page", "PageDescriptor", "element", "NAVIGATION_DISABLED", "PAGE_TEMPLATE"]

logger = logging.getLogger(__name__)

NAVIGATION_DISABLED = "navigation_disabled"
PAGE_TEMPLATE = "page_template"
PAGE_ATTRIBUTES = frozenset({NAVIGATION_DISABLED, PAGE_TEMPLATE})

FeatureRef = Union[str, Type[PageFeature]]


def _feature_name(ref: FeatureRef) -> str:
    return ref if isinstance(ref, str) else ref.accessor_name()


@dataclass(frozen=True)
class PageDescriptor:
    """Static definition of one page class; shared by every site instance."""

    name: str
    page_class: type
    url: Optional[str] = None
    url_matcher: Optional[re.Pattern[str]] = None
    attributes: tuple[str, ...] = ()
    features: tuple[FeatureRef, ...] = ()
    elements: tuple[str, ...] = ()
    methods: tuple[str, ...] = ()

    @property
    def navigation_disabled(self) -> bool:
        return NAVIGATION_DISABLED in self.attributes

    @property
    def is_page_template(self) -> bool:
        return PAGE_TEMPLATE in self.attributes

    @property
    def required_arguments(self) -> tuple[str, ...]:
        """Placeholders of the page's own URL (the site base URL may add more)."""
        return URLTemplate(self.url or "").placeholders

    def compile(self, base_url: Optional[str]) -> URLTemplate:
        return URLTemplate.compile(self.url, base_url)

    def feature_names(self) -> list[str]:
        return [_feature_name(f) for f in self.features]

    def public_names(self) -> set[str]:
        """Everything a page author declared that the site may delegate to."""
        return set(self.methods) | set(self.elements) | set(self.feature_names())


def validate_url_matcher(page: str, matcher: Any) -> Optional[re.Pattern[str]]:
    if matcher is None or isinstance(matcher, re.Pattern):
        return matcher
    raise PageConfigError(
        "url matcher must be a compiled regular expression",
        page=page,
        details={"provided": type(matcher).__name__},
    )


def validate_attributes(page: str, names: Iterable[Any]) -> tuple[str, ...]:
    names = tuple(names)
    for name in names:
        if name not in PAGE_ATTRIBUTES:
            raise PageConfigError(
                f"Unsupported page attribute argument: {name!r}. "
                f"Attributes must be one or more of: {', '.join(sorted(PAGE_ATTRIBUTES))}",
                page=page,
                details={"argument_class": type(name).__name__},
            )
    return names


def _authored_methods(cls: type) -> tuple[str, ...]:
    """Public callables/properties defined between the site's Page base and cls."""
    names: list[str] = []
    for klass in cls.__mro__:
        if klass.__dict__.get("_abstract"):
            break
        for attr, value in vars(klass).items():
            if attr.startswith("_") or attr.isupper() or attr in names:
                continue
            if isinstance(value, element):
                continue
            if inspect.isfunction(value) or isinstance(value, (property, staticmethod, classmethod)):
                names.append(attr)
    return tuple(names)


class Page:
    """
    Base page object. Each Site subclass creates its own `Site.Page` base;
    page classes derive from that one so they register with the right site.
    """

    _abstract: ClassVar[bool] = True

    URL: ClassVar[Optional[str]] = None
    URL_MATCHER: ClassVar[Optional[re.Pattern[str]]] = None
    ATTRIBUTES: ClassVar[tuple[str, ...]] = ()
    FEATURES: ClassVar[tuple[FeatureRef, ...]] = ()

    site_class: ClassVar[Optional[type]] = None
    descriptor: ClassVar[PageDescriptor]
    _own_features: ClassVar[tuple[FeatureRef, ...]] = ()

    # ---------------- class-level declarations ----------------

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("_abstract"):
            return
        cls._fold_descriptor()

    @classmethod
    def _fold_descriptor(cls) -> None:
        cls._own_features = tuple(cls.__dict__.get("FEATURES", ()))
        cls.descriptor = PageDescriptor(
            name=underscore(cls.__name__),
            page_class=cls,
            url=cls.__dict__.get("URL") or None,
            url_matcher=validate_url_matcher(cls.__name__, cls.__dict__.get("URL_MATCHER")),
            attributes=validate_attributes(cls.__name__, cls.__dict__.get("ATTRIBUTES", ())),
            features=cls._merged_features(),
            elements=tuple(declared_elements(cls)),
            methods=_authored_methods(cls),
        )
        site_cls = cls.site_class
        if site_cls is not None:
            site_cls.registry.register(cls.descriptor)

    @classmethod
    def _merged_features(cls) -> tuple[FeatureRef, ...]:
        """Nearest parent descriptor's features, then the ones cls added itself."""
        merged: list[FeatureRef] = []
        for base in cls.__mro__[1:]:
            parent = base.__dict__.get("descriptor")
            if isinstance(parent, PageDescriptor):
                merged.extend(f for f in parent.features if f not in merged)
                break
        merged.extend(f for f in cls.__dict__.get("_own_features", ()) if f not in merged)
        return tuple(merged)

    @classmethod
    def _refold_inherited(cls) -> None:
        # children folded their features and elements from this class; bring them along
        cls._update(features=cls._merged_features(), elements=tuple(declared_elements(cls)))
        for sub in cls.__subclasses__():
            sub._refold_inherited()

    @classmethod
    def _update(cls, **changes: Any) -> None:
        cls.descriptor = replace(cls.descriptor, **changes)
        if cls.site_class is not None:
            cls.site_class.registry.register(cls.descriptor)

    @classmethod
    def set_url(cls, url: Optional[str]) -> None:
        """Relative to the site base URL unless it starts with http:// or https://."""
        if url:
            cls.URL = url
            cls._update(url=url)

    @classmethod
    def set_url_matcher(cls, matcher: Optional[re.Pattern[str]]) -> None:
        """
        Regular expression used instead of the URL template to decide whether
        the page is displayed. Anything but a compiled pattern is rejected here.
        """
        if matcher is not None:
            cls.URL_MATCHER = validate_url_matcher(cls.__name__, matcher)
            cls._update(url_matcher=matcher)

    @classmethod
    def set_attributes(cls, *names: str) -> None:
        """
        navigation_disabled: the page is never navigated to, its accessor only
        works while the page is already displayed and visit() raises.
        page_template: no site accessor, not part of site.pages; only useful
        as a parent carrying shared features and elements.
        """
        cls.ATTRIBUTES = validate_attributes(cls.__name__, names)
        cls._update(attributes=cls.ATTRIBUTES)

    @classmethod
    def disable_automatic_navigation(cls) -> None:
        warnings.warn(
            "disable_automatic_navigation() is deprecated, use "
            "set_attributes('navigation_disabled') or ATTRIBUTES instead",
            DeprecationWarning,
            stacklevel=2,
        )
        attrs = tuple(a for a in cls.descriptor.attributes if a != NAVIGATION_DISABLED)
        cls.set_attributes(*attrs, NAVIGATION_DISABLED)

    @classmethod
    def use_features(cls, *features: FeatureRef) -> None:
        cls._own_features = cls.__dict__.get("_own_features", ()) + tuple(features)
        cls._refold_inherited()

    @classmethod
    def add_element(cls, name: str, fn: Any) -> None:
        """Programmatic form of `name = element(fn)` in the class body."""
        el = element(fn)
        setattr(cls, name, el)
        el.__set_name__(cls, name)
        cls._refold_inherited()

    # ---------------- instance lifecycle ----------------

    def __init__(self, site: "Site", args: Any = None) -> None:
        d = type(self).descriptor
        self.site = site
        self.page_url: Optional[str] = d.url
        self.url_matcher: Optional[re.Pattern[str]] = d.url_matcher
        self.page_attributes: tuple[str, ...] = d.attributes
        self.page_elements: tuple[str, ...] = d.elements
        self.page_features: tuple[FeatureRef, ...] = d.features
        self.url_template: URLTemplate = site.template_for(d)
        self.required_arguments: tuple[str, ...] = self.url_template.placeholders

        self.arguments: dict[str, Any] = self._resolve_arguments(args)
        self.url: str = self.url_template.expand(self.arguments)
        self._attach_features(args)

        site.most_recent_page = self
        if not self.is_displayed():
            if self.navigation_disabled:
                raise PageNavigationNotAllowedError(
                    "Navigation is intentionally disabled for this page. Its accessor "
                    "can only be used while the page is already displayed.",
                    page=type(self).__name__,
                    url=self._driver().current_url(),
                )
            self.visit()

    def _resolve_arguments(self, args: Any) -> dict[str, Any]:
        page = type(self).__name__
        source = as_argument_source(args)

        if not self.required_arguments:
            if source is not None:
                raise PageInitError(
                    f"{type(args).__name__} was provided as an initialization argument, "
                    "but the page URL doesn't require any arguments",
                    page=page,
                )
            return {}

        fallback = SiteSource(self.site)
        resolved: dict[str, Any] = {}
        for name in self.required_arguments:
            value = source.get(name) if source is not None else None
            if value is None:
                value = fallback.get(name)
            if value is None:
                if source is None:
                    raise PageInitError(
                        "No arguments provided and the site has none of the required ones",
                        page=page,
                        details={"required": list(self.required_arguments)},
                    )
                raise PageInitError(
                    f"A required page argument is missing: {name}",
                    page=page,
                    details={
                        "provided": type(args).__name__,
                        "required": list(self.required_arguments),
                    },
                )
            resolved[name] = value
        return resolved

    def _attach_features(self, args: Any) -> None:
        for ref in self.page_features:
            if isinstance(ref, str):
                try:
                    feature_cls = registry.get_feature(ref)
                except KeyError as e:
                    raise PageConfigError(
                        f"unknown page feature: {ref}", page=type(self).__name__
                    ) from e
            else:
                feature_cls = ref
            setattr(self, _feature_name(ref), feature_cls(self.browser, args))

    # ---------------- browser boundary ----------------

    @property
    def browser(self) -> Any:
        """Raw browser handle handed to element functions."""
        return unwrap_browser(self.site.browser)

    def _driver(self) -> "BrowserDriver":
        driver = self.site.driver
        if driver is None:
            raise BrowserLibraryNotSupportedError("No browser has been opened for the site")
        return driver

    # ---------------- state checks & navigation ----------------

    @property
    def navigation_disabled(self) -> bool:
        return NAVIGATION_DISABLED in self.page_attributes

    def is_displayed(self) -> bool:
        """Live check of the browser URL; nothing is cached between calls."""
        url = self.url_template.normalize(self._driver().current_url())

        if self.url_matcher is not None:
            return self.url_matcher.search(url) is not None
        if not self.url_template.matches(url):
            return False
        if not self.arguments:
            return True
        extracted = self.url_template.extract(url)
        if extracted is None:
            return False
        return all(extracted.get(k) == str(self.arguments[k]) for k in self.required_arguments)

    def visit(self) -> "Page":
        if self.navigation_disabled:
            raise PageNavigationNotAllowedError(
                "Navigation has been disabled for this page. It usually can't be "
                "reached directly through a URL.",
                page=type(self).__name__,
            )
        driver = self._driver()
        logger.debug("visit %s -> %s", type(self).__name__, self.url)
        driver.navigate(self.url)

        if not self.is_displayed():
            details: dict[str, Any] = {"url_template": self.url_template.pattern}
            if self.url_matcher is not None:
                details["url_matcher"] = self.url_matcher.pattern
            raise WrongPageError(
                "Navigation check failed after attempting to access the page",
                page=type(self).__name__,
                url=driver.current_url(),
                details=details,
            )

        self.site.most_recent_page = self
        return self

    def refresh(self) -> "Page":
        self._driver().refresh()
        return self

    def expect_page(self, page: Any) -> "Page":
        """Same policy as Site.expect_page, for use inside page methods."""
        return self.site.expect_page(page)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} url_template={self.url_template.pattern!r}>"
