"""
Site objects: the entry point test code talks to.

    class NewsSite(Site):
        pass

    class NewsPage(NewsSite.Page):
        URL = "/news?l={language}"

    with NewsSite(base_url="http://news.example.com", browser=driver) as site:
        site.news_page({"language": "es"})     # navigates if needed
        site.news_page_displayed()              # -> True
        site.page()                             # page currently displayed
        site.headlines()                        # delegated to the current page

Every Site subclass gets its own `Page` base class and PageRegistry. When the
site is instantiated it compiles each navigable page's URL template against
its base URL and binds two methods per page: `<page_name>(args=None)` and
`<page_name>_displayed()`.

Unknown attributes are looked up on the page being displayed (see
find_delegate). Names only one page declares go straight to the most recent
page without checking the browser URL.
"""
# @file purpose: Site aggregator, page accessors and delegation to the current page.

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, ClassVar, Mapping, Optional, Type, Union

from ..io.driver import BrowserDriver, open_browser, wrap_browser
from .controller.resolver import PageResolver
from .errors import BrowserLibraryNotSupportedError, PageConfigError, SiteInitError, WrongPageError
from .page import Page, PageDescriptor, validate_url_matcher
from .registry import PageRegistry
from .settings import settings
from .template import URLTemplate

logger = logging.getLogger(__name__)

PageRef = Union[str, Type[Page], Page, PageDescriptor]


class _NotFound:
    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


#: returned by Site.find_delegate when no page has the attribute
NOT_FOUND: Any = _NotFound()


def _has_attribute(obj: Any, name: str) -> bool:
    """hasattr() without evaluating properties or element functions."""
    if name in getattr(obj, "__dict__", {}):
        return True
    return any(name in vars(klass) for klass in type(obj).__mro__)


class Site:
    registry: ClassVar[PageRegistry] = PageRegistry("Site")
    Page: ClassVar[Type[Page]] = Page

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        parent = cls.__mro__[1]
        cls.registry = PageRegistry(cls.__name__)
        for d in getattr(parent, "registry", ()):
            cls.registry.register(d)
        cls.Page = type(
            "Page",
            (getattr(parent, "Page", Page),),
            {
                "_abstract": True,
                "site_class": cls,
                "__module__": cls.__module__,
                "__qualname__": f"{cls.__qualname__}.Page",
            },
        )

    def __init__(self, args: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> None:
        if args is not None and not isinstance(args, Mapping):
            raise SiteInitError(
                "You must provide mapping arguments when initializing a site object. "
                "At a minimum specify a base_url, e.g. MySite(base_url='http://foo.com'). "
                f"Got {type(args).__name__}"
            )
        arguments = {**(args or {}), **kwargs}
        self.base_url: str = arguments.pop("base_url", None) or settings.base_url
        self.browser: Any = arguments.pop("browser", None)
        self.arguments: dict[str, Any] = arguments
        self.most_recent_page: Optional[Page] = None

        self._templates: dict[str, URLTemplate] = {}
        self.pages: list[Type[Page]] = []
        for d in self.registry.navigable():
            self._templates[d.name] = d.compile(self.base_url)
            validate_url_matcher(d.page_class.__name__, d.url_matcher)
            if _has_attribute(self, d.name) or _has_attribute(self, f"{d.name}_displayed"):
                raise PageConfigError(
                    "page accessor name collides with an existing site attribute",
                    page=d.page_class.__name__,
                    details={"accessor": d.name},
                )
            self.pages.append(d.page_class)
            setattr(self, d.name, self._accessor(d))
            setattr(self, f"{d.name}_displayed", functools.partial(self.on_page, d))

        self.unique_methods: frozenset[str] = self.registry.unique_methods()
        self.resolver = PageResolver(self.registry.navigable(), self._templates)
        self._ready = True

    def _accessor(self, d: PageDescriptor) -> Callable[..., Page]:
        def accessor(args: Any = None) -> Page:
            return d.page_class(self, args)

        accessor.__name__ = d.name
        accessor.__doc__ = f"Return a {d.page_class.__name__}, navigating to it if needed."
        return accessor

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} base_url={self.base_url!r} "
            f"most_recent_page={self.most_recent_page!r}>"
        )

    # ---------------- browser ----------------

    @property
    def driver(self) -> Optional[BrowserDriver]:
        """
        Adapter over self.browser; raises for objects of unknown libraries.
        A raw handle is wrapped once and the adapter reused until self.browser
        is replaced, so its open/closed state survives between calls.
        """
        browser = self.browser
        if browser is None:
            return None
        cached = self.__dict__.get("_adapter")
        if cached is None or cached[0] is not browser:
            cached = (browser, wrap_browser(browser))
            self._adapter = cached
        return cached[1]

    def current_url(self) -> str:
        driver = self.driver
        if driver is None:
            raise BrowserLibraryNotSupportedError("No browser has been opened for the site")
        return driver.current_url()

    def open_browser(
        self, platform: Optional[str] = None, browser_type: Optional[str] = None, **options: Any
    ) -> BrowserDriver:
        """
        Open a browser for a site created without one:
            site.open_browser("playwright", "firefox", headless=False)
        Platform and browser type default to SITE_OBJECT_PLATFORM and
        SITE_OBJECT_BROWSER_TYPE.
        """
        self.browser = open_browser(platform, browser_type, **options)
        return self.browser

    def close_browser(self) -> None:
        driver = self.driver
        if driver is not None:
            driver.close()

    def __enter__(self) -> "Site":
        return self

    def __exit__(self, *exc: Any) -> None:
        driver = self.driver
        if driver is not None and driver.is_open():
            driver.close()

    # ---------------- pages ----------------

    def descriptor_for(self, ref: PageRef) -> PageDescriptor:
        if isinstance(ref, PageDescriptor):
            return ref
        if isinstance(ref, Page):
            return type(ref).descriptor
        if isinstance(ref, type) and issubclass(ref, Page):
            return ref.descriptor
        if isinstance(ref, str):
            return self.registry.get(ref)
        raise TypeError(f"Not a page reference: {ref!r}")

    def template_for(self, d: PageDescriptor) -> URLTemplate:
        tmpl = self._templates.get(d.name)
        if tmpl is None or d.page_class not in self.pages:
            tmpl = d.compile(self.base_url)
        return tmpl

    def get(self, ref: PageRef, args: Any = None) -> Page:
        """Generic form of the per-page accessors: site.get("news_page", {...})."""
        return self.descriptor_for(ref).page_class(self, args)

    def on_page(self, ref: PageRef) -> bool:
        """
        Whether the browser URL matches the page's matcher or URL template.
        Argument values and the most recent page are not considered.
        """
        d = self.descriptor_for(ref)
        url = self.current_url()
        tmpl = self.template_for(d)
        if d.url_matcher is not None:
            return d.url_matcher.search(tmpl.normalize(url)) is not None
        return tmpl.matches(url)

    def page(self) -> Optional[Page]:
        """
        Page object for whatever the browser displays. The most recent page
        is checked first; otherwise every navigable page is tried. None when
        no page matches.
        """
        recent = self.most_recent_page
        if recent is not None and recent.is_displayed():
            return recent

        found = self.resolver.match(self.current_url())
        if found is None:
            return None
        return found.descriptor.page_class(self, found.arguments or None)

    def expect_page(self, ref: PageRef) -> Page:
        """
        Return the displayed page if it is `ref` (a page instance, page class
        or accessor name), else raise WrongPageError. Argument values are not
        compared.
        """
        p = self.page()
        label = getattr(ref, "__name__", None) or (
            type(ref).__name__ if isinstance(ref, Page) else str(ref)
        )
        if p is None:
            raise WrongPageError(
                f"Expected {label} page to be displayed but the URL doesn't match "
                "the URL template of any known page",
                url=self.current_url(),
            )

        if isinstance(ref, Page):
            ok = ref is p or type(ref) is type(p)
        elif isinstance(ref, type):
            ok = type(p) is ref
        elif isinstance(ref, str):
            ok = type(p).descriptor.name == ref
        else:
            ok = False
        if ok:
            return p
        raise WrongPageError(
            f"Expected {label} page to be displayed but the URL doesn't look right",
            page=type(p).__name__,
            url=self.current_url(),
        )

    # ---------------- delegation ----------------

    def find_delegate(self, name: str) -> Any:
        """
        Attribute `name` of the page to delegate to, or NOT_FOUND.
        Names unique to one page type use the most recent page directly;
        anything else goes through page().
        """
        recent = self.most_recent_page
        if name in self.unique_methods and recent is not None and _has_attribute(recent, name):
            logger.debug("delegate %s -> %s (most recent page)", name, type(recent).__name__)
            return getattr(recent, name)

        p = self.page()
        if p is not None and _has_attribute(p, name):
            logger.debug("delegate %s -> %s", name, type(p).__name__)
            return getattr(p, name)
        return NOT_FOUND

    def forward(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call `name` on the current page; AttributeError when no page has it."""
        target = self.find_delegate(name)
        if target is NOT_FOUND:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return target(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        # only reached for names not found normally; never delegate private
        # names or anything before __init__ has finished
        if name.startswith("_") or not self.__dict__.get("_ready"):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        target = self.find_delegate(name)
        if target is NOT_FOUND:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return target
