# site_object/core/controller/resolver.py
"""
Decide which declared page a browser URL belongs to.

Responsibilities:
- Compile every navigable page's URL template against one base URL
- Match a URL: override matchers first, then query-bearing templates,
  then the remaining templates (registration order inside each pass)
- Extract placeholder values for the matched page

The resolver never touches a browser, so it also backs the CLI `resolve`
command.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ..page import PageDescriptor
from ..registry import PageRegistry
from ..template import URLTemplate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageMatch:
    """The matched page and the arguments recovered from the URL."""

    descriptor: PageDescriptor
    template: URLTemplate
    arguments: dict[str, str] = field(default_factory=dict)
    via: str = "template"  # or "matcher"


class PageResolver:
    def __init__(
        self,
        descriptors: Iterable[PageDescriptor],
        templates: Mapping[str, URLTemplate],
    ) -> None:
        self.descriptors = list(descriptors)
        self.templates = dict(templates)

    @classmethod
    def from_registry(cls, registry: PageRegistry, base_url: Optional[str]) -> "PageResolver":
        pages = registry.navigable()
        return cls(pages, {d.name: d.compile(base_url) for d in pages})

    def template(self, descriptor: PageDescriptor) -> URLTemplate:
        return self.templates[descriptor.name]

    def url_matches(self, descriptor: PageDescriptor, url: str) -> bool:
        """
        A page with an override matcher is identified by it alone; every other
        page by its URL template. Both see the URL normalized by the page's
        template, the same way Page.is_displayed() does.
        """
        tmpl = self.template(descriptor)
        if descriptor.url_matcher is not None:
            return descriptor.url_matcher.search(tmpl.normalize(url)) is not None
        return tmpl.matches(url)

    def match(self, url: str) -> Optional[PageMatch]:
        with_matcher = [d for d in self.descriptors if d.url_matcher is not None]
        for d in with_matcher:
            if self.url_matches(d, url):
                return self._found(d, url, via="matcher")

        plain = [d for d in self.descriptors if d.url_matcher is None]
        query_first = sorted(plain, key=lambda d: not self.template(d).has_query)
        for d in query_first:
            if self.template(d).matches(url):
                return self._found(d, url, via="template")

        logger.debug("no page matches %s", url)
        return None

    def _found(self, d: PageDescriptor, url: str, *, via: str) -> PageMatch:
        tmpl = self.template(d)
        args = tmpl.extract(url) if tmpl.placeholders else None
        logger.debug("resolved %s -> %s via %s", url, d.name, via)
        return PageMatch(descriptor=d, template=tmpl, arguments=args or {}, via=via)
