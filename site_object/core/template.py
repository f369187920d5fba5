"""
URL templates with {name} placeholders.

A template is compiled once per site base URL and used both ways:
- expand(): placeholder values -> concrete URL (navigation)
- matches()/extract(): observed browser URL -> placeholder values (page detection)

Only simple string expansion is supported: each value is percent-encoded
except for unreserved characters, and decoded again on extraction.
"""
# @file purpose: Compile, expand and match URL templates.

from __future__ import annotations

import re
from typing import Any, Mapping, Optional
from urllib.parse import quote, unquote

from .errors import TemplateExpansionError, TemplateSyntaxError

_ABSOLUTE = re.compile(r"^https?://", re.IGNORECASE)
_TOKEN = re.compile(r"\{([A-Za-z0-9_]+)\}")
# what a single placeholder may stand for in an observed URL
_VALUE = r"[^/?#&]*"


def is_absolute(pattern: str) -> bool:
    return bool(_ABSOLUTE.match(pattern))


class URLTemplate:
    """Compiled URL template. Immutable after construction."""

    def __init__(self, pattern: str) -> None:
        self.pattern: str = pattern
        self.placeholders: tuple[str, ...] = ()
        self.query_placeholders: tuple[str, ...] = ()

        names: list[str] = []
        regex: list[str] = []
        query_start = pattern.find("?")
        pos = 0
        for m in _TOKEN.finditer(pattern):
            literal = pattern[pos : m.start()]
            self._check_braces(literal)
            regex.append(re.escape(literal))
            name = m.group(1)
            if name in names:
                raise TemplateSyntaxError(
                    "duplicate placeholder in url template",
                    details={"pattern": pattern, "placeholder": name},
                )
            names.append(name)
            regex.append(f"(?P<{name}>{_VALUE})")
            pos = m.end()
        tail = pattern[pos:]
        self._check_braces(tail)
        regex.append(re.escape(tail))

        self.placeholders = tuple(names)
        if query_start >= 0:
            self.query_placeholders = tuple(
                m.group(1) for m in _TOKEN.finditer(pattern) if m.start() > query_start
            )
        self.has_query: bool = query_start >= 0
        self.has_fragment: bool = "#" in pattern
        self._regex = re.compile("".join(regex))

    @classmethod
    def compile(cls, pattern: Optional[str], base_url: Optional[str] = "") -> "URLTemplate":
        """
        Absolute patterns stand alone; relative ones are appended to base_url.
        An empty pattern compiles to the base URL itself.
        """
        pattern = pattern or ""
        if is_absolute(pattern):
            return cls(pattern)
        return cls(f"{base_url or ''}{pattern}")

    @property
    def is_literal(self) -> bool:
        return not self.placeholders

    def _check_braces(self, literal: str) -> None:
        if "{" in literal or "}" in literal:
            raise TemplateSyntaxError(
                "unbalanced or invalid placeholder in url template",
                details={"pattern": self.pattern, "near": literal},
            )

    # ---------------- expansion ----------------

    def expand(self, args: Mapping[str, Any] | None = None) -> str:
        args = args or {}
        missing = [n for n in self.placeholders if args.get(n) is None]
        if missing:
            raise TemplateExpansionError(
                f"cannot expand {self.pattern!r}: no value for {', '.join(missing)}"
            )
        return _TOKEN.sub(lambda m: quote(str(args[m.group(1)]), safe=""), self.pattern)

    # ---------------- matching ----------------

    def normalize(self, url: str) -> str:
        """
        Drop the parts of an observed URL the template does not describe:
        the query string when the template has none, the fragment likewise.
        """
        if not self.has_fragment:
            url = url.split("#", 1)[0]
        if not self.has_query:
            head, sep, rest = url.partition("?")
            if sep:
                # keep a fragment that followed the query
                frag = rest.partition("#")
                url = head + (frag[1] + frag[2] if frag[1] else "")
        return url

    def matches(self, url: str) -> bool:
        return self._regex.fullmatch(self.normalize(url)) is not None

    def extract(self, url: str) -> dict[str, str] | None:
        m = self._regex.fullmatch(self.normalize(url))
        if m is None:
            return None
        return {name: unquote(value) for name, value in m.groupdict().items()}

    def __repr__(self) -> str:
        return f"URLTemplate({self.pattern!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, URLTemplate) and other.pattern == self.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)
