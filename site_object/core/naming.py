# @file purpose: Class name -> accessor name conversion.

import re

_FIRST = re.compile(r"([A-Z]+)([A-Z][a-z])")
_REST = re.compile(r"([a-z\d])([A-Z])")


def underscore(name: str) -> str:
    """LandingPage -> landing_page, HTTPErrorPage -> http_error_page."""
    name = _FIRST.sub(r"\1_\2", name)
    name = _REST.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()
