"""
Page features: reusable bundles of element accessors shared by several pages
(a header bar, a footer, a sidebar).

    class Footer(PageFeature):
        news = element(lambda b: b.find_element(By.LINK_TEXT, "News"))

    class SomePage(MySite.Page):
        URL = "/blah"
        FEATURES = ("footer",)

    site.some_page().footer.news.click()

The accessor name defaults to the snake_case class name; set FEATURE_NAME to
override it.
"""
# @file purpose: Define PageFeature and its registration.

from __future__ import annotations

from typing import Any, ClassVar, Optional

from . import registry
from .naming import underscore


class PageFeature:
    FEATURE_NAME: ClassVar[Optional[str]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        registry.register_feature(cls.accessor_name(), cls)

    @classmethod
    def accessor_name(cls) -> str:
        # FEATURE_NAME set on a parent feature is not inherited
        return cls.__dict__.get("FEATURE_NAME") or underscore(cls.__name__)

    @classmethod
    def feature_name(cls, name: str) -> None:
        """Rename the accessor pages use for this feature."""
        registry.unregister_feature(cls.accessor_name())
        cls.FEATURE_NAME = name
        registry.register_feature(name, cls)

    def __init__(self, browser: Any, args: Any = None) -> None:
        self.browser = browser
        self.args = args

    def __repr__(self) -> str:
        return f"<{type(self).__name__} feature>"
