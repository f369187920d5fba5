"""Minimal smoke test: the package imports and the public names are in place."""
# @file purpose: Minimal smoke test.


def test_imports() -> None:
    import site_object.cli.main as cli  # noqa: F401
    import site_object.core.settings as settings  # noqa: F401
    import site_object.io.playwright_driver as driver  # noqa: F401
    from site_object.core.page import NAVIGATION_DISABLED, PAGE_TEMPLATE, Page, element  # noqa: F401
    from site_object.core.site import NOT_FOUND, Site  # noqa: F401


def test_feature_registry_reset() -> None:
    from site_object.core import registry
    from site_object.core.feature import PageFeature

    saved = registry.list_features()
    try:
        registry._reset_features_for_tests()

        class SearchBox(PageFeature):
            pass

        assert registry.list_features() == {"search_box": SearchBox}
        SearchBox.feature_name("query_box")
        assert registry.get_feature("query_box") is SearchBox
        assert "search_box" not in registry.list_features()
    finally:
        registry._reset_features_for_tests()
        for name, cls in saved.items():
            registry.register_feature(name, cls)
