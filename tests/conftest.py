"""Shared fixtures: a Selenium-like fake driver and the ruby-lang.org site."""

from collections.abc import Iterator

import pytest

from site_object.io.selenium_driver import SeleniumBrowser

from ruby_lang_site import RubyLangSite


class FakeWebDriver:
    """
    Stands in for a Selenium WebDriver: get() just moves current_url,
    optionally through a redirect table.
    """

    def __init__(self, url: str = "about:blank", redirects: dict[str, str] | None = None) -> None:
        self.current_url = url
        self.redirects = redirects or {}
        self.visited: list[str] = []
        self.refreshes = 0
        self.quit_called = False

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.current_url = self.redirects.get(url, url)

    def refresh(self) -> None:
        self.refreshes += 1

    def quit(self) -> None:
        self.quit_called = True


@pytest.fixture
def webdriver() -> FakeWebDriver:
    return FakeWebDriver()


@pytest.fixture
def browser(webdriver: FakeWebDriver) -> SeleniumBrowser:
    return SeleniumBrowser(webdriver)


@pytest.fixture
def site(browser: SeleniumBrowser) -> Iterator[RubyLangSite]:
    with RubyLangSite(browser, "en") as s:
        yield s
