import pytest

from selenium.webdriver.remote.webdriver import WebDriver

from site_object.core.errors import PageConfigError, SiteInitError, WrongPageError
from site_object.core.settings import settings
from site_object.core.site import Site
from site_object.io.selenium_driver import SeleniumBrowser

from conftest import FakeWebDriver
from ruby_lang_site import (
    DownloadsPage,
    GemsPage,
    LandingPage,
    NewsPage,
    NewsPostPage,
    RubyLangSite,
    RubyLangTemplate,
)

POST_URL = "https://www.ruby-lang.org/en/news/2024/12/25/ruby-3-4-0-released/"


class ExampleSite(Site):
    pass


class LocalNewsPage(ExampleSite.Page):
    URL = "/{lang}/news/"


# ---------------- construction ----------------


def test_site_requires_mapping_arguments() -> None:
    with pytest.raises(SiteInitError):
        ExampleSite("https://example.org")  # type: ignore[arg-type]


def test_init_arguments_are_kept_for_pages(webdriver: FakeWebDriver) -> None:
    site = ExampleSite({"base_url": "https://example.org", "lang": "en"}, browser=SeleniumBrowser(webdriver))
    assert site.base_url == "https://example.org"
    assert site.arguments == {"lang": "en"}

    page = site.local_news_page()
    assert webdriver.visited == ["https://example.org/en/news/"]
    assert page.is_displayed()
    assert site.local_news_page_displayed()


def test_accessors_skip_page_templates(site: RubyLangSite) -> None:
    assert callable(site.landing_page)
    assert callable(site.landing_page_displayed)
    assert "ruby_lang_template" not in vars(site)
    assert RubyLangTemplate not in site.pages
    assert site.pages == [LandingPage, NewsPage, NewsPostPage, DownloadsPage, GemsPage]


def test_generic_get(site: RubyLangSite) -> None:
    page = site.get("landing_page", {"language": "ja"})
    assert isinstance(page, LandingPage)
    assert page.url == "https://www.ruby-lang.org/ja/"
    assert isinstance(site.get(NewsPage), NewsPage)


def test_sites_have_separate_registries() -> None:
    assert "local_news_page" in ExampleSite.registry
    assert "local_news_page" not in RubyLangSite.registry
    assert LocalNewsPage.site_class is ExampleSite


def test_subclassed_site_inherits_pages(webdriver: FakeWebDriver) -> None:
    class RegionalSite(ExampleSite):
        pass

    class RegionPage(RegionalSite.Page):
        URL = "/region/{region}/"

    assert "local_news_page" in RegionalSite.registry
    assert "region_page" not in ExampleSite.registry
    site = RegionalSite(base_url="https://example.org", browser=SeleniumBrowser(webdriver))
    assert site.region_page({"region": "eu"}).url == "https://example.org/region/eu/"


def test_accessor_name_collision(webdriver: FakeWebDriver) -> None:
    class ClashSite(Site):
        pass

    class Page(ClashSite.Page):  # accessor "page" would hide Site.page()
        URL = "/p"

    with pytest.raises(PageConfigError):
        ClashSite(base_url="https://x.test", browser=SeleniumBrowser(webdriver))


# ---------------- on_page / predicates ----------------


def test_on_page_uses_matcher_or_template_only(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    webdriver.current_url = "https://www.ruby-lang.org/fr/"
    assert site.landing_page_displayed()
    assert site.on_page(LandingPage)
    assert site.on_page("landing_page")
    assert not site.news_page_displayed()

    webdriver.current_url = POST_URL
    assert site.news_post_page_displayed()
    assert not site.landing_page_displayed()


# ---------------- page() resolution ----------------


def test_page_returns_none_when_nothing_matches(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    webdriver.current_url = "https://www.python.org/"
    assert site.page() is None


def test_page_fast_path_returns_most_recent(site: RubyLangSite) -> None:
    landing = site.landing_page()
    assert site.page() is landing


def test_page_resolves_from_url_and_extracts_arguments(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    webdriver.current_url = "https://www.ruby-lang.org/de/"
    page = site.page()
    assert isinstance(page, LandingPage)
    assert page.arguments == {"language": "de"}
    assert webdriver.visited == []
    assert site.most_recent_page is page


def test_page_prefers_matchers(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    webdriver.current_url = POST_URL
    assert isinstance(site.page(), NewsPostPage)
    webdriver.current_url = "https://www.ruby-lang.org/en/news/"
    assert isinstance(site.page(), NewsPage)


def test_page_with_query_template(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    webdriver.current_url = "https://www.ruby-lang.org/en/downloads/?version=3.4"
    page = site.page()
    assert isinstance(page, DownloadsPage)
    assert page.arguments == {"language": "en", "version": "3.4"}


def test_stale_most_recent_page_is_ignored(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    site.landing_page()
    webdriver.current_url = "https://rubygems.org/gems/rails"
    assert isinstance(site.page(), GemsPage)


# ---------------- expect_page ----------------


def test_expect_page_accepts_name_class_and_instance(site: RubyLangSite) -> None:
    landing = site.landing_page()
    assert site.expect_page("landing_page") is landing
    assert site.expect_page(LandingPage) is landing
    assert site.expect_page(landing) is landing
    assert landing.expect_page(LandingPage) is landing


def test_expect_page_rejects_other_pages(site: RubyLangSite) -> None:
    news = site.news_page()
    site.landing_page()
    for ref in ("news_page", NewsPage, news):
        with pytest.raises(WrongPageError):
            site.expect_page(ref)


def test_expect_page_when_no_page_matches(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    webdriver.current_url = "https://www.python.org/"
    with pytest.raises(WrongPageError) as ei:
        site.expect_page(LandingPage)
    assert ei.value.url == "https://www.python.org/"


# ---------------- browser lifecycle ----------------


def test_open_browser_rejects_unknown_platform(site: RubyLangSite) -> None:
    with pytest.raises(ValueError):
        site.open_browser("watir", "firefox")


def test_close_browser(site: RubyLangSite, webdriver: FakeWebDriver) -> None:
    site.close_browser()
    assert webdriver.quit_called


def test_context_manager_closes_browser(webdriver: FakeWebDriver) -> None:
    with RubyLangSite(SeleniumBrowser(webdriver), "en") as site:
        site.landing_page()
    assert webdriver.quit_called


def test_repr(site: RubyLangSite) -> None:
    assert repr(site).startswith("<RubyLangSite base_url='https://www.ruby-lang.org'")


def test_matcher_pages_ignore_a_query_string_the_template_lacks(
    site: RubyLangSite, webdriver: FakeWebDriver
) -> None:
    webdriver.current_url = "https://www.ruby-lang.org/en/news/?page=2"
    news = site.news_page()
    assert webdriver.visited == []
    assert news.is_displayed()

    site.most_recent_page = None
    assert site.news_page_displayed()
    found = site.page()
    assert isinstance(found, NewsPage)
    assert found.arguments == {"language": "en"}
    assert isinstance(site.expect_page(NewsPage), NewsPage)
    assert site.posts() == [f"news-{i}" for i in range(10)]


# ---------------- raw browser handles ----------------


class RawWebDriver(WebDriver):
    """A WebDriver that never opens a session; quit() fails once the session is gone."""

    def __init__(self, url: str = "about:blank") -> None:
        self._location = url
        self.quits = 0

    @property
    def current_url(self) -> str:
        return self._location

    def get(self, url: str) -> None:
        self._location = url

    def refresh(self) -> None:
        pass

    def quit(self) -> None:
        if self.quits:
            raise RuntimeError("session already ended")
        self.quits += 1


def test_raw_webdriver_is_wrapped_once() -> None:
    raw = RawWebDriver()
    with RubyLangSite(raw, "en") as site:
        page = site.landing_page()
        assert page.browser is raw
        assert site.driver is site.driver
        site.close_browser()
        assert not site.driver.is_open()
    assert raw.quits == 1


def test_replacing_the_browser_drops_the_old_adapter() -> None:
    first, second = RawWebDriver(), RawWebDriver("https://www.ruby-lang.org/en/")
    site = RubyLangSite(first, "en")
    old = site.driver
    site.browser = second
    assert site.driver is not old
    assert site.current_url() == "https://www.ruby-lang.org/en/"


def test_open_browser_defaults_come_from_settings(
    site: RubyLangSite, monkeypatch: pytest.MonkeyPatch
) -> None:
    launched: list[str] = []

    def fake_launch(cls, browser_type, *, options=None):
        launched.append(browser_type)
        return SeleniumBrowser(FakeWebDriver())

    monkeypatch.setattr(settings, "platform", "selenium")
    monkeypatch.setattr(settings, "browser_type", "firefox")
    monkeypatch.setattr(SeleniumBrowser, "launch", classmethod(fake_launch))

    driver = site.open_browser()
    assert launched == ["firefox"]
    assert site.driver is driver
