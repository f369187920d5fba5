import functools
import http.server
import socketserver
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest

from site_object.core.element import element
from site_object.core.settings import BrowserOptions
from site_object.core.site import Site
from site_object.io.playwright_driver import PlaywrightBrowser


class LocalSite(Site):
    pass


class HomePage(LocalSite.Page):
    URL = "/{language}/"

    title = element(lambda p: p.locator("#title").inner_text())

    def open_news(self):
        self.browser.click("#news")
        self.browser.wait_for_url("**/news/")
        return self.site.expect_page(NewsPage)


class NewsPage(LocalSite.Page):
    URL = "/{language}/news/"

    post_titles = element(lambda p: p.locator(".post").all_inner_texts())


@pytest.fixture(scope="session")
def web_server() -> Iterator[str]:
    root = Path(__file__).resolve().parent / "fixtures" / "site"
    Handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(root))
    httpd = socketserver.TCPServer(("127.0.0.1", 0), Handler)
    t = threading.Thread(target=httpd.serve_forever, daemon=True)
    t.start()
    try:
        yield f"http://127.0.0.1:{httpd.server_address[1]}"
    finally:
        httpd.shutdown()
        httpd.server_close()


@pytest.fixture
def playwright_browser() -> PlaywrightBrowser:
    try:
        return PlaywrightBrowser.launch("chromium", options=BrowserOptions(headless=True))
    except Exception as e:  # browsers not installed (`playwright install chromium`)
        pytest.skip(f"playwright chromium unavailable: {e}")


def test_smoke_end_to_end(web_server: str, playwright_browser: PlaywrightBrowser) -> None:
    with LocalSite(base_url=web_server, browser=playwright_browser, language="en") as site:
        home = site.home_page()
        assert home.url == f"{web_server}/en/"
        assert site.title == "Welcome"

        news = site.open_news()
        assert isinstance(news, NewsPage)
        assert site.news_page_displayed()
        assert not site.home_page_displayed()
        assert site.post_titles == ["first", "second"]

    assert not playwright_browser.is_open()
