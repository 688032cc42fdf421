import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from conftest import FakePage, FakePlaywright, StubFetcher, thread_html

from avnmeta.errors import FetchError
from avnmeta.models import GameEngine, GameStatus
from avnmeta.rendered_fetcher import RenderedFetcher
from avnmeta.scraper import ThreadScraper, thread_url_for_id

URL = "https://f95zone.to/threads/a-family-venture.12345/"
PAGE = thread_html(tags=["Sandbox", "Harem"])


def test_uses_rendered_markup_when_available():
    rendered = StubFetcher(markup=PAGE)
    plain = StubFetcher(markup="<title>Should not be used</title>")

    metadata = ThreadScraper(rendered=rendered, plain=plain).scrape(URL)

    assert metadata.name == "A Family Venture"
    assert metadata.version == "v0.09"
    assert metadata.developer == "DevStudio"
    assert metadata.engine is GameEngine.RENPY
    assert metadata.status is GameStatus.ONGOING
    assert metadata.tags == ("Sandbox", "Harem")
    assert metadata.source_url == URL
    assert rendered.calls == [URL]
    assert plain.calls == []


@pytest.mark.parametrize("rendered_result", [None, ""])
def test_falls_back_to_plain_fetch(rendered_result):
    rendered = StubFetcher(markup=rendered_result)
    plain = StubFetcher(markup=PAGE)

    metadata = ThreadScraper(rendered=rendered, plain=plain).scrape(URL)

    assert metadata.name == "A Family Venture"
    assert plain.calls == [URL]


def test_plain_fetch_error_propagates():
    rendered = StubFetcher(markup=None)
    plain = StubFetcher(error=FetchError("HTTP 404", url=URL, status_code=404))

    with pytest.raises(FetchError) as excinfo:
        ThreadScraper(rendered=rendered, plain=plain).scrape(URL)

    assert excinfo.value.status_code == 404


def test_browser_timeout_falls_back_to_plain_fetch():
    playwright = FakePlaywright(FakePage(goto_error=PlaywrightTimeout("Timeout 15000ms exceeded.")))
    rendered = RenderedFetcher(playwright_factory=playwright)
    plain = StubFetcher(markup=PAGE)

    metadata = ThreadScraper(rendered=rendered, plain=plain).scrape(URL)

    assert metadata.tags == ("Sandbox", "Harem")
    assert plain.calls == [URL]
    assert playwright.browser.closed


def test_rendered_fetch_can_be_disabled():
    plain = StubFetcher(markup=PAGE)

    scraper = ThreadScraper(plain=plain, use_rendered=False)
    metadata = scraper.scrape(URL)

    assert scraper.rendered is None
    assert metadata.name == "A Family Venture"


def test_thread_url_for_id():
    assert thread_url_for_id(12345) == "https://f95zone.to/threads/12345/"
    assert thread_url_for_id(" 678 ") == "https://f95zone.to/threads/678/"


@pytest.mark.parametrize("bad_id", ["", "abc", "12a", "-5"])
def test_thread_url_for_id_rejects_non_numeric(bad_id):
    with pytest.raises(ValueError):
        thread_url_for_id(bad_id)


def test_scrape_by_id_builds_the_thread_url():
    rendered = StubFetcher(markup=PAGE)

    metadata = ThreadScraper(rendered=rendered, plain=StubFetcher()).scrape_by_id("12345")

    assert rendered.calls == ["https://f95zone.to/threads/12345/"]
    assert metadata.source_url == "https://f95zone.to/threads/12345/"


def test_browser_timeout_then_plain_failure_raises_fetch_error():
    playwright = FakePlaywright(FakePage(goto_error=PlaywrightTimeout("Timeout 15000ms exceeded.")))
    rendered = RenderedFetcher(playwright_factory=playwright)
    plain = StubFetcher(error=FetchError("Thread returned HTTP 503", url=URL, status_code=503))

    with pytest.raises(FetchError) as excinfo:
        ThreadScraper(rendered=rendered, plain=plain).scrape(URL)

    assert excinfo.value.status_code == 503
    assert plain.calls == [URL]
    assert playwright.browser.closed
    assert playwright.context.closed
