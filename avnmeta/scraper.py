from avnmeta.config import THREADS_URL
from avnmeta.cookies import load_cookies
from avnmeta.logging_config import logger
from avnmeta.parser import parse_thread_page
from avnmeta.plain_fetcher import PlainFetcher
from avnmeta.rendered_fetcher import RenderedFetcher


def thread_url_for_id(thread_id):
    thread_id = str(thread_id).strip()
    if not thread_id.isdigit():
        raise ValueError(f"Invalid thread id: {thread_id!r}")
    return f"{THREADS_URL}{thread_id}/"


class ThreadScraper:
    """
    Fetches a thread page and parses it into a GameMetadata record.

    The rendered fetcher is tried first so client-side tags are present; if it
    gives nothing back the plain fetcher is used instead. A FetchError from the
    plain fetcher is not caught: there is nothing left to fall back to.
    """

    def __init__(self, cookies=None, rendered=None, plain=None, use_rendered=True):
        jar = load_cookies(cookies)
        if use_rendered:
            self.rendered = rendered or RenderedFetcher(cookies=jar)
        else:
            self.rendered = None
        self.plain = plain or PlainFetcher(cookies=jar)

    def fetch_markup(self, url):
        markup = None
        if self.rendered is not None:
            markup = self.rendered.fetch_markup(url)
            if not markup:
                logger.warning(f"EXTRACT_GAME_DATA: Rendered fetch gave no markup for {url}. Falling back to plain fetch.")
        if not markup:
            markup = self.plain.fetch_markup(url)
        return markup

    def scrape(self, url):
        logger.info(f"EXTRACT_GAME_DATA: Starting extraction for: {url}")
        markup = self.fetch_markup(url)
        return parse_thread_page(markup, source_url=url)

    def scrape_by_id(self, thread_id):
        return self.scrape(thread_url_for_id(thread_id))


def extract_game_metadata(url, cookies=None):
    """Scrapes one thread URL with a default rendered-then-plain scraper."""
    return ThreadScraper(cookies=cookies).scrape(url)
