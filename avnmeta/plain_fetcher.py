from typing import NamedTuple

import requests

from avnmeta.config import REQUEST_TIMEOUT, USER_AGENT
from avnmeta.cookies import has_session_cookie, load_cookies
from avnmeta.errors import FetchError
from avnmeta.logging_config import logger

CHALLENGE_MARKERS = ("Just a moment...", "Enable JavaScript and cookies to continue")
GUEST_VIEW_MARKERS = ("You don't have permission to view the spoiler content", "Log in or register now")


class PlainResponse(NamedTuple):
    status_code: int
    body: str

    @property
    def ok(self):
        return 200 <= self.status_code < 300


class PlainFetcher:
    """
    Single direct GET with the caller's cookies. No rendering, no retries.
    """

    def __init__(self, cookies=None, session=None, timeout=REQUEST_TIMEOUT, user_agent=USER_AGENT):
        self.cookies = load_cookies(cookies)
        self.session = session or requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch(self, url, headers=None):
        """Returns the response status and body; network errors raise FetchError."""
        request_headers = {'User-Agent': self.user_agent}
        if headers:
            request_headers.update(headers)

        if not has_session_cookie(self.cookies):
            logger.warning("PLAIN_FETCH: No forum session cookie supplied; the page will be fetched as a guest.")

        try:
            response = self.session.get(url, headers=request_headers, cookies=self.cookies, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e

        return PlainResponse(status_code=response.status_code, body=response.text)

    def fetch_markup(self, url):
        """Returns the page body, raising FetchError for any non-2xx status."""
        logger.info(f"PLAIN_FETCH: Fetching {url}")
        response = self.fetch(url)
        if not response.ok:
            raise FetchError(f"Thread {url} returned HTTP {response.status_code}", url=url, status_code=response.status_code)

        if any(marker in response.body for marker in CHALLENGE_MARKERS):
            logger.warning("PLAIN_FETCH: Response looks like a Cloudflare challenge page; metadata may be missing.")
        elif any(marker in response.body for marker in GUEST_VIEW_MARKERS):
            logger.warning("PLAIN_FETCH: Response is a guest view; some tags may be missing.")
        return response.body
