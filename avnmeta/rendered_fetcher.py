from playwright.sync_api import Error as PlaywrightError, sync_playwright

from avnmeta.config import (
    COVER_IMAGE_URL_MARKERS,
    HEADLESS,
    MIN_EXPECTED_TAGS,
    PAGE_LOAD_TIMEOUT_MS,
    POLL_INTERVAL_MS,
    RECOVERY_PAUSE_MS,
    STABILIZE_TIMEOUT_MS,
    STABLE_WINDOW_MS,
    USER_AGENT,
)
from avnmeta.cookies import has_session_cookie, load_cookies, to_playwright_cookies
from avnmeta.logging_config import logger

BLOCKED_RESOURCE_TYPES = ('font', 'media')

TAG_COUNT_JS = "document.querySelectorAll('.js-tagList .tagItem').length"
SCROLL_TAG_LIST_JS = """() => {
    const tagList = document.querySelector('.js-tagList');
    if (tagList) {
        tagList.scrollIntoView({ behavior: 'auto', block: 'center' });
    }
}"""
PAGE_TITLE_JS = "() => ((document.querySelector('.p-title-value') || {}).textContent || document.title || '').trim()"


def should_block_request(resource_type, url):
    """Fonts and media never load; images only from the cover/attachment hosts."""
    if resource_type in BLOCKED_RESOURCE_TYPES:
        return True
    if resource_type == 'image':
        return not any(marker in url for marker in COVER_IMAGE_URL_MARKERS)
    return False


class RenderedFetcher:
    """
    Loads a thread in a throwaway headless Chromium context so client-side
    script can finish populating the tag list, then returns the DOM markup.
    """

    def __init__(self, cookies=None, playwright_factory=sync_playwright, headless=HEADLESS,
                 user_agent=USER_AGENT, load_timeout_ms=PAGE_LOAD_TIMEOUT_MS,
                 stabilize_timeout_ms=STABILIZE_TIMEOUT_MS, poll_interval_ms=POLL_INTERVAL_MS,
                 stable_window_ms=STABLE_WINDOW_MS, recovery_pause_ms=RECOVERY_PAUSE_MS,
                 min_expected_tags=MIN_EXPECTED_TAGS):
        self.cookies = load_cookies(cookies)
        self.playwright_factory = playwright_factory
        self.headless = headless
        self.user_agent = user_agent
        self.load_timeout_ms = load_timeout_ms
        self.stabilize_timeout_ms = stabilize_timeout_ms
        self.poll_interval_ms = poll_interval_ms
        self.stable_window_ms = stable_window_ms
        self.recovery_pause_ms = recovery_pause_ms
        self.min_expected_tags = min_expected_tags

    def fetch(self, url):
        """Rendered markup of the page, or None if it could not be loaded."""
        logger.info(f"RENDERED_FETCH: Loading {url}")
        if has_session_cookie(self.cookies):
            logger.info(f"RENDERED_FETCH: {len(self.cookies)} cookie(s) supplied, session cookie present.")
        else:
            logger.warning("RENDERED_FETCH: No forum session cookie supplied; tags hidden from guests will be missing.")

        try:
            with self.playwright_factory() as p:
                browser = p.chromium.launch(headless=self.headless)
                try:
                    return self._render(browser, url)
                finally:
                    _close_quietly(browser, "browser")
        except PlaywrightError as e:
            logger.warning(f"RENDERED_FETCH: Failed to render {url}: {e}")
            return None

    def fetch_markup(self, url):
        return self.fetch(url)

    def _render(self, browser, url):
        # Fresh context per call: cookies are copied in and thrown away with it
        context = browser.new_context(user_agent=self.user_agent, viewport={'width': 1280, 'height': 720})
        page = None
        try:
            cookies = to_playwright_cookies(self.cookies)
            if cookies:
                context.add_cookies(cookies)
            context.route("**/*", self._route_request)

            page = context.new_page()
            page.goto(url, timeout=self.load_timeout_ms, wait_until="load")

            tag_count = self._wait_for_tags(page)
            tag_count = self._recover_tags(page, tag_count)

            if '/threads/' not in (page.url or ''):
                logger.warning(f"RENDERED_FETCH: Landed on {page.url}, which is not a thread page.")
            page_title = page.evaluate(PAGE_TITLE_JS) or ''
            logger.info(f"RENDERED_FETCH: Rendered '{page_title[:50]}' with {tag_count} tag(s) in the tag list.")

            return page.content()
        finally:
            if page is not None:
                _close_quietly(page, "page")
            try:
                context.clear_cookies()
            except PlaywrightError as e:
                logger.warning(f"RENDERED_FETCH: Could not clear context cookies: {e}")
            _close_quietly(context, "context")

    def _route_request(self, route):
        request = route.request
        if should_block_request(request.resource_type, request.url):
            route.abort()
        else:
            route.continue_()

    def _tag_count(self, page):
        return int(page.evaluate(TAG_COUNT_JS) or 0)

    def _wait_for_tags(self, page):
        """
        Polls the tag count until it holds steady for the stability window or
        the polling budget runs out. Any change in the count restarts the window.
        """
        previous = 0
        stable_ms = 0
        waited_ms = 0
        while waited_ms < self.stabilize_timeout_ms:
            current = self._tag_count(page)
            if current != previous:
                previous = current
                stable_ms = 0
            elif current > 0:
                stable_ms += self.poll_interval_ms
                if stable_ms >= self.stable_window_ms:
                    break
            page.wait_for_timeout(self.poll_interval_ms)
            waited_ms += self.poll_interval_ms
        return self._tag_count(page)

    def _recover_tags(self, page, tag_count):
        # Some tag lists only fill in once scrolled into the viewport
        if tag_count >= self.min_expected_tags:
            return tag_count
        logger.info(f"RENDERED_FETCH: Only {tag_count} tag(s) rendered, scrolling the tag list into view.")
        page.evaluate(SCROLL_TAG_LIST_JS)
        page.wait_for_timeout(self.recovery_pause_ms)
        tag_count = self._tag_count(page)
        if tag_count < self.min_expected_tags:
            page.wait_for_timeout(self.recovery_pause_ms)
            tag_count = self._tag_count(page)
        return tag_count


def _close_quietly(target, label):
    try:
        target.close()
    except PlaywrightError as e:
        logger.warning(f"RENDERED_FETCH: Error closing {label}: {e}")
