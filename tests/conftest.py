from avnmeta.rendered_fetcher import SCROLL_TAG_LIST_JS, TAG_COUNT_JS

def tag_anchor(name):
    slug = name.lower().replace(" ", "-")
    return f'<a href="/tags/{slug}/" class="tagItem" dir="auto">{name}</a>'

def thread_html(title="Ren'Py - A Family Venture [v0.09] [DevStudio] | F95zone", tags=(),
                hidden_tags=(), heading=None, head_extra="", body_extra=""):
    """
    Minimal thread page. `hidden_tags` sit inside an HTML comment in the tag
    list: present in the raw markup but not in the parsed DOM, like items
    still waiting on client-side rendering.
    """
    title_html = f"<title>{title}</title>" if title is not None else ""
    heading_html = f'<h1 class="p-title-value">{heading}</h1>' if heading else ""
    hidden = ""
    if hidden_tags:
        hidden = "<!-- " + "".join(tag_anchor(t) for t in hidden_tags) + " -->"
    tag_list = ""
    if tags or hidden_tags:
        tag_list = ('<dl class="tagList"><dt>Tags</dt><dd><span class="js-tagList">'
                    + "".join(tag_anchor(t) for t in tags) + hidden + "</span></dd></dl>")
    return (f"<html><head>{title_html}{head_extra}</head><body>"
            f'<div class="p-body-header">{heading_html}{tag_list}</div>'
            f'<article class="message--post"><div class="bbWrapper">{body_extra}</div></article>'
            "</body></html>")

def tag_names(count, prefix="Tag"):
    return [f"{prefix} {i}" for i in range(1, count + 1)]

# --- Playwright fakes ---

class FakeRequest:
    def __init__(self, resource_type, url):
        self.resource_type = resource_type
        self.url = url

class FakeRoute:
    def __init__(self, resource_type, url):
        self.request = FakeRequest(resource_type, url)
        self.outcome = None

    def abort(self):
        self.outcome = "aborted"

    def continue_(self):
        self.outcome = "continued"

class FakePage:
    def __init__(self, counts=(40,), html="<html><head><title>Rendered</title></head></html>",
                 final_url=None, goto_error=None, counter=None):
        self._counts = list(counts)
        self.counter = counter
        self.html = html
        self.final_url = final_url
        self.goto_error = goto_error
        self.url = "about:blank"
        self.goto_calls = []
        self.waits = []
        self.scrolled = False
        self.closed = False

    def goto(self, url, timeout=None, wait_until=None):
        self.goto_calls.append((url, timeout, wait_until))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = self.final_url or url

    def _next_count(self):
        if self.counter is not None:
            return self.counter(self)
        if len(self._counts) > 1:
            return self._counts.pop(0)
        return self._counts[0]

    def evaluate(self, expression):
        if expression == TAG_COUNT_JS:
            return self._next_count()
        if expression == SCROLL_TAG_LIST_JS:
            self.scrolled = True
            return None
        return "A Family Venture"

    def wait_for_timeout(self, ms):
        self.waits.append(ms)

    def content(self):
        return self.html

    def close(self):
        self.closed = True

class FakeContext:
    def __init__(self, page):
        self.page = page
        self.cookies = []
        self.routes = []
        self.cleared = False
        self.closed = False

    def add_cookies(self, cookies):
        self.cookies.extend(cookies)

    def route(self, pattern, handler):
        self.routes.append((pattern, handler))

    def new_page(self):
        return self.page

    def clear_cookies(self):
        self.cleared = True
        self.cookies = []

    def close(self):
        self.closed = True

class FakeBrowser:
    def __init__(self, context):
        self.context = context
        self.context_kwargs = None
        self.closed = False

    def new_context(self, **kwargs):
        self.context_kwargs = kwargs
        return self.context

    def close(self):
        self.closed = True

class FakeChromium:
    def __init__(self, browser, launch_error=None):
        self.browser = browser
        self.launch_error = launch_error
        self.launch_kwargs = None

    def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        if self.launch_error is not None:
            raise self.launch_error
        return self.browser

class FakePlaywright:
    def __init__(self, page=None, launch_error=None):
        self.page = page or FakePage()
        self.context = FakeContext(self.page)
        self.browser = FakeBrowser(self.context)
        self.chromium = FakeChromium(self.browser, launch_error=launch_error)
        self.exited = False

    def __call__(self):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True
        return False


# --- requests fakes ---

class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text

class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

class StubFetcher:
    """Stands in for either fetcher at the orchestrator seam."""

    def __init__(self, markup=None, error=None):
        self.markup = markup
        self.error = error
        self.calls = []

    def fetch_markup(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.markup
