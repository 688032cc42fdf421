class ScraperError(Exception):
    """Base class for errors raised while scraping a thread."""


class FetchError(ScraperError):
    """The plain HTTP fetch failed (network error or non-2xx status)."""

    def __init__(self, message, url=None, status_code=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MissingTitleError(ScraperError):
    """The markup has no <title> text to build a record around."""
