from bs4 import BeautifulSoup


class ThreadPage:
    """
    Markup of one thread page plus its parsed tree.
    The tree is built on first use and shared by every extraction step.
    """

    def __init__(self, markup):
        if isinstance(markup, bytes):
            markup = markup.decode("utf-8", errors="replace")
        self.markup = markup or ""
        self._soup = None

    @property
    def soup(self):
        if self._soup is None:
            self._soup = BeautifulSoup(self.markup, 'html.parser')
        return self._soup
