import re
from urllib.parse import urljoin

from avnmeta.config import ATTACHMENTS_HOST, BASE_URL, PREVIEW_HOST


def _first_attr(element, *names):
    if element is None:
        return None
    for name in names:
        value = element.get(name)
        if value and value.strip():
            return value.strip()
    return None


def _lightbox_image(soup):
    """Cover inside a lightbox container; the zoomer's full-size data-src wins."""
    for container in soup.select(".lbContainer"):
        img = container.find("img")
        if img is None:
            continue
        zoomer = container.select_one(".lbContainer-zoomer")
        src = _first_attr(zoomer, "data-src") or _first_attr(img, "data-src", "src")
        if src:
            return src
    return None


def _embedded_image(soup):
    img = (soup.select_one("img.bbImage[data-src]")
           or soup.select_one("img.bbImage[src]")
           or soup.select_one("[data-lb-id] img"))
    return _first_attr(img, "data-src", "src")


def _meta_image(soup):
    return _first_attr(soup.select_one('meta[property="og:image"]'), "content")


def normalize_image_url(url, base_url=BASE_URL):
    """Absolute, full-resolution URL on the attachments host."""
    if not url:
        return None
    url = urljoin(base_url + "/", url.strip())
    url = re.sub(r"^(https?://)" + re.escape(PREVIEW_HOST) + r"(?=/|$)", r"\g<1>" + ATTACHMENTS_HOST, url, flags=re.IGNORECASE)
    while "/thumb/" in url:
        url = url.replace("/thumb/", "/")
    return url


def resolve_image(soup):
    """
    Cover image of the thread, tried in order: lightbox image, embedded post
    image, then the page-level og:image meta tag.
    """
    for strategy in (_lightbox_image, _embedded_image, _meta_image):
        src = strategy(soup)
        if src:
            return normalize_image_url(src)
    return None
