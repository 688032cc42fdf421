import json
import os
from http.cookiejar import CookieJar

from requests.cookies import RequestsCookieJar, create_cookie

from avnmeta.config import BASE_URL, SESSION_COOKIE_NAMES
from avnmeta.logging_config import logger

DEFAULT_COOKIE_DOMAIN = "." + BASE_URL.split("://", 1)[-1].split("/", 1)[0]


def _cookie_from_export(entry):
    """Builds a cookie from a browser-export entry (name/value/domain/path/...)."""
    expires = entry.get("expires", entry.get("expirationDate"))
    if expires is not None and expires < 0:
        expires = None
    return create_cookie(
        name=entry["name"],
        value=entry.get("value", ""),
        domain=entry.get("domain") or DEFAULT_COOKIE_DOMAIN,
        path=entry.get("path") or "/",
        secure=bool(entry.get("secure", False)),
        expires=int(expires) if expires is not None else None,
    )


def load_cookies(source=None):
    """
    Returns a new cookie jar holding the caller's authenticated cookies.

    `source` may be a cookie jar, a {name: value} dict, a list of exported
    cookie dicts, or the path to a JSON file holding either of the latter.
    The source itself is never modified.
    """
    jar = RequestsCookieJar()
    if source is None:
        return jar

    if isinstance(source, (str, os.PathLike)):
        with open(source, encoding="utf-8") as f:
            source = json.load(f)
        logger.info("COOKIES: Loaded cookie export from file.")

    if isinstance(source, CookieJar):
        jar.update(source)
    elif isinstance(source, dict):
        for name, value in source.items():
            jar.set_cookie(create_cookie(name=name, value=str(value), domain=DEFAULT_COOKIE_DOMAIN, path="/"))
    elif isinstance(source, list):
        for entry in source:
            jar.set_cookie(_cookie_from_export(entry))
    else:
        raise TypeError(f"Unsupported cookie source: {type(source).__name__}")
    return jar


def to_playwright_cookies(jar):
    """Converts a cookie jar into the dicts BrowserContext.add_cookies() expects."""
    cookies = []
    for cookie in jar:
        entry = {
            "name": cookie.name,
            "value": cookie.value or "",
            "domain": cookie.domain or DEFAULT_COOKIE_DOMAIN,
            "path": cookie.path or "/",
            "secure": bool(cookie.secure),
        }
        if cookie.expires is not None:
            entry["expires"] = cookie.expires
        cookies.append(entry)
    return cookies


def has_session_cookie(jar):
    return any(cookie.name in SESSION_COOKIE_NAMES for cookie in jar)
