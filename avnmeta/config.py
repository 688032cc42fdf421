import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name, default):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Site ---
BASE_URL = os.getenv("AVNMETA_BASE_URL", "https://f95zone.to").rstrip("/")
THREADS_URL = f"{BASE_URL}/threads/"
SITE_TITLE_SUFFIX = " | F95zone"
ATTACHMENTS_HOST = "attachments.f95zone.to"
PREVIEW_HOST = "preview.f95zone.to"
# Image requests allowed through the rendered fetcher's resource filter
COVER_IMAGE_URL_MARKERS = (
    ATTACHMENTS_HOST,
    PREVIEW_HOST,
    "f95zone.to/attachments/",
)
SESSION_COOKIE_NAMES = ("xf_session", "xf_user")

USER_AGENT = os.getenv(
    "AVNMETA_USER_AGENT",
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
)

# --- Rendered fetch timings (milliseconds) ---
PAGE_LOAD_TIMEOUT_MS = _env_int("AVNMETA_PAGE_LOAD_TIMEOUT_MS", 15000)
STABILIZE_TIMEOUT_MS = _env_int("AVNMETA_STABILIZE_TIMEOUT_MS", 5000)
POLL_INTERVAL_MS = _env_int("AVNMETA_POLL_INTERVAL_MS", 100)
STABLE_WINDOW_MS = _env_int("AVNMETA_STABLE_WINDOW_MS", 1000)
RECOVERY_PAUSE_MS = _env_int("AVNMETA_RECOVERY_PAUSE_MS", 1000)
HEADLESS = _env_bool("AVNMETA_HEADLESS", True)

# Tuned against real threads; pages with fewer tags are rechecked after scrolling
MIN_EXPECTED_TAGS = _env_int("AVNMETA_MIN_EXPECTED_TAGS", 35)

# --- Plain fetch ---
REQUEST_TIMEOUT = _env_int("AVNMETA_REQUEST_TIMEOUT", 20) # seconds

COOKIES_FILE = os.getenv("AVNMETA_COOKIES_FILE")
