"""
DishLens client settings.

Everything comes from the environment; nothing here is a secret. Staff
tokens are obtained at runtime through the login endpoints.
"""

import logging
from urllib.parse import urlsplit

import environ  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:3000"

env = environ.Env(
    DISHLENS_HTTP_TIMEOUT=(float, 30.0),
    DISHLENS_ORDER_TRACKER_POLL_SECONDS=(float, 3.0),
    DISHLENS_ORDER_STATUS_POLL_SECONDS=(float, 5.0),
    DISHLENS_TABLE_ORDERS_POLL_SECONDS=(float, 5.0),
    DISHLENS_WAITER_CALL_POLL_SECONDS=(float, 2.5),
    DISHLENS_WAITER_CALL_WATCH_SECONDS=(float, 120.0),
    DISHLENS_KITCHEN_POLL_SECONDS=(float, 10.0),
    DISHLENS_FLOOR_MAP_POLL_SECONDS=(float, 10.0),
)


def normalize_base_url(raw: str | None) -> str:
    """
    Turn whatever was configured into an absolute base URL without a
    trailing slash.

    Bare hosts get ``http://`` when local and ``https://`` otherwise.
    Anything that still doesn't parse falls back to the local default.
    """
    url = (raw or DEFAULT_API_BASE_URL).strip().rstrip("/")
    if not url.lower().startswith(("http://", "https://")):
        if "localhost" in url or url.startswith(("127.0.0.1", ":")):
            url = f"http://{url}"
        else:
            url = f"https://{url}"

    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError:
        parts = None

    if parts is None or not parts.hostname:
        logger.error(
            "Invalid API base URL: %s. Falling back to %s", raw, DEFAULT_API_BASE_URL
        )
        return DEFAULT_API_BASE_URL
    return url


# DISHLENS_API_BASE wins when both spellings are set.
API_BASE_URL = normalize_base_url(
    env.str("DISHLENS_API_BASE", default="")
    or env.str("DISHLENS_API_BASE_URL", default="")
    or None
)

HTTP_TIMEOUT = env("DISHLENS_HTTP_TIMEOUT")

# Directory for the file-backed local storage; unset keeps state in memory.
STORAGE_DIR = env.str("DISHLENS_STORAGE_DIR", default="") or None

# Poll intervals differ per screen on purpose; keep them independent.
ORDER_TRACKER_POLL_SECONDS = env("DISHLENS_ORDER_TRACKER_POLL_SECONDS")
ORDER_STATUS_POLL_SECONDS = env("DISHLENS_ORDER_STATUS_POLL_SECONDS")
TABLE_ORDERS_POLL_SECONDS = env("DISHLENS_TABLE_ORDERS_POLL_SECONDS")
WAITER_CALL_POLL_SECONDS = env("DISHLENS_WAITER_CALL_POLL_SECONDS")
WAITER_CALL_WATCH_SECONDS = env("DISHLENS_WAITER_CALL_WATCH_SECONDS")
KITCHEN_POLL_SECONDS = env("DISHLENS_KITCHEN_POLL_SECONDS")
FLOOR_MAP_POLL_SECONDS = env("DISHLENS_FLOOR_MAP_POLL_SECONDS")
