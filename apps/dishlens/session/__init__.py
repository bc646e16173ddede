"""Table session handling: device id, persistence, and resolution."""

from apps.dishlens.session.device import (
    DEVICE_ID_KEY,
    FALLBACK_DEVICE_ID,
    get_or_create_device_id,
)
from apps.dishlens.session.resolver import (
    TableSessionResolver,
    is_access_token,
    normalize_table_number,
)
from apps.dishlens.session.store import TableSessionStore, session_key

__all__ = [
    "DEVICE_ID_KEY",
    "FALLBACK_DEVICE_ID",
    "TableSessionResolver",
    "TableSessionStore",
    "get_or_create_device_id",
    "is_access_token",
    "normalize_table_number",
    "session_key",
]
