"""Stable per-device identifier sent with every session resolution."""

import secrets
import string
import time

from apps.dishlens.storage import LocalStorage

DEVICE_ID_KEY = "dishlens_device_id"

# Used when nothing can be persisted; the backend treats it as "unknown device".
FALLBACK_DEVICE_ID = "dishlens-device-unavailable"

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits)) or "0"


def new_device_id() -> str:
    """``<ms timestamp in base36>-<12 random chars>``."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(12))
    return f"{_base36(int(time.time() * 1000))}-{suffix}"


def get_or_create_device_id(storage: LocalStorage) -> str:
    """
    Return this device's id, generating and caching one on first use.

    Stored values shorter than 8 characters are replaced. If the new id
    cannot be persisted, the fallback constant is returned instead, so the
    id never changes from call to call.
    """
    existing = storage.get_raw(DEVICE_ID_KEY)
    if existing and len(existing) >= 8:
        return existing

    created = new_device_id()
    if not storage.set_raw(DEVICE_ID_KEY, created):
        return FALLBACK_DEVICE_ID
    return created
