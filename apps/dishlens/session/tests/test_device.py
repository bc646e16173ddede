"""Tests for the per-device identifier."""

import re

from apps.dishlens.session.device import (
    DEVICE_ID_KEY,
    FALLBACK_DEVICE_ID,
    get_or_create_device_id,
    new_device_id,
)
from apps.dishlens.storage import LocalStorage, MemoryBackend


def test_new_device_id_shape():
    device_id = new_device_id()

    assert re.fullmatch(r"[0-9a-z]+-[0-9a-z]{12}", device_id)


def test_new_device_ids_differ():
    assert new_device_id() != new_device_id()


def test_created_once_and_reused(storage, memory_backend):
    first = get_or_create_device_id(storage)
    second = get_or_create_device_id(storage)

    assert first == second
    assert memory_backend.get_item(DEVICE_ID_KEY) == first


def test_existing_id_is_kept():
    storage = LocalStorage(MemoryBackend({DEVICE_ID_KEY: "already-here-123"}))

    assert get_or_create_device_id(storage) == "already-here-123"


def test_short_stored_id_is_replaced():
    backend = MemoryBackend({DEVICE_ID_KEY: "abc"})

    device_id = get_or_create_device_id(LocalStorage(backend))

    assert device_id != "abc"
    assert backend.get_item(DEVICE_ID_KEY) == device_id


def test_fallback_when_storage_is_broken(broken_storage):
    assert get_or_create_device_id(broken_storage) == FALLBACK_DEVICE_ID
    assert get_or_create_device_id(broken_storage) == FALLBACK_DEVICE_ID


def test_fallback_without_storage():
    assert get_or_create_device_id(LocalStorage(None)) == FALLBACK_DEVICE_ID
