"""
Pytest configuration for DishLens client tests.
"""

import pytest

from apps.dishlens.api import KitchenAPI, PlatformAPI, PublicAPI, StaffAPI, WaiterAPI
from apps.dishlens.storage import LocalStorage, MemoryBackend

API_BASE = "http://api.dishlens.test"


@pytest.fixture
def api_base() -> str:
    """Base URL every test client talks to (mocked with respx)."""
    return API_BASE


@pytest.fixture
def memory_backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def storage(memory_backend: MemoryBackend) -> LocalStorage:
    """Working in-memory device storage."""
    return LocalStorage(memory_backend)


@pytest.fixture
def broken_storage() -> LocalStorage:
    """Storage whose every read and write fails, like a locked-down browser."""
    return LocalStorage(MemoryBackend(unavailable=True))


@pytest.fixture
def public_api() -> PublicAPI:
    return PublicAPI(base_url=API_BASE)


@pytest.fixture
def staff_api() -> StaffAPI:
    return StaffAPI(base_url=API_BASE, token="staff-token")


@pytest.fixture
def kitchen_api() -> KitchenAPI:
    return KitchenAPI(base_url=API_BASE, token="kitchen-token")


@pytest.fixture
def waiter_api() -> WaiterAPI:
    return WaiterAPI(base_url=API_BASE, token="waiter-token")


@pytest.fixture
def platform_api() -> PlatformAPI:
    return PlatformAPI(base_url=API_BASE, token="platform-token")
