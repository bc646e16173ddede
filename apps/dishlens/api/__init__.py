"""DishLens API clients - one per app surface."""

from enum import Enum
from typing import Any

from apps.dishlens.api.base import DishLensClient
from apps.dishlens.api.kitchen import KitchenAPI
from apps.dishlens.api.platform import PlatformAPI
from apps.dishlens.api.public import PublicAPI
from apps.dishlens.api.staff import StaffAPI
from apps.dishlens.api.waiter import WaiterAPI


class ApiSurface(str, Enum):
    PUBLIC = "public"
    STAFF = "staff"
    KITCHEN = "kitchen"
    WAITER = "waiter"
    PLATFORM = "platform"


_CLIENTS: dict[ApiSurface, type[DishLensClient]] = {
    ApiSurface.PUBLIC: PublicAPI,
    ApiSurface.STAFF: StaffAPI,
    ApiSurface.KITCHEN: KitchenAPI,
    ApiSurface.WAITER: WaiterAPI,
    ApiSurface.PLATFORM: PlatformAPI,
}


def get_client(surface: ApiSurface | str, **kwargs: Any) -> DishLensClient:
    """
    Get an API client for one surface of the DishLens API.

    Args:
        surface: Which surface to talk to.
        **kwargs: Passed to the client constructor (base_url, token,
            http_client, timeout).

    Raises:
        ValueError: If the surface is unknown.

    Example:
        api = get_client(ApiSurface.KITCHEN, token=token)
        orders = await api.get_orders(restaurant_id)
    """
    try:
        client_cls = _CLIENTS[ApiSurface(surface)]
    except ValueError:
        supported = ", ".join(s.value for s in ApiSurface)
        raise ValueError(
            f"Unsupported API surface: {surface}. Supported: {supported}"
        ) from None
    return client_cls(**kwargs)


__all__ = [
    "ApiSurface",
    "DishLensClient",
    "KitchenAPI",
    "PlatformAPI",
    "PublicAPI",
    "StaffAPI",
    "WaiterAPI",
    "get_client",
]
