"""
Restaurant staff and admin endpoints.

Every call here sends the bearer token obtained from ``login``.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from dishlens_schemas import (
    AuthUser,
    CreateTable,
    CreateWaiter,
    LoginResult,
    OrderSnapshot,
    OrderStatus,
    RestaurantTable,
    TablesStatus,
    UpdateTable,
    UpdateWaiter,
    WaiterProfile,
)

from apps.dishlens.api.base import DishLensClient, UploadFile, seg

logger = logging.getLogger(__name__)

# Raw statuses of orders no one in the kitchen has seen yet
UNACKNOWLEDGED_STATUSES = frozenset({"NEW", "PLACED"})


def status_param(status: str | Iterable[str] | None) -> str | None:
    """Comma-join a status filter; a single string passes through."""
    if status is None:
        return None
    if isinstance(status, str):
        return status or None
    joined = ",".join(str(getattr(s, "value", s)) for s in status)
    return joined or None


class StaffAPI(DishLensClient):
    """
    Client for the restaurant dashboard (menu, orders, waiters, tables).

    Usage:
        async with StaffAPI() as api:
            await api.login("owner@example.com", "secret")
            orders = await api.list_orders(restaurant_id, status=["PLACED"])
    """

    def _restaurant(self, restaurant_id: str) -> str:
        return f"/restaurants/{seg(restaurant_id)}"

    # =========================================================================
    # Auth
    # =========================================================================

    async def login(self, email: str, password: str) -> LoginResult:
        """Log in and keep the access token for subsequent calls."""
        data = await self.post(
            "/auth/login",
            json_body={"email": email, "password": password},
            auth=False,
        )
        result = LoginResult.model_validate(data)
        self.token = result.access_token
        logger.info("Logged in as %s", email)
        return result

    async def me(self) -> AuthUser:
        return AuthUser.model_validate(await self.get("/users/me"))

    async def list_restaurants(self) -> list[dict[str, Any]]:
        return await self.get("/restaurants") or []

    # =========================================================================
    # Orders
    # =========================================================================

    async def _fetch_orders(
        self, restaurant_id: str, status: str | Iterable[str] | None
    ) -> list[dict[str, Any]]:
        data = await self.get(
            f"{self._restaurant(restaurant_id)}/orders",
            params={"status": status_param(status)},
        )
        if not isinstance(data, list):
            return []
        return [o for o in data if isinstance(o, dict)]

    async def list_orders(
        self,
        restaurant_id: str,
        status: str | Iterable[str] | None = None,
        auto_ack: bool = False,
    ) -> list[OrderSnapshot]:
        """
        List a restaurant's orders, optionally filtered by status.

        With ``auto_ack``, freshly placed orders are moved to IN_KITCHEN and
        the list is fetched again. A failed acknowledgement is logged and
        does not fail the listing.
        """
        data = await self._fetch_orders(restaurant_id, status)

        if auto_ack:
            to_ack = [
                o["id"]
                for o in data
                if o.get("id")
                and str(o.get("status") or "").upper() in UNACKNOWLEDGED_STATUSES
            ]
            if to_ack:
                results = await asyncio.gather(
                    *(
                        self.update_order_status(
                            restaurant_id, order_id, OrderStatus.IN_KITCHEN
                        )
                        for order_id in to_ack
                    ),
                    return_exceptions=True,
                )
                for order_id, result in zip(to_ack, results):
                    if isinstance(result, Exception):
                        logger.warning(
                            "Auto-acknowledge failed for order %s: %s", order_id, result
                        )
                data = await self._fetch_orders(restaurant_id, status)

        return [OrderSnapshot.model_validate(o) for o in data]

    async def list_table_orders(
        self, restaurant_id: str, table_number: str, active_only: bool = False
    ) -> list[OrderSnapshot]:
        data = await self.get(
            f"{self._restaurant(restaurant_id)}/tables/{seg(table_number)}/orders",
            params={"activeOnly": 1 if active_only else None},
        )
        return [OrderSnapshot.model_validate(o) for o in data or []]

    async def claim_order(self, restaurant_id: str, order_id: str) -> OrderSnapshot:
        data = await self.post(
            f"{self._restaurant(restaurant_id)}/orders/{seg(order_id)}/claim"
        )
        return OrderSnapshot.model_validate(data)

    async def update_order(
        self, restaurant_id: str, order_id: str, body: dict[str, Any]
    ) -> OrderSnapshot:
        data = await self.patch(
            f"{self._restaurant(restaurant_id)}/orders/{seg(order_id)}",
            json_body=body,
        )
        return OrderSnapshot.model_validate(data)

    async def update_order_status(
        self, restaurant_id: str, order_id: str, status: OrderStatus | str
    ) -> OrderSnapshot:
        """PATCH an order's status. No transition rules are checked here."""
        value = status.value if isinstance(status, OrderStatus) else str(status)
        data = await self.patch(
            f"{self._restaurant(restaurant_id)}/orders/{seg(order_id)}/status",
            json_body={"status": value},
        )
        logger.info("Order %s moved to %s", order_id, value)
        return OrderSnapshot.model_validate(data)

    # =========================================================================
    # Menu management
    # =========================================================================

    async def admin_menu(self, restaurant_id: str) -> Any:
        """Full menu including inactive categories and items."""
        return await self.get(f"{self._restaurant(restaurant_id)}/menu")

    async def create_menu_category(
        self, restaurant_id: str, body: dict[str, Any]
    ) -> Any:
        return await self.post(
            f"{self._restaurant(restaurant_id)}/menu/categories", json_body=body
        )

    async def update_menu_category(
        self, restaurant_id: str, category_id: str, body: dict[str, Any]
    ) -> Any:
        return await self.patch(
            f"{self._restaurant(restaurant_id)}/menu/categories/{seg(category_id)}",
            json_body=body,
        )

    async def deactivate_menu_category(
        self, restaurant_id: str, category_id: str
    ) -> Any:
        return await self.patch(
            f"{self._restaurant(restaurant_id)}/menu/categories/{seg(category_id)}/deactivate"
        )

    async def create_menu_item(self, restaurant_id: str, body: dict[str, Any]) -> Any:
        """Create a dish. Prices go over the wire as ``priceCents``."""
        return await self.post(
            f"{self._restaurant(restaurant_id)}/menu/items", json_body=body
        )

    async def update_menu_item(
        self, restaurant_id: str, item_id: str, body: dict[str, Any]
    ) -> Any:
        return await self.patch(
            f"{self._restaurant(restaurant_id)}/menu/items/{seg(item_id)}",
            json_body=body,
        )

    async def deactivate_menu_item(self, restaurant_id: str, item_id: str) -> Any:
        return await self.patch(
            f"{self._restaurant(restaurant_id)}/menu/items/{seg(item_id)}/deactivate"
        )

    discontinue_menu_item = deactivate_menu_item

    # =========================================================================
    # Media uploads
    # =========================================================================

    async def upload_menu_item_image(self, item_id: str, file: UploadFile) -> Any:
        return await self.post(
            f"/menu-items/{seg(item_id)}/image", files={"file": file}
        )

    async def upload_menu_item_video(self, item_id: str, file: UploadFile) -> Any:
        return await self.post(
            f"/menu-items/{seg(item_id)}/video", files={"file": file}
        )

    async def upload_restaurant_logo(self, restaurant_id: str, file: UploadFile) -> Any:
        return await self.post(
            f"{self._restaurant(restaurant_id)}/logo", files={"file": file}
        )

    async def upload_restaurant_hero(self, restaurant_id: str, file: UploadFile) -> Any:
        return await self.post(
            f"{self._restaurant(restaurant_id)}/hero", files={"file": file}
        )

    # =========================================================================
    # QR codes and ratings
    # =========================================================================

    async def get_qr_token(
        self, restaurant_id: str, table_number: str | None = None
    ) -> Any:
        """Legacy signed token for a table's QR code."""
        return await self.get(
            f"{self._restaurant(restaurant_id)}/qr-token",
            params={"table": table_number or None},
        )

    async def restaurant_ratings(self, restaurant_id: str) -> Any:
        return await self.get(f"{self._restaurant(restaurant_id)}/ratings")

    # =========================================================================
    # Waiters
    # =========================================================================

    async def list_waiters(
        self, restaurant_id: str, include_inactive: bool = False
    ) -> list[WaiterProfile]:
        data = await self.get(
            f"{self._restaurant(restaurant_id)}/waiters",
            params={"includeInactive": "true" if include_inactive else None},
        )
        return [WaiterProfile.model_validate(w) for w in data or []]

    async def get_waiter(self, restaurant_id: str, waiter_id: str) -> WaiterProfile:
        data = await self.get(
            f"{self._restaurant(restaurant_id)}/waiters/{seg(waiter_id)}"
        )
        return WaiterProfile.model_validate(data)

    async def create_waiter(
        self, restaurant_id: str, waiter: CreateWaiter
    ) -> WaiterProfile:
        data = await self.post(
            f"{self._restaurant(restaurant_id)}/waiters",
            json_body=waiter.to_wire(exclude_unset=True),
        )
        return WaiterProfile.model_validate(data)

    async def update_waiter(
        self, restaurant_id: str, waiter_id: str, updates: UpdateWaiter
    ) -> WaiterProfile:
        data = await self.patch(
            f"{self._restaurant(restaurant_id)}/waiters/{seg(waiter_id)}",
            json_body=updates.to_wire(exclude_unset=True),
        )
        return WaiterProfile.model_validate(data)

    async def upload_waiter_photo(
        self, restaurant_id: str, waiter_id: str, file: UploadFile
    ) -> WaiterProfile:
        data = await self.post(
            f"{self._restaurant(restaurant_id)}/waiters/{seg(waiter_id)}/photo",
            files={"file": file},
        )
        return WaiterProfile.model_validate(data)

    async def deactivate_waiter(
        self, restaurant_id: str, waiter_id: str
    ) -> WaiterProfile:
        data = await self.post(
            f"{self._restaurant(restaurant_id)}/waiters/{seg(waiter_id)}/deactivate"
        )
        return WaiterProfile.model_validate(data)

    # =========================================================================
    # Tables
    # =========================================================================

    async def list_tables(
        self, restaurant_id: str, include_inactive: bool = False
    ) -> list[RestaurantTable]:
        data = await self.get(
            f"{self._restaurant(restaurant_id)}/tables",
            params={"includeInactive": "true" if include_inactive else None},
        )
        return [RestaurantTable.model_validate(t) for t in data or []]

    async def get_table(self, restaurant_id: str, table_id: str) -> RestaurantTable:
        data = await self.get(f"{self._restaurant(restaurant_id)}/tables/{seg(table_id)}")
        return RestaurantTable.model_validate(data)

    async def create_table(
        self, restaurant_id: str, table: CreateTable
    ) -> RestaurantTable:
        data = await self.post(
            f"{self._restaurant(restaurant_id)}/tables",
            json_body=table.to_wire(exclude_unset=True),
        )
        return RestaurantTable.model_validate(data)

    async def update_table(
        self, restaurant_id: str, table_id: str, updates: UpdateTable
    ) -> RestaurantTable:
        data = await self.patch(
            f"{self._restaurant(restaurant_id)}/tables/{seg(table_id)}",
            json_body=updates.to_wire(exclude_unset=True),
        )
        return RestaurantTable.model_validate(data)

    async def deactivate_table(
        self, restaurant_id: str, table_id: str
    ) -> RestaurantTable:
        data = await self.post(
            f"{self._restaurant(restaurant_id)}/tables/{seg(table_id)}/deactivate"
        )
        return RestaurantTable.model_validate(data)

    async def delete_table(self, restaurant_id: str, table_id: str) -> bool:
        """Permanently delete a table. Returns the API's ``ok`` flag."""
        data = await self.delete(
            f"{self._restaurant(restaurant_id)}/tables/{seg(table_id)}"
        )
        return bool(isinstance(data, dict) and data.get("ok"))

    async def get_tables_status(self, restaurant_id: str) -> TablesStatus:
        data = await self.get(f"{self._restaurant(restaurant_id)}/tables-status")
        return TablesStatus.model_validate(data or {})
