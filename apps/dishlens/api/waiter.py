"""Waiter app endpoints: floor map, table claims, calls and serving."""

import logging
from typing import Any

from dishlens_schemas import (
    FloorMap,
    OrderSnapshot,
    OrderStatus,
    TableAssignment,
    WaiterCall,
    WaiterOrderPayload,
    WaiterProfile,
    WaiterTableOrders,
)

from apps.dishlens.api.base import DishLensClient, seg

logger = logging.getLogger(__name__)


class WaiterAPI(DishLensClient):
    """
    Client for the signed-in waiter.

    Calls are scoped by the token; only ready/serving endpoints need the
    restaurant id explicitly.
    """

    async def get_profile(self) -> WaiterProfile:
        return WaiterProfile.model_validate(await self.get("/waiter/me"))

    async def get_floor_map(self, restaurant_id: str | None = None) -> FloorMap:
        data = await self.get(
            "/waiter/floor-map", params={"restaurantId": restaurant_id}
        )
        return FloorMap.model_validate(data or {})

    # =========================================================================
    # Tables
    # =========================================================================

    async def claim_table(self, table_id: str) -> TableAssignment:
        data = await self.post(f"/waiter/tables/{seg(table_id)}/claim")
        return TableAssignment.model_validate(data)

    async def take_over_table(
        self, table_id: str, reason: str | None = None
    ) -> TableAssignment:
        data = await self.post(
            f"/waiter/tables/{seg(table_id)}/takeover",
            json_body={"reason": reason},
        )
        logger.info("Took over table %s", table_id)
        return TableAssignment.model_validate(data)

    async def release_table(self, table_id: str) -> TableAssignment:
        data = await self.post(f"/waiter/tables/{seg(table_id)}/release")
        return TableAssignment.model_validate(data)

    async def get_table_orders(self, table_id: str) -> WaiterTableOrders:
        data = await self.get(f"/waiter/tables/{seg(table_id)}/orders")
        return WaiterTableOrders.model_validate(data)

    # =========================================================================
    # Calls
    # =========================================================================

    async def get_calls(self, status: str | None = None) -> list[WaiterCall]:
        """Open calls on the waiter's tables."""
        data = await self.get("/waiter/calls", params={"status": status or None})
        calls = data.get("calls", []) if isinstance(data, dict) else []
        return [WaiterCall.model_validate(c) for c in calls]

    async def accept_call(self, call_id: str) -> WaiterCall:
        return WaiterCall.model_validate(
            await self.post(f"/waiter/calls/{seg(call_id)}/accept")
        )

    async def close_call(self, call_id: str) -> WaiterCall:
        return WaiterCall.model_validate(
            await self.post(f"/waiter/calls/{seg(call_id)}/close")
        )

    async def handle_call(self, call_id: str) -> WaiterCall:
        """Older spelling of ``close_call`` still served by the API."""
        return WaiterCall.model_validate(
            await self.post(f"/waiter/calls/{seg(call_id)}/handle")
        )

    # =========================================================================
    # Orders
    # =========================================================================

    async def get_ready_orders(self, restaurant_id: str) -> list[OrderSnapshot]:
        data = await self.get(
            "/waiter/orders",
            params={"restaurantId": restaurant_id, "status": OrderStatus.READY.value},
        )
        return [OrderSnapshot.model_validate(o) for o in data or []]

    async def mark_serving(self, restaurant_id: str, order_id: str) -> OrderSnapshot:
        data = await self.post(
            f"/waiter/orders/{seg(order_id)}/mark-serving",
            params={"restaurantId": restaurant_id},
        )
        return OrderSnapshot.model_validate(data)

    async def mark_served(self, restaurant_id: str, order_id: str) -> OrderSnapshot:
        data = await self.post(
            f"/waiter/orders/{seg(order_id)}/mark-served",
            params={"restaurantId": restaurant_id},
        )
        return OrderSnapshot.model_validate(data)

    async def create_order(
        self, restaurant_id: str, payload: WaiterOrderPayload
    ) -> Any:
        """Place an order on behalf of a table (source = WAITER)."""
        return await self.post(
            "/waiter/orders/create",
            params={"restaurantId": restaurant_id},
            json_body=payload.to_wire(),
        )
