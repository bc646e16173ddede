"""
Public (customer) API endpoints.

None of these need a bearer token; table sessions and order tokens are the
credentials.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from dishlens_schemas import (
    CreatedOrder,
    CreateOrderPayload,
    CurrentWaiterCall,
    MenuCategory,
    MenuDish,
    OrderSnapshot,
    PublicMenu,
    TableService,
    TableSession,
    WaiterCall,
)

from apps.dishlens.api.base import DishLensClient, seg

logger = logging.getLogger(__name__)


def dollars_from_cents(cents: Any) -> Decimal:
    """Whole cents to dollars; anything non-numeric is zero."""
    try:
        value = Decimal(str(cents))
    except ArithmeticError:
        return Decimal("0.00")
    if not value.is_finite():
        return Decimal("0.00")
    return (value.to_integral_value(rounding=ROUND_HALF_UP) / 100).quantize(Decimal("0.01"))


def parse_menu(payload: Any) -> PublicMenu:
    """
    Normalize the raw menu payload into ``PublicMenu``.

    Prices arrive as ``priceCents`` and become dollars. Each dish carries
    its category's name. Malformed sections are treated as empty.
    """
    if not isinstance(payload, dict):
        payload = {}
    restaurant = payload.get("restaurant")
    raw_categories = payload.get("categories")
    if not isinstance(raw_categories, list):
        raw_categories = []

    categories: list[MenuCategory] = []
    for raw in raw_categories:
        if not isinstance(raw, dict):
            continue
        category_name = str(raw.get("name") or "")
        raw_items = raw.get("items") if isinstance(raw.get("items"), list) else []
        dishes = [
            MenuDish(
                id=str(item.get("id")),
                name=str(item.get("name") or ""),
                category_name=category_name,
                description=item.get("description"),
                price=dollars_from_cents(item.get("priceCents")),
                currency=str(item.get("currency") or "USD"),
                is_veg=item.get("isVeg") if isinstance(item.get("isVeg"), bool) else None,
                spice=item.get("spiceLevel"),
                allergens=item.get("allergens") if isinstance(item.get("allergens"), list) else None,
                image_url=item.get("imageUrl"),
                video_url=item.get("videoUrl"),
                avg_rating=item.get("avgRating") if isinstance(item.get("avgRating"), (int, float)) else None,
                rating_count=item.get("ratingCount") if isinstance(item.get("ratingCount"), int) else None,
            )
            for item in raw_items
            if isinstance(item, dict)
        ]
        categories.append(
            MenuCategory(id=str(raw.get("id")), name=category_name, items=dishes)
        )

    return PublicMenu(
        restaurant=restaurant if isinstance(restaurant, dict) else None,
        categories=categories,
    )


class PublicAPI(DishLensClient):
    """
    Customer-facing client.

    Usage:
        async with PublicAPI() as api:
            menu = await api.get_menu("demo")
    """

    def _restaurant(self, slug: str) -> str:
        return f"/public/restaurants/{seg(slug)}"

    # =========================================================================
    # Menu
    # =========================================================================

    async def get_menu(self, slug: str) -> PublicMenu:
        data = await self.get(f"{self._restaurant(slug)}/menu", auth=False)
        return parse_menu(data)

    async def rate_menu_item(
        self, menu_item_id: str, stars: int, comment: str | None = None
    ) -> Any:
        return await self.post(
            f"/public/menu-items/{seg(menu_item_id)}/rating",
            json_body={"stars": stars, "comment": comment},
            auth=False,
        )

    # =========================================================================
    # Table sessions
    # =========================================================================

    async def resolve_table_session(
        self, slug: str, access_token: str, device_id: str
    ) -> TableSession:
        """Exchange a QR capability token for a table session."""
        data = await self.post(
            f"{self._restaurant(slug)}/table-sessions/resolve",
            json_body={"accessToken": access_token, "deviceId": device_id},
            auth=False,
        )
        return TableSession.model_validate(data)

    async def start_table_session(
        self, slug: str, token: str, device_id: str
    ) -> TableSession:
        """Start a session from a legacy dot-delimited signed token."""
        data = await self.post(
            f"{self._restaurant(slug)}/table-sessions/start",
            json_body={"token": token, "deviceId": device_id},
            auth=False,
        )
        return TableSession.model_validate(data)

    async def start_guest_session(
        self, slug: str, table_number: str, device_id: str
    ) -> TableSession:
        data = await self.post(
            f"{self._restaurant(slug)}/table-sessions/guest",
            json_body={"tableNumber": table_number, "deviceId": device_id},
            auth=False,
        )
        return TableSession.model_validate(data)

    # =========================================================================
    # Orders
    # =========================================================================

    async def create_order(
        self, slug: str, payload: CreateOrderPayload
    ) -> CreatedOrder:
        data = await self.post(
            f"{self._restaurant(slug)}/orders",
            json_body=payload.to_wire(),
            auth=False,
        )
        return CreatedOrder.model_validate(data)

    async def get_order(
        self, slug: str, order_id: str, order_token: str | None = None
    ) -> OrderSnapshot:
        data = await self.get(
            f"{self._restaurant(slug)}/orders/{seg(order_id)}",
            params={"token": order_token or None},
            auth=False,
        )
        return OrderSnapshot.model_validate(data)

    async def get_table_orders(
        self, slug: str, table_session_id: str, token: str | None = None
    ) -> list[OrderSnapshot]:
        """All orders placed on a table session (``token`` is the session secret)."""
        data = await self.get(
            f"{self._restaurant(slug)}/table/{seg(table_session_id)}/orders",
            params={"token": token or None},
            auth=False,
        )
        return [OrderSnapshot.model_validate(o) for o in data or []]

    # =========================================================================
    # Waiter service
    # =========================================================================

    async def call_waiter(
        self,
        table_session_id: str,
        session_secret: str,
        device_id: str | None = None,
        note: str | None = None,
    ) -> WaiterCall:
        """
        Ask for a waiter.

        Raises:
            DishLensRateLimitError: The session called too often (the API
                allows a few calls per ten minutes).
        """
        body: dict[str, Any] = {
            "tableSessionId": table_session_id,
            "sessionSecret": session_secret,
        }
        if device_id:
            body["deviceId"] = device_id
        if note:
            body["note"] = note
        data = await self.post("/public/waiter-calls", json_body=body, auth=False)
        return WaiterCall.model_validate(data)

    async def get_current_waiter_call(
        self, slug: str, table_session_id: str, token: str
    ) -> CurrentWaiterCall:
        data = await self.get(
            f"{self._restaurant(slug)}/waiter-calls/current",
            params={"tableSessionId": table_session_id, "token": token},
            auth=False,
        )
        return CurrentWaiterCall.model_validate(data or {})

    async def get_table_service(
        self, table_session_id: str, session_secret: str
    ) -> TableService:
        """Current waiter for the table and the state of any open call."""
        data = await self.get(
            "/public/table-service",
            params={
                "tableSessionId": table_session_id,
                "sessionSecret": session_secret,
            },
            auth=False,
        )
        return TableService.model_validate(data or {})
