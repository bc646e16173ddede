"""Kitchen display endpoints."""

from collections.abc import Iterable

from dishlens_schemas import OrderSnapshot, OrderStatus

from apps.dishlens.api.base import DishLensClient, seg
from apps.dishlens.api.staff import status_param

DEFAULT_KITCHEN_STATUSES = (OrderStatus.PLACED, OrderStatus.IN_KITCHEN)


class KitchenAPI(DishLensClient):
    """Orders the kitchen still has to cook, and marking them ready."""

    async def get_orders(
        self,
        restaurant_id: str,
        status: Iterable[str] | None = None,
    ) -> list[OrderSnapshot]:
        data = await self.get(
            "/kitchen/orders",
            params={
                "restaurantId": restaurant_id,
                "status": status_param(status) or status_param(DEFAULT_KITCHEN_STATUSES),
            },
        )
        return [OrderSnapshot.model_validate(o) for o in data or []]

    async def mark_ready(self, restaurant_id: str, order_id: str) -> OrderSnapshot:
        data = await self.post(
            f"/kitchen/orders/{seg(order_id)}/mark-ready",
            params={"restaurantId": restaurant_id},
        )
        return OrderSnapshot.model_validate(data)
