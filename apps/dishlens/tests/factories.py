"""Factory classes for DishLens schema objects and raw API payloads."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import factory
from dishlens_schemas import CartItem, LineModifiers, OrderSnapshot, OrderStatus, TableSession


class TableSessionFactory(factory.Factory):
    """Factory for a live table session that can place orders."""

    class Meta:
        model = TableSession

    table_session_id = factory.Sequence(lambda n: f"ts-{n:04d}")
    table_number = "1"
    session_secret = factory.Sequence(lambda n: f"secret-{n:04d}")
    expires_at = factory.LazyFunction(lambda: datetime.now(UTC) + timedelta(hours=2))


class CartItemFactory(factory.Factory):
    class Meta:
        model = CartItem

    menu_item_id = factory.Sequence(lambda n: f"dish-{n}")
    name = factory.Faker("word")
    price = Decimal("9.99")
    image_url = None


class LineModifiersFactory(factory.Factory):
    class Meta:
        model = LineModifiers

    spice_level = "MEDIUM"
    spice_on_side = False
    allergens_avoid = factory.LazyFunction(list)
    special_instructions = None


class OrderSnapshotFactory(factory.Factory):
    class Meta:
        model = OrderSnapshot

    id = factory.Sequence(lambda n: f"order-{n}")
    status = OrderStatus.PLACED
    table_number = "1"
    total_cents = 1998
    currency = "USD"


class SessionPayloadFactory(factory.DictFactory):
    """Raw camelCase body returned by the table-session endpoints."""

    tableSessionId = factory.Sequence(lambda n: f"ts-api-{n:04d}")
    tableNumber = "1"
    sessionSecret = factory.Sequence(lambda n: f"api-secret-{n:04d}")
    expiresAt = factory.LazyFunction(
        lambda: (datetime.now(UTC) + timedelta(hours=2)).isoformat()
    )


class OrderPayloadFactory(factory.DictFactory):
    """Raw camelCase order body as the status endpoints return it."""

    id = factory.Sequence(lambda n: f"order-api-{n}")
    status = "PLACED"
    tableNumber = "1"
    totalCents = 1998
    currency = "USD"
    lines = factory.LazyFunction(list)
