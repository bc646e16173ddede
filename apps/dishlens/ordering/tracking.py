"""Remembers the last order placed from this device so its status can be shown again."""

import logging

from dishlens_schemas import TrackedOrder
from pydantic import ValidationError

from apps.dishlens.storage import LocalStorage

logger = logging.getLogger(__name__)


def tracking_key(slug: str) -> str:
    return f"dishlens_order_tracking:{slug}"


def save_order_tracking(
    storage: LocalStorage, slug: str, order_id: str, order_token: str | None
) -> bool:
    tracked = TrackedOrder(order_id=order_id, order_token=order_token)
    return storage.set_json(tracking_key(slug), tracked.to_wire())


def load_order_tracking(storage: LocalStorage, slug: str) -> TrackedOrder | None:
    """The tracked order, or None if there is none or it has no order id."""
    data = storage.get_json(tracking_key(slug))
    if not isinstance(data, dict) or not data.get("orderId"):
        return None
    try:
        return TrackedOrder.model_validate(data)
    except ValidationError:
        logger.warning("Discarding corrupt order tracking record for %s", slug)
        return None


def clear_order_tracking(storage: LocalStorage, slug: str) -> None:
    storage.remove(tracking_key(slug))
