"""Order placement, tracking, and status polling."""

from apps.dishlens.ordering.polling import (
    CancellationToken,
    OrderStatusPoller,
    Poller,
    TableOrdersPoller,
    WaiterCallWatcher,
    floor_map_poller,
    kitchen_orders_poller,
    order_status_page_poller,
)
from apps.dishlens.ordering.services import call_waiter, submit_order
from apps.dishlens.ordering.tracking import (
    clear_order_tracking,
    load_order_tracking,
    save_order_tracking,
)

__all__ = [
    "CancellationToken",
    "OrderStatusPoller",
    "Poller",
    "TableOrdersPoller",
    "WaiterCallWatcher",
    "call_waiter",
    "clear_order_tracking",
    "floor_map_poller",
    "kitchen_orders_poller",
    "load_order_tracking",
    "order_status_page_poller",
    "save_order_tracking",
    "submit_order",
]
