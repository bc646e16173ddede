"""Order schemas - order lifecycle, snapshots, and waiter calls."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from dishlens_schemas.cart import OrderLinePayload, money_cents
from dishlens_schemas.common import WireModel

# =============================================================================
# Status
# =============================================================================


class OrderStatus(str, Enum):
    """Order lifecycle status, as used by current API versions."""

    PLACED = "PLACED"
    IN_KITCHEN = "IN_KITCHEN"
    READY = "READY"
    SERVING = "SERVING"
    SERVED = "SERVED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def message(self) -> str:
        return STATUS_MESSAGES[self]


TERMINAL_STATUSES = frozenset({OrderStatus.SERVED, OrderStatus.CANCELLED})

# Older API versions (and the kitchen dashboard) still send these.
LEGACY_STATUS_ALIASES: dict[str, OrderStatus] = {
    "NEW": OrderStatus.PLACED,
    "IN_PROGRESS": OrderStatus.IN_KITCHEN,
    "DONE": OrderStatus.READY,
}

STATUS_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PLACED: "Order Placed",
    OrderStatus.IN_KITCHEN: "In Kitchen",
    OrderStatus.READY: "Ready",
    OrderStatus.SERVING: "Serving",
    OrderStatus.SERVED: "Served",
    OrderStatus.CANCELLED: "Cancelled",
}

STATUS_MESSAGES: dict[OrderStatus, str] = {
    OrderStatus.PLACED: "Order received",
    OrderStatus.IN_KITCHEN: "Preparing your order",
    OrderStatus.READY: "Ready - On the way to your table",
    OrderStatus.SERVING: "Serving - Your waiter is bringing it",
    OrderStatus.SERVED: "Served to your table",
    OrderStatus.CANCELLED: "Order cancelled",
}

# Status buttons staff screens offer for each current status.
STAFF_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PLACED: (OrderStatus.IN_KITCHEN, OrderStatus.CANCELLED),
    OrderStatus.IN_KITCHEN: (OrderStatus.READY, OrderStatus.CANCELLED),
    OrderStatus.READY: (OrderStatus.SERVING, OrderStatus.CANCELLED),
    OrderStatus.SERVING: (OrderStatus.SERVED, OrderStatus.CANCELLED),
    OrderStatus.SERVED: (),
    OrderStatus.CANCELLED: (),
}


def normalize_status(raw: Any) -> OrderStatus:
    """
    Map any status string the API may send onto ``OrderStatus``.

    Legacy values are translated; unknown values fall back to PLACED, which
    is how order screens have always displayed them.
    """
    if isinstance(raw, OrderStatus):
        return raw
    value = str(raw or "").strip().upper()
    if value in LEGACY_STATUS_ALIASES:
        return LEGACY_STATUS_ALIASES[value]
    try:
        return OrderStatus(value)
    except ValueError:
        return OrderStatus.PLACED


def staff_transitions(status: Any) -> tuple[OrderStatus, ...]:
    """Statuses a staff member may move an order to from ``status``."""
    return STAFF_TRANSITIONS[normalize_status(status)]


# =============================================================================
# Orders
# =============================================================================


class OrderLine(WireModel):
    """A line on a placed order."""

    id: str = ""
    menu_item_id: str | None = None
    name: str = ""
    quantity: int = 0
    unit_price_cents: int = 0
    spice_level: str | None = None
    special_instructions: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _kitchen_price_field(cls, data: Any) -> Any:
        # Kitchen listings name the unit price "priceCents".
        if isinstance(data, dict) and "unitPriceCents" not in data:
            if "priceCents" in data:
                data = {**data, "unitPriceCents": data["priceCents"]}
        return data


class OrderSnapshot(WireModel):
    """
    Order as returned by the status endpoints.

    ``status`` is normalized on decode, so code downstream never sees the
    legacy spellings.
    """

    id: str
    status: OrderStatus = OrderStatus.PLACED
    status_message: str | None = None
    table_number: str = ""
    total_cents: int = 0
    currency: str = "USD"
    serving_waiter_user_id: str | None = None
    placed_at: datetime | None = None
    ready_at: datetime | None = None
    served_at: datetime | None = None
    lines: list[OrderLine] = Field(default_factory=list)
    notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> OrderStatus:
        return normalize_status(value)

    @model_validator(mode="before")
    @classmethod
    def _accept_items(cls, data: Any) -> Any:
        # Staff listings call the lines "items".
        if isinstance(data, dict) and not data.get("lines") and data.get("items"):
            data = {**data, "lines": data["items"]}
        return data

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def label(self) -> str:
        """Short status label, e.g. ``Ready``."""
        return self.status.label

    @property
    def headline(self) -> str:
        """Customer-facing message; a server-provided one wins."""
        return self.status_message or self.status.message

    @property
    def total_display(self) -> str:
        return money_cents(self.total_cents, self.currency)


class CreateOrderPayload(WireModel):
    """Body of ``POST /public/restaurants/{slug}/orders``."""

    table_session_id: str
    session_secret: str
    device_id: str | None = None
    lines: list[OrderLinePayload]
    notes: str | None = None


class CreatedOrder(WireModel):
    """Response of order creation; ``order_token`` unlocks status polling."""

    id: str
    order_token: str | None = None
    status: OrderStatus = OrderStatus.PLACED

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> OrderStatus:
        return normalize_status(value)


class WaiterOrderPayload(WireModel):
    """Body of the waiter-side create-order endpoint (source = WAITER)."""

    table_number: str
    table_session_id: str | None = None
    lines: list[OrderLinePayload]
    notes: str | None = None


# =============================================================================
# Waiter calls
# =============================================================================


class WaiterRef(WireModel):
    """A waiter as shown to the customer."""

    user_id: str
    name: str
    photo_url: str | None = None
    assigned_at: datetime | None = None


class WaiterCall(WireModel):
    """A customer's request for a waiter."""

    id: str
    table_id: str | None = None
    table_number: str | None = None
    status: str
    requested_at: datetime | None = None
    accepted_at: datetime | None = None
    closed_at: datetime | None = None
    note: str | None = None
    is_my_table: bool | None = None
    handled_by_user_id: str | None = None
    accepted_by: WaiterRef | None = None


class CurrentWaiterCall(WireModel):
    """Response of the current-waiter-call endpoint."""

    status: str | None = None
    call: WaiterCall | None = None


class ActiveCall(WireModel):
    call_id: str
    status: str
    accepted_by: WaiterRef | None = None


class TableService(WireModel):
    """Which waiter serves a table, and the state of any open call."""

    waiter: WaiterRef | None = None
    table_number: str = ""
    active_call: ActiveCall | None = None

    @property
    def accepted_by(self) -> WaiterRef | None:
        return self.active_call.accepted_by if self.active_call else None
