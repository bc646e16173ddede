"""Staff schemas - waiters, tables, and floor state for the admin and waiter apps."""

from datetime import datetime
from typing import Any

from pydantic import Field

from dishlens_schemas.common import WireModel
from dishlens_schemas.orders import OrderSnapshot, WaiterRef

# =============================================================================
# Waiters
# =============================================================================


class WaiterProfile(WireModel):
    """A waiter attached to a restaurant."""

    id: str
    user_id: str = ""
    restaurant_id: str = ""
    name: str
    photo_url: str | None = None
    phone: str | None = None
    notes: str | None = None
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: dict[str, Any] | None = None


class CreateWaiter(WireModel):
    name: str
    email: str | None = None
    password: str | None = None
    photo_url: str | None = None
    phone: str | None = None
    notes: str | None = None
    user_id: str | None = None


class UpdateWaiter(WireModel):
    name: str | None = None
    photo_url: str | None = None
    phone: str | None = None
    notes: str | None = None
    active: bool | None = None


# =============================================================================
# Tables
# =============================================================================


class RestaurantTable(WireModel):
    """A physical table and its floor-plan geometry."""

    id: str
    restaurant_id: str = ""
    table_number: str
    display_name: str | None = None
    seats: int | None = None
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    rotation: float | None = None
    zone: str | None = None
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateTable(WireModel):
    table_number: str
    display_name: str | None = None
    seats: int | None = None
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    rotation: float | None = None
    zone: str | None = None


class UpdateTable(WireModel):
    display_name: str | None = None
    seats: int | None = None
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    rotation: float | None = None
    zone: str | None = None
    active: bool | None = None


class TableOccupancy(RestaurantTable):
    occupied: bool = False


class TablesStatus(WireModel):
    """Occupancy and capacity across a restaurant's tables."""

    tables: list[TableOccupancy] = Field(default_factory=list)
    total_capacity: int = 0
    occupied_tables_count: int = 0
    available_tables_count: int = 0
    occupied_seats: int = 0
    available_seats: int = 0


class FloorTable(RestaurantTable):
    """A table on the waiter floor map."""

    current_waiter: WaiterRef | None = None
    open_calls_count: int = 0
    active_orders_count: int = 0


class FloorMap(WireModel):
    tables: list[FloorTable] = Field(default_factory=list)


class TableAssignment(WireModel):
    """Result of claiming, taking over, or releasing a table."""

    id: str
    table_id: str | None = None
    waiter_user_id: str | None = None
    takeover_from_user_id: str | None = None
    takeover_reason: str | None = None
    assigned_at: datetime | None = None
    released_at: datetime | None = None
    table: dict[str, Any] | None = None


class WaiterTableOrders(WireModel):
    """Orders currently open on one table, as the waiter sees them."""

    table_id: str
    table_number: str
    orders: list[OrderSnapshot] = Field(default_factory=list)
