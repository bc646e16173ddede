"""DishLens Schemas - Pydantic models for the DishLens API contracts."""

from dishlens_schemas.cart import (
    COMMON_ALLERGENS,
    MAX_LINE_QUANTITY,
    SPICE_LEVELS,
    CartItem,
    CartLine,
    LineModifiers,
    OrderLinePayload,
    clamp_quantity,
    line_key,
    money,
    money_cents,
)
from dishlens_schemas.common import WireModel
from dishlens_schemas.menu import MenuCategory, MenuDish, PublicMenu
from dishlens_schemas.orders import (
    LEGACY_STATUS_ALIASES,
    STAFF_TRANSITIONS,
    STATUS_LABELS,
    STATUS_MESSAGES,
    TERMINAL_STATUSES,
    ActiveCall,
    CreatedOrder,
    CreateOrderPayload,
    CurrentWaiterCall,
    OrderLine,
    OrderSnapshot,
    OrderStatus,
    TableService,
    WaiterCall,
    WaiterOrderPayload,
    WaiterRef,
    normalize_status,
    staff_transitions,
)
from dishlens_schemas.platform import (
    PLATFORM_ROLES,
    AdminUserSeed,
    AuditLog,
    AuditLogPage,
    AuthUser,
    CreateRestaurant,
    LoginResult,
    PlatformRestaurant,
    PlatformRestaurantDetail,
    RestaurantBranding,
    RestaurantFeatures,
    RestaurantStatus,
    SubscriptionPlan,
    UpdateRestaurant,
    is_platform_role,
    is_restaurant_role,
)
from dishlens_schemas.session import TableSession, TrackedOrder
from dishlens_schemas.staff import (
    CreateTable,
    CreateWaiter,
    FloorMap,
    FloorTable,
    RestaurantTable,
    TableAssignment,
    TableOccupancy,
    TablesStatus,
    UpdateTable,
    UpdateWaiter,
    WaiterProfile,
    WaiterTableOrders,
)

__all__ = [
    "WireModel",
    # Session
    "TableSession",
    "TrackedOrder",
    # Cart
    "COMMON_ALLERGENS",
    "MAX_LINE_QUANTITY",
    "SPICE_LEVELS",
    "CartItem",
    "CartLine",
    "LineModifiers",
    "OrderLinePayload",
    "clamp_quantity",
    "line_key",
    "money",
    "money_cents",
    # Menu
    "MenuCategory",
    "MenuDish",
    "PublicMenu",
    # Orders
    "LEGACY_STATUS_ALIASES",
    "STAFF_TRANSITIONS",
    "STATUS_LABELS",
    "STATUS_MESSAGES",
    "TERMINAL_STATUSES",
    "ActiveCall",
    "CreatedOrder",
    "CreateOrderPayload",
    "CurrentWaiterCall",
    "OrderLine",
    "OrderSnapshot",
    "OrderStatus",
    "TableService",
    "WaiterCall",
    "WaiterOrderPayload",
    "WaiterRef",
    "normalize_status",
    "staff_transitions",
    # Staff
    "CreateTable",
    "CreateWaiter",
    "FloorMap",
    "FloorTable",
    "RestaurantTable",
    "TableAssignment",
    "TableOccupancy",
    "TablesStatus",
    "UpdateTable",
    "UpdateWaiter",
    "WaiterProfile",
    "WaiterTableOrders",
    # Platform
    "PLATFORM_ROLES",
    "AdminUserSeed",
    "AuditLog",
    "AuditLogPage",
    "AuthUser",
    "CreateRestaurant",
    "LoginResult",
    "PlatformRestaurant",
    "PlatformRestaurantDetail",
    "RestaurantBranding",
    "RestaurantFeatures",
    "RestaurantStatus",
    "SubscriptionPlan",
    "UpdateRestaurant",
    "is_platform_role",
    "is_restaurant_role",
]
