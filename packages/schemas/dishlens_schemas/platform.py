"""Platform schemas - the SaaS operator's view of restaurants and plans."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field

from dishlens_schemas.common import WireModel


class RestaurantStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"


PLATFORM_ROLES = frozenset(
    {
        "SUPER_ADMIN",
        "COMPANY_ADMIN",
        "SUPPORT_AGENT",
        "SALES",
        "ONBOARDING",
        "ATX_ADMIN",  # legacy
    }
)


def is_platform_role(role: str) -> bool:
    """Platform (operator) roles, as opposed to restaurant staff roles."""
    return role in PLATFORM_ROLES


def is_restaurant_role(role: str) -> bool:
    return not is_platform_role(role)


class AuthUser(WireModel):
    id: str
    email: str
    name: str = ""
    roles: list[str] = Field(default_factory=list)
    is_active: bool = True

    @property
    def is_platform_user(self) -> bool:
        return any(is_platform_role(role) for role in self.roles)


class LoginResult(WireModel):
    """Response of ``POST /auth/login``."""

    access_token: str
    expires_in: str | None = None
    user: AuthUser | None = None


class PlatformRestaurant(WireModel):
    id: str
    name: str
    slug: str | None = None
    city: str | None = None
    state: str | None = None
    phone: str | None = None
    website: str | None = None
    status: RestaurantStatus | None = None
    subscription_plan_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RestaurantFeatures(WireModel):
    ordering_enabled: bool = False
    waiter_call_enabled: bool = False
    dish_ratings_enabled: bool = False
    waiter_ratings_enabled: bool = False
    spice_level_required: bool = False
    allergen_notes_required: bool = False
    special_instructions_enabled: bool = False
    eta_visible: bool = False
    availability_visible: bool = False
    kitchen_screen_enabled: bool = False
    payment_enabled: bool = False
    table_reservation_enabled: bool = False


class RestaurantBranding(WireModel):
    logo_url: str | None = None
    hero_image_url: str | None = None
    primary_color: str = ""
    secondary_color: str = ""
    accent_color: str | None = None
    font_family: str = ""
    custom_domain: str | None = None


class PlatformRestaurantDetail(PlatformRestaurant):
    features: RestaurantFeatures | None = None
    branding: RestaurantBranding | None = None


class AdminUserSeed(WireModel):
    email: str
    name: str
    password: str


class CreateRestaurant(WireModel):
    name: str
    slug: str | None = None
    city: str | None = None
    state: str | None = None
    phone: str | None = None
    website: str | None = None
    subscription_plan_code: str | None = None
    create_admin_user: AdminUserSeed | None = None


class UpdateRestaurant(WireModel):
    name: str | None = None
    slug: str | None = None
    city: str | None = None
    state: str | None = None
    phone: str | None = None
    website: str | None = None
    status: RestaurantStatus | None = None
    subscription_plan_code: str | None = None


class SubscriptionPlan(WireModel):
    id: str
    name: str
    code: str
    # Decimal columns arrive as strings
    price_monthly: Decimal
    price_yearly: Decimal | None = None
    description: str | None = None
    active: bool = True


class AuditLog(WireModel):
    id: str
    actor_platform_user_id: str | None = None
    target_restaurant_id: str | None = None
    action_type: str
    action_details: dict[str, Any] | None = None
    before_json: dict[str, Any] | None = None
    after_json: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime | None = None


class AuditLogPage(WireModel):
    logs: list[AuditLog] = Field(default_factory=list)
    total: int = 0
