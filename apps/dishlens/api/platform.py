"""Platform (SaaS operator) endpoints."""

import logging

from dishlens_schemas import (
    AuditLogPage,
    CreateRestaurant,
    LoginResult,
    PlatformRestaurant,
    PlatformRestaurantDetail,
    RestaurantBranding,
    RestaurantFeatures,
    RestaurantStatus,
    SubscriptionPlan,
    UpdateRestaurant,
)

from apps.dishlens.api.base import DishLensClient, seg

logger = logging.getLogger(__name__)


class PlatformAPI(DishLensClient):
    """Restaurant onboarding, plans, and audit logs for platform users."""

    async def login(self, email: str, password: str) -> LoginResult:
        data = await self.post(
            "/auth/login",
            json_body={"email": email, "password": password},
            auth=False,
        )
        result = LoginResult.model_validate(data)
        if result.user is not None and not result.user.is_platform_user:
            logger.warning("%s has no platform role", email)
        self.token = result.access_token
        return result

    # =========================================================================
    # Restaurants
    # =========================================================================

    async def list_restaurants(
        self, status: RestaurantStatus | str | None = None
    ) -> list[PlatformRestaurant]:
        value = status.value if isinstance(status, RestaurantStatus) else status
        data = await self.get("/platform/restaurants", params={"status": value or None})
        return [PlatformRestaurant.model_validate(r) for r in data or []]

    async def get_restaurant(self, restaurant_id: str) -> PlatformRestaurantDetail:
        data = await self.get(f"/platform/restaurants/{seg(restaurant_id)}")
        return PlatformRestaurantDetail.model_validate(data)

    async def create_restaurant(self, dto: CreateRestaurant) -> PlatformRestaurant:
        data = await self.post(
            "/platform/restaurants", json_body=dto.to_wire(exclude_unset=True)
        )
        restaurant = PlatformRestaurant.model_validate(data)
        logger.info("Created restaurant %s (%s)", restaurant.name, restaurant.id)
        return restaurant

    async def update_restaurant(
        self, restaurant_id: str, updates: UpdateRestaurant
    ) -> PlatformRestaurant:
        data = await self.patch(
            f"/platform/restaurants/{seg(restaurant_id)}",
            json_body=updates.to_wire(exclude_unset=True),
        )
        return PlatformRestaurant.model_validate(data)

    async def suspend_restaurant(self, restaurant_id: str) -> PlatformRestaurant:
        data = await self.post(f"/platform/restaurants/{seg(restaurant_id)}/suspend")
        logger.info("Suspended restaurant %s", restaurant_id)
        return PlatformRestaurant.model_validate(data)

    async def activate_restaurant(self, restaurant_id: str) -> PlatformRestaurant:
        data = await self.post(f"/platform/restaurants/{seg(restaurant_id)}/activate")
        logger.info("Activated restaurant %s", restaurant_id)
        return PlatformRestaurant.model_validate(data)

    async def update_features(
        self, restaurant_id: str, features: RestaurantFeatures
    ) -> RestaurantFeatures:
        data = await self.patch(
            f"/platform/restaurants/{seg(restaurant_id)}/features",
            json_body=features.to_wire(exclude_unset=True),
        )
        return RestaurantFeatures.model_validate(data)

    async def update_branding(
        self, restaurant_id: str, branding: RestaurantBranding
    ) -> RestaurantBranding:
        data = await self.patch(
            f"/platform/restaurants/{seg(restaurant_id)}/branding",
            json_body=branding.to_wire(exclude_unset=True),
        )
        return RestaurantBranding.model_validate(data)

    # =========================================================================
    # Plans and audit
    # =========================================================================

    async def list_plans(self) -> list[SubscriptionPlan]:
        data = await self.get("/platform/plans")
        return [SubscriptionPlan.model_validate(p) for p in data or []]

    async def get_audit_logs(
        self,
        restaurant_id: str | None = None,
        action_type: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> AuditLogPage:
        """Audit log page. Empty or zero filters are not sent."""
        data = await self.get(
            "/platform/audit-logs",
            params={
                "restaurantId": restaurant_id or None,
                "actionType": action_type or None,
                "limit": limit or None,
                "offset": offset or None,
            },
        )
        return AuditLogPage.model_validate(data or {})
