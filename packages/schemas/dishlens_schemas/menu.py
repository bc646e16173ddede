"""Menu schemas - the public menu as customers browse it."""

from decimal import Decimal
from typing import Any

from pydantic import Field

from dishlens_schemas.cart import CartItem
from dishlens_schemas.common import WireModel


class MenuDish(WireModel):
    """A dish on the public menu, priced in dollars."""

    id: str
    name: str
    category_name: str = ""
    description: str | None = None
    price: Decimal = Field(default=Decimal("0.00"))
    currency: str = "USD"
    is_veg: bool | None = None
    spice: str | None = None
    allergens: list[str] | None = None
    image_url: str | None = None
    video_url: str | None = None
    avg_rating: float | None = None
    rating_count: int | None = None

    def as_cart_item(self) -> CartItem:
        """The subset of this dish the cart stores on a line."""
        return CartItem(
            menu_item_id=self.id,
            name=self.name,
            price=self.price,
            image_url=self.image_url,
        )


class MenuCategory(WireModel):
    """A menu section and its dishes."""

    id: str
    name: str
    items: list[MenuDish] = Field(default_factory=list)


class PublicMenu(WireModel):
    """The public menu of a restaurant, plus its raw restaurant record."""

    restaurant: dict[str, Any] | None = None
    categories: list[MenuCategory] = Field(default_factory=list)

    def find_dish(self, dish_id: str) -> MenuDish | None:
        for category in self.categories:
            for dish in category.items:
                if dish.id == dish_id:
                    return dish
        return None
