"""Cart schemas - line items and their per-line customizations."""

from decimal import Decimal

from pydantic import Field, field_validator

from dishlens_schemas.common import WireModel

MAX_LINE_QUANTITY = 99

SPICE_LEVELS: tuple[tuple[str, str], ...] = (
    ("MILD", "Mild"),
    ("MEDIUM", "Medium"),
    ("HOT", "Hot"),
)

COMMON_ALLERGENS: tuple[str, ...] = (
    "PEANUTS",
    "TREE_NUTS",
    "DAIRY",
    "EGGS",
    "GLUTEN",
    "SOY",
    "SHELLFISH",
    "SESAME",
)


def clamp_quantity(value: object, minimum: int = 0) -> int:
    """Coerce a requested quantity into ``[minimum, 99]``; junk counts as 0."""
    try:
        qty = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        qty = 0
    return max(minimum, min(MAX_LINE_QUANTITY, qty))


class LineModifiers(WireModel):
    """Customizations chosen for a single cart line."""

    spice_level: str | None = None
    spice_on_side: bool = False
    allergens_avoid: list[str] = Field(default_factory=list)
    special_instructions: str | None = None

    @field_validator("spice_level")
    @classmethod
    def _upper_spice(cls, value: str | None) -> str | None:
        value = (value or "").strip().upper()
        return value or None

    @field_validator("allergens_avoid")
    @classmethod
    def _dedupe_allergens(cls, value: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for allergen in value:
            key = str(allergen).strip().upper()
            if key:
                seen.setdefault(key, None)
        return list(seen)

    @field_validator("special_instructions")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        value = (value or "").strip()
        return value or None

    def describe(self) -> str:
        """Human-readable summary, e.g. ``Spice: MEDIUM • Avoid: DAIRY``."""
        parts: list[str] = []
        if self.spice_level:
            parts.append(f"Spice: {self.spice_level.replace('_', ' ')}")
        if self.spice_on_side:
            parts.append("Spice on side")
        if self.allergens_avoid:
            parts.append(f"Avoid: {', '.join(self.allergens_avoid)}")
        if self.special_instructions:
            parts.append(self.special_instructions)
        return " • ".join(parts)


def line_key(menu_item_id: str, modifiers: LineModifiers | None = None) -> str:
    """
    Identity of a cart line.

    Two lines for the same dish share a key only when every modifier matches;
    allergen order and instruction casing do not matter.
    """
    mods = modifiers or LineModifiers()
    return "|".join(
        [
            menu_item_id,
            mods.spice_level or "",
            "side" if mods.spice_on_side else "",
            ",".join(sorted(mods.allergens_avoid)),
            (mods.special_instructions or "").lower(),
        ]
    )


class CartItem(WireModel):
    """A dish as offered to the cart (what ``Cart.add`` receives)."""

    menu_item_id: str
    name: str
    price: Decimal = Field(description="Unit price in dollars")
    image_url: str | None = None


class CartLine(WireModel):
    """One line in the cart."""

    key: str
    menu_item_id: str
    name: str
    price: Decimal = Field(default=Decimal("0.00"))
    image_url: str | None = None
    quantity: int = 1
    modifiers: LineModifiers | None = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class OrderLinePayload(WireModel):
    """Order line as sent to the create-order endpoints."""

    menu_item_id: str
    quantity: int
    spice_level: str | None = None
    spice_on_side: bool = False
    allergens_avoid: list[str] = Field(default_factory=list)
    special_instructions: str | None = None

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderLinePayload":
        mods = line.modifiers or LineModifiers()
        return cls(
            menu_item_id=line.menu_item_id,
            quantity=line.quantity,
            spice_level=mods.spice_level,
            spice_on_side=mods.spice_on_side,
            allergens_avoid=list(mods.allergens_avoid),
            special_instructions=mods.special_instructions,
        )


def money(value: Decimal | float | int | None) -> str:
    """Format a dollar amount as ``$12.34``."""
    try:
        amount = Decimal(str(value)) if value is not None else Decimal("0")
    except ArithmeticError:
        amount = Decimal("0")
    if not amount.is_finite():
        amount = Decimal("0")
    return f"${amount.quantize(Decimal('0.01'))}"


def money_cents(cents: int | None, currency: str = "USD") -> str:
    """Format an amount in cents; non-USD currencies get a code suffix."""
    amount = (Decimal(cents or 0) / 100).quantize(Decimal("0.01"))
    if currency == "USD":
        return f"${amount}"
    return f"{amount} {currency}"
