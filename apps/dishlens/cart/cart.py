"""
Persistent cart for one table session.

Lines are kept in insertion order and identified by their ``key`` (dish id
plus modifiers); no two lines ever share a key.
"""

import logging
from decimal import Decimal
from typing import Any

from dishlens_schemas import (
    MAX_LINE_QUANTITY,
    CartItem,
    CartLine,
    LineModifiers,
    OrderLinePayload,
    clamp_quantity,
    line_key,
)
from pydantic import ValidationError

from apps.dishlens.storage import LocalStorage

logger = logging.getLogger(__name__)

CART_VERSION = 1

_UNSET: Any = object()


def cart_key(slug: str, table_session_id: str) -> str:
    return f"dishlens_cart:{slug}:{table_session_id}"


class Cart:
    """
    Cart scoped to (restaurant slug, table session id).

    Every mutation is written through to storage as ``{"v": 1, "lines": [...]}``.
    If storage is unavailable the cart still works, it just won't survive a
    restart.

    Usage:
        cart = Cart(storage, "demo", session.table_session_id)
        cart.add(dish.as_cart_item(), 2, LineModifiers(spice_level="HOT"))
        payload = cart.order_lines()
    """

    def __init__(self, storage: LocalStorage, slug: str, table_session_id: str) -> None:
        self.storage = storage
        self.slug = slug
        self.table_session_id = table_session_id
        self._lines: list[CartLine] = self._load()

    @property
    def storage_key(self) -> str:
        return cart_key(self.slug, self.table_session_id)

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load(self) -> list[CartLine]:
        data = self.storage.get_json(self.storage_key)
        if not isinstance(data, dict) or not isinstance(data.get("lines"), list):
            return []

        lines: list[CartLine] = []
        seen: set[str] = set()
        for raw in data["lines"]:
            try:
                line = CartLine.model_validate(raw)
            except ValidationError:
                logger.warning("Dropping unreadable cart line in %s", self.storage_key)
                continue
            quantity = clamp_quantity(line.quantity)
            if quantity <= 0 or line.key in seen:
                continue
            seen.add(line.key)
            lines.append(line.model_copy(update={"quantity": quantity}))
        return lines

    def _save(self) -> None:
        self.storage.set_json(
            self.storage_key,
            {"v": CART_VERSION, "lines": [line.to_wire() for line in self._lines]},
        )

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def total(self) -> Decimal:
        """Sum of price times quantity over all lines, in dollars."""
        return sum((line.line_total for line in self._lines), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def get(self, key: str) -> CartLine | None:
        return next((line for line in self._lines if line.key == key), None)

    def order_lines(self) -> list[OrderLinePayload]:
        """Lines in the shape the create-order endpoints expect."""
        return [OrderLinePayload.from_cart_line(line) for line in self._lines]

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(
        self,
        item: CartItem,
        quantity: int = 1,
        modifiers: LineModifiers | None = None,
    ) -> CartLine:
        """
        Add ``quantity`` of a dish.

        A line with the same dish and modifiers is topped up (capped at 99);
        otherwise a new line is appended. Quantities below 1 count as 1.
        """
        qty = clamp_quantity(quantity, minimum=1)
        key = line_key(item.menu_item_id, modifiers)

        for i, line in enumerate(self._lines):
            if line.key == key:
                updated = line.model_copy(
                    update={"quantity": min(MAX_LINE_QUANTITY, line.quantity + qty)}
                )
                self._lines[i] = updated
                self._save()
                return updated

        line = CartLine(
            key=key,
            menu_item_id=item.menu_item_id,
            name=item.name,
            price=item.price,
            image_url=item.image_url,
            quantity=qty,
            modifiers=modifiers,
        )
        self._lines.append(line)
        self._save()
        return line

    def set_qty(self, key: str, quantity: int) -> None:
        """Set a line's quantity (capped at 99); zero or less removes it."""
        qty = clamp_quantity(quantity)
        self._lines = [
            line.model_copy(update={"quantity": qty}) if line.key == key else line
            for line in self._lines
        ]
        self._lines = [line for line in self._lines if line.quantity > 0]
        self._save()

    def remove(self, key: str) -> None:
        self.set_qty(key, 0)

    def edit_line(
        self,
        key: str,
        modifiers: LineModifiers | None = _UNSET,
        quantity: int | None = None,
    ) -> CartLine | None:
        """
        Change a line's modifiers and/or quantity.

        The line's key follows its new modifiers. If that key already belongs
        to another line, the two are merged into the other line (quantities
        summed, capped at 99) and it keeps its position. Returns the
        resulting line, or None if ``key`` is unknown or the line was removed.
        """
        existing = self.get(key)
        if existing is None:
            return None

        new_qty = existing.quantity if quantity is None else clamp_quantity(quantity)
        new_modifiers = existing.modifiers if modifiers is _UNSET else modifiers
        new_key = line_key(existing.menu_item_id, new_modifiers)

        if new_qty <= 0:
            self._lines = [line for line in self._lines if line.key != key]
            self._save()
            return None

        if new_key != key:
            for i, line in enumerate(self._lines):
                if line.key == new_key:
                    merged = line.model_copy(
                        update={
                            "quantity": min(MAX_LINE_QUANTITY, line.quantity + new_qty)
                        }
                    )
                    self._lines[i] = merged
                    self._lines = [other for other in self._lines if other.key != key]
                    self._save()
                    return merged

        edited = existing.model_copy(
            update={"key": new_key, "quantity": new_qty, "modifiers": new_modifiers}
        )
        self._lines = [edited if line.key == key else line for line in self._lines]
        self._save()
        return edited

    def clear(self) -> None:
        self._lines = []
        self._save()
