"""
Order submission service - places the cart as an order for the table.

Handles:
1. Checking the table session can order and the cart is non-empty
2. Building the order payload from cart lines
3. Creating the order through the public API
4. Clearing the cart and remembering the order for status tracking

The cart is cleared only after the API confirms the order, so a failed
submission can simply be retried.
"""

import logging

from dishlens_schemas import CreatedOrder, CreateOrderPayload, TableSession, WaiterCall

from apps.dishlens.api.public import PublicAPI
from apps.dishlens.cart import Cart
from apps.dishlens.exceptions import (
    SESSION_EXPIRED_MESSAGE,
    DishLensAPIError,
    DishLensError,
    DishLensRateLimitError,
    MissingTableSessionError,
    OrderSubmissionError,
    SessionExpiredError,
)
from apps.dishlens.ordering.tracking import save_order_tracking
from apps.dishlens.session.device import get_or_create_device_id

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Please wait a few minutes before calling again."


async def submit_order(
    api: PublicAPI,
    cart: Cart,
    session: TableSession | None,
    notes: str | None = None,
) -> CreatedOrder | None:
    """
    Submit the cart as an order.

    Args:
        api: Public API client.
        cart: The table's cart; emptied on success.
        session: The resolved table session (must carry its secret).
        notes: Optional note for the kitchen.

    Returns:
        The created order, or None when the cart is empty (nothing sent).

    Raises:
        MissingTableSessionError: No session, or one without a secret.
        SessionExpiredError: The API rejected the session as expired/invalid.
        OrderSubmissionError: Any other failure; the cart is left intact.
    """
    if session is None or not session.can_order:
        raise MissingTableSessionError()
    if cart.is_empty():
        return None

    payload = CreateOrderPayload(
        table_session_id=session.table_session_id,
        session_secret=session.session_secret or "",
        device_id=get_or_create_device_id(cart.storage),
        lines=cart.order_lines(),
        notes=notes or None,
    )

    try:
        created = await api.create_order(cart.slug, payload)
    except DishLensError as e:
        if isinstance(e, DishLensAPIError) and e.is_session_expired:
            logger.warning(
                "Order rejected for session %s: %s", session.table_session_id, e.message
            )
            raise SessionExpiredError(SESSION_EXPIRED_MESSAGE) from e
        status_code = e.status_code if isinstance(e, DishLensAPIError) else None
        logger.error("Order submission failed for %s: %s", cart.slug, e.message)
        raise OrderSubmissionError(e.message, status_code=status_code) from e

    cart.clear()
    logger.info(
        "Order %s submitted for %s table %s",
        created.id,
        cart.slug,
        session.table_number,
    )
    if created.order_token:
        save_order_tracking(cart.storage, cart.slug, created.id, created.order_token)
    return created


async def call_waiter(
    api: PublicAPI,
    session: TableSession | None,
    device_id: str | None = None,
    note: str | None = None,
) -> WaiterCall:
    """
    Ask for a waiter at the session's table.

    Raises:
        MissingTableSessionError: No session, or one without a secret.
        DishLensRateLimitError: Called too often; its message is replaced
            with a customer-facing one.
        DishLensAPIError: Any other API failure.
    """
    if session is None or not session.can_order:
        raise MissingTableSessionError()
    try:
        return await api.call_waiter(
            session.table_session_id,
            session.session_secret or "",
            device_id=device_id,
            note=note,
        )
    except DishLensRateLimitError as e:
        raise DishLensRateLimitError(
            RATE_LIMITED_MESSAGE,
            status_code=e.status_code,
            response_body=e.response_body,
            retry_after=e.retry_after,
        ) from e
