"""
Interval pollers for order status, table orders, waiter calls, and staff lists.

Each poller fetches once immediately and then on a fixed interval. It keeps
the last good value when a fetch fails, and ignores any response that
arrives after it was cancelled or pointed at a different target. Nothing is
retried early; a failed fetch just waits for the next tick.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from dishlens_schemas import FloorMap, OrderSnapshot, TableService, WaiterRef
from pydantic import ValidationError

from apps.dishlens.api.kitchen import KitchenAPI
from apps.dishlens.api.public import PublicAPI
from apps.dishlens.api.waiter import WaiterAPI
from apps.dishlens.config import settings
from apps.dishlens.exceptions import DishLensError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-way flag shared between a poller and the fetches it started."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds``, waking early if cancelled."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except TimeoutError:
            pass


class Poller(Generic[T]):
    """
    Fetch a value on a fixed interval until cancelled or done.

    Subclasses override ``is_done`` to stop at a terminal state; the base
    class never stops on its own (kitchen list, floor map).

    Usage:
        poller = Poller(lambda: api.get_floor_map(rid), interval=10.0)
        poller.start()
        ...
        poller.cancel()
    """

    name = "poller"

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        interval: float,
        on_update: Callable[[T], None] | None = None,
    ) -> None:
        self._fetch = fetch
        self.interval = interval
        self.on_update = on_update
        self.token = CancellationToken()
        self.latest: T | None = None
        self.last_error: Exception | None = None
        self.fetch_count = 0
        self.done = False
        self._task: asyncio.Task[None] | None = None

    def is_done(self, value: T) -> bool:
        return False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> T | None:
        """
        Fetch once, unless stopped or cancelled.

        Returns the latest known value, which is unchanged when the fetch
        fails or its response is discarded.
        """
        token = self.token
        if self.done or token.cancelled:
            return self.latest

        self.fetch_count += 1
        try:
            value = await self._fetch()
        except (DishLensError, ValidationError) as e:
            if not token.cancelled:
                self.last_error = e
                logger.warning("%s fetch failed, keeping last value: %s", self.name, e)
            return self.latest

        if token.cancelled or token is not self.token:
            return self.latest

        self.latest = value
        self.last_error = None
        if self.on_update is not None:
            self.on_update(value)
        if self.is_done(value):
            self.done = True
            logger.info("%s reached a final state; polling stopped", self.name)
        return value

    async def run(self, token: CancellationToken | None = None) -> None:
        """Tick immediately, then every ``interval`` seconds."""
        token = token or self.token
        while not token.cancelled and not self.done:
            await self.tick()
            if self.done:
                break
            await token.sleep(self.interval)

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(self.token))
        return self._task

    def cancel(self) -> None:
        """Stop polling; responses still in flight are discarded."""
        self.token.cancel()

    async def stop(self) -> None:
        self.cancel()
        if self._task is not None:
            await self._task
            self._task = None


class OrderStatusPoller(Poller[OrderSnapshot]):
    """
    Tracks one order until it is SERVED or CANCELLED.

    Statuses are normalized on decode, so ``latest.label`` is always one of
    the current labels (``Ready``, never ``DONE``).
    """

    name = "order status poller"

    def __init__(
        self,
        api: PublicAPI,
        slug: str,
        order_id: str,
        order_token: str | None = None,
        interval: float | None = None,
        on_update: Callable[[OrderSnapshot], None] | None = None,
    ) -> None:
        self.api = api
        self.slug = slug
        self.order_id = order_id
        self.order_token = order_token
        super().__init__(
            self._get_order,
            settings.ORDER_TRACKER_POLL_SECONDS if interval is None else interval,
            on_update,
        )

    async def _get_order(self) -> OrderSnapshot:
        return await self.api.get_order(self.slug, self.order_id, self.order_token)

    def is_done(self, value: OrderSnapshot) -> bool:
        return value.is_terminal

    def retarget(
        self, slug: str, order_id: str, order_token: str | None = None
    ) -> None:
        """
        Point the poller at another order.

        The current run is cancelled and its late responses dropped; a new
        run starts if one was active.
        """
        was_running = self.running
        self.cancel()
        self.slug = slug
        self.order_id = order_id
        self.order_token = order_token
        self.token = CancellationToken()
        self.latest = None
        self.last_error = None
        self.done = False
        self._task = None
        if was_running:
            self.start()


class TableOrdersPoller(Poller[list[OrderSnapshot]]):
    """All orders on a table session; stops once every one is final."""

    name = "table orders poller"

    def __init__(
        self,
        api: PublicAPI,
        slug: str,
        table_session_id: str,
        token: str | None = None,
        interval: float | None = None,
        on_update: Callable[[list[OrderSnapshot]], None] | None = None,
    ) -> None:
        self.api = api

        async def fetch() -> list[OrderSnapshot]:
            return await api.get_table_orders(slug, table_session_id, token)

        super().__init__(
            fetch,
            settings.TABLE_ORDERS_POLL_SECONDS if interval is None else interval,
            on_update,
        )

    def is_done(self, value: list[OrderSnapshot]) -> bool:
        return bool(value) and all(order.is_terminal for order in value)


class WaiterCallWatcher(Poller[TableService]):
    """
    After a waiter call, watch the table until somebody accepts it.

    Gives up silently once ``watch_seconds`` have passed since the first
    tick.
    """

    name = "waiter call watcher"

    def __init__(
        self,
        api: PublicAPI,
        table_session_id: str,
        session_secret: str,
        interval: float | None = None,
        watch_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_update: Callable[[TableService], None] | None = None,
    ) -> None:
        async def fetch() -> TableService:
            return await api.get_table_service(table_session_id, session_secret)

        super().__init__(
            fetch,
            settings.WAITER_CALL_POLL_SECONDS if interval is None else interval,
            on_update,
        )
        self.watch_seconds = (
            settings.WAITER_CALL_WATCH_SECONDS if watch_seconds is None else watch_seconds
        )
        self.clock = clock
        self.started_at: float | None = None

    @property
    def accepted_by(self) -> WaiterRef | None:
        return self.latest.accepted_by if self.latest else None

    def is_done(self, value: TableService) -> bool:
        return bool(value.accepted_by and value.accepted_by.name)

    async def tick(self) -> TableService | None:
        now = self.clock()
        if self.started_at is None:
            self.started_at = now
        elif now - self.started_at > self.watch_seconds:
            if not self.done:
                logger.info("No waiter accepted within %ss; giving up", self.watch_seconds)
            self.done = True
            return self.latest
        return await super().tick()


def order_status_page_poller(
    api: PublicAPI,
    slug: str,
    order_id: str,
    order_token: str | None = None,
    interval: float | None = None,
    on_update: Callable[[OrderSnapshot], None] | None = None,
) -> OrderStatusPoller:
    """Order tracking for the order button and status page, which refresh slower."""
    return OrderStatusPoller(
        api,
        slug,
        order_id,
        order_token,
        interval=settings.ORDER_STATUS_POLL_SECONDS if interval is None else interval,
        on_update=on_update,
    )


def kitchen_orders_poller(
    api: KitchenAPI,
    restaurant_id: str,
    interval: float | None = None,
    on_update: Callable[[list[OrderSnapshot]], None] | None = None,
) -> Poller[list[OrderSnapshot]]:
    """Refreshes the kitchen's open orders; never stops on its own."""
    poller: Poller[list[OrderSnapshot]] = Poller(
        lambda: api.get_orders(restaurant_id),
        settings.KITCHEN_POLL_SECONDS if interval is None else interval,
        on_update,
    )
    poller.name = "kitchen orders poller"
    return poller


def floor_map_poller(
    api: WaiterAPI,
    restaurant_id: str | None = None,
    interval: float | None = None,
    on_update: Callable[[FloorMap], None] | None = None,
) -> Poller[FloorMap]:
    poller: Poller[FloorMap] = Poller(
        lambda: api.get_floor_map(restaurant_id),
        settings.FLOOR_MAP_POLL_SECONDS if interval is None else interval,
        on_update,
    )
    poller.name = "floor map poller"
    return poller
