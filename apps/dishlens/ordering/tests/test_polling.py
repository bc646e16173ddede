"""Tests for the interval pollers."""

import asyncio

import httpx
import pytest
import respx
from dishlens_schemas import ActiveCall, OrderStatus, TableService, WaiterRef

from apps.dishlens.exceptions import DishLensAPIError, DishLensConnectionError
from apps.dishlens.ordering.polling import (
    CancellationToken,
    OrderStatusPoller,
    Poller,
    TableOrdersPoller,
    WaiterCallWatcher,
    floor_map_poller,
    kitchen_orders_poller,
    order_status_page_poller,
)
from apps.dishlens.tests.factories import OrderPayloadFactory, OrderSnapshotFactory

API_BASE = "http://api.dishlens.test"


class Sequence:
    """Async fetch that returns (or raises) the queued results in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        result = self.results[min(self.calls, len(self.results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


class Gate:
    """Async fetch that blocks until released."""

    def __init__(self, value):
        self.value = value
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def __call__(self):
        self.entered.set()
        await self.release.wait()
        return self.value


class FakePublicAPI:
    """Stands in for PublicAPI where tests need to control timing."""

    def __init__(self):
        self.orders = {}
        self.order_calls = []
        self.gates = {}
        self.services = []
        self.service_calls = 0

    async def get_order(self, slug, order_id, order_token=None):
        self.order_calls.append((slug, order_id, order_token))
        if order_id in self.gates:
            await self.gates[order_id].wait()
        return self.orders[order_id]

    async def get_table_service(self, table_session_id, session_secret):
        self.service_calls += 1
        return self.services[min(self.service_calls, len(self.services)) - 1]


def accepted(name: str | None) -> TableService:
    if name is None:
        return TableService(table_number="4")
    return TableService(
        table_number="4",
        active_call=ActiveCall(
            call_id="c-1", status="ACCEPTED", accepted_by=WaiterRef(user_id="u-1", name=name)
        ),
    )


# =============================================================================
# CancellationToken
# =============================================================================


class TestCancellationToken:
    @pytest.mark.asyncio
    async def test_sleep_wakes_on_cancel(self):
        token = CancellationToken()
        sleeper = asyncio.create_task(token.sleep(60))
        await asyncio.sleep(0)

        token.cancel()
        await asyncio.wait_for(sleeper, timeout=1)

        assert token.cancelled is True

    @pytest.mark.asyncio
    async def test_sleep_times_out(self):
        token = CancellationToken()

        await token.sleep(0.01)

        assert token.cancelled is False


# =============================================================================
# Poller
# =============================================================================


class TestPoller:
    """Base polling behaviour."""

    @pytest.mark.asyncio
    async def test_tick_updates_latest_and_notifies(self):
        seen = []
        poller = Poller(Sequence(1, 2), interval=0, on_update=seen.append)

        await poller.tick()
        await poller.tick()

        assert poller.latest == 2
        assert seen == [1, 2]
        assert poller.fetch_count == 2

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_last_value(self):
        fetch = Sequence("first", DishLensConnectionError("offline"))
        seen = []
        poller = Poller(fetch, interval=0, on_update=seen.append)

        await poller.tick()
        result = await poller.tick()

        assert result == "first"
        assert poller.latest == "first"
        assert isinstance(poller.last_error, DishLensConnectionError)
        assert seen == ["first"]

    @pytest.mark.asyncio
    async def test_error_cleared_after_recovery(self):
        poller = Poller(Sequence(DishLensAPIError("boom", 500), "ok"), interval=0)

        await poller.tick()
        assert poller.latest is None
        await poller.tick()

        assert poller.latest == "ok"
        assert poller.last_error is None

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self):
        poller = Poller(Sequence(RuntimeError("bug")), interval=0)

        with pytest.raises(RuntimeError):
            await poller.tick()

    @pytest.mark.asyncio
    async def test_cancel_drops_in_flight_response(self):
        gate = Gate("late")
        seen = []
        poller = Poller(gate, interval=0, on_update=seen.append)

        pending = asyncio.create_task(poller.tick())
        await gate.entered.wait()
        poller.cancel()
        gate.release.set()

        assert await pending is None
        assert poller.latest is None
        assert seen == []

    @pytest.mark.asyncio
    async def test_no_fetch_after_cancel(self):
        fetch = Sequence(1)
        poller = Poller(fetch, interval=0)

        poller.cancel()
        await poller.tick()

        assert fetch.calls == 0

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        fetch = Sequence(1)
        poller = Poller(fetch, interval=0.01)

        poller.start()
        while fetch.calls < 3:
            await asyncio.sleep(0.01)
        await poller.stop()

        assert poller.running is False
        calls = fetch.calls
        await asyncio.sleep(0.05)
        assert fetch.calls == calls

    @pytest.mark.asyncio
    async def test_start_twice_reuses_task(self):
        poller = Poller(Sequence(1), interval=10)

        first = poller.start()
        second = poller.start()
        await poller.stop()

        assert first is second

    @pytest.mark.asyncio
    async def test_start_after_finish_makes_new_task(self):
        api = FakePublicAPI()
        api.orders["o-1"] = OrderSnapshotFactory(id="o-1", status=OrderStatus.SERVED)
        poller = OrderStatusPoller(api, "demo", "o-1", interval=0)

        first = poller.start()
        await asyncio.wait_for(first, timeout=1)
        second = poller.start()
        await asyncio.wait_for(second, timeout=1)

        assert first is not second
        assert poller.running is False


# =============================================================================
# Order status
# =============================================================================


class TestOrderStatusPoller:
    """Tracking one order to a final status."""

    def test_tracker_and_status_page_intervals(self):
        api = FakePublicAPI()

        assert OrderStatusPoller(api, "demo", "o-1").interval == 3.0
        assert order_status_page_poller(api, "demo", "o-1", "otok").interval == 5.0
        assert order_status_page_poller(api, "demo", "o-1", interval=1).interval == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("final", [OrderStatus.SERVED, OrderStatus.CANCELLED])
    async def test_no_requests_after_final_status(self, final):
        api = FakePublicAPI()
        api.orders["o-1"] = OrderSnapshotFactory(id="o-1", status=final)
        poller = OrderStatusPoller(api, "demo", "o-1", "otok", interval=0)

        await asyncio.wait_for(poller.run(), timeout=1)
        for _ in range(5):
            await poller.tick()

        assert poller.done is True
        assert len(api.order_calls) == 1

    @pytest.mark.asyncio
    async def test_polls_until_served(self):
        fetch_statuses = ["PLACED", "IN_KITCHEN", "READY", "SERVED", "SERVED"]
        api = FakePublicAPI()
        poller = OrderStatusPoller(api, "demo", "o-1", interval=0)
        labels = []
        poller.on_update = lambda order: labels.append(order.label)

        async def get_order(slug, order_id, order_token=None):
            api.order_calls.append(order_id)
            return OrderSnapshotFactory(id=order_id, status=fetch_statuses[len(api.order_calls) - 1])

        api.get_order = get_order
        await asyncio.wait_for(poller.run(), timeout=1)

        assert labels == ["Order Placed", "In Kitchen", "Ready", "Served"]
        assert len(api.order_calls) == 4

    @pytest.mark.asyncio
    @respx.mock
    async def test_legacy_done_renders_as_ready(self, public_api):
        route = respx.get(f"{API_BASE}/public/restaurants/demo/orders/o-1").mock(
            return_value=httpx.Response(200, json=OrderPayloadFactory(id="o-1", status="DONE"))
        )
        poller = OrderStatusPoller(public_api, "demo", "o-1", "otok", interval=0)

        order = await poller.tick()

        assert route.calls.last.request.url.params["token"] == "otok"
        assert order.label == "Ready"
        assert poller.done is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_keeps_last_snapshot(self, public_api):
        respx.get(f"{API_BASE}/public/restaurants/demo/orders/o-1").mock(
            side_effect=[
                httpx.Response(200, json=OrderPayloadFactory(id="o-1", status="IN_KITCHEN")),
                httpx.Response(503, json={"message": "Service unavailable"}),
                httpx.Response(200, text="<html>"),
            ]
        )
        poller = OrderStatusPoller(public_api, "demo", "o-1", interval=0)

        first = await poller.tick()
        await poller.tick()
        await poller.tick()

        assert poller.latest is first
        assert poller.latest.status == OrderStatus.IN_KITCHEN

    @pytest.mark.asyncio
    async def test_retarget_discards_old_response(self):
        api = FakePublicAPI()
        api.orders["o-1"] = OrderSnapshotFactory(id="o-1", status=OrderStatus.READY)
        api.orders["o-2"] = OrderSnapshotFactory(id="o-2", status=OrderStatus.PLACED)
        api.gates["o-1"] = asyncio.Event()
        poller = OrderStatusPoller(api, "demo", "o-1", interval=0)

        pending = asyncio.create_task(poller.tick())
        while not api.order_calls:
            await asyncio.sleep(0)
        poller.retarget("demo", "o-2", "tok-2")
        api.gates["o-1"].set()
        await pending

        assert poller.latest is None
        order = await poller.tick()
        assert order.id == "o-2"
        assert api.order_calls[-1] == ("demo", "o-2", "tok-2")

    @pytest.mark.asyncio
    async def test_retarget_resets_done_and_restarts(self):
        api = FakePublicAPI()
        api.orders["o-1"] = OrderSnapshotFactory(id="o-1", status=OrderStatus.SERVED)
        api.orders["o-2"] = OrderSnapshotFactory(id="o-2", status=OrderStatus.PLACED)
        poller = OrderStatusPoller(api, "demo", "o-1", interval=10)

        await poller.tick()
        assert poller.done is True

        poller.start()
        poller.retarget("demo", "o-2")
        assert poller.done is False
        assert poller.running is True
        while poller.latest is None:
            await asyncio.sleep(0)
        await poller.stop()

        assert poller.latest.id == "o-2"


# =============================================================================
# Table orders and waiter calls
# =============================================================================


class TestTableOrdersPoller:
    @pytest.mark.asyncio
    @respx.mock
    async def test_stops_when_every_order_is_final(self, public_api):
        route = respx.get(f"{API_BASE}/public/restaurants/demo/table/ts-1/orders").mock(
            side_effect=[
                httpx.Response(200, json=[]),
                httpx.Response(
                    200,
                    json=[OrderPayloadFactory(status="SERVED"), OrderPayloadFactory(status="READY")],
                ),
                httpx.Response(
                    200,
                    json=[OrderPayloadFactory(status="SERVED"), OrderPayloadFactory(status="CANCELLED")],
                ),
            ]
        )
        poller = TableOrdersPoller(public_api, "demo", "ts-1", "s3cret", interval=0)

        await asyncio.wait_for(poller.run(), timeout=1)
        await poller.tick()

        assert route.call_count == 3
        assert route.calls.last.request.url.params["token"] == "s3cret"
        assert poller.done is True


class TestWaiterCallWatcher:
    @pytest.mark.asyncio
    async def test_stops_once_accepted(self):
        api = FakePublicAPI()
        api.services = [accepted(None), accepted(None), accepted("Priya")]
        watcher = WaiterCallWatcher(api, "ts-1", "s3cret", interval=0, watch_seconds=120)

        await asyncio.wait_for(watcher.run(), timeout=1)

        assert api.service_calls == 3
        assert watcher.accepted_by.name == "Priya"

    @pytest.mark.asyncio
    async def test_gives_up_after_watch_window(self):
        now = [0.0]
        api = FakePublicAPI()
        api.services = [accepted(None)]
        watcher = WaiterCallWatcher(
            api, "ts-1", "s3cret", interval=0, watch_seconds=120, clock=lambda: now[0]
        )

        await watcher.tick()
        now[0] = 119.0
        await watcher.tick()
        now[0] = 121.0
        await watcher.tick()
        await watcher.tick()

        assert api.service_calls == 2
        assert watcher.done is True
        assert watcher.accepted_by is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_reads_table_service(self, public_api):
        route = respx.get(f"{API_BASE}/public/table-service").mock(
            return_value=httpx.Response(
                200,
                json={
                    "tableNumber": "4",
                    "activeCall": {
                        "callId": "c-1",
                        "status": "ACCEPTED",
                        "acceptedBy": {"userId": "u-1", "name": "Sam"},
                    },
                },
            )
        )
        watcher = WaiterCallWatcher(public_api, "ts-1", "s3cret", interval=0)

        await watcher.tick()

        params = route.calls.last.request.url.params
        assert params["tableSessionId"] == "ts-1"
        assert params["sessionSecret"] == "s3cret"
        assert watcher.done is True


class TestStaffPollers:
    @pytest.mark.asyncio
    @respx.mock
    async def test_kitchen_poller_never_finishes(self, kitchen_api):
        respx.get(f"{API_BASE}/kitchen/orders").mock(
            return_value=httpx.Response(200, json=[OrderPayloadFactory(status="SERVED")])
        )
        poller = kitchen_orders_poller(kitchen_api, "r-1", interval=0)

        await poller.tick()
        await poller.tick()

        assert poller.fetch_count == 2
        assert poller.done is False
        assert poller.interval == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_floor_map_poller(self, waiter_api):
        respx.get(f"{API_BASE}/waiter/floor-map").mock(
            return_value=httpx.Response(200, json={"tables": []})
        )
        poller = floor_map_poller(waiter_api)

        floor = await poller.tick()

        assert floor.tables == []
        assert poller.interval == 10.0
