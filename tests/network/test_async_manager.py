"""AsyncNetworkManager over an async MockTransport (driven with asyncio.run)."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from NetToolKit.errors import ContentTypeError, DecodeError, HttpStatusError
from NetToolKit.network import AsyncNetworkManager
from NetToolKit.network.normalize import is_explicitly_cancelled
from NetToolKit.network.request import CachePolicy
from NetToolKit.settings import NetworkSettings
from tests.fixtures.http_mocking import MockResponseBuilder, RecordingSink


def _async_client(router) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=router.transport(), base_url="https://api.example.com")


def test_fetch_json(router):
    router.add("GET", "/items", MockResponseBuilder().with_json({"a": 1}))
    sink = RecordingSink()

    async def run():
        async with _async_client(router) as client:
            manager = AsyncNetworkManager(client, logger=sink)
            return await manager.fetch_json("/items", params={"page": 1})

    assert asyncio.run(run()) == {"a": 1}
    assert sink.messages()[0] == "API OUT [1]: GET /items {'page': 1}"
    assert sink.messages()[1].startswith("API IN [1]:")


def test_status_failure(router):
    router.add("GET", "/x", MockResponseBuilder(404).with_json({"error": "nf"}))

    async def run():
        async with _async_client(router) as client:
            await AsyncNetworkManager(client).fetch_json("/x")

    with pytest.raises(HttpStatusError) as excinfo:
        asyncio.run(run())
    assert excinfo.value.status_code == 404
    assert excinfo.value.json == {"error": "nf"}


def test_content_type_failure(router):
    router.add("GET", "/page", MockResponseBuilder().with_content("<html/>", "text/html"))

    async def run():
        async with _async_client(router) as client:
            await AsyncNetworkManager(client).fetch_data("/page", content_types=["application/json"])

    with pytest.raises(ContentTypeError):
        asyncio.run(run())


def test_prebuilt_request_surfaces_decode_error(router):
    router.add("GET", "/bad", MockResponseBuilder().with_content("nope", "text/plain"))

    async def run():
        async with _async_client(router) as client:
            manager = AsyncNetworkManager(client)
            await manager.fetch_json_for_request(
                client.build_request("GET", "/bad"), cache_policy=CachePolicy.DO_NOT_CACHE
            )

    with pytest.raises(DecodeError):
        asyncio.run(run())
    assert router.requests[0].extensions["cache_disabled"] is True


def test_task_cancellation_aborts_in_flight_request():
    async def run():
        in_flight = asyncio.Event()

        async def hang(request):
            in_flight.set()
            await asyncio.sleep(3600)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(hang), base_url="https://api.example.com"
        ) as client:
            manager = AsyncNetworkManager(client)
            task = asyncio.create_task(manager.fetch_data("/slow"))
            await in_flight.wait()
            task.cancel()
            try:
                await task
            except asyncio.CancelledError as exc:
                return exc
        return None

    error = asyncio.run(run())

    assert isinstance(error, asyncio.CancelledError)
    assert is_explicitly_cancelled(error)


def test_throttled_requests_are_spaced(router):
    router.add("GET", "/t", MockResponseBuilder().with_json({}))
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    async def run():
        async with _async_client(router) as client:
            manager = AsyncNetworkManager(client, inter_request_interval=1.0, clock=lambda: 0.0)
            manager.throttle_gate._async_sleep = fake_sleep
            for _ in range(3):
                await manager.fetch_data("/t")

    asyncio.run(run())

    assert sleeps == [1.0, 2.0]


def test_from_settings_owns_and_closes_client(router):
    router.add("GET", "/items", MockResponseBuilder().with_json([1]))

    async def run():
        manager = AsyncNetworkManager.from_settings(
            NetworkSettings(http2=False, base_url="https://api.example.com"),
            transport=router.transport(),
        )
        async with manager:
            value = await manager.fetch_json("/items")
        return value, manager.session.is_closed

    assert asyncio.run(run()) == ([1], True)
