"""Tests for the asyncio client: same behaviour as the blocking one, awaited."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from rabbitmq_http.client import AsyncClient
from rabbitmq_http.exceptions import BuildError, ConflictError, NotFoundError, TransportError
from rabbitmq_http.models import QueueParams
from rabbitmq_http.models.common import QueueType

from conftest import ENDPOINT, FakeBroker


def _client(broker: FakeBroker) -> AsyncClient:
    return AsyncClient(ENDPOINT, "guest", "guest", http_client=broker.async_client())


@pytest.mark.asyncio
async def test_declare_and_fetch(broker: FakeBroker) -> None:
    async with _client(broker) as rc:
        await rc.declare_queue("/", QueueParams.quorum("orders/eu"))
        info = await rc.get_queue_info("/", "orders/eu")
    assert info.declared_type is QueueType.QUORUM
    assert broker.requests[0].url.raw_path == b"/api/queues/%2F/orders%2Feu"


@pytest.mark.asyncio
async def test_missing_queue(broker: FakeBroker) -> None:
    async with _client(broker) as rc:
        with pytest.raises(NotFoundError):
            await rc.get_queue_info("/", "ghost")
        assert await rc.delete_queue("/", "ghost", idempotently=True) is None


@pytest.mark.asyncio
async def test_conflict(broker: FakeBroker) -> None:
    broker.add_queue("/", "orders", durable=True)
    async with _client(broker) as rc:
        with pytest.raises(ConflictError):
            await rc.declare_queue("/", QueueParams.new("orders", QueueType.CLASSIC, durable=False))


@pytest.mark.asyncio
async def test_build_errors_are_raised_before_awaiting(broker: FakeBroker) -> None:
    async with _client(broker) as rc:
        with pytest.raises(BuildError):
            rc.delete_users([])
    assert broker.requests == []


@pytest.mark.asyncio
async def test_transport_failure() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    async with AsyncClient(ENDPOINT, http_client=http) as rc:
        with pytest.raises(TransportError):
            await rc.list_vhosts()
    await http.aclose()


@pytest.mark.asyncio
async def test_corrupt_content_encoding_is_a_transport_error() -> None:
    def corrupt(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip")

    http = httpx.AsyncClient(transport=httpx.MockTransport(corrupt))
    async with AsyncClient(ENDPOINT, http_client=http) as rc:
        with pytest.raises(TransportError) as excinfo:
            await rc.get_overview()
    assert isinstance(excinfo.value.__cause__, httpx.DecodingError)
    await http.aclose()


@pytest.mark.asyncio
async def test_redirect_loop_is_a_transport_error() -> None:
    def loop(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"location": str(request.url)})

    http = httpx.AsyncClient(transport=httpx.MockTransport(loop), follow_redirects=True, max_redirects=3)
    async with AsyncClient(ENDPOINT, http_client=http) as rc:
        with pytest.raises(TransportError) as excinfo:
            await rc.list_vhosts()
    assert isinstance(excinfo.value.__cause__, httpx.TooManyRedirects)
    await http.aclose()


@pytest.mark.asyncio
async def test_iterates_pages(broker: FakeBroker) -> None:
    for index in range(5):
        broker.add_queue("/", f"q{index}")
    async with _client(broker) as rc:
        sizes = [len(page) async for page in rc.iter_queue_pages("/", page_size=2)]
    assert sizes == [2, 2, 1]
    assert [r.url.params["page"] for r in broker.requests] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_concurrent_calls(broker: FakeBroker) -> None:
    for name in ("a", "b", "c"):
        broker.add_queue("/", name)
    async with _client(broker) as rc:
        infos = await asyncio.gather(*(rc.get_queue_info("/", name) for name in ("a", "b", "c")))
    assert [info.name for info in infos] == ["a", "b", "c"]
