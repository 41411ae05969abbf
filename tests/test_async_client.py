from __future__ import annotations

import asyncio
import json
from typing import Any, List

import httpx
import pytest

from restrpc.aio import AsyncClient
from restrpc.errors import AuthError, RPCError
from restrpc.results import Absent


def make_client(handler, options: Any = "http://node.example:8332", **kwargs: Any) -> AsyncClient:
    return AsyncClient(options, transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_async_get_and_post() -> None:
    seen: List[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"echo": request.method})

    async with make_client(handler, {"url": "http://node.example", "token": "t"}) as client:
        assert await client.get("/a", {"q": 1}) == {"echo": "GET"}
        assert await client.post("/b", {"v": 2}) == {"echo": "POST"}

    assert seen[0].url.params["q"] == "1"
    assert seen[0].url.params["token"] == "t"
    assert json.loads(seen[1].content) == {"v": 2, "token": "t"}


@pytest.mark.asyncio
async def test_async_status_mapping() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/missing":
            return httpx.Response(404)
        return httpx.Response(401)

    async with make_client(handler) as client:
        assert await client.get("missing") is None
        assert isinstance(await client.request_result("GET", "missing"), Absent)
        with pytest.raises(AuthError):
            await client.delete("locked")
        with pytest.raises(RPCError) as excinfo:
            await client.call("/", "getinfo")
        assert excinfo.value.code == 0xFFFFFFFF


@pytest.mark.asyncio
async def test_async_concurrent_call_ids() -> None:
    ids: List[int] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        ids.append(body["id"])
        return httpx.Response(200, json={"result": body["id"]})

    async with make_client(handler) as client:
        results = await asyncio.gather(*(client.call("/", "ping") for _ in range(10)))

    assert sorted(results) == list(range(1, 11))
    assert sorted(ids) == list(range(1, 11))


@pytest.mark.asyncio
async def test_async_connect() -> None:
    async def connector(host: str, port: int, use_tls: bool) -> tuple:
        return (host, port, use_tls)

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    async with make_client(handler, "https://node.example", connector=connector) as client:
        assert await client.connect() == ("node.example", 443, True)


@pytest.mark.asyncio
async def test_async_connect_failure() -> None:
    async def connector(host: str, port: int, use_tls: bool) -> None:
        raise OSError("unreachable")

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    async with make_client(handler, connector=connector) as client:
        with pytest.raises(OSError, match="unreachable"):
            await client.connect()
