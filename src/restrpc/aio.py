"""asyncio flavour of the client."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any, Awaitable, Callable, Optional

import httpx

from .client import ClientBase
from .config import RawOptions, TransportSettings
from .results import Result, normalize_rest, normalize_rpc
from .transport import AsyncHttpTransport, open_websocket_async

logger = logging.getLogger("restrpc.aio")

AsyncConnector = Callable[[str, int, bool], Awaitable[Any]]


class AsyncClient(ClientBase):
    """Same surface as :class:`restrpc.Client`, with awaitable methods."""

    def __init__(
        self,
        options: RawOptions = None,
        *,
        settings: Optional[TransportSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        connector: Optional[AsyncConnector] = None,
    ) -> None:
        super().__init__(options)
        self._http = AsyncHttpTransport(settings or TransportSettings(), transport=transport)
        self._connector = connector or open_websocket_async

    async def __aenter__(self) -> "AsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def connect(self) -> Any:
        cfg = self._config
        logger.debug("Opening connection to %s", cfg.netloc)
        return await self._connector(cfg.host, cfg.port, cfg.use_tls)

    async def request_result(
        self,
        method: str,
        endpoint: str,
        params: Optional[MutableMapping[str, Any]] = None,
    ) -> Result:
        descriptor = self._build_request(method, endpoint, params)
        return normalize_rest(await self._http.send(descriptor))

    async def request(self, method: str, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        result = await self.request_result(method, endpoint, params)
        return result.unwrap()

    async def get(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return await self.request("GET", endpoint, params)

    async def post(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return await self.request("POST", endpoint, params)

    async def put(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return await self.request("PUT", endpoint, params)

    async def delete(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return await self.request("DELETE", endpoint, params)

    del_ = delete

    async def call_result(self, endpoint: str, method: str, params: Any = None) -> Result:
        # The id is taken before the first await so concurrent calls never share one.
        descriptor = self._build_call(endpoint, method, params)
        return normalize_rpc(await self._http.send(descriptor))

    async def call(self, endpoint: str, method: str, params: Any = None) -> Any:
        result = await self.call_result(endpoint, method, params)
        return result.unwrap()

    async def close(self) -> None:
        await self._http.close()


__all__ = ["AsyncClient", "AsyncConnector"]
