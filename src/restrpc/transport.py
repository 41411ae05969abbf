"""httpx and websockets backed transports."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
import websockets
from websockets.sync.client import connect as sync_connect

from .config import ConnectionConfig, TransportSettings
from .descriptors import JSON, RequestDescriptor, ResponseDescriptor, classify_content_type

logger = logging.getLogger("restrpc.transport")


def _url(descriptor: RequestDescriptor) -> httpx.URL:
    path = descriptor.path if descriptor.path.startswith("/") else "/" + descriptor.path
    return httpx.URL(
        scheme="https" if descriptor.use_tls else "http",
        host=descriptor.host,
        port=descriptor.port,
        path=path,
    )


def _request_kwargs(descriptor: RequestDescriptor) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    if descriptor.has_credentials:
        kwargs["auth"] = httpx.BasicAuth(descriptor.username or "", descriptor.password or "")
    if descriptor.query is not None:
        kwargs["params"] = descriptor.query
    else:
        kwargs["json"] = descriptor.json
    return kwargs


def _describe(response: httpx.Response) -> ResponseDescriptor:
    content_type = classify_content_type(response.headers.get("Content-Type"))
    body = None
    if content_type == JSON and response.content:
        try:
            body = json.loads(response.content)
        except ValueError:
            logger.warning("Undecodable JSON body status=%s url=%s", response.status_code, response.request.url)
    return ResponseDescriptor(status_code=response.status_code, content_type=content_type, body=body)


def _headers(settings: TransportSettings) -> Dict[str, str]:
    headers = {
        "Accept": "application/json",
        "User-Agent": settings.user_agent,
    }
    headers.update(settings.headers)
    return headers


class HttpTransport:
    """Sends request descriptors over a pooled ``httpx.Client``."""

    def __init__(self, settings: TransportSettings, *, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._client = httpx.Client(timeout=settings.timeout, headers=_headers(settings), transport=transport)

    def send(self, descriptor: RequestDescriptor) -> ResponseDescriptor:
        url = _url(descriptor)
        logger.debug("%s %s", descriptor.method, url.path)
        response = self._client.request(descriptor.method, url, **_request_kwargs(descriptor))
        logger.debug("%s %s -> %s", descriptor.method, url.path, response.status_code)
        return _describe(response)

    def close(self) -> None:
        self._client.close()


class AsyncHttpTransport:
    """Sends request descriptors over a pooled ``httpx.AsyncClient``."""

    def __init__(self, settings: TransportSettings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._client = httpx.AsyncClient(timeout=settings.timeout, headers=_headers(settings), transport=transport)

    async def send(self, descriptor: RequestDescriptor) -> ResponseDescriptor:
        url = _url(descriptor)
        logger.debug("%s %s", descriptor.method, url.path)
        response = await self._client.request(descriptor.method, url, **_request_kwargs(descriptor))
        logger.debug("%s %s -> %s", descriptor.method, url.path, response.status_code)
        return _describe(response)

    async def close(self) -> None:
        await self._client.aclose()


def _websocket_uri(host: str, port: int, use_tls: bool) -> str:
    return ConnectionConfig(use_tls=use_tls, host=host, port=port).websocket_url


def open_websocket(host: str, port: int, use_tls: bool) -> Any:
    """Open a blocking websocket connection; raises if the handshake fails."""
    # The caller closes the returned connection.
    return sync_connect(_websocket_uri(host, port, use_tls), legacy=True)


async def open_websocket_async(host: str, port: int, use_tls: bool) -> Any:
    """Open an asyncio websocket connection; raises if the handshake fails."""
    return await websockets.connect(_websocket_uri(host, port, use_tls))


__all__ = [
    "AsyncHttpTransport",
    "HttpTransport",
    "open_websocket",
    "open_websocket_async",
]
