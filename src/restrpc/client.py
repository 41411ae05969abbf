"""Blocking HTTP and JSON-RPC client."""

from __future__ import annotations

import logging
import threading
from collections.abc import MutableMapping
from typing import Any, Callable, Optional

import httpx

from .config import ConnectionConfig, RawOptions, TransportSettings, resolve
from .descriptors import RequestDescriptor, RpcRequest
from .results import Result, normalize_rest, normalize_rpc
from .transport import HttpTransport, open_websocket

logger = logging.getLogger("restrpc.client")

Connector = Callable[[str, int, bool], Any]


class ClientBase:
    """State and request assembly shared by the blocking and asyncio clients."""

    def __init__(self, options: RawOptions = None) -> None:
        self._config = resolve(options)
        self._request_id = 0
        self._id_lock = threading.Lock()

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def request_id(self) -> int:
        """Id used by the most recent JSON-RPC call (0 before the first)."""
        return self._request_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config.base_url}{self._config.base_path})"

    def _next_id(self) -> int:
        with self._id_lock:
            self._request_id += 1
            return self._request_id

    def _build_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[MutableMapping[str, Any]],
    ) -> RequestDescriptor:
        if not isinstance(method, str) or not method:
            raise ValueError("method must be a non-empty string")
        if not isinstance(endpoint, str):
            raise TypeError(f"endpoint must be a string, got {type(endpoint).__name__}")
        if params is None:
            params = {}
        if not isinstance(params, MutableMapping):
            raise TypeError(f"params must be a mapping, got {type(params).__name__}")

        if self._config.auth_token:
            params["token"] = self._config.auth_token

        method = method.upper()
        if method == "GET":
            return RequestDescriptor.build(self._config, method, endpoint, query=dict(params))
        return RequestDescriptor.build(self._config, method, endpoint, json=dict(params))

    def _build_call(self, endpoint: str, method: str, params: Any) -> RequestDescriptor:
        if not isinstance(endpoint, str):
            raise TypeError(f"endpoint must be a string, got {type(endpoint).__name__}")
        if not isinstance(method, str):
            raise TypeError(f"method must be a string, got {type(method).__name__}")

        envelope = RpcRequest(method=method, params=params, id=self._next_id())
        logger.debug("JSON-RPC call method=%s id=%s", method, envelope.id)
        return RequestDescriptor.build(self._config, "POST", endpoint, json=envelope.model_dump())


class Client(ClientBase):
    """Talks to one remote server over REST-style HTTP and JSON-RPC.

    ``options`` is a URL string, a mapping of option fields or a
    ``ClientOptions`` instance. ``transport`` replaces the httpx transport
    (for example ``httpx.MockTransport``) and ``connector`` replaces the
    websocket opener used by :meth:`connect`.
    """

    def __init__(
        self,
        options: RawOptions = None,
        *,
        settings: Optional[TransportSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        connector: Optional[Connector] = None,
    ) -> None:
        super().__init__(options)
        self._http = HttpTransport(settings or TransportSettings(), transport=transport)
        self._connector = connector or open_websocket

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def connect(self) -> Any:
        """Open a bidirectional connection to the server."""
        cfg = self._config
        logger.debug("Opening connection to %s", cfg.netloc)
        return self._connector(cfg.host, cfg.port, cfg.use_tls)

    def request_result(
        self,
        method: str,
        endpoint: str,
        params: Optional[MutableMapping[str, Any]] = None,
    ) -> Result:
        descriptor = self._build_request(method, endpoint, params)
        return normalize_rest(self._http.send(descriptor))

    def request(self, method: str, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        """Send a request and return the decoded JSON body.

        Returns ``None`` on 404 and raises a ``ClientError`` subclass for any
        other failure reported by the server.
        """
        return self.request_result(method, endpoint, params).unwrap()

    def get(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return self.request("GET", endpoint, params)

    def post(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return self.request("POST", endpoint, params)

    def put(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return self.request("PUT", endpoint, params)

    def delete(self, endpoint: str, params: Optional[MutableMapping[str, Any]] = None) -> Any:
        return self.request("DELETE", endpoint, params)

    del_ = delete

    def call_result(self, endpoint: str, method: str, params: Any = None) -> Result:
        descriptor = self._build_call(endpoint, method, params)
        return normalize_rpc(self._http.send(descriptor))

    def call(self, endpoint: str, method: str, params: Any = None) -> Any:
        """Make a JSON-RPC call and return its ``result``; raises ``RPCError`` on failure."""
        return self.call_result(endpoint, method, params).unwrap()

    def close(self) -> None:
        self._http.close()


__all__ = ["Client", "ClientBase", "Connector"]
