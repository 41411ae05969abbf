"""Request and response shapes exchanged with the HTTP transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .config import ConnectionConfig

JSON = "json"


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    use_tls: bool
    host: str
    port: int
    path: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    query: Optional[Dict[str, Any]] = None
    json: Any = None
    use_pool: bool = True

    def __post_init__(self) -> None:
        if self.query is not None and self.json is not None:
            raise ValueError("A request carries either a query or a JSON body, not both")

    @classmethod
    def build(
        cls,
        config: ConnectionConfig,
        method: str,
        endpoint: str,
        *,
        query: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> "RequestDescriptor":
        return cls(
            method=method,
            use_tls=config.use_tls,
            host=config.host,
            port=config.port,
            path=config.base_path + endpoint,
            username=config.username,
            password=config.password,
            query=query,
            json=json,
        )

    @property
    def has_credentials(self) -> bool:
        return self.username is not None or self.password is not None


@dataclass(frozen=True)
class ResponseDescriptor:
    """Transport-neutral view of one HTTP response.

    ``content_type`` is ``"json"`` for JSON media types and the bare media
    type otherwise. ``body`` is the decoded JSON value, or ``None`` when the
    response had no usable JSON body.
    """

    status_code: int
    content_type: str
    body: Any = None

    @property
    def is_json(self) -> bool:
        return self.content_type == JSON

    def json(self) -> Any:
        return self.body


class RpcRequest(BaseModel):
    """JSON-RPC request envelope."""

    method: str
    params: Any = None
    id: int


def classify_content_type(header: Optional[str]) -> str:
    if not header:
        return ""
    media_type = header.split(";", 1)[0].strip().lower()
    if media_type == "application/json" or media_type.endswith("+json"):
        return JSON
    return media_type


__all__ = [
    "JSON",
    "RequestDescriptor",
    "ResponseDescriptor",
    "RpcRequest",
    "classify_content_type",
]
