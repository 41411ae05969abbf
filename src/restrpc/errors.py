"""Error types raised by the restrpc clients."""

from __future__ import annotations

from typing import Any, Optional


class ClientError(Exception):
    """Base class for every error produced by this library."""


class ValidationError(ClientError, ValueError):
    """Raised when client options cannot be resolved."""


class AuthError(ClientError):
    """Raised when the server rejects the configured credentials."""


class ProtocolError(ClientError):
    """Raised when the server answers in an unexpected shape."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RemoteError(ClientError):
    """Application error reported inside a REST response body."""

    def __init__(self, message: str, type: Optional[str] = None, code: Any = None):
        super().__init__(message)
        self.message = message
        self.type = type
        self.code = code


class RPCError(ClientError):
    """Error returned by, or synthesized for, a JSON-RPC call."""

    type = "RPCError"

    def __init__(self, message: Any, code: Any = 0):
        self.message = "" if message is None else str(message)
        self.code = _unsigned32(code)
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"RPCError(message={self.message!r}, code={self.code})"


def _unsigned32(code: Any) -> int:
    try:
        return int(code) & 0xFFFFFFFF
    except (TypeError, ValueError, OverflowError):
        return 0


__all__ = [
    "ClientError",
    "ValidationError",
    "AuthError",
    "ProtocolError",
    "RemoteError",
    "RPCError",
]
