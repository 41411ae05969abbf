"""HTTP and JSON-RPC client for a single remote API server."""

from .aio import AsyncClient
from .client import Client
from .config import ClientOptions, ConnectionConfig, TransportSettings, resolve
from .errors import AuthError, ClientError, ProtocolError, RemoteError, RPCError, ValidationError
from .results import Absent, Failure, Result, Success

__version__ = "0.1.0"

__all__ = [
    "Absent",
    "AsyncClient",
    "AuthError",
    "Client",
    "ClientError",
    "ClientOptions",
    "ConnectionConfig",
    "Failure",
    "ProtocolError",
    "RPCError",
    "RemoteError",
    "Result",
    "Success",
    "TransportSettings",
    "ValidationError",
    "resolve",
]
