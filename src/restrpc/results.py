"""Normalization of server responses into explicit results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from .descriptors import ResponseDescriptor
from .errors import AuthError, ClientError, ProtocolError, RemoteError, RPCError

logger = logging.getLogger("restrpc.results")

UNAUTHORIZED = "Unauthorized (bad API key)."
WRONG_CONTENT_TYPE = "Bad response (wrong content-type)."
NO_BODY = "Bad response (no body)."
NO_RPC_BODY = "No body for JSON-RPC response."


@dataclass(frozen=True)
class Success:
    value: Any

    ok = True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Absent:
    """The server reported that the resource does not exist."""

    ok = True

    def unwrap(self) -> None:
        return None


@dataclass(frozen=True)
class Failure:
    error: ClientError

    ok = False

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Success, Absent, Failure]


def _is_blank(body: Any) -> bool:
    # Empty containers still count as a body.
    if body is None:
        return True
    if isinstance(body, (dict, list)):
        return False
    return not body


def _error_field(body: Any) -> Any:
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    return None if _is_blank(error) else error


def _message(value: Any) -> str:
    return "" if value is None else str(value)


def _status_error(response: ResponseDescriptor) -> ProtocolError:
    return ProtocolError(f"Status code: {response.status_code}.", status_code=response.status_code)


def normalize_rest(response: ResponseDescriptor) -> Result:
    """Map a REST response onto a result, checking conditions in priority order."""
    status = response.status_code

    if status == 404:
        return Absent()

    if status == 401:
        return Failure(AuthError(UNAUTHORIZED))

    if not response.is_json:
        return Failure(ProtocolError(WRONG_CONTENT_TYPE, status_code=status))

    body = response.json()

    if _is_blank(body):
        return Failure(ProtocolError(NO_BODY, status_code=status))

    error = _error_field(body)
    if error is not None:
        if isinstance(error, dict):
            err_type = error.get("type")
            remote = RemoteError(
                _message(error.get("message")),
                type=str(err_type) if err_type is not None else None,
                code=error.get("code"),
            )
        else:
            remote = RemoteError(str(error))
        logger.warning("Server reported error status=%s type=%s message=%s", status, remote.type, remote.message)
        return Failure(remote)

    if status != 200:
        return Failure(_status_error(response))

    return Success(body)


def normalize_rpc(response: ResponseDescriptor) -> Result:
    """Map a JSON-RPC response onto a result, checking conditions in priority order."""
    status = response.status_code

    if status == 401:
        return Failure(RPCError(UNAUTHORIZED, -1))

    if not response.is_json:
        return Failure(ProtocolError(WRONG_CONTENT_TYPE, status_code=status))

    body = response.json()

    if _is_blank(body):
        return Failure(ProtocolError(NO_RPC_BODY, status_code=status))

    error = _error_field(body)
    if error is not None:
        if isinstance(error, dict):
            rpc_error = RPCError(error.get("message"), error.get("code"))
        else:
            rpc_error = RPCError(error)
        logger.warning("JSON-RPC error code=%s message=%s", rpc_error.code, rpc_error.message)
        return Failure(rpc_error)

    if status != 200:
        return Failure(_status_error(response))

    if isinstance(body, dict):
        return Success(body.get("result"))
    return Success(None)


__all__ = [
    "Absent",
    "Failure",
    "Result",
    "Success",
    "normalize_rest",
    "normalize_rpc",
]
