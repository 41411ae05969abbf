"""Connection options and their resolution into a canonical config."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Mapping, NamedTuple, Optional, Union
from urllib.parse import unquote, urlsplit

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from .errors import ValidationError

DEFAULT_HOST = "localhost"
DEFAULT_PATH = "/"
HTTP_PORT = 80
HTTPS_PORT = 443

Port = Annotated[StrictInt, Field(ge=1, le=0xFFFF)]

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class ClientOptions(BaseModel):
    """Raw, unresolved client options.

    Every field is optional. ``apiKey`` is accepted as the alias of
    ``api_key``; ``api_key`` and ``key`` both set the password.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ssl: Optional[StrictBool] = None
    host: Optional[StrictStr] = None
    port: Optional[Port] = None
    path: Optional[StrictStr] = None
    url: Optional[StrictStr] = None
    api_key: Optional[StrictStr] = Field(default=None, alias="apiKey")
    key: Optional[StrictStr] = None
    username: Optional[StrictStr] = None
    password: Optional[StrictStr] = None
    token: Optional[StrictStr] = None

    @classmethod
    def from_env(cls, prefix: str = "RESTRPC_", environ: Optional[Mapping[str, str]] = None) -> "ClientOptions":
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in ("url", "host", "path", "username", "password", "token"):
            raw = env.get(f"{prefix}{name.upper()}")
            if raw is not None:
                values[name] = raw

        api_key = env.get(f"{prefix}API_KEY")
        if api_key is not None:
            values["api_key"] = api_key

        port = env.get(f"{prefix}PORT")
        if port is not None:
            try:
                values["port"] = int(port)
            except ValueError as exc:
                raise ValidationError(f"{prefix}PORT must be an integer, got {port!r}") from exc

        ssl = env.get(f"{prefix}SSL")
        if ssl is not None:
            flag = ssl.strip().lower()
            if flag not in _TRUTHY | _FALSY:
                raise ValidationError(f"{prefix}SSL must be a boolean, got {ssl!r}")
            values["ssl"] = flag in _TRUTHY

        return _validate(values)


RawOptions = Union[str, ClientOptions, Mapping[str, Any], None]


@dataclass(frozen=True)
class ConnectionConfig:
    use_tls: bool = False
    host: str = DEFAULT_HOST
    port: int = HTTP_PORT
    base_path: str = DEFAULT_PATH
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    auth_token: Optional[str] = field(default=None, repr=False)

    @property
    def scheme(self) -> str:
        return "https" if self.use_tls else "http"

    @property
    def netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.netloc}"

    @property
    def websocket_url(self) -> str:
        return f"{'wss' if self.use_tls else 'ws'}://{self.netloc}/"


@dataclass(frozen=True)
class TransportSettings:
    timeout: float = 5.0
    user_agent: str = "restrpc-python/0.1.0"
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, prefix: str = "RESTRPC_") -> "TransportSettings":
        timeout = os.environ.get(f"{prefix}TIMEOUT")
        if timeout is None:
            return cls()
        try:
            return cls(timeout=float(timeout))
        except ValueError as exc:
            raise ValidationError(f"{prefix}TIMEOUT must be a number, got {timeout!r}") from exc


class ParsedURL(NamedTuple):
    use_tls: bool
    host: str
    port: int
    path: str
    username: Optional[str]
    password: Optional[str]


def parse_url(url: str) -> ParsedURL:
    """Split a server URL into the parts a connection needs.

    A URL without ``://`` is treated as ``http://``. Only ``http`` and
    ``https`` are accepted, and a host is required.
    """
    if "://" not in url:
        url = "http://" + url

    try:
        parts = urlsplit(url)
        explicit_port = parts.port
    except ValueError as exc:
        raise ValidationError("Malformed URL.") from exc

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ValidationError("Malformed URL.")

    use_tls = parts.scheme == "https"
    port = HTTPS_PORT if use_tls else HTTP_PORT
    if explicit_port is not None:
        if explicit_port == 0:
            raise ValidationError("Malformed URL.")
        port = explicit_port

    username: Optional[str] = None
    password: Optional[str] = None
    userinfo, at, _ = parts.netloc.rpartition("@")
    if at and userinfo:
        name, colon, secret = userinfo.partition(":")
        username = unquote(name)
        if colon:
            password = unquote(secret)

    return ParsedURL(
        use_tls=use_tls,
        host=parts.hostname,
        port=port,
        path=parts.path or DEFAULT_PATH,
        username=username,
        password=password,
    )


def resolve(raw: RawOptions = None) -> ConnectionConfig:
    """Merge raw options into a fully populated ``ConnectionConfig``.

    Fields are applied in a fixed order (ssl, host, port, path, url, apiKey,
    key, username, password, token) and a later field overrides whatever an
    earlier one derived. Raises ``ValidationError`` on malformed input.
    """
    options = _coerce(raw)

    use_tls = False
    host = DEFAULT_HOST
    port = HTTP_PORT
    base_path = DEFAULT_PATH
    username: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None

    if options.ssl is not None:
        use_tls = options.ssl
        port = HTTPS_PORT if options.ssl else HTTP_PORT

    if options.host is not None:
        host = options.host

    if options.port is not None:
        port = options.port

    if options.path is not None:
        base_path = options.path

    if options.url is not None:
        parsed = parse_url(options.url)
        use_tls = parsed.use_tls
        host = parsed.host
        port = parsed.port
        base_path = parsed.path
        if parsed.username is not None:
            username = parsed.username
        if parsed.password is not None:
            password = parsed.password

    if options.api_key is not None:
        password = options.api_key

    if options.key is not None:
        password = options.key

    if options.username is not None:
        username = options.username

    if options.password is not None:
        password = options.password

    if options.token is not None:
        token = options.token

    return ConnectionConfig(
        use_tls=use_tls,
        host=host,
        port=port,
        base_path=base_path,
        username=username,
        password=password,
        auth_token=token,
    )


def _coerce(raw: RawOptions) -> ClientOptions:
    if raw is None:
        return ClientOptions()
    if isinstance(raw, ClientOptions):
        return raw
    if isinstance(raw, str):
        return _validate({"url": raw})
    if isinstance(raw, Mapping):
        return _validate(dict(raw))
    raise ValidationError(f"Options must be a URL string or a mapping, got {type(raw).__name__}")


def _validate(values: Dict[str, Any]) -> ClientOptions:
    try:
        return ClientOptions.model_validate(values)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid client options: {exc}") from exc


__all__ = [
    "ClientOptions",
    "ConnectionConfig",
    "ParsedURL",
    "RawOptions",
    "TransportSettings",
    "parse_url",
    "resolve",
]
