"""Typed ASGI definitions.

Replaces the standard Scope = MutableMapping[str, Any] with a typed
dataclass for internal use. Users never see these.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias
from urllib.parse import quote

# Raw ASGI types
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class HTTPScope:
    """Typed HTTP scope parsed from raw ASGI scope dict."""

    type: str
    scheme: str
    http_version: str
    method: str
    path: str
    raw_path: bytes
    query_string: bytes
    headers: tuple[tuple[bytes, bytes], ...]
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    @classmethod
    def from_scope(cls, scope: Scope) -> "HTTPScope":
        """Parse raw ASGI scope into typed object."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            type=scope["type"],
            scheme=scope.get("scheme", "http"),
            http_version=scope.get("http_version", "1.1"),
            method=scope["method"],
            path=scope["path"],
            raw_path=scope.get("raw_path", b""),
            query_string=scope.get("query_string", b""),
            headers=tuple(scope.get("headers", ())),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )

    @property
    def target_path(self) -> str:
        """Request path, still percent-encoded.

        Encoded ``%2F``, ``%3F`` and ``%23`` stay inside their segment.

        Some clients send the query string inside ``raw_path``; it is cut off
        here and taken from ``query_string`` instead.
        """
        if self.raw_path:
            return self.raw_path.decode("latin-1").split("?", 1)[0]
        return quote(self.path, safe="/:@!$&'()*+,;=-._~")

    @property
    def url(self) -> str:
        """Absolute request URL reconstructed from the scope."""
        host = None
        for name, value in self.headers:
            if name.lower() == b"host":
                host = value.decode("latin-1")
                break
        if host is None:
            if self.server is None:
                host = "localhost"
            else:
                hostname, port = self.server
                if ":" in hostname:
                    hostname = f"[{hostname}]"
                default_port = 443 if self.scheme == "https" else 80
                host = hostname if port == default_port else f"{hostname}:{port}"
        url = f"{self.scheme}://{host}{self.target_path}"
        if self.query_string:
            url = f"{url}?{self.query_string.decode('latin-1')}"
        return url
