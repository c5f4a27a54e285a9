"""Immutable HTTP request.

Frozen metadata with async body access. The dispatcher reads only
``method`` and ``url``; everything else is carried for handlers.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from switchyard._internal.asgi import Receive
from switchyard.http.headers import Headers


@dataclass(frozen=True, slots=True)
class ConnectionInfo:
    """Transport metadata for the connection a request arrived on.

    Passed through the dispatcher untouched; handlers forward it when
    they delegate to a nested router.
    """

    client: tuple[str, int] | None = None
    server: tuple[str, int] | None = None

    @property
    def remote_addr(self) -> str | None:
        """Client host, if the transport reported one."""
        return self.client[0] if self.client else None


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``method`` is normalized to upper case on creation. ``url`` is the
    absolute request URL as a string; the dispatcher parses it once per
    dispatch and hands handlers the parsed form.

    Body is accessed asynchronously via ``.body()``, ``.text()``, ``.json()``.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=Headers)

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached. The ASGI receive is consumed once, then the
        same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if "_body" in self._cache:
            if self._cache["_body"]:
                yield self._cache["_body"]
            return
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        body: bytes | str = b"",
    ) -> Request:
        """Create a request with an in-memory body.

        Usage::

            request = Request.build("POST", "http://localhost/items", body=b"{}")
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(
            method=method,
            url=url,
            headers=Headers(headers),
            _cache={"_body": body},
        )
