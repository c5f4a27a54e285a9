"""ASGI handler: translates ASGI scope/messages to switchyard types.

The only component that touches raw ASGI directly. Converts the scope
to a Request and ConnectionInfo, dispatches through the router, and
sends the Response back through ASGI send().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from switchyard._internal.asgi import HTTPScope, Receive, Scope, Send
from switchyard.http.headers import Headers
from switchyard.http.request import ConnectionInfo, Request
from switchyard.server.sender import send_response

if TYPE_CHECKING:
    from switchyard.routing.router import Router

logger = logging.getLogger("switchyard.server")


def request_from_scope(scope: Scope, receive: Receive) -> tuple[Request, ConnectionInfo]:
    """Build the Request and its ConnectionInfo from an ASGI HTTP scope."""
    http_scope = HTTPScope.from_scope(scope)
    request = Request(
        method=http_scope.method,
        url=http_scope.url,
        headers=Headers.from_raw(http_scope.headers),
        _receive=receive,
    )
    info = ConnectionInfo(client=http_scope.client, server=http_scope.server)
    return request, info


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
) -> None:
    """Process a single ASGI HTTP request through *router*.

    Lifespan and websocket scopes are ignored; lifespan startup and
    shutdown are acknowledged so servers that require it keep going.
    """
    if scope["type"] == "lifespan":
        await _acknowledge_lifespan(receive, send)
        return
    if scope["type"] != "http":
        logger.debug("Ignoring unsupported ASGI scope type %r", scope["type"])
        return

    request, info = request_from_scope(scope, receive)
    response = await router.dispatch(request, info)
    await send_response(response, send, method=request.method)


async def _acknowledge_lifespan(receive: Receive, send: Send) -> None:
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
