"""Ordered route table with continuation-based dispatch.

Routes are tried in insertion order. The first route whose matcher accepts
the request runs; its handler can hand the request on to the remaining
routes by awaiting ``ctx.next()``. When the table is exhausted the default
handler runs. Failures anywhere in the chain are caught once, at the top,
and turned into a response by the error handler.

Usage::

    router = (
        Router()
        .get("/*", authenticate)       # middleware: sets ctx.state, awaits next()
        .get("/:name", greet)
        .default(lambda: Response("Not found", status=404))
    )
    response = await router.dispatch(Request("GET", "http://localhost/Wazoo"))

Thread safety:
    A router is safe to share between concurrent dispatches as long as the
    table is not modified while requests are in flight. Build it once, then
    serve. ``freeze()`` enforces that. A state value passed explicitly to
    several concurrent dispatches is shared without any locking.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Final

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.invoke import invoke, invoke_with_arity
from switchyard._internal.types import DefaultHandler, ErrorHandler, Handler
from switchyard.config import DEFAULT_CONFIG, RouterConfig
from switchyard.errors import ConfigurationError, HTTPError, NextAfterDefaultError
from switchyard.http.request import ConnectionInfo, Request
from switchyard.http.response import Response
from switchyard.http.url import URL
from switchyard.routing.matcher import StructuralMatch, evaluate
from switchyard.routing.pattern import PathPattern
from switchyard.routing.route import DispatchContext, RouteDescriptor
from switchyard.server.negotiation import negotiate

logger = logging.getLogger("switchyard.router")


class _Missing:
    """Sentinel type: no explicit state was passed to ``dispatch()``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def _empty_state() -> Any:
    return {}


async def _next_after_default() -> Response:
    raise NextAfterDefaultError


class Router[StateT]:
    """An HTTP request dispatcher over an ordered route table.

    Every builder method appends or configures and returns the same
    router, so configuration chains::

        api = Router().get("/items/:id", show_item).post("/items", create_item)
        app = Router().use(api).default(not_found).error(on_error)
    """

    __slots__ = (
        "_frozen",
        "config",
        "default_handler",
        "error_handler",
        "initialize_state",
        "routes",
    )

    def __init__(
        self,
        routes: Iterable[RouteDescriptor] | None = None,
        *,
        initialize_state: Callable[[], StateT] | None = None,
        default_handler: DefaultHandler | None = None,
        error_handler: ErrorHandler | None = None,
        config: RouterConfig = DEFAULT_CONFIG,
    ) -> None:
        self.routes: list[RouteDescriptor] = list(routes or ())
        self.initialize_state: Callable[[], StateT] = initialize_state or _empty_state
        self.default_handler = default_handler
        self.error_handler = error_handler
        self.config = config
        self._frozen = False

    def __repr__(self) -> str:
        return f"<Router routes={len(self.routes)}{' frozen' if self._frozen else ''}>"

    # -- Dispatch --

    async def dispatch(
        self,
        request: Request,
        info: ConnectionInfo | None = None,
        state: StateT | _Missing = MISSING,
    ) -> Response:
        """Run *request* through the route table and return a response.

        A fresh state is created with ``initialize_state()`` unless *state*
        is given. Pass the caller's state when dispatching into a nested
        router so values set by earlier handlers stay visible.

        Only ``NextAfterDefaultError`` and failures raised by the error
        handler itself escape this call.
        """
        if isinstance(state, _Missing):
            state = self.initialize_state()

        try:
            url = URL.parse(request.url)
            return await self._execute(0, request, url, info, state)
        except NextAfterDefaultError:
            raise
        except Exception as exc:
            return await self._handle_error(exc, request)

    async def _execute(
        self,
        index: int,
        request: Request,
        url: URL,
        info: ConnectionInfo | None,
        state: StateT,
    ) -> Response:
        """Walk the table from *index* and run the first matching route."""
        routes = self.routes
        while index < len(routes):
            route = routes[index]
            params = await evaluate(route.matcher, request, url)
            if params is None:
                index += 1
                continue

            next_index = index + 1

            async def next_route() -> Response:
                return await self._execute(next_index, request, url, info, state)

            context = DispatchContext(
                request=request,
                url=url,
                params=params,
                state=state,
                info=info,
                next=next_route,
            )
            return negotiate(await invoke(route.handler, context))

        return await self._run_default(request, url, info, state)

    async def _run_default(
        self,
        request: Request,
        url: URL,
        info: ConnectionInfo | None,
        state: StateT,
    ) -> Response:
        """Run the default handler, or synthesize the not-found response."""
        if self.default_handler is None:
            logger.debug("No route matched %s %s", request.method, url.path)
            return Response(
                body=self.config.not_found_body,
                status=self.config.not_found_status,
                content_type=self.config.content_type,
            )

        context = DispatchContext(
            request=request,
            url=url,
            params={},
            state=state,
            info=info,
            next=_next_after_default,
        )
        return negotiate(await invoke_with_arity(self.default_handler, context))

    async def _handle_error(self, exc: Exception, request: Request) -> Response:
        """Convert a failure from the chain into a response."""
        if self.error_handler is not None:
            return negotiate(await invoke_with_arity(self.error_handler, exc, request))

        if isinstance(exc, HTTPError):
            logger.debug("%d %s %s: %s", exc.status, request.method, request.url, exc.detail)
            response = Response(
                body=exc.detail or str(exc.status),
                status=exc.status,
                content_type=self.config.content_type,
            )
            for name, value in exc.headers:
                response = response.with_header(name, value)
            return response

        logger.exception(
            "%d %s %s",
            self.config.internal_error_status,
            request.method,
            request.url,
            exc_info=exc,
        )
        return Response(
            body=str(exc) or self.config.internal_error_body,
            status=self.config.internal_error_status,
            content_type=self.config.content_type,
        )

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point: serve this router directly."""
        from switchyard.server.handler import handle_request

        await handle_request(scope, receive, send, router=self)

    # -- Builder --

    def _check_mutable(self) -> None:
        if self._frozen:
            msg = "Cannot add routes to a frozen router."
            raise ConfigurationError(msg)

    def freeze(self) -> "Router[StateT]":
        """Make the route table read-only. Later registrations raise."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        """True once ``freeze()`` has been called."""
        return self._frozen

    def state(self, factory: Callable[[], StateT]) -> "Router[StateT]":
        """Set the factory that creates the state for each dispatch."""
        if not callable(factory):
            msg = f"State factory must be callable, got {type(factory).__name__}"
            raise ConfigurationError(msg)
        self.initialize_state = factory
        return self

    def with_(self, matcher: Any, handler: Handler | None = None) -> "Router[StateT]":
        """Append a route.

        Accepts a ready ``RouteDescriptor``, or a matcher plus a handler.
        The matcher may be a ``StructuralMatch``/``PredicateMatch``, a
        predicate callable, a ``{"method": ..., "pattern": ...}`` mapping,
        a pattern string, or None for a catch-all.
        """
        self._check_mutable()
        if isinstance(matcher, RouteDescriptor):
            if handler is not None:
                msg = "Pass either a RouteDescriptor or a matcher and handler, not both."
                raise ConfigurationError(msg)
            self.routes.append(matcher)
            return self

        if handler is None or not callable(handler):
            msg = f"Route handler must be callable, got {type(handler).__name__}"
            raise ConfigurationError(msg)
        if isinstance(matcher, Router):
            msg = "Use router.use(other) to compose routers."
            raise ConfigurationError(msg)
        self.routes.append(RouteDescriptor(handler=handler, matcher=matcher))
        return self

    def use(self, *sources: "Router[StateT] | Iterable[RouteDescriptor]") -> "Router[StateT]":
        """Append the routes of other routers or route lists, in order.

        Only routes are merged. Default handlers, error handlers and state
        factories stay with the router that owns them.
        """
        self._check_mutable()
        for source in sources:
            routes = source.routes if isinstance(source, Router) else source
            for route in list(routes):
                if not isinstance(route, RouteDescriptor):
                    msg = f"Expected RouteDescriptor, got {type(route).__name__}"
                    raise ConfigurationError(msg)
                self.routes.append(route)
        return self

    def default(self, handler: DefaultHandler) -> "Router[StateT]":
        """Set the handler that runs when no route matches."""
        self.default_handler = handler
        return self

    def error(self, handler: ErrorHandler) -> "Router[StateT]":
        """Set the handler that turns failures into responses."""
        self.error_handler = handler
        return self

    def route(self, method: str, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a route for *method* and *pattern*."""
        return self.with_(StructuralMatch(method=method, pattern=pattern), handler)

    def connect(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a CONNECT route."""
        return self.route("CONNECT", pattern, handler)

    def delete(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a DELETE route."""
        return self.route("DELETE", pattern, handler)

    def get(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a GET route."""
        return self.route("GET", pattern, handler)

    def head(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a HEAD route."""
        return self.route("HEAD", pattern, handler)

    def options(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append an OPTIONS route."""
        return self.route("OPTIONS", pattern, handler)

    def patch(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a PATCH route."""
        return self.route("PATCH", pattern, handler)

    def post(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a POST route."""
        return self.route("POST", pattern, handler)

    def put(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a PUT route."""
        return self.route("PUT", pattern, handler)

    def trace(self, pattern: str | PathPattern, handler: Handler) -> "Router[StateT]":
        """Append a TRACE route."""
        return self.route("TRACE", pattern, handler)


def create_router[StateT](
    *,
    initialize_state: Callable[[], StateT] | None = None,
    config: RouterConfig = DEFAULT_CONFIG,
) -> Router[StateT]:
    """Create an empty router. Equivalent to ``Router(...)``."""
    return Router(initialize_state=initialize_state, config=config)
