"""Switchyard: an ordered, continuation-based HTTP request dispatcher.

Routes are tried in registration order. The first match runs, and may hand
the request on to the remaining routes with ``await ctx.next()``. A state
value created per dispatch travels through the whole chain.

Basic usage::

    from switchyard import Request, Response, Router

    router = (
        Router()
        .get("/", lambda ctx: Response(f"Hello, {ctx.url.query.get('name', 'World')}!"))
        .default(lambda: Response("Not found", status=404))
    )

    response = await router.dispatch(Request("GET", "http://localhost/?name=Deno"))

Routers are ASGI applications, so any ASGI server can serve them directly.
"""

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_CONFIG",
    "MISSING",
    "ConfigurationError",
    "ConnectionInfo",
    "DispatchContext",
    "HTTPError",
    "Headers",
    "Next",
    "NextAfterDefaultError",
    "NotFound",
    "PathPattern",
    "PredicateMatch",
    "Request",
    "Response",
    "RouteDescriptor",
    "Router",
    "RouterConfig",
    "StructuralMatch",
    "SwitchyardError",
    "URL",
    "create_router",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name in ("Router", "create_router", "MISSING"):
        from switchyard.routing import router as _router

        return getattr(_router, name)

    if name in ("DispatchContext", "RouteDescriptor", "Next"):
        from switchyard.routing import route as _route

        return getattr(_route, name)

    if name in ("StructuralMatch", "PredicateMatch"):
        from switchyard.routing import matcher as _matcher

        return getattr(_matcher, name)

    if name == "PathPattern":
        from switchyard.routing.pattern import PathPattern

        return PathPattern

    if name in ("Request", "ConnectionInfo"):
        from switchyard.http import request as _req

        return getattr(_req, name)

    if name == "Response":
        from switchyard.http.response import Response

        return Response

    if name == "Headers":
        from switchyard.http.headers import Headers

        return Headers

    if name == "URL":
        from switchyard.http.url import URL

        return URL

    if name in ("RouterConfig", "DEFAULT_CONFIG"):
        from switchyard import config as _config

        return getattr(_config, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "NextAfterDefaultError",
        "NotFound",
        "SwitchyardError",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
