"""Invoke helpers: call sync or async callables uniformly.

Handlers, predicates, default handlers and error handlers can all be
``def`` or ``async def``. Any code that calls a user-provided callable goes
through this module so the sync/async check lives in exactly one place.

Usage::

    from switchyard._internal.invoke import invoke

    result = await invoke(handler, context)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync, returns immediately
        def hello(ctx):
            return Response("Hello")

        # async, the coroutine is awaited here
        async def hello(ctx):
            return await ctx.next()
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def positional_arity(handler: Any) -> int:
    """Number of positional arguments *handler* will accept.

    ``*args`` counts as unlimited. Callables whose signature cannot be
    inspected (some builtins) are assumed to take one argument.
    """
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return 1

    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 1 << 16
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


async def invoke_with_arity(handler: Any, *args: Any) -> Any:
    """Call *handler* with as many leading *args* as its signature accepts.

    Default handlers may take zero args or the dispatch context; error
    handlers may take ``(error)`` or ``(error, request)``.
    """
    arity = positional_arity(handler)
    return await invoke(handler, *args[:arity])
