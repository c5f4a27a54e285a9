"""RouteDescriptor and DispatchContext frozen dataclasses."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from switchyard._internal.types import Handler
from switchyard.errors import ConfigurationError
from switchyard.http.request import ConnectionInfo, Request
from switchyard.http.response import Response
from switchyard.http.url import URL
from switchyard.routing.matcher import Matcher, to_matcher

# Continuation: resumes dispatch at the next route in the same table
type Next = Callable[[], Awaitable[Response]]


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A matcher/handler pair. Immutable once registered.

    ``matcher=None`` matches every request. Other matcher shorthands
    (pattern strings, mappings, predicate callables) are normalized the
    same way ``Router.with_`` does it.
    """

    handler: Handler
    matcher: Matcher | None = None

    def __post_init__(self) -> None:
        if not callable(self.handler):
            msg = f"Route handler must be callable, got {type(self.handler).__name__}"
            raise ConfigurationError(msg)
        object.__setattr__(self, "matcher", to_matcher(self.matcher))


@dataclass(frozen=True, slots=True)
class DispatchContext[StateT]:
    """Everything a handler receives for one invocation.

    ``state`` is shared by reference with every other handler in the same
    dispatch chain. ``next()`` runs the next matching route (or the default
    handler) and may be awaited any number of times.
    """

    request: Request
    url: URL
    params: dict[str, str]
    state: StateT
    info: ConnectionInfo | None
    next: Next = field(repr=False)

    @property
    def method(self) -> str:
        """Shortcut for ``ctx.request.method``."""
        return self.request.method

    def param(self, name: str, default: Any = None) -> Any:
        """Return captured parameter *name*, or *default* if absent."""
        return self.params.get(name, default)
