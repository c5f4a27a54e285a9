"""Tests for switchyard.routing.route: RouteDescriptor and DispatchContext."""

import dataclasses

import pytest

from switchyard.errors import ConfigurationError
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.http.url import URL
from switchyard.routing.matcher import PredicateMatch, StructuralMatch
from switchyard.routing.route import DispatchContext, RouteDescriptor


def _handler(ctx: DispatchContext) -> Response:
    return Response("ok")


async def _next() -> Response:
    return Response("next")


class TestRouteDescriptor:
    def test_catch_all_by_default(self) -> None:
        route = RouteDescriptor(handler=_handler)
        assert route.matcher is None
        assert route.handler is _handler

    def test_with_matcher(self) -> None:
        matcher = StructuralMatch(method="GET", pattern="/")
        assert RouteDescriptor(handler=_handler, matcher=matcher).matcher is matcher

    def test_frozen(self) -> None:
        route = RouteDescriptor(handler=_handler)
        with pytest.raises(dataclasses.FrozenInstanceError):
            route.matcher = None  # type: ignore[misc]

    def test_pattern_string_normalized(self) -> None:
        route = RouteDescriptor(handler=_handler, matcher="/items/:id")
        assert isinstance(route.matcher, StructuralMatch)
        assert route.matcher.method is None
        assert route.matcher.pattern.source == "/items/:id"

    def test_mapping_normalized(self) -> None:
        route = RouteDescriptor(handler=_handler, matcher={"method": "get", "pattern": "/"})
        assert route.matcher == StructuralMatch(method="GET", pattern="/")

    def test_callable_becomes_predicate(self) -> None:
        def is_admin(request: Request, url: URL) -> bool:
            return url.path.startswith("/admin")

        route = RouteDescriptor(handler=_handler, matcher=is_admin)
        assert route.matcher == PredicateMatch(is_admin)

    def test_invalid_matcher_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteDescriptor(handler=_handler, matcher=42)  # type: ignore[arg-type]

    def test_invalid_pattern_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteDescriptor(handler=_handler, matcher="/items/{id}")

    def test_handler_must_be_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteDescriptor(handler="nope")  # type: ignore[arg-type]


class TestDispatchContext:
    def _context(self) -> DispatchContext[dict[str, str]]:
        request = Request("post", "http://localhost/items/42")
        return DispatchContext(
            request=request,
            url=URL.parse(request.url),
            params={"id": "42"},
            state={},
            info=None,
            next=_next,
        )

    def test_method_shortcut(self) -> None:
        assert self._context().method == "POST"

    def test_param(self) -> None:
        ctx = self._context()
        assert ctx.param("id") == "42"
        assert ctx.param("missing") is None
        assert ctx.param("missing", "fallback") == "fallback"

    def test_state_is_mutable_through_frozen_context(self) -> None:
        ctx = self._context()
        ctx.state["user"] = "ada"
        assert ctx.state == {"user": "ada"}

    def test_frozen(self) -> None:
        ctx = self._context()
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.state = {}  # type: ignore[misc]

    @pytest.mark.anyio
    async def test_next_is_callable(self) -> None:
        response = await self._context().next()
        assert response.text == "next"

    def test_repr_omits_next(self) -> None:
        assert "next=" not in repr(self._context())
