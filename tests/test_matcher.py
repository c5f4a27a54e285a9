"""Tests for switchyard.routing.matcher: structural and predicate matchers."""

from unittest.mock import Mock

import pytest

from switchyard.errors import ConfigurationError
from switchyard.http.request import Request
from switchyard.http.url import URL
from switchyard.routing.matcher import (
    PredicateMatch,
    StructuralMatch,
    capture_params,
    evaluate,
    to_matcher,
)
from switchyard.routing.pattern import PathPattern, PatternResult


def _request(method: str = "GET", url: str = "http://localhost/") -> tuple[Request, URL]:
    request = Request(method, url)
    return request, URL.parse(request.url)


class TestStructuralMatch:
    def test_method_is_upper_cased(self) -> None:
        assert StructuralMatch(method="get").method == "GET"

    def test_string_pattern_is_compiled(self) -> None:
        matcher = StructuralMatch(pattern="/items/:id")
        assert isinstance(matcher.pattern, PathPattern)
        assert matcher.pattern.source == "/items/:id"

    def test_wildcards_by_default(self) -> None:
        matcher = StructuralMatch()
        assert matcher.method is None
        assert matcher.pattern is None

    def test_rejects_empty_method(self) -> None:
        with pytest.raises(ConfigurationError):
            StructuralMatch(method="  ")

    def test_rejects_non_pattern(self) -> None:
        with pytest.raises(ConfigurationError):
            StructuralMatch(pattern=42)  # type: ignore[arg-type]

    def test_malformed_pattern_fails_at_construction(self) -> None:
        with pytest.raises(ConfigurationError):
            StructuralMatch(pattern="/users/{id}")

    def test_kind(self) -> None:
        assert StructuralMatch.kind == "structural"
        assert PredicateMatch.kind == "predicate"


class TestPredicateMatch:
    def test_rejects_non_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            PredicateMatch(42)  # type: ignore[arg-type]


class TestToMatcher:
    def test_none_is_catch_all(self) -> None:
        assert to_matcher(None) is None

    def test_existing_matcher_passes_through(self) -> None:
        matcher = StructuralMatch(method="GET")
        assert to_matcher(matcher) is matcher

    def test_callable_becomes_predicate(self) -> None:
        def predicate(request, url):
            return True

        matcher = to_matcher(predicate)
        assert isinstance(matcher, PredicateMatch)
        assert matcher.predicate is predicate

    def test_mapping_becomes_structural(self) -> None:
        matcher = to_matcher({"method": "post", "pattern": "/items"})
        assert matcher == StructuralMatch(method="POST", pattern=PathPattern("/items"))

    def test_mapping_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigurationError):
            to_matcher({"path": "/items"})

    def test_string_becomes_pattern_only(self) -> None:
        matcher = to_matcher("/items")
        assert isinstance(matcher, StructuralMatch)
        assert matcher.method is None

    def test_rejects_other_types(self) -> None:
        with pytest.raises(ConfigurationError):
            to_matcher(42)


class TestCaptureParams:
    def test_drops_unpopulated_groups(self) -> None:
        result = PatternResult(path="/items", groups={"id": None, "kind": "book"})
        assert capture_params(result) == {"kind": "book"}


class TestEvaluate:
    @pytest.mark.anyio
    async def test_catch_all(self) -> None:
        request, url = _request("DELETE", "http://localhost/anything")
        assert await evaluate(None, request, url) == {}

    @pytest.mark.anyio
    async def test_method_only(self) -> None:
        request, url = _request("POST", "http://localhost/anything")
        assert await evaluate(StructuralMatch(method="POST"), request, url) == {}
        assert await evaluate(StructuralMatch(method="GET"), request, url) is None

    @pytest.mark.anyio
    async def test_pattern_only_any_method(self) -> None:
        request, url = _request("PATCH", "http://localhost/items/42")
        assert await evaluate(StructuralMatch(pattern="/items/:id"), request, url) == {"id": "42"}

    @pytest.mark.anyio
    async def test_pattern_uses_path_not_query(self) -> None:
        request, url = _request("GET", "http://localhost/items/42?full=1")
        assert await evaluate(StructuralMatch(pattern="/items/:id"), request, url) == {"id": "42"}

    @pytest.mark.anyio
    async def test_pattern_mismatch(self) -> None:
        request, url = _request("GET", "http://localhost/posts/42")
        assert await evaluate(StructuralMatch(pattern="/items/:id"), request, url) is None

    @pytest.mark.anyio
    async def test_extracts_exactly_populated_groups(self) -> None:
        request, url = _request("GET", "http://localhost/items")
        params = await evaluate(StructuralMatch(method="GET", pattern="/items/:id?"), request, url)
        assert params == {}

    @pytest.mark.anyio
    async def test_method_mismatch_skips_pattern(self) -> None:
        pattern = Mock(spec=PathPattern)
        matcher = StructuralMatch(method="POST", pattern=pattern)
        request, url = _request("GET", "http://localhost/items")

        assert await evaluate(matcher, request, url) is None
        pattern.match.assert_not_called()

    @pytest.mark.anyio
    async def test_sync_predicate(self) -> None:
        seen: list[tuple[Request, URL]] = []

        def predicate(request: Request, url: URL) -> bool:
            seen.append((request, url))
            return url.query.get("beta") == "1"

        request, url = _request("GET", "http://localhost/?beta=1")
        assert await evaluate(PredicateMatch(predicate), request, url) == {}
        assert seen == [(request, url)]

        request, url = _request("GET", "http://localhost/")
        assert await evaluate(PredicateMatch(predicate), request, url) is None

    @pytest.mark.anyio
    async def test_async_predicate(self) -> None:
        async def predicate(request: Request, url: URL) -> bool:
            return request.headers.get("x-admin") == "yes"

        request = Request.build("GET", "http://localhost/", headers={"X-Admin": "yes"})
        assert await evaluate(PredicateMatch(predicate), request, URL.parse(request.url)) == {}

    @pytest.mark.anyio
    async def test_predicate_ignores_method(self) -> None:
        request, url = _request("TRACE", "http://localhost/")
        assert await evaluate(PredicateMatch(lambda request, url: True), request, url) == {}

    @pytest.mark.anyio
    async def test_predicate_failure_propagates(self) -> None:
        def predicate(request: Request, url: URL) -> bool:
            raise RuntimeError("boom")

        request, url = _request()
        with pytest.raises(RuntimeError, match="boom"):
            await evaluate(PredicateMatch(predicate), request, url)

