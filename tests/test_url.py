"""Tests for switchyard.http.url: URL parsing and query parameters."""

from switchyard.http.url import URL, QueryParams


class TestURL:
    def test_absolute(self) -> None:
        url = URL.parse("https://example.com:8443/items/42?full=1#top")
        assert url.scheme == "https"
        assert url.host == "example.com"
        assert url.port == 8443
        assert url.path == "/items/42"
        assert url.query_string == "full=1"
        assert url.fragment == "top"
        assert url.origin == "https://example.com:8443"

    def test_empty_path_is_root(self) -> None:
        assert URL.parse("http://localhost").path == "/"

    def test_relative_resolves_against_localhost(self) -> None:
        url = URL.parse("/items?x=1")
        assert url.origin == "http://localhost"
        assert url.path == "/items"
        assert url.query.get("x") == "1"

    def test_str_is_href(self) -> None:
        assert str(URL.parse("http://localhost/a?b=c")) == "http://localhost/a?b=c"

    def test_equality_ignores_query_object(self) -> None:
        assert URL.parse("http://localhost/?a=1") == URL.parse("http://localhost/?a=1")


class TestQueryParams:
    def test_first_value(self) -> None:
        params = QueryParams("tag=a&tag=b&page=2")
        assert params["tag"] == "a"
        assert params.get_list("tag") == ["a", "b"]
        assert params.get("page") == "2"

    def test_blank_values_kept(self) -> None:
        params = QueryParams("flag&empty=")
        assert "flag" in params
        assert params["empty"] == ""

    def test_missing(self) -> None:
        params = QueryParams()
        assert params.get("x") is None
        assert params.get("x", "d") == "d"
        assert params.get_list("x") == []
        assert len(params) == 0

    def test_repr(self) -> None:
        assert repr(QueryParams("a=1")) == "QueryParams({'a': '1'})"
