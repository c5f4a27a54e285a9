"""Parsed absolute URLs and immutable query parameters.

Handlers receive a ``URL`` alongside the raw request so they never parse
the request target themselves.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlsplit


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: str = "") -> None:
        object.__setattr__(self, "_raw", query_string)
        parsed = parse_qs(query_string, keep_blank_values=True)
        object.__setattr__(self, "_data", parsed)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))


@dataclass(frozen=True, slots=True)
class URL:
    """An absolute URL split into its components.

    Usage::

        url = URL.parse("http://localhost/?name=Deno")
        url.path               # "/"
        url.query.get("name")  # "Deno"
    """

    href: str
    scheme: str
    host: str
    port: int | None
    path: str
    query_string: str
    fragment: str
    query: QueryParams = field(compare=False, repr=False)

    @classmethod
    def parse(cls, url: str) -> "URL":
        """Parse *url*. Relative URLs are resolved against ``http://localhost``."""
        parts = urlsplit(url)
        if not parts.scheme:
            parts = urlsplit(f"http://localhost{url if url.startswith('/') else '/' + url}")
        return cls(
            href=parts.geturl(),
            scheme=parts.scheme,
            host=parts.hostname or "",
            port=parts.port,
            path=parts.path or "/",
            query_string=parts.query,
            fragment=parts.fragment,
            query=QueryParams(parts.query),
        )

    @property
    def origin(self) -> str:
        """``scheme://host[:port]``."""
        if self.port is None:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"

    def __str__(self) -> str:
        return self.href
