"""Matchers: decide whether a request qualifies for a route.

Two explicit variants, no shape sniffing at dispatch time:

- ``StructuralMatch(method, pattern)``: method token and/or pathname
  pattern. Either may be None, meaning "any".
- ``PredicateMatch(predicate)``: arbitrary ``(request, url) -> bool``,
  sync or async. Its result is the only criterion.

``evaluate()`` returns None for no match, or the capture map for a match.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Literal

from switchyard._internal.invoke import invoke
from switchyard._internal.types import Predicate
from switchyard.errors import ConfigurationError
from switchyard.http.request import Request
from switchyard.http.url import URL
from switchyard.routing.pattern import PathPattern, PatternResult


def capture_params(result: PatternResult) -> dict[str, str]:
    """Keep only groups the pattern engine actually populated."""
    return {name: value for name, value in result.groups.items() if value is not None}


@dataclass(frozen=True, slots=True)
class StructuralMatch:
    """Match on HTTP method and/or pathname pattern.

    A string pattern is compiled on construction, so malformed patterns
    fail at registration rather than on the first request.
    """

    kind: ClassVar[Literal["structural"]] = "structural"

    method: str | None = None
    pattern: PathPattern | None = None

    def __post_init__(self) -> None:
        if self.method is not None:
            if not isinstance(self.method, str) or not self.method.strip():
                msg = f"Method must be a non-empty string, got {self.method!r}"
                raise ConfigurationError(msg)
            object.__setattr__(self, "method", self.method.strip().upper())
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", PathPattern(self.pattern))
        elif self.pattern is not None and not isinstance(self.pattern, PathPattern):
            msg = f"Pattern must be a string or PathPattern, got {type(self.pattern).__name__}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class PredicateMatch:
    """Match when ``predicate(request, url)`` is truthy."""

    kind: ClassVar[Literal["predicate"]] = "predicate"

    predicate: Predicate

    def __post_init__(self) -> None:
        if not callable(self.predicate):
            msg = f"Predicate must be callable, got {type(self.predicate).__name__}"
            raise ConfigurationError(msg)


type Matcher = StructuralMatch | PredicateMatch


def to_matcher(value: Any) -> Matcher | None:
    """Normalize the accepted matcher shorthands.

    - ``None`` -> None (catch-all)
    - ``StructuralMatch`` / ``PredicateMatch`` -> as is
    - callable -> ``PredicateMatch``
    - mapping with ``method`` and/or ``pattern`` keys -> ``StructuralMatch``
    - ``str`` / ``PathPattern`` -> pattern-only ``StructuralMatch``
    """
    match value:
        case None | StructuralMatch() | PredicateMatch():
            return value
        case str() | PathPattern():
            return StructuralMatch(pattern=value)
        case Mapping():
            unknown = set(value) - {"method", "pattern"}
            if unknown:
                msg = f"Unknown matcher keys: {sorted(unknown)}"
                raise ConfigurationError(msg)
            return StructuralMatch(method=value.get("method"), pattern=value.get("pattern"))
        case Callable():
            return PredicateMatch(value)
        case _:
            msg = f"Cannot build a matcher from {type(value).__name__!r}"
            raise ConfigurationError(msg)


async def evaluate(matcher: Matcher | None, request: Request, url: URL) -> dict[str, str] | None:
    """Evaluate *matcher* against a request.

    Returns None when the request does not match, otherwise the capture
    map (empty for predicates and pattern-less matchers).
    """
    match matcher:
        case None:
            return {}
        case StructuralMatch(method=method, pattern=pattern):
            if method is not None and method != request.method:
                return None
            if pattern is None:
                return {}
            result = pattern.match(url.path)
            if result is None:
                return None
            return capture_params(result)
        case PredicateMatch(predicate=predicate):
            if await invoke(predicate, request, url):
                return {}
            return None
        case _:
            msg = f"Unsupported matcher {matcher!r}"
            raise TypeError(msg)
