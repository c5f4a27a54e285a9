"""Pathname patterns with named capture groups.

The syntax follows the pathname part of the WHATWG URLPattern API::

    "/users"            static
    "/users/:id"        named segment            {"id": "42"}
    "/users/:id?"       optional segment         {} for "/users"
    "/files/:path+"     one or more segments     {"path": "a/b/c"}
    "/files/:path*"     zero or more segments
    "/items/:id(\\d+)"  custom regex
    "/static/*"         wildcard, captured as    {"0": "css/app.css"}

A match yields a ``PatternResult`` whose groups may be partially
populated: an optional group that did not participate maps to ``None``.
Callers decide what to do with the gaps.
"""

import re
from dataclasses import dataclass

from switchyard.errors import ConfigurationError

# Default regex for a single path segment
SEGMENT = r"[^/]+"

_NAME_START = re.compile(r"[A-Za-z_]")
_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True, slots=True)
class PatternResult:
    """Result of matching a path against a ``PathPattern``."""

    path: str
    groups: dict[str, str | None]


def _read_regex(source: str, start: int) -> tuple[str, int]:
    """Read a parenthesized regex starting at ``source[start] == "("``.

    Returns the inner regex and the index just past the closing paren.
    """
    depth = 0
    i = start
    while i < len(source):
        char = source[i]
        if char == "\\":
            i += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                inner = source[start + 1 : i]
                if not inner:
                    msg = f"Empty regex group at offset {start} in pattern {source!r}"
                    raise ConfigurationError(msg)
                return inner, i + 1
        i += 1
    msg = f"Unbalanced parenthesis at offset {start} in pattern {source!r}"
    raise ConfigurationError(msg)


def _group(name: str, body: str, modifier: str, prefix: str) -> str:
    """Regex for one capture group, applying its modifier and prefix."""
    if modifier in ("*", "+"):
        body = f"(?:{body})(?:{re.escape(prefix or '/')}(?:{body}))*"
    captured = f"{re.escape(prefix)}(?P<{name}>{body})"
    if modifier in ("?", "*"):
        return f"(?:{captured})?"
    return captured


def compile_pattern(source: str) -> tuple[re.Pattern[str], tuple[tuple[str, str], ...]]:
    """Compile a pathname pattern into a regex.

    Returns the compiled regex and ``(regex_group, public_name)`` pairs in
    declaration order. Raises ``ConfigurationError`` on malformed input.
    """
    parts: list[str] = []
    literal: list[str] = []
    groups: list[tuple[str, str]] = []
    unnamed = 0
    i = 0

    def flush() -> None:
        if literal:
            parts.append(re.escape("".join(literal)))
            literal.clear()

    while i < len(source):
        char = source[i]

        if char == "\\":
            if i + 1 >= len(source):
                msg = f"Trailing backslash in pattern {source!r}"
                raise ConfigurationError(msg)
            literal.append(source[i + 1])
            i += 2
            continue

        if char == "{" or char == "}":
            msg = (
                f"Braces are not supported in pattern {source!r}. "
                "Use :param for named segments, e.g. '/users/:id'."
            )
            raise ConfigurationError(msg)

        if char == ":" and i + 1 < len(source) and _NAME_START.match(source[i + 1]):
            name_match = _NAME.match(source, i + 1)
            assert name_match is not None
            public = name_match.group()
            i = name_match.end()
            body = SEGMENT
            if i < len(source) and source[i] == "(":
                body, i = _read_regex(source, i)
        elif char == "(":
            public = str(unnamed)
            unnamed += 1
            body, i = _read_regex(source, i)
        elif char == "*":
            public = str(unnamed)
            unnamed += 1
            body = ".*"
            i += 1
        else:
            literal.append(char)
            i += 1
            continue

        modifier = ""
        if i < len(source) and source[i] in "?*+":
            modifier = source[i]
            i += 1

        prefix = ""
        if literal and literal[-1] == "/" and (modifier or body == SEGMENT):
            literal.pop()
            prefix = "/"
        flush()

        if any(existing == public for _, existing in groups):
            msg = f"Duplicate group name {public!r} in pattern {source!r}"
            raise ConfigurationError(msg)

        regex_name = f"g{len(groups)}"
        groups.append((regex_name, public))
        parts.append(_group(regex_name, body, modifier, prefix))

    flush()

    try:
        regex = re.compile("".join(parts))
    except re.error as exc:
        msg = f"Invalid regex in pattern {source!r}: {exc}"
        raise ConfigurationError(msg) from exc
    return regex, tuple(groups)


class PathPattern:
    """A compiled pathname pattern.

    Usage::

        pattern = PathPattern("/users/:id")
        result = pattern.match("/users/42")
        result.groups  # {"id": "42"}
        pattern.match("/posts")  # None
    """

    __slots__ = ("_groups", "_regex", "source")

    def __init__(self, source: str) -> None:
        if not isinstance(source, str) or not source:
            msg = f"Pattern must be a non-empty string, got {source!r}"
            raise ConfigurationError(msg)
        self.source = source
        self._regex, self._groups = compile_pattern(source)

    def __repr__(self) -> str:
        return f"PathPattern({self.source!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathPattern):
            return NotImplemented
        return self.source == other.source

    def __hash__(self) -> int:
        return hash(self.source)

    @property
    def group_names(self) -> tuple[str, ...]:
        """Public group names in declaration order."""
        return tuple(public for _, public in self._groups)

    def match(self, path: str) -> PatternResult | None:
        """Match *path* in full. Returns None when it does not match."""
        found = self._regex.fullmatch(path)
        if found is None:
            return None
        return PatternResult(
            path=path,
            groups={public: found.group(name) for name, public in self._groups},
        )
