"""Switchyard exception hierarchy.

Shared across the router, matchers, and the ASGI adapter so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a router is configured incorrectly.

    Registration-time problems: malformed patterns, empty method tokens,
    unsupported matcher arguments, or adding routes to a frozen router.
    """


class NextAfterDefaultError(SwitchyardError):
    """Raised when ``next()`` is called from the default handler.

    There is no route after the default handler, so continuing is a
    composition bug. The router never passes this to the error handler.
    """

    def __init__(self, detail: str = "No route follows the default handler.") -> None:
        super().__init__(detail)


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Handlers raise it to short-circuit with a specific status. When the
    router has no error handler, it is converted into a response carrying
    ``status``, ``detail`` and ``headers``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: the requested resource does not exist."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status=404, detail=detail)
