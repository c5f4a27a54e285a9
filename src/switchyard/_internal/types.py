"""Shared type aliases used across switchyard modules."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

# Route handler: receives a DispatchContext, returns a response value
Handler: TypeAlias = Callable[..., Any]

# Default handler: zero args, or the DispatchContext
DefaultHandler: TypeAlias = Callable[..., Any]

# Error handler: receives (error) or (error, request)
ErrorHandler: TypeAlias = Callable[..., Any]

# Predicate matcher: receives (request, url), returns a truthy value
Predicate: TypeAlias = Callable[..., bool | Awaitable[bool]]
