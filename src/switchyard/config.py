"""Router configuration.

RouterConfig is a frozen dataclass and cannot change after creation.
It holds the fallback responses the router synthesizes when no
default or error handler is installed.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Fallback response settings. Immutable after creation.

    Override what you need::

        config = RouterConfig(not_found_body="Nothing here")
        router = Router(config=config)
    """

    # No route matched and no default handler
    not_found_body: str = "Not found"
    not_found_status: int = 404

    # Unhandled failure and no error handler. The failure's message is used
    # as the body; internal_error_body is the fallback for empty messages.
    internal_error_body: str = "Internal Server Error"
    internal_error_status: int = 500

    # Content type of synthesized responses
    content_type: str = "text/plain; charset=utf-8"


DEFAULT_CONFIG = RouterConfig()
"""The configuration used by routers created without an explicit config."""
