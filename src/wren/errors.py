"""Wren exception hierarchy.

Shared across the filter chain, dispatcher and response helpers so every
module raises and catches the same types. A request that simply does not
match a route is never an exception; these types cover misconfiguration
and handler failures only.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a dispatcher or config is set up incorrectly.

    Typically raised while routes are being registered, before any
    request is dispatched.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Handlers raise these to choose the status and body of the error
    response. Any other exception escaping a handler becomes a 500.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no candidate matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — a candidate rejected the request on its method alone.

    When the allowed methods are known they are sent in an ``Allow``
    header and listed in the detail string.
    """

    def __init__(self, allowed: frozenset[str] = frozenset(), detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        if allow_value:
            default_detail = f"Method not allowed. Allowed methods: {allow_value}"
            headers: tuple[tuple[str, str], ...] = (("Allow", allow_value),)
        else:
            default_detail = "Method Not Allowed"
            headers = ()
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=headers,
        )


class BadRequest(HTTPError):  # noqa: N818
    """400 — a candidate rejected the request on a header, query or custom check."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)
