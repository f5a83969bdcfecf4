"""Test helpers for code built on wren.

Requests and responses are the same httpx types used in production.
No wrapper translation layer.
"""

from collections.abc import Mapping
from typing import Any

import httpx


def make_request(
    method: str = "GET",
    url: str = "https://example.org/",
    *,
    headers: Mapping[str, str] | list[tuple[str, str]] | None = None,
    extensions: dict[str, Any] | None = None,
    content: bytes | str | None = None,
) -> httpx.Request:
    """Build an ``httpx.Request`` for feeding filter chains and dispatchers.

    Usage::

        request = make_request("POST", "https://example.org/item/grapes?cool=wren",
                               headers={"content-type": "text/plain"},
                               extensions={"user_id": 7})
    """
    return httpx.Request(method, url, headers=headers, extensions=extensions, content=content)


# ---------------------------------------------------------------------------
# Response assertion helpers
# ---------------------------------------------------------------------------


def assert_status(response: httpx.Response, status: int) -> None:
    """Assert the response has the expected status code."""
    assert response.status_code == status, (
        f"Expected status {status}, got {response.status_code}.\n"
        f"Response body: {response.text[:500]}"
    )


def assert_body(response: httpx.Response, text: str, *, status: int | None = None) -> None:
    """Assert the response body equals *text* (and optionally the status)."""
    if status is not None:
        assert_status(response, status)
    assert response.text == text, (
        f"Expected body {text!r}, got {response.text[:500]!r}"
    )


def assert_not_found(response: httpx.Response) -> None:
    """Assert the response is the default not-found fallback."""
    assert_status(response, 404)
    assert response.text == "Not Found", (
        f"Expected the not-found fallback body, got {response.text[:500]!r}"
    )
