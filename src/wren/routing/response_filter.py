"""Response filter chain — the same short-circuit algebra over a response.

Useful for middleware-style post-processing: decide what to do with a
response from its status and headers without a cascade of ``if``s::

    if filter_response(response).filter_status(range(500, 600)):
        ...
"""

from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import Any

import httpx

from wren._internal.types import ResponsePredicate
from wren.routing.matcher import match_header
from wren.routing.pattern import tokenize_value


@dataclass(frozen=True, slots=True)
class ResponseFilter:
    """A response that passed every filter so far, or ``None``."""

    response: httpx.Response | None

    @property
    def is_live(self) -> bool:
        return self.response is not None

    def __bool__(self) -> bool:
        return self.response is not None

    def filter_status(self, status: int | Collection[int]) -> "ResponseFilter":
        """Keep the chain if the status code is *status* (or one of them)."""
        if self.response is None:
            return self
        allowed = (status,) if isinstance(status, int) else status
        if self.response.status_code in allowed:
            return self
        return ResponseFilter(None)

    def filter_header(self, name: str, pattern: str) -> "ResponseFilter":
        """Keep the chain if header *name* matches *pattern* (``{}`` for any name)."""
        if self.response is None:
            return self
        if match_header(self.response.headers, name, tokenize_value(pattern)):
            return self
        return ResponseFilter(None)

    def filter_custom(self, predicate: ResponsePredicate) -> "ResponseFilter":
        """Keep the chain if ``predicate(response)`` is truthy."""
        if self.response is None:
            return self
        if predicate(self.response):
            return self
        return ResponseFilter(None)

    def and_then(self, func: Callable[[httpx.Response], Any]) -> Any:
        """``func(response)`` on a live chain, ``None`` otherwise."""
        if self.response is None:
            return None
        return func(self.response)


def filter_response(response: httpx.Response) -> ResponseFilter:
    """Start a filter chain on *response*."""
    return ResponseFilter(response)
