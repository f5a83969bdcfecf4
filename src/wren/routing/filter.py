"""Filter chain — short-circuiting predicates over an immutable request.

A ``Filter`` is either live (it holds the request) or disqualified (it
holds ``None`` plus the status of the predicate that failed). Every
``filter_*`` method maps a chain to a chain: on a live chain it checks
one condition, on a disqualified chain it returns the chain unchanged
without looking at anything. Nothing can bring a disqualified chain back.

Usage::

    chain = (
        filter_http(request)
        .filter_path("/item/{}")
        .filter_method("POST")
        .filter_header("content-type", "application/x-www-form-urlencoded")
        .filter_query("cool", "wren")
        .filter_scheme("https")
    )
    if chain:
        name = chain.get_path_var(1)

Wildcards (``{}``) match one whole path segment, or any run of characters
inside a header or query value. Values are compared exactly as they
appear on the wire; filters never percent-decode, so
``filter_query("also+cool", "go")`` is how to match ``?also+cool=go``.
"""

from collections.abc import Awaitable, Callable, Collection
from dataclasses import dataclass, replace
from typing import Any

import httpx

from wren._internal.types import RequestPredicate
from wren.http.iterators import query_iter
from wren.http.response import to_response
from wren.http.view import request_path, request_scheme
from wren.routing.matcher import match_header, match_path, match_path_prefix, match_value
from wren.routing.outcome import Matched, MatchedWithError, NoMatch, Outcome
from wren.routing.pattern import WILDCARD, tokenize_path, tokenize_value
from wren.routing.status import FilterStatus


def accepts(option: str | Collection[str], actual: str, *, ignore_case: bool = False) -> bool:
    """True if *actual* is one of the values *option* allows.

    *option* may be a single value, the wildcard ``{}``, an alternation
    string like ``"{GET|HEAD}"``, or any collection of values.
    """
    if isinstance(option, str):
        if option == WILDCARD:
            return True
        if len(option) > 2 and option.startswith("{") and option.endswith("}"):
            choices: Collection[str] = option[1:-1].split("|")
        else:
            choices = (option,)
    else:
        choices = option

    if ignore_case:
        folded = actual.casefold()
        return any(choice.casefold() == folded for choice in choices)
    return actual in choices


@dataclass(frozen=True, slots=True)
class Filter:
    """A request that is still a candidate, or the reason it no longer is.

    ``path_vars`` holds the segments captured by the most recent
    successful ``filter_path`` / ``filter_path_prefix`` call; read them
    with the 1-based ``get_path_var``.
    """

    request: httpx.Request | None
    status: FilterStatus = FilterStatus.PASS
    path_vars: tuple[str, ...] = ()

    # -- State --

    @property
    def is_live(self) -> bool:
        """True while every predicate so far has passed."""
        return self.request is not None

    def __bool__(self) -> bool:
        return self.request is not None

    def _disqualify(self, status: FilterStatus) -> "Filter":
        return Filter(None, status)

    def get_path_var(self, index: int) -> str | None:
        """The *index*-th captured path segment, counting from 1.

        Returns ``None`` for a disqualified chain or an index with no
        capture. Only the last path filter's captures are kept.
        """
        if index < 1 or index > len(self.path_vars):
            return None
        return self.path_vars[index - 1]

    # -- Predicates --

    def filter_method(self, method: str | Collection[str]) -> "Filter":
        """Keep the chain if the request method is *method* (case-sensitive).

        Accepts one method, a collection of methods, or ``"{GET|HEAD}"``.
        """
        if self.request is None:
            return self
        if accepts(method, self.request.method):
            return self
        return self._disqualify(FilterStatus.FAIL_METHOD)

    def filter_scheme(self, scheme: str | Collection[str]) -> "Filter":
        """Keep the chain if the URL scheme is *scheme* (case-insensitive)."""
        if self.request is None:
            return self
        if accepts(scheme, request_scheme(self.request), ignore_case=True):
            return self
        return self._disqualify(FilterStatus.FAIL_SCHEME)

    def filter_path(self, pattern: str) -> "Filter":
        """Keep the chain if the whole path matches *pattern*.

        ``{}`` matches exactly one non-empty segment, so ``/{}`` matches
        ``/any`` but not ``/any/more`` and not ``/``.
        """
        if self.request is None:
            return self
        captured = match_path(tokenize_path(pattern), request_path(self.request))
        if captured is None:
            return self._disqualify(FilterStatus.FAIL_PATH)
        return replace(self, path_vars=captured)

    def filter_path_prefix(self, pattern: str) -> "Filter":
        """Keep the chain if the path begins with the segments of *pattern*.

        Segments must match completely: ``/var`` prefixes ``/var/static``
        but ``/v`` does not.
        """
        if self.request is None:
            return self
        captured = match_path_prefix(tokenize_path(pattern), request_path(self.request))
        if captured is None:
            return self._disqualify(FilterStatus.FAIL_PATH)
        return replace(self, path_vars=captured)

    def filter_header(self, name: str, pattern: str) -> "Filter":
        """Keep the chain if header *name* is present and matches *pattern*.

        The name is looked up case-insensitively and the first value is
        matched. A name of ``{}`` passes if any header value matches.
        """
        if self.request is None:
            return self
        if match_header(self.request.headers, name, tokenize_value(pattern)):
            return self
        return self._disqualify(FilterStatus.FAIL_HEADER)

    def filter_query(self, key: str, pattern: str) -> "Filter":
        """Keep the chain if query key *key* is present and matches *pattern*.

        Only the first pair with that exact key is considered. A key of
        ``{}`` passes if any pair's value matches.
        """
        if self.request is None:
            return self
        tokens = tokenize_value(pattern)

        for q_key, q_value in query_iter(self.request):
            if key == WILDCARD:
                if match_value(tokens, q_value):
                    return self
            elif q_key == key:
                if match_value(tokens, q_value):
                    return self
                break
        return self._disqualify(FilterStatus.FAIL_QUERY)

    def filter_custom(self, predicate: RequestPredicate) -> "Filter":
        """Keep the chain if ``predicate(request)`` is truthy.

        The predicate is never called on a disqualified chain.
        """
        if self.request is None:
            return self
        if predicate(self.request):
            return self
        return self._disqualify(FilterStatus.FAIL_CUSTOM)

    # -- Consumption --

    def and_then(self, func: Callable[[httpx.Request], Any]) -> Any:
        """``func(request)`` on a live chain, ``None`` on a disqualified one."""
        if self.request is None:
            return None
        return func(self.request)

    def handle(self, handler: Callable[["Filter"], Any]) -> Outcome:
        """Run a synchronous handler if the chain is live.

        The handler receives this chain (for ``request`` and path vars) and
        returns an ``httpx.Response`` (or ``str`` / ``bytes``). An exception
        from the handler becomes ``MatchedWithError``; a disqualified chain
        yields ``NoMatch`` without calling it.
        """
        if self.request is None:
            return NoMatch(self.status)
        try:
            response = to_response(handler(self))
        except Exception as exc:
            return MatchedWithError(exc)
        return Matched(response)

    async def async_handle(self, handler: Callable[["Filter"], Awaitable[Any]]) -> Outcome:
        """Run an async handler if the chain is live.

        Same contract as ``handle``. All matching has already happened
        by the time this is awaited; the handler body is the only place
        the task suspends.
        """
        if self.request is None:
            return NoMatch(self.status)
        try:
            response = to_response(await handler(self))
        except Exception as exc:
            return MatchedWithError(exc)
        return Matched(response)


def filter_http(request: httpx.Request) -> Filter:
    """Start a filter chain on *request*. The request is never modified."""
    return Filter(request)
