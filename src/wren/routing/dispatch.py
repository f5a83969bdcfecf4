"""First-match dispatch over an ordered list of candidates.

Each candidate pairs a chain builder (``request -> Filter``) with a
handler. Candidates are tried strictly in registration order: the next
one is only built after the previous one resolved to ``NoMatch``, and
the first candidate whose filters pass decides the response, even if
its handler fails. A chain builder that raises stops the search the
same way a failing handler does. When nothing matches, a fallback
response is synthesized, so ``dispatch`` always ends with an
``httpx.Response``.

Usage::

    dispatcher = Dispatcher()

    @dispatcher.route(lambda req: filter_http(req).filter_path("/item/{}").filter_method("GET"))
    async def item(chain: Filter) -> httpx.Response:
        return httpx.Response(200, text=f"Got any {chain.get_path_var(1)}?")

    response = await dispatcher.dispatch(request)
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

import anyio
import httpx

from wren._internal.invoke import invoke
from wren._internal.types import ErrorHandler, Handler
from wren.config import DispatchConfig
from wren.errors import BadRequest, ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from wren.http.response import reason_phrase, response_from_error
from wren.http.view import request_path
from wren.routing.filter import Filter
from wren.routing.outcome import Matched, MatchedWithError, NoMatch, Outcome
from wren.routing.status import FilterStatus

logger = logging.getLogger("wren.dispatch")

_DEFAULT_CONFIG = DispatchConfig()

ChainBuilder = Callable[[httpx.Request], Filter]


@dataclass(frozen=True, slots=True)
class Candidate:
    """One chain builder plus the handler it guards."""

    build: ChainBuilder
    handler: Handler
    name: str = ""


class Dispatcher:
    """Ordered candidates with first-match-wins semantics.

    Holds no per-request state: concurrent ``dispatch`` calls for
    different requests never interact.
    """

    __slots__ = ("_candidates", "config", "error_handler")

    def __init__(
        self,
        config: DispatchConfig | None = None,
        *,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.config = config or _DEFAULT_CONFIG
        self.error_handler = error_handler
        self._candidates: list[Candidate] = []

    # -- Registration --

    def route(
        self,
        build: ChainBuilder,
        handler: Handler | None = None,
        *,
        name: str | None = None,
    ) -> "Dispatcher | Callable[[Handler], Handler]":
        """Append a candidate.

        Called with a handler it registers it and returns the dispatcher,
        so registrations chain. Called without one it returns a decorator.
        """
        if not callable(build):
            msg = f"Chain builder must be callable, got {type(build).__name__}."
            raise ConfigurationError(msg)

        if handler is None:

            def decorator(func: Handler) -> Handler:
                self._add(build, func, name)
                return func

            return decorator

        self._add(build, handler, name)
        return self

    def _add(self, build: ChainBuilder, handler: Handler, name: str | None) -> None:
        if not callable(handler):
            msg = f"Handler must be callable, got {type(handler).__name__}."
            raise ConfigurationError(msg)
        label = name or getattr(handler, "__name__", "") or f"candidate-{len(self._candidates)}"
        self._candidates.append(Candidate(build=build, handler=handler, name=label))

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        """Registered candidates, in evaluation order."""
        return tuple(self._candidates)

    # -- Dispatch --

    async def evaluate(self, request: httpx.Request) -> Outcome:
        """Try each candidate in order and return the first real outcome.

        Returns ``NoMatch`` (carrying the most specific failure) when no
        candidate's filters pass. A chain builder or predicate that raises
        ends the search with ``MatchedWithError``, like a failing handler.
        """
        no_match = NoMatch()
        for candidate in self._candidates:
            try:
                chain = candidate.build(request)
            except Exception as exc:
                logger.debug(
                    "%s %s — %s chain builder raised %r",
                    request.method,
                    request_path(request),
                    candidate.name,
                    exc,
                )
                return MatchedWithError(exc)
            if not chain:
                logger.debug(
                    "%s %s — %s rejected (%s)",
                    request.method,
                    request_path(request),
                    candidate.name,
                    chain.status.value,
                )
                no_match = no_match.merge(chain.status)
                continue

            logger.debug("%s %s — %s matched", request.method, request_path(request), candidate.name)
            return await chain.async_handle(partial(invoke, candidate.handler))

        return no_match

    async def dispatch(self, request: httpx.Request) -> httpx.Response:
        """Evaluate candidates and turn the outcome into a response."""
        outcome = await self.evaluate(request)
        return resolve(outcome, self.config, self.error_handler)

    def dispatch_sync(self, request: httpx.Request) -> httpx.Response:
        """Blocking ``dispatch`` for callers outside an event loop."""
        return anyio.run(self.dispatch, request)


async def first_match(*candidates: Callable[[], Outcome | Awaitable[Outcome]]) -> Outcome:
    """Await candidate thunks one at a time until one does not return ``NoMatch``.

    Functional form of the dispatcher for callers building outcomes by hand::

        outcome = await first_match(
            lambda: filter_http(req).filter_path("/item/{}").async_handle(item),
            lambda: filter_http(req).filter_path("/hello/{}").async_handle(hello),
        )

    Later thunks are never called once an earlier one matched. A thunk
    that raises ends the search with ``MatchedWithError``.
    """
    no_match = NoMatch()
    for thunk in candidates:
        try:
            outcome = await invoke(thunk)
        except Exception as exc:
            return MatchedWithError(exc)
        if not isinstance(outcome, NoMatch):
            return outcome
        no_match = no_match.merge(outcome.status)
    return no_match


def resolve(
    outcome: Outcome,
    config: DispatchConfig | None = None,
    error_handler: ErrorHandler | None = None,
) -> httpx.Response:
    """Turn any outcome into the final response.

    ``Matched`` yields its response. ``MatchedWithError`` goes through
    *error_handler* when given, else ``response_from_error``. An
    *error_handler* that raises is logged and ``response_from_error`` is
    used instead. ``NoMatch`` becomes the not-found fallback (or
    404/405/400 with ``distinguish_failures``).
    """
    config = config or _DEFAULT_CONFIG

    if isinstance(outcome, Matched):
        return outcome.response

    if isinstance(outcome, MatchedWithError):
        err = outcome.error
        if isinstance(err, HTTPError):
            logger.debug("Handler raised %s", err)
        elif config.log_handler_errors:
            logger.error("Handler failed: %s", err, exc_info=err)
        if error_handler is not None:
            try:
                return error_handler(err)
            except Exception as handler_exc:
                logger.error("Error handler failed: %s", handler_exc, exc_info=handler_exc)
        return response_from_error(err, config)

    fallback = fallback_error(outcome, config)
    logger.debug("No candidate matched (%s); answering %d", outcome.status.value, fallback.status)
    return response_from_error(fallback, config)


def fallback_error(no_match: NoMatch, config: DispatchConfig | None = None) -> HTTPError:
    """The HTTP error a request that matched no candidate is answered with."""
    config = config or _DEFAULT_CONFIG

    if config.distinguish_failures:
        if no_match.status is FilterStatus.FAIL_METHOD:
            return MethodNotAllowed()
        if no_match.status is not FilterStatus.FAIL_PATH:
            return BadRequest()

    status = config.not_found_status
    if status == 404:
        return NotFound()
    return HTTPError(status=status, detail=reason_phrase(status))
