"""Dispatch outcomes — what a single candidate produced.

``Matched`` and ``MatchedWithError`` are final for a request: the
candidate's filters passed and its handler ran. ``NoMatch`` means the
next candidate should be tried; it never leaves the dispatch layer.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

import httpx

from wren.routing.status import FilterStatus


@dataclass(frozen=True, slots=True)
class Matched:
    """The handler produced a response."""

    response: httpx.Response

    def or_else(self, alternative: Callable[[], "Outcome"]) -> "Outcome":
        return self


@dataclass(frozen=True, slots=True)
class MatchedWithError:
    """The filters passed but the handler raised."""

    error: Exception

    def or_else(self, alternative: Callable[[], "Outcome"]) -> "Outcome":
        return self


@dataclass(frozen=True, slots=True)
class NoMatch:
    """The chain was disqualified; ``status`` names the failing predicate."""

    status: FilterStatus = FilterStatus.FAIL_PATH

    def or_else(self, alternative: Callable[[], "Outcome"]) -> "Outcome":
        """Evaluate *alternative* only because this candidate did not match."""
        outcome = alternative()
        if isinstance(outcome, NoMatch):
            return self.merge(outcome.status)
        return outcome

    def merge(self, status: FilterStatus) -> "NoMatch":
        """Keep whichever failure is more specific (first one wins ties)."""
        if status.specificity > self.status.specificity:
            return NoMatch(status)
        return self


Outcome: TypeAlias = Matched | MatchedWithError | NoMatch
