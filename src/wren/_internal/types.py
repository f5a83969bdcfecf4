"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

import httpx

# Route handler: receives the live filter chain, returns (or awaits) a response
Handler: TypeAlias = Callable[..., Any]

# Custom predicate: receives the request view, truthy keeps the chain live
RequestPredicate: TypeAlias = Callable[[httpx.Request], object]

# Response predicate: same contract for the response-side chain
ResponsePredicate: TypeAlias = Callable[[httpx.Response], object]

# Error handler: maps a handler exception to the final response
ErrorHandler: TypeAlias = Callable[[Exception], httpx.Response]
