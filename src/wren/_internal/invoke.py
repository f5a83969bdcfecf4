"""Invoke helpers — call sync or async handlers uniformly.

Route handlers and candidate thunks can be ``def`` or ``async def``.
Any code that calls a user-provided callable must handle both cases.
This module provides a single helper so the sync/async check lives in
exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(handler, chain)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately, no await needed
        def item(chain):
            return httpx.Response(200, text="ok")

        # async: returns coroutine, awaited automatically
        async def item(chain):
            row = await db.fetch(chain.get_path_var(1))
            return httpx.Response(200, text=row.name)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
