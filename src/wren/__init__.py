"""Wren — request matching and first-match dispatch over httpx types.

Match an immutable ``httpx.Request`` against method, scheme, path,
header and query patterns, then hand it to the first handler whose
filters all pass.

Basic usage::

    import httpx
    from wren import Dispatcher, filter_http

    dispatcher = Dispatcher()

    @dispatcher.route(lambda req: filter_http(req).filter_path("/item/{}").filter_method("GET"))
    async def item(chain):
        return httpx.Response(200, text=f"Got any {chain.get_path_var(1)}?")

    response = await dispatcher.dispatch(httpx.Request("GET", "https://example.org/item/grapes"))

Filters on their own::

    if filter_http(request).filter_query("cool", "wren"):
        ...
"""

__version__ = "0.1.0"
__all__ = [
    "BadRequest",
    "ConfigurationError",
    "DispatchConfig",
    "Dispatcher",
    "Filter",
    "FilterStatus",
    "HTTPError",
    "Matched",
    "MatchedWithError",
    "MethodNotAllowed",
    "NoMatch",
    "NotFound",
    "ResponseFilter",
    "WrenError",
    "filter_http",
    "filter_response",
    "first_match",
    "path_iter",
    "query_iter",
    "resolve",
    "response_from_error",
    "response_from_status",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name in ("Filter", "filter_http"):
        from wren.routing import filter as _filter

        return getattr(_filter, name)

    if name in ("ResponseFilter", "filter_response"):
        from wren.routing import response_filter as _rfilter

        return getattr(_rfilter, name)

    if name in ("Dispatcher", "first_match", "resolve"):
        from wren.routing import dispatch as _dispatch

        return getattr(_dispatch, name)

    if name in ("Matched", "MatchedWithError", "NoMatch"):
        from wren.routing import outcome as _outcome

        return getattr(_outcome, name)

    if name == "FilterStatus":
        from wren.routing.status import FilterStatus

        return FilterStatus

    if name in ("path_iter", "query_iter"):
        from wren.http import iterators as _iterators

        return getattr(_iterators, name)

    if name in ("response_from_error", "response_from_status"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name == "DispatchConfig":
        from wren.config import DispatchConfig

        return DispatchConfig

    if name in (
        "BadRequest",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
