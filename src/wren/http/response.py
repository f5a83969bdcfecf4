"""Response construction for fallbacks and handler failures.

Responses are plain ``httpx.Response`` objects. These helpers turn a
status code or an exception into one, so the dispatcher always ends with
a response no matter how a request was (or was not) handled.
"""

import httpx

from wren.config import DispatchConfig
from wren.errors import HTTPError

_DEFAULT_CONFIG = DispatchConfig()


def reason_phrase(status: int) -> str:
    """Standard reason phrase for *status* (``""`` when unknown)."""
    return httpx.codes.get_reason_phrase(status)


def response_from_status(status: int) -> httpx.Response:
    """An empty-bodied response with the given status."""
    return httpx.Response(status)


def response_from_error(err: Exception, config: DispatchConfig | None = None) -> httpx.Response:
    """Render a handler exception as a response.

    ``HTTPError`` keeps its own status, headers and detail. Anything else
    becomes ``config.error_status`` (500 by default) with ``str(err)`` as
    the body, or the reason phrase when the message is empty or
    ``config.expose_error_detail`` is off.
    """
    config = config or _DEFAULT_CONFIG

    if isinstance(err, HTTPError):
        body = err.detail or reason_phrase(err.status)
        return httpx.Response(err.status, text=body, headers=list(err.headers))

    status = config.error_status
    body = str(err) if config.expose_error_detail else ""
    return httpx.Response(status, text=body or reason_phrase(status))


def to_response(result: object) -> httpx.Response:
    """Coerce a handler's return value into a response.

    ``httpx.Response`` passes through; ``str`` and ``bytes`` become a
    200 response with that body. Anything else is a handler bug.
    """
    if isinstance(result, httpx.Response):
        return result
    if isinstance(result, str):
        return httpx.Response(200, text=result)
    if isinstance(result, bytes):
        return httpx.Response(200, content=result)
    msg = f"Handler returned {type(result).__name__}; expected httpx.Response, str or bytes."
    raise TypeError(msg)
