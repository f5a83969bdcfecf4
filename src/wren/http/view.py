"""Read-only accessors over an ``httpx.Request``.

The request is owned by the caller; these helpers only read from it.
Everything is returned exactly as it appeared on the wire: the path and
query string are taken from ``url.raw_path`` and ``url.query`` so no
percent-decoding ever happens (``httpx.URL.path`` would decode).
"""

import httpx


def request_path(request: httpx.Request) -> str:
    """The raw (still percent-encoded) path, without the query string."""
    path, _, _ = request.url.raw_path.partition(b"?")
    return path.decode("latin-1")


def request_query(request: httpx.Request) -> str:
    """The raw query string, without the leading ``?``. Empty if absent."""
    return request.url.query.decode("latin-1")


def request_scheme(request: httpx.Request) -> str:
    """The URL scheme, lower-cased by httpx (``"https"``)."""
    return request.url.scheme


def request_authority(request: httpx.Request) -> str:
    """The authority component (``host[:port]``, with userinfo if present)."""
    return request.url.netloc.decode("latin-1")
