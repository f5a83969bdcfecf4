"""Lazy scans over a request's path and query string.

Both iterators walk the source string with ``str.find`` and yield slices
as they go: nothing is decoded, nothing is collected up front, and a
scan stops as soon as the caller stops pulling. They are forward-only;
build a fresh iterator to scan again.

Malformed input is never an error. A stray ``&`` yields an empty pair and
a key without ``=`` yields an empty value.
"""

from collections.abc import Iterator

import httpx

from wren.http.view import request_path, request_query


def iter_query_pairs(query: str) -> Iterator[tuple[str, str]]:
    """Yield ``(key, value)`` pairs from a raw query string, in order.

    Pairs are separated by ``&`` and split on the first ``=``::

        list(iter_query_pairs("one=two&three=fo+ur"))
        # [("one", "two"), ("three", "fo+ur")]

        list(iter_query_pairs("flag&&a=b=c"))
        # [("flag", ""), ("", ""), ("a", "b=c")]
    """
    if not query:
        return
    end = len(query)
    start = 0
    while start <= end:
        amp = query.find("&", start)
        if amp == -1:
            amp = end
        eq = query.find("=", start, amp)
        if eq == -1:
            yield query[start:amp], ""
        else:
            yield query[start:eq], query[eq + 1 : amp]
        start = amp + 1


def iter_segments(path: str) -> Iterator[str]:
    """Yield the ``/``-separated segments of *path*, in order.

    Splits exactly like ``path.split("/")``, so a leading slash produces
    a leading empty segment and ``"/"`` produces two empty segments.
    """
    start = 0
    while True:
        slash = path.find("/", start)
        if slash == -1:
            yield path[start:]
            return
        yield path[start:slash]
        start = slash + 1


def query_iter(request: httpx.Request) -> Iterator[tuple[str, str]]:
    """Iterate over the query pairs of *request* without decoding them.

    Example::

        request = httpx.Request("GET", "https://example.org/?one=two&three=fo+ur")
        for key, value in query_iter(request):
            print(key, value)

        # one two
        # three fo+ur
    """
    return iter_query_pairs(request_query(request))


def path_iter(request: httpx.Request) -> Iterator[str]:
    """Iterate over the raw path segments of *request*."""
    return iter_segments(request_path(request))
