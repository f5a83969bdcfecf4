"""Positional matching of tokenized patterns against live values.

Paths are compared segment by segment: counts must agree, literals must
be equal, and a wildcard takes exactly one non-empty segment, which is
captured. Values (headers, query values) are compared as a glob over the
whole string. Comparison is byte-exact and case-sensitive throughout,
and nothing is percent-decoded.
"""

from collections.abc import Iterator

from wren._internal.multimap import MultiValueMapping
from wren.http.iterators import iter_segments
from wren.routing.pattern import WILDCARD, Token


def match_path(tokens: tuple[Token, ...], path: str) -> tuple[str, ...] | None:
    """Match a whole path.

    Returns the captured wildcard segments in left-to-right order, or
    ``None`` when the path does not match. A path with a different
    segment count never matches, whatever wildcards the pattern holds.
    """
    if not tokens:
        return () if path == "" else None

    segments = iter_segments(path)
    captured = _match_segments(tokens, segments)
    if captured is None:
        return None
    if next(segments, None) is not None:
        return None
    return captured


def match_path_prefix(tokens: tuple[Token, ...], path: str) -> tuple[str, ...] | None:
    """Match the leading segments of a path.

    Like ``match_path`` but the live path may continue past the pattern.
    Each pattern segment still has to match a complete live segment, so
    ``/v`` is not a prefix of ``/var``. A trailing ``/`` in the pattern is
    ignored: ``/`` prefixes every absolute path. An empty pattern is a
    prefix of every path.
    """
    if len(tokens) > 1 and tokens[-1] == Token(""):
        tokens = tokens[:-1]
    if not tokens:
        return ()
    return _match_segments(tokens, iter_segments(path))


def _match_segments(tokens: tuple[Token, ...], segments: Iterator[str]) -> tuple[str, ...] | None:
    captured: list[str] = []
    for token in tokens:
        segment = next(segments, None)
        if segment is None:
            return None
        if token.is_wildcard:
            if not segment:
                return None
            captured.append(segment)
        elif token.text != segment:
            return None
    return tuple(captured)


def match_value(tokens: tuple[Token, ...], value: str) -> bool:
    """Match a header or query value against a value pattern.

    A wildcard absorbs any run of characters (possibly empty) up to the
    first occurrence of the literal that follows it; a literal that ends
    the pattern must end the value. A pattern with no tokens matches only
    the empty string.
    """
    if not tokens:
        return value == ""

    pos = 0
    last = len(tokens) - 1
    after_wildcard = False
    for i, token in enumerate(tokens):
        if token.is_wildcard:
            after_wildcard = True
            continue
        text = token.text
        if not after_wildcard:
            if not value.startswith(text, pos):
                return False
            pos += len(text)
        elif i == last:
            return len(value) - len(text) >= pos and value.endswith(text)
        else:
            found = value.find(text, pos)
            if found == -1:
                return False
            pos = found + len(text)
        after_wildcard = False
    return after_wildcard or pos == len(value)


def match_header(headers: MultiValueMapping, name: str, tokens: tuple[Token, ...]) -> bool:
    """Match a header against a value pattern.

    *name* is looked up case-insensitively and only its first value is
    compared. A name of ``{}`` matches if any header value does. A missing
    header never matches.
    """
    if name == WILDCARD:
        return any(match_value(tokens, value) for _, value in headers.multi_items())
    values = headers.get_list(name)
    return bool(values) and match_value(tokens, values[0])
