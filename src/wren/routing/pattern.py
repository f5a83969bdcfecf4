"""Pattern tokens — literal text and the ``{}`` wildcard.

Path patterns are split on ``/`` into one token per segment; a segment
that is exactly ``{}`` is a wildcard. Header and query value patterns are
not segmented: the whole value is split on ``{}`` into alternating
literal and wildcard tokens.

Tokenizing is total. Every string yields a (possibly empty) token tuple
and an empty pattern yields no tokens at all.
"""

from dataclasses import dataclass

WILDCARD = "{}"


@dataclass(frozen=True, slots=True)
class Token:
    """One piece of a tokenized pattern.

    Literal:  ``Token("item")``           (is_wildcard=False)
    Wildcard: ``Token("{}", is_wildcard=True)``
    """

    text: str
    is_wildcard: bool = False


WILDCARD_TOKEN = Token(WILDCARD, is_wildcard=True)


def tokenize_path(pattern: str) -> tuple[Token, ...]:
    """Split a path pattern into one token per ``/``-separated segment.

    Examples::

        "/item/{}" -> (Token(""), Token("item"), WILDCARD_TOKEN)
        "/"        -> (Token(""), Token(""))
        ""         -> ()

    The leading empty token mirrors the leading empty segment the live
    path produces, so ``/a/b`` lines up with ``/a/b``.
    """
    if not pattern:
        return ()
    return tuple(
        WILDCARD_TOKEN if part == WILDCARD else Token(part)
        for part in pattern.split("/")
    )


def tokenize_value(pattern: str) -> tuple[Token, ...]:
    """Split a header or query value pattern at each ``{}``.

    Examples::

        "wren"     -> (Token("wren"),)
        "{}"       -> (WILDCARD_TOKEN,)
        "text/{}"  -> (Token("text/"), WILDCARD_TOKEN)
        "a{}{}b"   -> (Token("a"), WILDCARD_TOKEN, Token("b"))

    Empty literals are dropped and adjacent wildcards collapse into one.
    """
    tokens: list[Token] = []
    for i, part in enumerate(pattern.split(WILDCARD)):
        if i and not (tokens and tokens[-1].is_wildcard):
            tokens.append(WILDCARD_TOKEN)
        if part:
            tokens.append(Token(part))
    return tuple(tokens)
