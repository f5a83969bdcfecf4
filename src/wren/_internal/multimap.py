"""MultiValueMapping protocol — the header collection a request view must offer.

A structural protocol so the filter chain can accept any case-insensitive,
multi-valued header container without coupling to one concrete type.
``httpx.Headers`` satisfies it as-is.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A read-only string mapping where keys can have multiple values.

    ``__getitem__`` returns the value for a key.
    ``get_list`` returns every value for a key, in wire order.
    ``multi_items`` returns every (key, value) pair, in wire order.

    Defined with explicit dunder methods because Protocols cannot
    inherit from non-Protocol ABCs like ``Mapping``.
    """

    def __getitem__(self, key: str) -> str: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def get_list(self, key: str) -> list[str]: ...
    def multi_items(self) -> list[tuple[str, str]]: ...
