"""Why a filter chain stopped being a candidate."""

from enum import Enum


class FilterStatus(Enum):
    """Which predicate disqualified a chain (``PASS`` while it is still live)."""

    PASS = "pass"
    FAIL_HEADER = "fail_header"
    FAIL_QUERY = "fail_query"
    FAIL_PATH = "fail_path"
    FAIL_METHOD = "fail_method"
    FAIL_SCHEME = "fail_scheme"
    FAIL_CUSTOM = "fail_custom"

    @property
    def specificity(self) -> int:
        """How much a failure says about the request, for picking a fallback.

        Chains are expected to check path, then method, then the rest. A
        header, query, scheme or custom failure therefore means some
        candidate otherwise fit; a path failure says the least.
        """
        if self is FilterStatus.PASS:
            return 0
        if self is FilterStatus.FAIL_PATH:
            return 1
        if self is FilterStatus.FAIL_METHOD:
            return 2
        return 3
