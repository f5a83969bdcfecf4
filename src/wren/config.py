"""Dispatch configuration.

DispatchConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass

from wren.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class DispatchConfig:
    """Fallback policy for a dispatcher. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DispatchConfig(distinguish_failures=True, expose_error_detail=False)
    """

    # Status used when no candidate matched
    not_found_status: int = 404

    # Status used when a handler raised something other than HTTPError
    error_status: int = 500

    # Map the failing predicate to 404 / 405 / 400 instead of always not_found_status
    distinguish_failures: bool = False

    # Render str(error) as the body of a 500; False sends the reason phrase only
    expose_error_detail: bool = True

    # Log handler exceptions (with traceback) on the "wren.dispatch" logger
    log_handler_errors: bool = True

    def __post_init__(self) -> None:
        for name in ("not_found_status", "error_status"):
            status = getattr(self, name)
            if not 100 <= status <= 599:
                msg = f"{name} must be a valid HTTP status code (100-599), got {status!r}."
                raise ConfigurationError(msg)
