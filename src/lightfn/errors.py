"""Error definitions for lightfn."""

from typing import Any, Dict


class LightFnError(Exception):
    """Base exception for all lightfn errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class UsageError(LightFnError, TypeError):
    """Helper called with malformed arguments."""
    pass


class PipeUsageError(UsageError):
    """Pipe built with no stages or with a non-callable stage."""
    pass


class DebounceConfigError(UsageError):
    """Debounce options are missing, conflicting or invalid."""
    pass


class CloneError(LightFnError):
    """Base exception for deep clone failures."""
    pass


class UncloneableError(CloneError):
    """Value kind has no cloning strategy and the policy is fail-fast."""
    pass


class CyclicReferenceError(CloneError):
    """Value contains a reference back to one of its own containers."""
    pass


class ConfigurationError(LightFnError):
    """Configuration file is unreadable or invalid."""
    pass
