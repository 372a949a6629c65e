"""Custom exception hierarchy for SealVault.

Every failure raised by this package is one of two kinds:

1. Fatal: the input is structurally impossible (negative backup version,
   malformed backup file name, canonical serialization failure). Retrying
   the same input will never succeed.
2. Retriable: the input was transient or ambiguous (a numeric string that
   failed to parse). The caller may retry with corrected input.

Exception Hierarchy:
    SealvaultError (base)
    ├── FatalError
    │   ├── NotFoundError
    │   └── ConfigurationError
    └── RetriableError (retryable)

Usage:
    from sealvault.exceptions import FatalError

    if value < 0:
        raise FatalError("Negative backup version", value=value)
"""

from typing import Any


class SealvaultError(Exception):
    """Base exception for all SealVault errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (offending field, raw value)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class FatalError(SealvaultError):
    """The input will never succeed as given - do not retry."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, retryable=False, **context)


class RetriableError(SealvaultError):
    """Transient or ambiguous input - the caller may retry."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, retryable=True, **context)


class NotFoundError(FatalError):
    """A requested row does not exist."""

    def __init__(
        self,
        message: str = "Not found",
        *,
        table: str | None = None,
        **context: Any,
    ) -> None:
        if table:
            context["table"] = table
        super().__init__(message, **context)


class ConfigurationError(FatalError):
    """Configuration or settings error."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: str | None = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)
