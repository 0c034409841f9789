"""Custom exceptions for lookup-cache.

All exceptions inherit from LookupCacheError. The concrete errors also
inherit from the builtin they specialise, so callers that only know about
``ValueError`` or ``RuntimeError`` still catch them.

Usage:
    try:
        item = cache("gpt-4o", prompt)
    except EmbeddingUnavailableError:
        item = hash_cache("gpt-4o", prompt)
"""

from typing import Any


class LookupCacheError(Exception):
    """Base exception for all lookup-cache errors.

    Attributes:
        message: Human-readable error message
        details: Optional dictionary with additional context
        cause: Optional original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with details."""
        msg = self.message
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            msg = f"{msg} ({detail_str})"
        if self.cause:
            msg = f"{msg} [caused by: {type(self.cause).__name__}: {self.cause}]"
        return msg


class ConfigError(LookupCacheError, ValueError):
    """Invalid configuration value."""


class EmbeddingUnavailableError(LookupCacheError, RuntimeError):
    """The embedding provider failed or could not be reached.

    Not retryable for the call that raised it. Falling back to the hash
    cache is up to the caller.
    """


class CacheIntegrityError(LookupCacheError, RuntimeError):
    """A candidate position does not point at a usable item.

    Appends are linearizable, so this only happens when the store has been
    tampered with or a strategy was handed positions from another store.
    """


class InvalidItemError(LookupCacheError, ValueError):
    """Raised when a miss token (item without output) is appended."""
