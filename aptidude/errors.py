"""Error taxonomy for the local state layer."""

from __future__ import annotations


class CredentialValidationError(ValueError):
    """User-correctable credential problem carrying the single message to show."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StorageCorruptionError(ValueError):
    """A stored value could not be decoded into its expected shape."""

    def __init__(self, key: str, raw: str | None, reason: str) -> None:
        super().__init__(f"Stored value for '{key}' is unusable: {reason}")
        self.key = key
        self.raw = raw
        self.reason = reason


class ContractViolationError(RuntimeError):
    """Caller broke an API contract (unvalidated input, out-of-domain value)."""


__all__ = [
    "ContractViolationError",
    "CredentialValidationError",
    "StorageCorruptionError",
]
