"""Exception hierarchy for RegisterVault."""

from __future__ import annotations


class VaultError(Exception):
    """Base exception for all RegisterVault errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(VaultError, ValueError):
    """Input rejected before it reaches the store."""


class AuthenticationError(VaultError):
    """No acting user is available for a write."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class StoreError(VaultError):
    """The persistence layer failed (constraint violation, connectivity)."""


class NotFoundError(VaultError):
    """Resource not found, or not owned by the acting user."""
