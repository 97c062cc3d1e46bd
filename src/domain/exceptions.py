"""
Domain exceptions - Semantic error types for the username registry.

Repository adapters raise these at the storage boundary to communicate
business rule violations without leaking infrastructure details. The
registry service converts them into structured results.
"""

from .ports import FailureKind


class RegistryError(Exception):
    """Base class for registry domain errors."""

    kind: FailureKind


class DuplicateAccount(RegistryError):
    """Account identifier already has a username binding."""

    kind = FailureKind.DUPLICATE_ACCOUNT


class UsernameTaken(RegistryError):
    """Username (case-insensitive) is held by another account."""

    kind = FailureKind.USERNAME_TAKEN


class AccountNotFound(RegistryError):
    """No binding exists for the account identifier."""

    kind = FailureKind.ACCOUNT_NOT_FOUND


class StorageUnavailable(RegistryError):
    """Underlying store failed; the operation had no effect and may be retried."""

    kind = FailureKind.STORAGE_UNAVAILABLE
