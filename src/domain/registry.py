"""
Username registry domain service - Account to username bindings.

This module contains the core business logic for binding a chosen username
to an opaque account identifier.

Invariants
==========
- An account identifier has at most one binding.
- No two bindings share a username, compared case-insensitively.
- Every stored username passed the syntax rules when it was written.
- Bindings are created once, may be renamed, and are never deleted.

Concurrency
===========
Validation runs first as a cheap gate, but its availability answer can be
stale by the time the write happens. The repository therefore re-checks
availability inside the same atomic unit as the write (in-process lock or
unique index + transaction), and reports a lost race as UsernameTaken.

Mutating operations always return a RegistryResult; storage faults become
STORAGE_UNAVAILABLE results instead of propagating.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from .exceptions import RegistryError, StorageUnavailable
from .ports import EMPTY_ACCOUNT_ID, AccountBinding, AccountRepository, FailureKind
from .validation import TAKEN_MESSAGE, ValidationResult, is_blank, validate_username

logger = logging.getLogger(__name__)

_VALIDATION_FAILED_MESSAGE = "Username validation failed"

# Caller-facing message and error details per failure kind.
_FAILURE_DETAILS: dict[FailureKind, tuple[str, list[str]]] = {
    FailureKind.USERNAME_TAKEN: (_VALIDATION_FAILED_MESSAGE, [TAKEN_MESSAGE]),
    FailureKind.DUPLICATE_ACCOUNT: ("Account ID already exists", ["Account ID is already registered"]),
    FailureKind.ACCOUNT_NOT_FOUND: ("Account not found", ["Account ID does not exist"]),
    FailureKind.INVALID_ACCOUNT_ID: ("Invalid Account ID", ["Account ID cannot be empty"]),
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegistryResult:
    """Outcome of a mutating registry operation."""

    success: bool
    message: str
    binding: AccountBinding | None = None
    failure: FailureKind | None = None
    errors: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, message: str, binding: AccountBinding) -> "RegistryResult":
        return cls(success=True, message=message, binding=binding)

    @classmethod
    def fail(cls, kind: FailureKind) -> "RegistryResult":
        message, errors = _FAILURE_DETAILS[kind]
        return cls(success=False, message=message, failure=kind, errors=list(errors))


@dataclass
class UsernameRegistry:
    """
    Domain service for username registration.

    Constructed once with a repository and shared by all callers.
    """

    repository: AccountRepository
    clock: Callable[[], datetime] = _utc_now

    def is_username_available(
        self, candidate: str, exclude_account_id: UUID | None = None
    ) -> bool:
        """
        Check whether no binding holds the candidate (case-insensitive).

        Raises:
            StorageUnavailable: If the store cannot be reached
        """
        return self.repository.is_username_available(candidate, exclude_account_id)

    def is_account_registered(self, account_id: UUID | None) -> bool:
        """
        Check whether the account has a binding.

        The empty identifier is never registered.

        Raises:
            StorageUnavailable: If the store cannot be reached
        """
        if self._is_empty_id(account_id):
            return False
        return self.repository.account_exists(account_id)

    def validate_username(
        self, candidate: str | None, exclude_account_id: UUID | None = None
    ) -> ValidationResult:
        """
        Run the syntax rules, then add the availability check.

        Args:
            candidate: Raw username
            exclude_account_id: Account whose current username is not a collision

        Returns:
            ValidationResult with syntax and availability violations combined

        Raises:
            StorageUnavailable: If the store cannot be reached
        """
        result = validate_username(candidate)
        if is_blank(candidate):
            return result

        if not self.is_username_available(candidate, exclude_account_id):
            result.errors.append(TAKEN_MESSAGE)
        return result

    def register_account(self, account_id: UUID | None, candidate: str | None) -> RegistryResult:
        """
        Bind a username to a new account.

        Args:
            account_id: Non-empty account identifier
            candidate: Requested username

        Returns:
            RegistryResult with the new binding, or the failure kind
        """
        if self._is_empty_id(account_id):
            return RegistryResult.fail(FailureKind.INVALID_ACCOUNT_ID)

        try:
            rejected = self._check_candidate(candidate)
            if rejected is not None:
                return rejected

            binding = self.repository.insert_binding(account_id, candidate, self.clock())
        except StorageUnavailable:
            logger.warning("Registration of account %s failed: storage unavailable", account_id)
            return self._storage_failure("Error creating user account")
        except RegistryError as e:
            logger.info("Registration of account %s rejected: %s", account_id, e.kind.value)
            return RegistryResult.fail(e.kind)

        logger.info("Registered account %s as %s", account_id, binding.username)
        return RegistryResult.ok("User account created successfully", binding)

    def update_username(self, account_id: UUID | None, candidate: str | None) -> RegistryResult:
        """
        Replace the username of an existing account.

        Re-submitting the account's current username (any casing) succeeds.

        Args:
            account_id: Identifier of a registered account
            candidate: New username

        Returns:
            RegistryResult with the updated binding, or the failure kind
        """
        if self._is_empty_id(account_id):
            return RegistryResult.fail(FailureKind.INVALID_ACCOUNT_ID)

        try:
            rejected = self._check_candidate(candidate, exclude_account_id=account_id)
            if rejected is not None:
                return rejected

            binding = self.repository.update_username(account_id, candidate, self.clock())
        except StorageUnavailable:
            logger.warning("Username update for account %s failed: storage unavailable", account_id)
            return self._storage_failure("Error updating username")
        except RegistryError as e:
            logger.info("Username update for account %s rejected: %s", account_id, e.kind.value)
            return RegistryResult.fail(e.kind)

        logger.info("Account %s renamed to %s", account_id, binding.username)
        return RegistryResult.ok("Username updated successfully", binding)

    def _check_candidate(
        self, candidate: str | None, exclude_account_id: UUID | None = None
    ) -> RegistryResult | None:
        """
        Validate a candidate before writing.

        A candidate whose only problem is availability fails as USERNAME_TAKEN,
        the same kind a lost race inside the repository reports. Any syntax
        violation fails as VALIDATION_FAILED with every message.
        """
        validation = self.validate_username(candidate, exclude_account_id)
        if validation.is_valid:
            return None

        logger.debug("Username %r rejected: %s", candidate, validation.errors)
        if validation.errors == [TAKEN_MESSAGE]:
            return RegistryResult.fail(FailureKind.USERNAME_TAKEN)
        return RegistryResult(
            success=False,
            message=_VALIDATION_FAILED_MESSAGE,
            failure=FailureKind.VALIDATION_FAILED,
            errors=validation.errors,
        )

    def _storage_failure(self, message: str) -> RegistryResult:
        return RegistryResult(
            success=False, message=message, failure=FailureKind.STORAGE_UNAVAILABLE
        )

    @staticmethod
    def _is_empty_id(account_id: UUID | None) -> bool:
        return account_id is None or account_id == EMPTY_ACCOUNT_ID
