"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the binding entity, the failure taxonomy and the
repository interface (port) that the domain requires from infrastructure.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import UUID

# Nil UUID - the "empty" account identifier, never a valid key.
EMPTY_ACCOUNT_ID = UUID(int=0)


class FailureKind(str, Enum):
    """
    Reasons a registry operation can fail.

    User-fixable:
    - VALIDATION_FAILED: username breaks a syntax rule
    - DUPLICATE_ACCOUNT, USERNAME_TAKEN, ACCOUNT_NOT_FOUND: state conflicts

    Caller bug:
    - INVALID_ACCOUNT_ID: empty/nil account identifier

    Infrastructure fault (safe to retry):
    - STORAGE_UNAVAILABLE
    """

    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_ACCOUNT = "duplicate_account"
    USERNAME_TAKEN = "username_taken"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INVALID_ACCOUNT_ID = "invalid_account_id"
    STORAGE_UNAVAILABLE = "storage_unavailable"


@dataclass(frozen=True)
class AccountBinding:
    """Association between one account identifier and one username."""

    account_id: UUID
    username: str
    created_at: datetime
    updated_at: datetime | None = None


class AccountRepository(Protocol):
    """Port interface for account binding persistence."""

    def is_username_available(self, username: str, exclude_account_id: UUID | None = None) -> bool:
        """
        Check that no binding holds the username, compared case-insensitively.

        Args:
            username: Candidate username (any casing)
            exclude_account_id: Account whose own binding is ignored

        Returns:
            True if no other binding's lowercased username matches

        Raises:
            StorageUnavailable: If the store cannot be reached
        """
        ...

    def account_exists(self, account_id: UUID) -> bool:
        """
        Check whether a binding exists for the account.

        Raises:
            StorageUnavailable: If the store cannot be reached
        """
        ...

    def get_binding(self, account_id: UUID) -> AccountBinding | None:
        """
        Fetch the binding for an account, or None if unregistered.

        Raises:
            StorageUnavailable: If the store cannot be reached
        """
        ...

    def insert_binding(
        self, account_id: UUID, username: str, created_at: datetime
    ) -> AccountBinding:
        """
        Atomically create a new binding.

        The account check, the availability re-check and the insert form one
        atomic unit; concurrent inserts for the same (lowercased) username
        cannot both succeed.

        Args:
            account_id: Non-empty account identifier
            username: Syntactically valid username, original casing
            created_at: Creation timestamp (UTC)

        Returns:
            The stored binding

        Raises:
            DuplicateAccount: If the account already has a binding
            UsernameTaken: If another binding holds the username
            StorageUnavailable: If the store cannot be reached
        """
        ...

    def update_username(
        self, account_id: UUID, username: str, updated_at: datetime
    ) -> AccountBinding:
        """
        Atomically change the username of an existing binding.

        The account's own current username never counts as a collision.

        Args:
            account_id: Account whose binding is updated
            username: Syntactically valid username, original casing
            updated_at: Modification timestamp (UTC)

        Returns:
            The updated binding

        Raises:
            AccountNotFound: If no binding exists for the account
            UsernameTaken: If a different binding holds the username
            StorageUnavailable: If the store cannot be reached
        """
        ...
