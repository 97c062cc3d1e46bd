"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the username registry:
syntax validation, the account-to-username binding rules and the
repository port. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    AccountNotFound,
    DuplicateAccount,
    RegistryError,
    StorageUnavailable,
    UsernameTaken,
)
from .ports import EMPTY_ACCOUNT_ID, AccountBinding, AccountRepository, FailureKind
from .registry import RegistryResult, UsernameRegistry
from .validation import ValidationResult, normalize_username, validate_username

__all__ = [
    "EMPTY_ACCOUNT_ID",
    "AccountBinding",
    "AccountNotFound",
    "AccountRepository",
    "DuplicateAccount",
    "FailureKind",
    "RegistryError",
    "RegistryResult",
    "StorageUnavailable",
    "UsernameRegistry",
    "UsernameTaken",
    "ValidationResult",
    "normalize_username",
    "validate_username",
]
