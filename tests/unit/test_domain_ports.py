"""
Unit tests for domain ports and exceptions.

Tests verify:
- Failure taxonomy is properly defined
- Exceptions carry their failure kind
- Domain purity (zero framework imports)
"""

import subprocess
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

import pytest

from src.domain.exceptions import (
    AccountNotFound,
    DuplicateAccount,
    RegistryError,
    StorageUnavailable,
    UsernameTaken,
)
from src.domain.ports import EMPTY_ACCOUNT_ID, AccountBinding, FailureKind


class TestFailureKindEnum:
    """Tests for FailureKind enum."""

    def test_failure_kind_is_str_enum(self) -> None:
        assert issubclass(FailureKind, Enum)
        assert issubclass(FailureKind, str)

    @pytest.mark.parametrize(
        ("member", "value"),
        [
            ("VALIDATION_FAILED", "validation_failed"),
            ("DUPLICATE_ACCOUNT", "duplicate_account"),
            ("USERNAME_TAKEN", "username_taken"),
            ("ACCOUNT_NOT_FOUND", "account_not_found"),
            ("INVALID_ACCOUNT_ID", "invalid_account_id"),
            ("STORAGE_UNAVAILABLE", "storage_unavailable"),
        ],
    )
    def test_failure_kind_values(self, member: str, value: str) -> None:
        assert FailureKind[member].value == value

    def test_failure_kind_has_six_members(self) -> None:
        assert len(FailureKind) == 6


class TestAccountBinding:
    """Tests for the AccountBinding entity."""

    def test_binding_is_immutable(self) -> None:
        binding = AccountBinding(uuid4(), "alice123", datetime.now(timezone.utc))

        with pytest.raises(FrozenInstanceError):
            binding.username = "bob45678"  # type: ignore[misc]

    def test_updated_at_defaults_to_none(self) -> None:
        binding = AccountBinding(uuid4(), "alice123", datetime.now(timezone.utc))
        assert binding.updated_at is None

    def test_empty_account_id_is_nil_uuid(self) -> None:
        assert EMPTY_ACCOUNT_ID == UUID("00000000-0000-0000-0000-000000000000")


class TestDomainExceptions:
    """Tests for domain exception hierarchy."""

    @pytest.mark.parametrize(
        ("exc_type", "kind"),
        [
            (DuplicateAccount, FailureKind.DUPLICATE_ACCOUNT),
            (UsernameTaken, FailureKind.USERNAME_TAKEN),
            (AccountNotFound, FailureKind.ACCOUNT_NOT_FOUND),
            (StorageUnavailable, FailureKind.STORAGE_UNAVAILABLE),
        ],
    )
    def test_exception_kind(self, exc_type: type[RegistryError], kind: FailureKind) -> None:
        assert issubclass(exc_type, RegistryError)
        assert exc_type("detail").kind == kind

    def test_registry_error_is_exception(self) -> None:
        assert issubclass(RegistryError, Exception)


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
        ],
    )
    def test_no_framework_imports_in_domain(self, pattern: str) -> None:
        result = subprocess.run(
            ["grep", "-r", pattern, "src/domain/"],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Framework import found: {result.stdout}"
