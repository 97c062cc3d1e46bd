"""
In-memory repository adapter - Implements AccountRepository protocol.

Bindings live in a dict keyed by account id, with a secondary index from
lowercased username to owning account. A single lock guards both maps:
mutations run their re-check and write under it, reads hold it only long
enough to see a consistent state.
"""

import threading
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from src.domain.exceptions import AccountNotFound, DuplicateAccount, UsernameTaken
from src.domain.ports import AccountBinding
from src.domain.validation import normalize_username


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with process-local state.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Suitable for a single process; state is lost on restart.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._bindings: dict[UUID, AccountBinding] = {}
        self._owners: dict[str, UUID] = {}

    def is_username_available(self, username: str, exclude_account_id: UUID | None = None) -> bool:
        key = normalize_username(username)
        with self._lock:
            owner = self._owners.get(key)
        return owner is None or owner == exclude_account_id

    def account_exists(self, account_id: UUID) -> bool:
        with self._lock:
            return account_id in self._bindings

    def get_binding(self, account_id: UUID) -> AccountBinding | None:
        with self._lock:
            return self._bindings.get(account_id)

    def insert_binding(
        self, account_id: UUID, username: str, created_at: datetime
    ) -> AccountBinding:
        """
        Create a binding under the write lock.

        Account existence is checked before username availability.
        """
        key = normalize_username(username)
        binding = AccountBinding(account_id=account_id, username=username, created_at=created_at)

        with self._lock:
            if account_id in self._bindings:
                raise DuplicateAccount(account_id)
            if key in self._owners:
                raise UsernameTaken(username)

            self._bindings[account_id] = binding
            self._owners[key] = account_id

        return binding

    def update_username(
        self, account_id: UUID, username: str, updated_at: datetime
    ) -> AccountBinding:
        """
        Rename a binding under the write lock.

        The old index entry is released in the same critical section, so the
        previous username becomes available exactly when the new one is taken.
        """
        key = normalize_username(username)

        with self._lock:
            current = self._bindings.get(account_id)
            if current is None:
                raise AccountNotFound(account_id)

            owner = self._owners.get(key)
            if owner is not None and owner != account_id:
                raise UsernameTaken(username)

            binding = replace(current, username=username, updated_at=updated_at)
            del self._owners[normalize_username(current.username)]
            self._owners[key] = account_id
            self._bindings[account_id] = binding

        return binding

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)
