"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Uniqueness Design:
-----------------
Username uniqueness is enforced by the storage engine, not by a read before
the write:

1. **user_accounts_pkey**: primary key on account_id, one binding per account.

2. **user_accounts_username_lower_key**: unique index on lower(username).
   Two concurrent transactions inserting the same name (in any casing)
   cannot both commit; the loser gets a UniqueViolation.

3. **Constraint mapping**: UniqueViolation is translated by constraint name
   into DuplicateAccount or UsernameTaken. Every other driver or pool error
   becomes StorageUnavailable, so psycopg exceptions never leave this module.

4. **Self-collision**: an UPDATE that keeps the same lowercased name rewrites
   the row's own index entry and does not conflict.
"""

import logging
from datetime import datetime
from pathlib import Path
from uuid import UUID

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import (
    AccountNotFound,
    DuplicateAccount,
    StorageUnavailable,
    UsernameTaken,
)
from src.domain.ports import AccountBinding

logger = logging.getLogger(__name__)

_PRIMARY_KEY = "user_accounts_pkey"

_COLUMNS = "account_id, username, created_at, updated_at"


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def is_username_available(self, username: str, exclude_account_id: UUID | None = None) -> bool:
        """
        Check the lower(username) index for a holder other than the excluded account.

        Args:
            username: Candidate username (any casing)
            exclude_account_id: Account whose own row is ignored

        Returns:
            True if no other row matches case-insensitively
        """
        if exclude_account_id is None:
            sql = "SELECT 1 FROM user_accounts WHERE lower(username) = lower(%s)"
            params: tuple = (username,)
        else:
            sql = """
                SELECT 1 FROM user_accounts
                WHERE lower(username) = lower(%s) AND account_id <> %s
            """
            params = (username, exclude_account_id)

        row = self._fetch_one(sql, params)
        return row is None

    def account_exists(self, account_id: UUID) -> bool:
        row = self._fetch_one("SELECT 1 FROM user_accounts WHERE account_id = %s", (account_id,))
        return row is not None

    def get_binding(self, account_id: UUID) -> AccountBinding | None:
        row = self._fetch_one(
            f"SELECT {_COLUMNS} FROM user_accounts WHERE account_id = %s", (account_id,)
        )
        return self._map_row(row) if row is not None else None

    def insert_binding(
        self, account_id: UUID, username: str, created_at: datetime
    ) -> AccountBinding:
        """
        Insert a new binding in a single transaction.

        The explicit account lookup keeps DuplicateAccount ahead of
        UsernameTaken when both would apply. A concurrent insert that slips
        past the lookup is still caught by the primary key.

        Args:
            account_id: Non-empty account identifier
            username: Validated username, original casing
            created_at: Creation timestamp (UTC)

        Returns:
            The stored binding
        """
        exists_sql = "SELECT 1 FROM user_accounts WHERE account_id = %s"
        insert_sql = f"""
            INSERT INTO user_accounts (account_id, username, created_at, updated_at)
            VALUES (%s, %s, %s, NULL)
            RETURNING {_COLUMNS}
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(exists_sql, (account_id,))
                if cursor.fetchone() is not None:
                    raise DuplicateAccount(account_id)

                cursor.execute(insert_sql, (account_id, username, created_at))
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            if e.diag.constraint_name == _PRIMARY_KEY:
                raise DuplicateAccount(account_id) from e
            raise UsernameTaken(username) from e
        except psycopg.Error as e:
            logger.error("Insert of account %s failed: %s", account_id, e)
            raise StorageUnavailable(str(account_id)) from e

        return self._map_row(row)

    def update_username(
        self, account_id: UUID, username: str, updated_at: datetime
    ) -> AccountBinding:
        """
        Rename an existing binding in a single statement.

        Args:
            account_id: Account whose row is updated
            username: Validated username, original casing
            updated_at: Modification timestamp (UTC)

        Returns:
            The updated binding
        """
        update_sql = f"""
            UPDATE user_accounts
            SET username = %s, updated_at = %s
            WHERE account_id = %s
            RETURNING {_COLUMNS}
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(update_sql, (username, updated_at, account_id))
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            raise UsernameTaken(username) from e
        except psycopg.Error as e:
            logger.error("Update of account %s failed: %s", account_id, e)
            raise StorageUnavailable(str(account_id)) from e

        if row is None:
            raise AccountNotFound(account_id)
        return self._map_row(row)

    def _fetch_one(self, sql: str, params: tuple) -> tuple | None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                return cursor.fetchone()
        except psycopg.Error as e:
            logger.error("Query on user_accounts failed: %s", e)
            raise StorageUnavailable("user_accounts") from e

    def _map_row(self, row: tuple) -> AccountBinding:
        """Convert a raw database tuple into an AccountBinding."""
        return AccountBinding(
            account_id=row[0],
            username=row[1],
            created_at=row[2],
            updated_at=row[3],
        )


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
