"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository and registry wiring
- A deterministic clock for timestamp assertions
- PostgreSQL connection pool and repository (skipped when no database is reachable)
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.config.settings import get_settings
from src.domain.registry import UsernameRegistry

START_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def start_time() -> datetime:
    """First timestamp handed out by the clock fixture."""
    return START_TIME


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    """Fresh in-memory repository for each test."""
    return InMemoryAccountRepository()


@pytest.fixture
def registry(repository: InMemoryAccountRepository, clock: FakeClock) -> UsernameRegistry:
    """Registry backed by the in-memory repository."""
    return UsernameRegistry(repository=repository, clock=clock)


@pytest.fixture
def account_id() -> UUID:
    return uuid4()


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """
    Create connection pool for database-backed tests.

    Skips dependent tests when PostgreSQL is not reachable.
    """
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=20,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> None:
    """Empty the user_accounts table before a test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM user_accounts")
        conn.commit()


@pytest.fixture
def postgres_repository(pool: ConnectionPool, clean_database: None) -> PostgresAccountRepository:
    """Create repository instance on an empty table."""
    return PostgresAccountRepository(pool)
