"""
Shared fixtures for adversarial tests.

Provides common infrastructure for concurrent race condition tests.
"""

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

Runner = Callable[[list[Callable[[], Any]]], list[Any]]


def _run_concurrently(calls: list[Callable[[], Any]]) -> list[Any]:
    """
    Run every call on its own worker, released together by a barrier.

    Returns results in submission order.
    """
    barrier = threading.Barrier(len(calls))

    def wrapped(call: Callable[[], Any]) -> Any:
        barrier.wait()
        return call()

    with ThreadPoolExecutor(max_workers=len(calls)) as executor:
        futures = [executor.submit(wrapped, call) for call in calls]
        return [f.result() for f in futures]


@pytest.fixture
def run_concurrently() -> Runner:
    """Launch a batch of calls at the same instant from separate threads."""
    return _run_concurrently
