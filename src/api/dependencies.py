"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services into routes.
"""

from fastapi import Request

from src.domain.registry import UsernameRegistry


def get_registry(request: Request) -> UsernameRegistry:
    """
    Get the username registry from app state.

    The registry is built once during app lifespan startup and shared by
    every request, so all callers see the same store and locking.
    """
    return request.app.state.registry
