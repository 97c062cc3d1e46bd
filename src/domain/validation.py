"""
Username validation - Pure syntax rules for candidate usernames.

This module decides whether a candidate string is a well-formed username,
independent of any stored state. Availability (uniqueness) is layered on
top by the registry service.

Rules
=====
- Blank candidates (None, empty, whitespace-only) produce a single violation
  and no further rule is evaluated.
- Length must be 6-30 characters inclusive.
- Characters must be ASCII letters or digits.

Length and character violations accumulate; length is reported first.
"""

import re
from dataclasses import dataclass, field

USERNAME_MIN_LENGTH = 6
USERNAME_MAX_LENGTH = 30

EMPTY_USERNAME_MESSAGE = "Username cannot be null or empty"
LENGTH_MESSAGE = (
    f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
)
ALPHANUMERIC_MESSAGE = "Username must contain only alphanumeric characters"
TAKEN_MESSAGE = "Username is already taken"

_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]+")


@dataclass
class ValidationResult:
    """Ordered list of violation messages; valid when the list is empty."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "Username is valid" if self.is_valid else "Username validation failed"


def is_blank(candidate: str | None) -> bool:
    """True for None, empty or whitespace-only candidates."""
    return candidate is None or not candidate.strip()


def normalize_username(candidate: str) -> str:
    """
    Return the comparison key for uniqueness checks.

    Usernames are stored with original casing but compared lowercased.
    """
    return candidate.lower()


def validate_username(candidate: str | None) -> ValidationResult:
    """
    Check a candidate username against the syntax rules.

    Args:
        candidate: Raw username as submitted by the caller

    Returns:
        ValidationResult with every violated rule, in check order
    """
    if is_blank(candidate):
        return ValidationResult(errors=[EMPTY_USERNAME_MESSAGE])

    errors: list[str] = []

    if not USERNAME_MIN_LENGTH <= len(candidate) <= USERNAME_MAX_LENGTH:
        errors.append(LENGTH_MESSAGE)

    if _ALPHANUMERIC.fullmatch(candidate) is None:
        errors.append(ALPHANUMERIC_MESSAGE)

    return ValidationResult(errors=errors)
