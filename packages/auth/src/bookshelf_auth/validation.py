"""Form field validators. Pure functions, no side effects."""

from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_MIN_LENGTH = 8


def validate_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(value))


def validate_password(value: str) -> bool:
    """At least 8 characters with an uppercase letter, a lowercase letter and a digit."""
    return (
        len(value) >= PASSWORD_MIN_LENGTH
        and any(c.isupper() for c in value)
        and any(c.islower() for c in value)
        and any(c.isdigit() for c in value)
    )


def validate_required(value: str | None) -> bool:
    return bool(value and value.strip())
