"""Input validation for user name, email and age."""
from __future__ import annotations

from typing import Optional

from .errors import ValidationError

NAME_EMPTY = "Name cannot be empty."
EMAIL_INVALID = "Invalid email format."
AGE_NOT_POSITIVE = "Age must be positive."


def find_violation(name: Optional[str], email: Optional[str], age: int) -> Optional[str]:
    """Return the message of the first rule the input violates, or ``None``.

    Rules are checked in order: name, email, age.
    """

    if name is None or not name.strip():
        return NAME_EMPTY
    if email is None or "@" not in email:
        return EMAIL_INVALID
    if age <= 0:
        return AGE_NOT_POSITIVE
    return None


def validate(name: Optional[str], email: Optional[str], age: int) -> None:
    reason = find_violation(name, email, age)
    if reason is not None:
        raise ValidationError(reason)


__all__ = ["AGE_NOT_POSITIVE", "EMAIL_INVALID", "NAME_EMPTY", "find_violation", "validate"]
