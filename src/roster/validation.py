"""Field validation, name uniqueness and id allocation for user records.

All functions here are pure: they look at a candidate payload and the current
collection and never mutate either.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from .models import User

NAME_PATTERN = re.compile(r"[a-zA-Z\s]+")  # letters and whitespace only
AGE_PATTERN = re.compile(r"\d+", re.ASCII)

NAME_MESSAGE = "User name must contain only letters and spaces."
AGE_MESSAGE = "Age must be a positive integer."


def _as_text(value: Any) -> str | None:
    """Return the string form a field is matched against, or None if unusable."""
    if isinstance(value, str):
        return value
    # bool is an int subclass; "True" must not pass as an age
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    # 30.0 reads as "30"; 30.5 keeps its fraction and fails the digit check
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return str(value)
    return None


def validate_user_data(candidate: Mapping[str, Any]) -> list[str]:
    """Check ``name`` then ``age`` and return every violation found.

    An empty list means the candidate is valid. Names are strings of ASCII
    letters and whitespace; ages are strings of digits (an integer, or a
    float with no fractional part, is matched through its decimal form).
    """
    errors: list[str] = []

    name = candidate.get("name")
    if not isinstance(name, str) or not NAME_PATTERN.fullmatch(name):
        errors.append(NAME_MESSAGE)

    age = _as_text(candidate.get("age"))
    if age is None or not AGE_PATTERN.fullmatch(age):
        errors.append(AGE_MESSAGE)

    return errors


def is_name_unique(users: Iterable[User], name: str) -> bool:
    """True if no existing user has exactly this name (case-sensitive)."""
    return not any(user.name == name for user in users)


def next_user_id(users: Iterable[User]) -> int:
    """Next id: one past the current maximum, or 1 for an empty collection."""
    return max((user.id for user in users), default=0) + 1
