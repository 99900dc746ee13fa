"""User record model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class User:
    """A single user record.

    ``age`` is kept exactly as it was received; only the creation path
    checks its format.
    """

    id: int
    name: str
    age: Any

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
        }

    @classmethod
    def from_dict(cls, data: dict) -> User:
        return cls(
            id=data["id"],
            name=data["name"],
            age=data["age"],
        )
