"""Domain entity for a tracked GitHub repository."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryIdentifier:
    """Immutable ``owner/name`` pair."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str) -> RepositoryIdentifier:
        """
        Parse an ``owner/name`` string.

        Raises:
            ValueError: If the string does not have exactly two non-empty parts.
        """
        parts = [part.strip() for part in (value or "").split("/")]
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Invalid repository format: {value!r}")
        return cls(owner=parts[0], name=parts[1])

    def __str__(self) -> str:
        return self.full_name
