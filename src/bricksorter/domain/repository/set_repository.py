"""Abstract repository for LegoSet aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. The concrete SQLite implementation lives in the
infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bricksorter.domain.model.lego_set import LegoSet


class SetRepository(ABC):

    @abstractmethod
    def get_by_id(self, set_id: str) -> LegoSet | None:
        """Return a set by its catalog number, or None if not found."""

    @abstractmethod
    def list_by_priority(self) -> list[LegoSet]:
        """Return every set, lowest priority number first.

        Ties are broken by most recently created first.
        """

    @abstractmethod
    def search(self, query: str) -> list[LegoSet]:
        """Return sets whose id or name contains *query*."""

    @abstractmethod
    def add(self, lego_set: LegoSet) -> None:
        """Insert a new set."""

    @abstractmethod
    def save(self, lego_set: LegoSet) -> None:
        """Persist changes to an existing set."""
