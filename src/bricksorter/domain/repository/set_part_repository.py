"""Abstract repository for SetPart need rows."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bricksorter.domain.model.part import SetPart
from bricksorter.domain.model.value_objects import PartKey


class SetPartRepository(ABC):

    @abstractmethod
    def get(self, set_id: str, key: PartKey) -> SetPart | None:
        """Return one set's need row for a part, or None."""

    @abstractmethod
    def list_for_set(self, set_id: str) -> list[SetPart]:
        """Return every need row of a set."""

    @abstractmethod
    def list_open_demand(self, key: PartKey) -> list[SetPart]:
        """Return rows still needing this part, in allocation order.

        Only sets that are not soft-completed are included, ordered by
        set priority ascending (ties: most recently created set first).
        """

    @abstractmethod
    def totals_for_set(self, set_id: str) -> tuple[int, int]:
        """Return ``(total_needed, total_allocated)`` for a set."""

    @abstractmethod
    def add(self, set_part: SetPart) -> None:
        """Insert a new need row."""

    @abstractmethod
    def save(self, set_part: SetPart) -> None:
        """Persist the allocated quantity of an existing row."""
