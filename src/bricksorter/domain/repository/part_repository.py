"""Abstract repository for Part aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bricksorter.domain.model.part import Part
from bricksorter.domain.model.value_objects import PartKey


class PartRepository(ABC):

    @abstractmethod
    def get(self, key: PartKey) -> Part | None:
        """Return the part for a part number and colour, or None."""

    @abstractmethod
    def find_by_element_id(self, element_id: str) -> list[Part]:
        """Return every part carrying this element id."""

    @abstractmethod
    def upsert(self, part: Part) -> None:
        """Insert a part, or fill in missing ids on an existing one.

        Never touches the quantity of an existing part.
        """

    @abstractmethod
    def save(self, part: Part) -> None:
        """Persist changes to an existing part."""
