"""Abstract client for the remote parts catalog.

The domain only consumes catalog data; fetching it is an
infrastructure concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bricksorter.domain.model.catalog import CatalogPart, CatalogSet, PartColorVariant


class CatalogClient(ABC):

    @abstractmethod
    def get_set_details(self, set_number: str) -> CatalogSet:
        """Return name and release year of a set."""

    @abstractmethod
    def get_set_parts(self, set_number: str) -> list[CatalogPart]:
        """Return the full inventory of a set, spares included."""

    @abstractmethod
    def get_part_color_variants(self, part_num: str) -> list[PartColorVariant]:
        """Return the elements of one mold of a part, grouped by colour."""

    @abstractmethod
    def color_name(self, color_id: int) -> str:
        """Return a display name for a colour id."""
