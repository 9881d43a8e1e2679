"""Read-only records handed to the domain by the parts catalog.

These mirror what the remote catalog knows about a set and its parts.
They are never persisted as-is; Set Ingestion turns them into
``LegoSet``/``Part``/``SetPart`` rows.
"""

from __future__ import annotations

from dataclasses import dataclass

from bricksorter.domain.model.value_objects import PartKey


@dataclass(frozen=True)
class CatalogSet:
    set_num: str
    name: str
    year: int


@dataclass(frozen=True)
class CatalogPart:
    """One inventory line of a set as listed by the catalog."""

    part_num: str
    name: str
    color_id: int
    quantity: int
    is_spare: bool = False
    element_id: str | None = None
    mold_variants: tuple[str, ...] = ()
    bricklink_ids: tuple[str, ...] = ()

    @property
    def key(self) -> PartKey:
        return PartKey(self.part_num, self.color_id)

    @property
    def bricklink_id(self) -> str | None:
        return ",".join(self.bricklink_ids) or None


@dataclass(frozen=True)
class PartColorVariant:
    """Elements produced for one mold of a part in one colour."""

    part_num: str
    color_id: int
    element_ids: tuple[str, ...]
    year_from: int | None = None
    year_to: int | None = None

    def was_produced_in(self, year: int) -> bool:
        if self.year_from is None or self.year_to is None:
            return False
        return self.year_from <= year <= self.year_to
