"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from bricksorter.domain.model.lego_set import LegoSet


@dataclass(frozen=True)
class SetDTO:
    """Output: a set as listed to the user."""

    id: str
    name: str
    priority: int
    completion: float
    soft_completed: bool
    display_completion: float

    @staticmethod
    def from_domain(lego_set: LegoSet) -> SetDTO:
        return SetDTO(
            id=lego_set.id,
            name=lego_set.name,
            priority=lego_set.priority,
            completion=lego_set.completion,
            soft_completed=lego_set.soft_completed,
            display_completion=lego_set.display_completion,
        )


@dataclass(frozen=True)
class AllocationDTO:
    """Output: what one set received from an allocation."""

    set_id: str
    set_name: str
    allocated: int
    became_first_allocated: bool
    became_fully_allocated: bool


@dataclass(frozen=True)
class SetPartDTO:
    """Output: one need row of a set, joined with its part."""

    part_num: str
    color_id: int
    name: str
    element_id: str | None
    bricklink_id: str | None
    quantity_needed: int
    quantity_allocated: int

    @property
    def remaining(self) -> int:
        return self.quantity_needed - self.quantity_allocated

    @property
    def allocation_percent(self) -> float:
        return self.quantity_allocated / self.quantity_needed if self.quantity_needed else 0.0
