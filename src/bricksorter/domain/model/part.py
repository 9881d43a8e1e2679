"""Part and SetPart aggregates.

A ``Part`` is the collection-wide tally for one ``(part_num, color_id)``;
a ``SetPart`` is one set's need for it.  The two are always updated
together so that a part's quantity equals the sum of its allocations.
"""

from __future__ import annotations

from dataclasses import dataclass

from bricksorter.domain.exceptions import ConflictError, ValidationError
from bricksorter.domain.model.value_objects import PartKey


@dataclass
class Part:
    """Collection-wide record of a part.

    ``quantity`` is the number allocated to date across all sets; it is
    not a free pool of loose parts.
    """

    key: PartKey
    name: str
    quantity: int = 0
    bricklink_id: str | None = None
    element_id: str | None = None

    @property
    def part_num(self) -> str:
        return self.key.part_num

    @property
    def color_id(self) -> int:
        return self.key.color_id

    def record_allocation(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Allocation quantity must be positive")
        self.quantity += quantity


@dataclass
class SetPart:
    """How much of one part a set needs and how much it has received.

    Invariants:
    - ``0 <= quantity_allocated <= quantity_needed``
    - ``quantity_allocated`` never decreases
    """

    set_id: str
    key: PartKey
    quantity_needed: int
    quantity_allocated: int = 0

    @property
    def remaining_quantity(self) -> int:
        return max(0, self.quantity_needed - self.quantity_allocated)

    @property
    def is_fully_allocated(self) -> bool:
        return self.remaining_quantity == 0

    def allocate(self, quantity: int) -> int:
        """Take up to *quantity* units; return how many were applied.

        Anything beyond the outstanding need is discarded, not an error.
        """
        if quantity <= 0:
            raise ValidationError("Allocation quantity must be positive")
        if self.is_fully_allocated:
            raise ConflictError(
                f"Set {self.set_id} already has enough of part {self.key}."
            )
        applied = min(quantity, self.remaining_quantity)
        self.quantity_allocated += applied
        return applied
