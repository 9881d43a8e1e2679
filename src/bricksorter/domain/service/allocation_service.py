"""Domain service: Part Allocation.

Decides which sets receive a newly available quantity of a part.  Either
the caller names one set, or the quantity is walked down the priority
list, filling each set's outstanding need in turn.

Every allocation is one transaction covering the need rows, the part
tally and the completion of each touched set, so the part's quantity
always equals the sum of its allocations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bricksorter.domain.exceptions import ConflictError, EntityNotFoundError
from bricksorter.domain.model.lego_set import LegoSet
from bricksorter.domain.model.part import Part, SetPart
from bricksorter.domain.model.value_objects import PartKey, Quantity
from bricksorter.domain.repository.unit_of_work import UnitOfWork
from bricksorter.domain.service.completion_tracker import CompletionTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allocation:
    """What one set received from a single allocation call."""

    set_id: str
    set_name: str
    allocated: int
    became_first_allocated: bool = False
    became_fully_allocated: bool = False


class AllocationService:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._completion = CompletionTracker(uow)

    def key_for_element(self, element_id: str) -> PartKey:
        """Map an element id to the part it belongs to."""
        matches = self._uow.parts.find_by_element_id(element_id)
        if not matches:
            raise EntityNotFoundError(
                f"Element ID {element_id} not found in database."
            )
        if len(matches) > 1:
            raise ConflictError(
                f"Element ID {element_id} matches {len(matches)} parts."
            )
        return matches[0].key

    def allocate(
        self,
        key: PartKey,
        quantity: Quantity,
        target_set_id: str | None = None,
    ) -> list[Allocation]:
        """Allocate *quantity* of a part and report where it went.

        With ``target_set_id`` the whole quantity goes to that set (capped
        at its outstanding need).  Without it the quantity is spread over
        every set needing the part, lowest priority number first.
        """
        part = self._uow.parts.get(key)
        if part is None:
            raise EntityNotFoundError(
                f"Part {key.part_num} not found in database. "
                "Add a set containing this part first."
            )

        if target_set_id is not None:
            allocations = self._allocate_to_set(part, quantity, target_set_id)
        else:
            allocations = self._allocate_by_priority(part, quantity)

        logger.info(
            "Allocated %d of %s across %d set(s)",
            sum(a.allocated for a in allocations), key, len(allocations),
        )
        return allocations

    # --- Modes ----------------------------------------------------------------

    def _allocate_to_set(
        self, part: Part, quantity: Quantity, set_id: str
    ) -> list[Allocation]:
        # Phase 1: validate before any write
        lego_set = self._uow.sets.get_by_id(set_id)
        if lego_set is None:
            raise EntityNotFoundError(
                f"Set {set_id} not found in database. Add the set first."
            )
        if lego_set.soft_completed:
            raise ConflictError(
                f"Set {set_id} is marked complete. Unmark it before adding parts."
            )
        set_part = self._uow.set_parts.get(set_id, part.key)
        if set_part is None:
            raise ConflictError(f"Part {part.key} is not used in set {set_id}.")
        if set_part.is_fully_allocated:
            raise ConflictError(
                f"Set {set_id} already has enough of part {part.key}."
            )

        # Phase 2: mutate atomically
        with self._uow.transaction():
            allocation = self._apply(lego_set, set_part, quantity.value)
            part.record_allocation(allocation.allocated)
            self._uow.parts.save(part)

        return [allocation]

    def _allocate_by_priority(self, part: Part, quantity: Quantity) -> list[Allocation]:
        allocations: list[Allocation] = []
        remaining = quantity.value

        with self._uow.transaction():
            for set_part in self._uow.set_parts.list_open_demand(part.key):
                if remaining <= 0:
                    break
                lego_set = self._uow.sets.get_by_id(set_part.set_id)
                if lego_set is None or lego_set.soft_completed:
                    continue
                allocation = self._apply(lego_set, set_part, remaining)
                remaining -= allocation.allocated
                allocations.append(allocation)

            total = quantity.value - remaining
            if not total:
                raise ConflictError(
                    f"Part {part.key} is not needed for any sets. "
                    f"{remaining} parts not added."
                )

            part.record_allocation(total)
            self._uow.parts.save(part)

        return allocations

    # --- Helpers --------------------------------------------------------------

    def _apply(self, lego_set: LegoSet, set_part: SetPart, quantity: int) -> Allocation:
        """Allocate to one need row and refresh the owning set's completion."""
        before = lego_set.completion
        applied = set_part.allocate(quantity)
        self._uow.set_parts.save(set_part)
        after = self._completion.recompute(lego_set.id)
        lego_set.completion = after

        return Allocation(
            set_id=lego_set.id,
            set_name=lego_set.name,
            allocated=applied,
            became_first_allocated=before == 0 and after > 0,
            became_fully_allocated=before < 1 and after >= 1,
        )
