"""Domain service: Completion Tracker."""

from __future__ import annotations

from bricksorter.domain.exceptions import EntityNotFoundError
from bricksorter.domain.model.lego_set import LegoSet
from bricksorter.domain.repository.unit_of_work import UnitOfWork


class CompletionTracker:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def recompute(self, set_id: str) -> float:
        """Store and return the allocated/needed ratio of a set.

        A set needing nothing is 0 complete.  The soft-completed flag is
        left alone.
        """
        with self._uow.transaction():
            lego_set = self._load(set_id)
            needed, allocated = self._uow.set_parts.totals_for_set(set_id)
            lego_set.completion = allocated / needed if needed else 0.0
            self._uow.sets.save(lego_set)
        return lego_set.completion

    def mark_soft_completed(self, set_id: str) -> None:
        """Exclude a set from allocation without touching its parts."""
        with self._uow.transaction():
            lego_set = self._load(set_id)
            lego_set.soft_completed = True
            self._uow.sets.save(lego_set)

    def clear_soft_completed(self, set_id: str) -> float:
        with self._uow.transaction():
            lego_set = self._load(set_id)
            lego_set.soft_completed = False
            self._uow.sets.save(lego_set)
            return self.recompute(set_id)

    def _load(self, set_id: str) -> LegoSet:
        lego_set = self._uow.sets.get_by_id(set_id)
        if lego_set is None:
            raise EntityNotFoundError(f"Set {set_id} not found")
        return lego_set
