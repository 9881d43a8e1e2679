"""Application service: Update Set use case.

Moves a set to a new rank and/or marks it complete by hand.
"""

from __future__ import annotations

from bricksorter.application.dto import SetDTO
from bricksorter.domain.exceptions import EntityNotFoundError
from bricksorter.domain.model.value_objects import Priority, SetNumber
from bricksorter.domain.repository.unit_of_work import UnitOfWork
from bricksorter.domain.service.completion_tracker import CompletionTracker
from bricksorter.domain.service.priority_normalizer import (
    PriorityNormalizer,
    PriorityRequest,
)


class UpdateSetHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        set_id: str,
        priority: int | None = None,
        soft_completed: bool | None = None,
    ) -> SetDTO:
        """Apply the requested changes atomically and return the new state.

        ``soft_completed=False`` clears the mark and recomputes the real
        completion from the set's parts.
        """
        set_id = str(SetNumber.parse(set_id))
        requested = Priority(priority) if priority is not None else None

        if self._uow.sets.get_by_id(set_id) is None:
            raise EntityNotFoundError(f"Set {set_id} not found")

        tracker = CompletionTracker(self._uow)
        with self._uow.transaction():
            if requested is not None:
                PriorityNormalizer(self._uow).normalize(
                    PriorityRequest(set_id=set_id, priority=requested)
                )
            if soft_completed is True:
                tracker.mark_soft_completed(set_id)
            elif soft_completed is False:
                tracker.clear_soft_completed(set_id)

        return SetDTO.from_domain(self._uow.sets.get_by_id(set_id))
