"""Domain service: Priority Normalizer.

Keeps set priorities a dense 1..N sequence and moves a set to a
requested rank, shifting the others around it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bricksorter.domain.exceptions import EntityNotFoundError
from bricksorter.domain.model.value_objects import Priority
from bricksorter.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriorityRequest:
    """Place ``set_id`` at rank ``priority`` during normalization."""

    set_id: str
    priority: Priority


class PriorityNormalizer:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def normalize(self, request: PriorityRequest | None = None) -> int:
        """Renumber all sets 1..N and return N + 1.

        With a request, the named set is taken out of the ordering and
        spliced back in at ``requested - 1`` (clamped to the list).
        Only rows whose priority actually changes are written.
        """
        with self._uow.transaction():
            sets = self._uow.sets.list_by_priority()

            if request is not None:
                moving = next((s for s in sets if s.id == request.set_id), None)
                if moving is None:
                    raise EntityNotFoundError(f"Set {request.set_id} not found")
                sets.remove(moving)
                target = max(0, min(len(sets), request.priority.value - 1))
                sets.insert(target, moving)

            changed = 0
            for index, lego_set in enumerate(sets):
                new_priority = index + 1
                if lego_set.priority != new_priority:
                    lego_set.priority = new_priority
                    self._uow.sets.save(lego_set)
                    changed += 1

        if changed:
            logger.debug("Renumbered %d of %d set priorities", changed, len(sets))
        return len(sets) + 1
