"""Application service: Allocate Part use case.

Accepts a part either as design number plus colour or as an element id,
validates the raw input and hands the work to the AllocationService.
"""

from __future__ import annotations

from bricksorter.application.dto import AllocationDTO
from bricksorter.domain.exceptions import ValidationError
from bricksorter.domain.model.value_objects import PartKey, Quantity, SetNumber
from bricksorter.domain.repository.unit_of_work import UnitOfWork
from bricksorter.domain.service.allocation_service import AllocationService


class AllocatePartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        quantity: int,
        part_num: str | None = None,
        color_id: str | int | None = None,
        element_id: str | None = None,
        set_id: str | None = None,
    ) -> list[AllocationDTO]:
        """Allocate parts and return one entry per set that received some.

        Args:
            quantity: How many parts became available.
            part_num, color_id: The part, when identified by design.
            element_id: The part, when identified by element.
            set_id: Give everything to this set instead of following
                priorities.
        """
        qty = Quantity(quantity)
        target = str(SetNumber.parse(set_id)) if set_id else None
        svc = AllocationService(self._uow)

        if element_id:
            if part_num is not None or color_id is not None:
                raise ValidationError(
                    "Give either an element ID or a part number and color, not both"
                )
            key = svc.key_for_element(element_id.strip())
        else:
            if not part_num or color_id is None:
                raise ValidationError(
                    "A part number and color ID, or an element ID, are required"
                )
            key = PartKey.of(part_num, color_id)

        return [
            AllocationDTO(
                set_id=a.set_id,
                set_name=a.set_name,
                allocated=a.allocated,
                became_first_allocated=a.became_first_allocated,
                became_fully_allocated=a.became_fully_allocated,
            )
            for a in svc.allocate(key, qty, target)
        ]
