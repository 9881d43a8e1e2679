"""Application service: Show Set Parts use case (query)."""

from __future__ import annotations

from enum import Enum

from bricksorter.application.dto import SetDTO, SetPartDTO
from bricksorter.domain.exceptions import EntityNotFoundError
from bricksorter.domain.model.value_objects import SetNumber
from bricksorter.domain.repository.unit_of_work import UnitOfWork


class PartSort(Enum):
    COLOR = "color"
    REMAINING = "remaining"
    PERCENT = "percent"
    PART_NUM = "part"


class ShowSetPartsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        set_id: str,
        sort: PartSort = PartSort.COLOR,
        descending: bool = False,
        color_id: int | None = None,
    ) -> tuple[SetDTO, list[SetPartDTO]]:
        """Return a set with its need rows, sorted and optionally filtered.

        ``REMAINING`` ascending lists the parts still missing most first.
        """
        set_id = str(SetNumber.parse(set_id))
        lego_set = self._uow.sets.get_by_id(set_id)
        if lego_set is None:
            raise EntityNotFoundError(f"Set {set_id} not found")

        rows: list[SetPartDTO] = []
        for set_part in self._uow.set_parts.list_for_set(set_id):
            if color_id is not None and set_part.key.color_id != color_id:
                continue
            part = self._uow.parts.get(set_part.key)
            rows.append(
                SetPartDTO(
                    part_num=set_part.key.part_num,
                    color_id=set_part.key.color_id,
                    name=part.name if part else "",
                    element_id=part.element_id if part else None,
                    bricklink_id=part.bricklink_id if part else None,
                    quantity_needed=set_part.quantity_needed,
                    quantity_allocated=set_part.quantity_allocated,
                )
            )

        if sort is PartSort.REMAINING:
            rows.sort(key=lambda r: -r.remaining)
        elif sort is PartSort.PERCENT:
            rows.sort(key=lambda r: r.allocation_percent)
        elif sort is PartSort.PART_NUM:
            rows.sort(key=lambda r: r.part_num)
        else:
            rows.sort(key=lambda r: (r.color_id, r.part_num))
        if descending:
            rows.reverse()

        return SetDTO.from_domain(lego_set), rows

    def colors(self, set_id: str) -> list[int]:
        """Distinct colour ids used by a set, ascending."""
        set_id = str(SetNumber.parse(set_id))
        return sorted({sp.key.color_id for sp in self._uow.set_parts.list_for_set(set_id)})
