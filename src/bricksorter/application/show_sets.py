"""Application service: Show Sets use case (query)."""

from __future__ import annotations

from bricksorter.application.dto import SetDTO
from bricksorter.domain.repository.unit_of_work import UnitOfWork


class ListSetsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, query: str = "") -> list[SetDTO]:
        """Sets matching *query* by number or name, most complete first."""
        return [SetDTO.from_domain(s) for s in self._uow.sets.search(query.strip())]
