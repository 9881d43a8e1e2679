"""Abstract unit of work: the repositories plus one transaction boundary.

Services receive a unit of work instead of individual repositories so
that every multi-row write they make shares a single transaction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from bricksorter.domain.repository.part_repository import PartRepository
from bricksorter.domain.repository.set_part_repository import SetPartRepository
from bricksorter.domain.repository.set_repository import SetRepository


class UnitOfWork(ABC):

    sets: SetRepository
    parts: PartRepository
    set_parts: SetPartRepository

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Run the enclosed block atomically.

        Nested use joins the enclosing transaction; an exception rolls
        back everything written inside the block and is re-raised.
        """
