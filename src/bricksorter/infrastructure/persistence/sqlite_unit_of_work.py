"""SQLite implementation of UnitOfWork."""

from __future__ import annotations

from contextlib import AbstractContextManager

from bricksorter.domain.repository.unit_of_work import UnitOfWork
from bricksorter.infrastructure.persistence.database import Database
from bricksorter.infrastructure.persistence.sqlite_part_repository import (
    SqlitePartRepository,
)
from bricksorter.infrastructure.persistence.sqlite_set_part_repository import (
    SqliteSetPartRepository,
)
from bricksorter.infrastructure.persistence.sqlite_set_repository import (
    SqliteSetRepository,
)


class SqliteUnitOfWork(UnitOfWork):

    def __init__(self, db: Database) -> None:
        self.db = db
        self.sets = SqliteSetRepository(db)
        self.parts = SqlitePartRepository(db)
        self.set_parts = SqliteSetPartRepository(db)

    def transaction(self) -> AbstractContextManager[None]:
        return self.db.transaction()
