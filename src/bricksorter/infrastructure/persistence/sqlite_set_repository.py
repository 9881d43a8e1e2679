"""SQLite-backed implementation of SetRepository."""

from __future__ import annotations

import sqlite3

from bricksorter.domain.model.lego_set import LegoSet
from bricksorter.domain.repository.set_repository import SetRepository
from bricksorter.infrastructure.persistence.database import Database

_COLUMNS = "id, name, priority, completion, soft_completed"


class SqliteSetRepository(SetRepository):

    def __init__(self, db: Database) -> None:
        self._db = db

    # --- SetRepository interface ----------------------------------------------

    def get_by_id(self, set_id: str) -> LegoSet | None:
        row = self._db.fetch_one(f"SELECT {_COLUMNS} FROM sets WHERE id = ?", (set_id,))
        return self._to_domain(row) if row else None

    def list_by_priority(self) -> list[LegoSet]:
        rows = self._db.fetch_all(
            f"SELECT {_COLUMNS} FROM sets ORDER BY priority ASC, rowid DESC"
        )
        return [self._to_domain(row) for row in rows]

    def search(self, query: str) -> list[LegoSet]:
        pattern = f"%{query}%"
        rows = self._db.fetch_all(
            f"""SELECT {_COLUMNS} FROM sets
                WHERE id LIKE ? OR name LIKE ?
                ORDER BY CASE WHEN soft_completed THEN 1.0 ELSE completion END DESC,
                         priority ASC""",
            (pattern, pattern),
        )
        return [self._to_domain(row) for row in rows]

    def add(self, lego_set: LegoSet) -> None:
        self._db.execute(
            f"INSERT INTO sets ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            self._to_row(lego_set),
        )

    def save(self, lego_set: LegoSet) -> None:
        set_id, name, priority, completion, soft_completed = self._to_row(lego_set)
        self._db.execute(
            """UPDATE sets SET name = ?, priority = ?, completion = ?, soft_completed = ?
               WHERE id = ?""",
            (name, priority, completion, soft_completed, set_id),
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(lego_set: LegoSet) -> tuple:
        return (
            lego_set.id,
            lego_set.name,
            lego_set.priority,
            lego_set.completion,
            int(lego_set.soft_completed),
        )

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> LegoSet:
        return LegoSet(
            id=row["id"],
            name=row["name"],
            priority=row["priority"],
            completion=row["completion"],
            soft_completed=bool(row["soft_completed"]),
        )
