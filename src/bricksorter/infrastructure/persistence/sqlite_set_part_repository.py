"""SQLite-backed implementation of SetPartRepository."""

from __future__ import annotations

import sqlite3

from bricksorter.domain.model.part import SetPart
from bricksorter.domain.model.value_objects import PartKey
from bricksorter.domain.repository.set_part_repository import SetPartRepository
from bricksorter.infrastructure.persistence.database import Database

_COLUMNS = "sp.set_id, sp.part_num, sp.color_id, sp.quantity_needed, sp.quantity_allocated"


class SqliteSetPartRepository(SetPartRepository):

    def __init__(self, db: Database) -> None:
        self._db = db

    # --- SetPartRepository interface ------------------------------------------

    def get(self, set_id: str, key: PartKey) -> SetPart | None:
        row = self._db.fetch_one(
            f"""SELECT {_COLUMNS} FROM set_parts sp
                WHERE sp.set_id = ? AND sp.part_num = ? AND sp.color_id = ?""",
            (set_id, key.part_num, key.color_id),
        )
        return self._to_domain(row) if row else None

    def list_for_set(self, set_id: str) -> list[SetPart]:
        rows = self._db.fetch_all(
            f"""SELECT {_COLUMNS} FROM set_parts sp
                WHERE sp.set_id = ?
                ORDER BY sp.color_id, sp.part_num""",
            (set_id,),
        )
        return [self._to_domain(row) for row in rows]

    def list_open_demand(self, key: PartKey) -> list[SetPart]:
        rows = self._db.fetch_all(
            f"""SELECT {_COLUMNS} FROM set_parts sp
                JOIN sets s ON s.id = sp.set_id
                WHERE sp.part_num = ? AND sp.color_id = ?
                  AND s.soft_completed = 0
                  AND sp.quantity_allocated < sp.quantity_needed
                ORDER BY s.priority ASC, s.rowid DESC""",
            (key.part_num, key.color_id),
        )
        return [self._to_domain(row) for row in rows]

    def totals_for_set(self, set_id: str) -> tuple[int, int]:
        row = self._db.fetch_one(
            """SELECT COALESCE(SUM(quantity_needed), 0) AS needed,
                      COALESCE(SUM(quantity_allocated), 0) AS allocated
               FROM set_parts WHERE set_id = ?""",
            (set_id,),
        )
        return row["needed"], row["allocated"]

    def add(self, set_part: SetPart) -> None:
        self._db.execute(
            """INSERT INTO set_parts
                   (set_id, part_num, color_id, quantity_needed, quantity_allocated)
               VALUES (?, ?, ?, ?, ?)""",
            (
                set_part.set_id,
                set_part.key.part_num,
                set_part.key.color_id,
                set_part.quantity_needed,
                set_part.quantity_allocated,
            ),
        )

    def save(self, set_part: SetPart) -> None:
        self._db.execute(
            """UPDATE set_parts SET quantity_allocated = ?
               WHERE set_id = ? AND part_num = ? AND color_id = ?""",
            (
                set_part.quantity_allocated,
                set_part.set_id,
                set_part.key.part_num,
                set_part.key.color_id,
            ),
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> SetPart:
        return SetPart(
            set_id=row["set_id"],
            key=PartKey(row["part_num"], row["color_id"]),
            quantity_needed=row["quantity_needed"],
            quantity_allocated=row["quantity_allocated"],
        )
