"""SQLite-backed implementation of PartRepository."""

from __future__ import annotations

import sqlite3

from bricksorter.domain.model.part import Part
from bricksorter.domain.model.value_objects import PartKey
from bricksorter.domain.repository.part_repository import PartRepository
from bricksorter.infrastructure.persistence.database import Database

_COLUMNS = "part_num, color_id, name, quantity, bricklink_id, element_id"


class SqlitePartRepository(PartRepository):

    def __init__(self, db: Database) -> None:
        self._db = db

    # --- PartRepository interface ---------------------------------------------

    def get(self, key: PartKey) -> Part | None:
        row = self._db.fetch_one(
            f"SELECT {_COLUMNS} FROM parts WHERE part_num = ? AND color_id = ?",
            (key.part_num, key.color_id),
        )
        return self._to_domain(row) if row else None

    def find_by_element_id(self, element_id: str) -> list[Part]:
        rows = self._db.fetch_all(
            f"SELECT {_COLUMNS} FROM parts WHERE element_id = ?", (element_id,)
        )
        return [self._to_domain(row) for row in rows]

    def upsert(self, part: Part) -> None:
        """Insert a part, or fill in ids still missing on an existing one.

        A part holds a single element id: the first one recorded wins, so an
        element chosen for the same part and colour in a later set is not
        stored and cannot be looked up. Stock is never reset.
        """
        self._db.execute(
            f"""INSERT INTO parts ({_COLUMNS}) VALUES (?, ?, ?, 0, ?, ?)
                ON CONFLICT (part_num, color_id) DO UPDATE SET
                    bricklink_id = COALESCE(parts.bricklink_id, excluded.bricklink_id),
                    element_id = COALESCE(parts.element_id, excluded.element_id)""",
            (part.part_num, part.color_id, part.name, part.bricklink_id, part.element_id),
        )

    def save(self, part: Part) -> None:
        self._db.execute(
            """UPDATE parts SET name = ?, quantity = ?, bricklink_id = ?, element_id = ?
               WHERE part_num = ? AND color_id = ?""",
            (
                part.name,
                part.quantity,
                part.bricklink_id,
                part.element_id,
                part.part_num,
                part.color_id,
            ),
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> Part:
        return Part(
            key=PartKey(row["part_num"], row["color_id"]),
            name=row["name"],
            quantity=row["quantity"],
            bricklink_id=row["bricklink_id"],
            element_id=row["element_id"],
        )
