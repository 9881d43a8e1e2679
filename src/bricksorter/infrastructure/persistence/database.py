"""SQLite connection, schema and transaction handling.

The connection runs in autocommit mode so transactions are always
explicit: the outermost ``transaction()`` issues BEGIN/COMMIT, nested
ones use savepoints, and any exception rolls back before propagating.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS sets (
    id             TEXT PRIMARY KEY,
    name           TEXT NOT NULL,
    priority       INTEGER NOT NULL,
    completion     REAL NOT NULL DEFAULT 0,
    soft_completed INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS parts (
    part_num     TEXT NOT NULL,
    color_id     INTEGER NOT NULL,
    name         TEXT NOT NULL,
    quantity     INTEGER NOT NULL DEFAULT 0,
    bricklink_id TEXT,
    element_id   TEXT,
    PRIMARY KEY (part_num, color_id)
);

CREATE INDEX IF NOT EXISTS idx_parts_element_id ON parts (element_id);

CREATE TABLE IF NOT EXISTS set_parts (
    set_id             TEXT NOT NULL REFERENCES sets (id),
    part_num           TEXT NOT NULL,
    color_id           INTEGER NOT NULL,
    quantity_needed    INTEGER NOT NULL,
    quantity_allocated INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (set_id, part_num, color_id),
    FOREIGN KEY (part_num, color_id) REFERENCES parts (part_num, color_id),
    CHECK (quantity_allocated >= 0 AND quantity_allocated <= quantity_needed)
);

CREATE INDEX IF NOT EXISTS idx_set_parts_part ON set_parts (part_num, color_id);
"""


class Database:

    def __init__(self, path: str | Path = ":memory:") -> None:
        self._path = str(path)
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._path, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._depth = 0

    def create_schema(self) -> None:
        self._conn.executescript(SCHEMA)

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        return self._conn.execute(sql, params)

    def fetch_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        return self._conn.execute(sql, params).fetchone()

    def fetch_all(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        return self._conn.execute(sql, params).fetchall()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth == 0:
            begin, commit, rollback = "BEGIN", ["COMMIT"], ["ROLLBACK"]
        else:
            name = f"sp_{self._depth}"
            begin = f"SAVEPOINT {name}"
            commit = [f"RELEASE SAVEPOINT {name}"]
            rollback = [f"ROLLBACK TO SAVEPOINT {name}", f"RELEASE SAVEPOINT {name}"]

        self._conn.execute(begin)
        self._depth += 1
        try:
            yield
        except BaseException:
            self._depth -= 1
            for statement in rollback:
                self._conn.execute(statement)
            if not self._depth:
                logger.warning("Transaction rolled back")
            raise
        else:
            self._depth -= 1
            for statement in commit:
                self._conn.execute(statement)

    def close(self) -> None:
        self._conn.close()
