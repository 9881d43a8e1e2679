"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from bricksorter.infrastructure.catalog.rebrickable_client import (
    RebrickableCatalogClient,
)
from bricksorter.infrastructure.config import get_settings
from bricksorter.infrastructure.persistence.database import Database
from bricksorter.infrastructure.persistence.sqlite_unit_of_work import (
    SqliteUnitOfWork,
)


def unit_of_work() -> SqliteUnitOfWork:
    db = Database(get_settings().db_path)
    db.create_schema()
    return SqliteUnitOfWork(db)


def catalog_client() -> RebrickableCatalogClient:
    settings = get_settings()
    return RebrickableCatalogClient(
        api_key=settings.rebrickable_api_key,
        base_url=settings.rebrickable_base_url,
        timeout=settings.http_timeout,
    )
