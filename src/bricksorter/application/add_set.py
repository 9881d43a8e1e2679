"""Application service: Add Set use case.

Adding a set can need user input: some catalog parts name no concrete
element and the catalog offers several (or none).  Instead of blocking,
the handler works on an ``IngestionSession`` owned by the caller and
returns a tagged result:

- ``SetAdded``: every part was settled and the set is stored;
- ``DecisionNeeded``: the caller must ``choose`` or ``skip`` a part on
  the session, then call ``handle`` again;
- ``IngestionFailed``: a domain error ended the attempt.

Catalog data and every settled part live on the session, so resuming
never fetches or resolves anything twice.  Nothing is written until all
parts are settled; dropping the session cancels the attempt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from bricksorter.application.dto import SetDTO
from bricksorter.domain.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from bricksorter.domain.model.catalog import CatalogPart, CatalogSet
from bricksorter.domain.model.lego_set import LegoSet
from bricksorter.domain.model.part import Part, SetPart
from bricksorter.domain.model.value_objects import PartKey, Priority, SetNumber
from bricksorter.domain.repository.catalog_client import CatalogClient
from bricksorter.domain.repository.unit_of_work import UnitOfWork
from bricksorter.domain.service.element_resolver import ElementChoice, ElementResolver
from bricksorter.domain.service.priority_normalizer import (
    PriorityNormalizer,
    PriorityRequest,
)

logger = logging.getLogger(__name__)

SKIPPED = ""


@dataclass
class IngestionSession:
    """State of one attempt at adding a set."""

    set_number: SetNumber
    priority: Priority
    resolutions: dict[PartKey, str] = field(default_factory=dict)
    catalog_set: CatalogSet | None = None
    catalog_parts: list[CatalogPart] | None = None

    def choose(self, key: PartKey, element_id: str) -> None:
        if not element_id:
            raise ValidationError("Element ID must not be empty; use skip instead")
        self.resolutions[key] = element_id

    def skip(self, key: PartKey) -> None:
        self.resolutions[key] = SKIPPED

    @property
    def skipped(self) -> list[PartKey]:
        return sorted(k for k, v in self.resolutions.items() if v == SKIPPED)


@dataclass(frozen=True)
class SetAdded:
    lego_set: SetDTO
    skipped: tuple[PartKey, ...] = ()


@dataclass(frozen=True)
class DecisionNeeded:
    session: IngestionSession
    choice: ElementChoice


@dataclass(frozen=True)
class IngestionFailed:
    error: DomainException


IngestionResult = Union[SetAdded, DecisionNeeded, IngestionFailed]


class AddSetHandler:

    def __init__(self, uow: UnitOfWork, catalog: CatalogClient) -> None:
        self._uow = uow
        self._catalog = catalog
        self._resolver = ElementResolver(catalog)

    def start(self, set_number: str, priority: int | None = None) -> IngestionSession:
        """Validate the request and open a session for it.

        Without a priority the set is appended after all existing sets.
        """
        number = SetNumber.parse(set_number)
        requested = Priority(priority) if priority is not None else None
        self._reject_existing(number)

        if requested is None:
            requested = Priority(PriorityNormalizer(self._uow).normalize())

        return IngestionSession(set_number=number, priority=requested)

    def handle(self, session: IngestionSession) -> IngestionResult:
        """Advance the session as far as possible."""
        try:
            return self._advance(session)
        except DomainException as exc:
            logger.info("Adding set %s failed: %s", session.set_number, exc)
            return IngestionFailed(exc)

    # --- Steps ----------------------------------------------------------------

    def _advance(self, session: IngestionSession) -> IngestionResult:
        self._reject_existing(session.set_number)
        catalog_set, parts = self._load_catalog(session)

        for part in parts:
            if part.is_spare or part.element_id or part.key in session.resolutions:
                continue
            outcome = self._resolver.resolve(part, catalog_set)
            if isinstance(outcome, ElementChoice):
                return DecisionNeeded(session=session, choice=outcome)
            session.resolutions[part.key] = outcome

        lego_set = self._persist(session)
        logger.info(
            "Added set %s at priority %d (%d part(s) skipped)",
            lego_set.id, lego_set.priority, len(session.skipped),
        )
        return SetAdded(
            lego_set=SetDTO.from_domain(lego_set),
            skipped=tuple(session.skipped),
        )

    def _load_catalog(
        self, session: IngestionSession
    ) -> tuple[CatalogSet, list[CatalogPart]]:
        number = str(session.set_number)
        if session.catalog_set is None:
            session.catalog_set = self._catalog.get_set_details(number)
        if session.catalog_parts is None:
            parts = self._catalog.get_set_parts(number)
            if not parts:
                raise EntityNotFoundError(f"No parts found for set {number}")
            session.catalog_parts = parts
        return session.catalog_set, session.catalog_parts

    def _persist(self, session: IngestionSession) -> LegoSet:
        set_id = str(session.set_number)
        needs = self._collect_needs(session)

        with self._uow.transaction():
            self._reject_existing(session.set_number)
            name = session.catalog_set.name or f"Set {set_id}"
            self._uow.sets.add(
                LegoSet(id=set_id, name=name, priority=session.priority.value)
            )

            for key, (part, element_id, quantity) in needs.items():
                self._uow.parts.upsert(
                    Part(
                        key=key,
                        name=part.name,
                        bricklink_id=part.bricklink_id,
                        element_id=element_id,
                    )
                )
                self._uow.set_parts.add(
                    SetPart(set_id=set_id, key=key, quantity_needed=quantity)
                )

            PriorityNormalizer(self._uow).normalize(
                PriorityRequest(set_id=set_id, priority=session.priority)
            )
            return self._uow.sets.get_by_id(set_id)

    @staticmethod
    def _collect_needs(
        session: IngestionSession,
    ) -> dict[PartKey, tuple[CatalogPart, str, int]]:
        """Sum the catalog lines per part; skipped parts are left out."""
        needs: dict[PartKey, tuple[CatalogPart, str, int]] = {}
        for part in session.catalog_parts or []:
            if part.is_spare:
                continue
            element_id = part.element_id or session.resolutions.get(part.key)
            if not element_id:
                continue
            if part.key in needs:
                first, first_element, quantity = needs[part.key]
                needs[part.key] = (first, first_element, quantity + part.quantity)
            else:
                needs[part.key] = (part, element_id, part.quantity)
        return needs

    def _reject_existing(self, number: SetNumber) -> None:
        if self._uow.sets.get_by_id(str(number)) is not None:
            raise ConflictError(f"Set {number} already exists in the database")
