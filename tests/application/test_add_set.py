"""Integration tests for the AddSet use case."""

import pytest
import requests

from bricksorter.application.add_set import (
    AddSetHandler,
    DecisionNeeded,
    IngestionFailed,
    SetAdded,
)
from bricksorter.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ExternalServiceError,
    ValidationError,
)
from bricksorter.domain.model.catalog import CatalogPart, CatalogSet, PartColorVariant
from bricksorter.domain.model.value_objects import PartKey, Quantity
from bricksorter.domain.service.allocation_service import AllocationService
from bricksorter.infrastructure.catalog.rebrickable_client import RebrickableCatalogClient
from tests.fakes import FakeCatalogClient, make_uow, seed_set, snapshot

BANK = CatalogSet(set_num="10251-1", name="Brick Bank", year=2015)


def _catalog(parts=None, variants=None):
    if parts is None:
        parts = [
            CatalogPart("3001", "Brick 2 x 4", 4, 6, element_id="300121",
                        bricklink_ids=("3001",)),
            CatalogPart("3003", "Brick 2 x 2", 1, 4, element_id="300301"),
            CatalogPart("3003", "Brick 2 x 2", 1, 1, is_spare=True, element_id="300301"),
        ]
    return FakeCatalogClient(sets=[BANK], parts={"10251-1": parts}, variants=variants)


def _ambiguous_catalog():
    """Two parts without element ids: a head with choices, a tile with none."""
    return _catalog(
        parts=[
            CatalogPart("3001", "Brick 2 x 4", 4, 6, element_id="300121"),
            CatalogPart("3626c", "Minifig Head", 14, 2, mold_variants=("3626b",)),
            CatalogPart("3070b", "Tile 1 x 1", 0, 3),
        ],
        variants={
            "3626c": [PartColorVariant("3626c", 14, ("old",), 1999, 2003)],
            "3626b": [PartColorVariant("3626b", 14, ("new",), 2010, 2020)],
            "3070b": [],
        },
    )


def _run(handler, session):
    result = handler.handle(session)
    assert not isinstance(result, IngestionFailed), result
    return result


# ── Happy path ───────────────────────────────────────────────────────────────


class TestAddSetHappyPath:

    def test_stores_set_parts_and_needs(self):
        uow = make_uow()
        handler = AddSetHandler(uow, _catalog())

        result = _run(handler, handler.start("10251"))

        assert isinstance(result, SetAdded)
        assert result.lego_set.id == "10251-1"
        assert result.lego_set.name == "Brick Bank"
        assert result.lego_set.priority == 1
        brick = uow.parts.get(PartKey("3001", 4))
        assert brick.element_id == "300121"
        assert brick.bricklink_id == "3001"
        assert brick.quantity == 0
        needs = {sp.key: sp.quantity_needed for sp in uow.set_parts.list_for_set("10251-1")}
        assert needs == {PartKey("3001", 4): 6, PartKey("3003", 1): 4}

    def test_spares_are_not_needed(self):
        uow = make_uow()
        handler = AddSetHandler(uow, _catalog())
        _run(handler, handler.start("10251-1"))

        assert uow.set_parts.get("10251-1", PartKey("3003", 1)).quantity_needed == 4

    def test_duplicate_catalog_lines_are_summed(self):
        uow = make_uow()
        parts = [
            CatalogPart("3001", "Brick 2 x 4", 4, 6, element_id="300121"),
            CatalogPart("3001", "Brick 2 x 4", 4, 2, element_id="4211359"),
        ]
        handler = AddSetHandler(uow, _catalog(parts=parts))

        _run(handler, handler.start("10251-1"))

        rows = uow.set_parts.list_for_set("10251-1")
        assert [(sp.key, sp.quantity_needed) for sp in rows] == [(PartKey("3001", 4), 8)]

    def test_existing_part_is_shared_not_reset(self):
        uow = make_uow()
        seed_set(uow, "1-1", 1, [("3001", 4, 2)])
        AllocationService(uow).allocate(PartKey("3001", 4), Quantity(2))
        handler = AddSetHandler(uow, _catalog())

        _run(handler, handler.start("10251-1"))

        brick = uow.parts.get(PartKey("3001", 4))
        assert brick.quantity == 2
        assert brick.element_id == "300121"

    def test_default_priority_appends(self):
        uow = make_uow()
        seed_set(uow, "1-1", 1, [])
        seed_set(uow, "2-1", 5, [])
        handler = AddSetHandler(uow, _catalog())

        result = _run(handler, handler.start("10251-1"))

        assert result.lego_set.priority == 3
        assert [s.priority for s in uow.sets.list_by_priority()] == [1, 2, 3]

    def test_requested_priority_shifts_others(self):
        uow = make_uow()
        seed_set(uow, "1-1", 1, [])
        seed_set(uow, "2-1", 2, [])
        handler = AddSetHandler(uow, _catalog())

        _run(handler, handler.start("10251-1", priority=1))

        assert {s.id: s.priority for s in uow.sets.list_by_priority()} == {
            "10251-1": 1, "1-1": 2, "2-1": 3,
        }


# ── Validation ───────────────────────────────────────────────────────────────


class TestAddSetValidation:

    def test_malformed_number_rejected(self):
        with pytest.raises(ValidationError, match="Invalid set number"):
            AddSetHandler(make_uow(), _catalog()).start("bank")

    def test_non_positive_priority_rejected(self):
        with pytest.raises(ValidationError, match="Priority must be greater than 0"):
            AddSetHandler(make_uow(), _catalog()).start("10251-1", priority=0)

    def test_existing_set_rejected(self):
        uow = make_uow()
        seed_set(uow, "10251-1", 1, [])
        with pytest.raises(ConflictError, match="already exists"):
            AddSetHandler(uow, _catalog()).start("10251")

    def test_set_without_parts_fails(self):
        uow = make_uow()
        handler = AddSetHandler(uow, _catalog(parts=[]))

        result = handler.handle(handler.start("10251-1"))

        assert isinstance(result, IngestionFailed)
        assert isinstance(result.error, EntityNotFoundError)
        assert uow.sets.get_by_id("10251-1") is None

    def test_catalog_failure_reported_as_result(self):
        class DownCatalog(FakeCatalogClient):
            def get_set_details(self, set_number):
                raise ExternalServiceError("Rebrickable API unreachable")

        uow = make_uow()
        handler = AddSetHandler(uow, DownCatalog())

        result = handler.handle(handler.start("10251-1"))

        assert isinstance(result, IngestionFailed)
        assert "unreachable" in str(result.error)

    def test_malformed_catalog_reply_reported_as_result(self):
        class GarbledSession:
            status_code = 200
            reason = "OK"

            def get(self, url, params=None, headers=None, timeout=None):
                return self

            def json(self):
                raise requests.JSONDecodeError("Expecting value", "<html>", 0)

        uow = make_uow()
        handler = AddSetHandler(uow, RebrickableCatalogClient("secret", session=GarbledSession()))

        result = handler.handle(handler.start("10251-1"))

        assert isinstance(result, IngestionFailed)
        assert isinstance(result.error, ExternalServiceError)
        assert uow.sets.get_by_id("10251-1") is None


# ── Decisions ────────────────────────────────────────────────────────────────


class TestAddSetDecisions:

    def test_ambiguous_part_suspends_without_writing(self):
        uow = make_uow()
        handler = AddSetHandler(uow, _ambiguous_catalog())
        session = handler.start("10251-1")
        before = snapshot(uow)

        result = handler.handle(session)

        assert isinstance(result, DecisionNeeded)
        assert result.session is session
        assert result.choice.part.part_num == "3626c"
        assert result.choice.lego_set == BANK
        assert result.choice.candidates == ("new", "old")
        assert result.choice.default == "new"
        assert snapshot(uow) == before

    def test_resume_after_choice_and_skip(self):
        uow = make_uow()
        handler = AddSetHandler(uow, _ambiguous_catalog())
        session = handler.start("10251-1")

        first = handler.handle(session)
        session.choose(first.choice.part.key, "new")
        second = handler.handle(session)

        assert isinstance(second, DecisionNeeded)
        assert second.choice.part.part_num == "3070b"
        assert second.choice.candidates == ()

        session.skip(second.choice.part.key)
        done = handler.handle(session)

        assert isinstance(done, SetAdded)
        assert done.skipped == (PartKey("3070b", 0),)
        keys = {sp.key for sp in uow.set_parts.list_for_set("10251-1")}
        assert keys == {PartKey("3001", 4), PartKey("3626c", 14)}
        assert uow.parts.get(PartKey("3626c", 14)).element_id == "new"
        assert uow.parts.get(PartKey("3070b", 0)) is None

    def test_resume_does_not_refetch_or_reresolve(self):
        uow = make_uow()
        catalog = _ambiguous_catalog()
        handler = AddSetHandler(uow, catalog)
        session = handler.start("10251-1")

        first = handler.handle(session)
        session.choose(first.choice.part.key, "old")
        second = handler.handle(session)
        session.skip(second.choice.part.key)
        handler.handle(session)

        assert catalog.count("get_set_details") == 1
        assert catalog.count("get_set_parts") == 1
        # both head molds and the tile, each looked up exactly once
        assert catalog.count("get_part_color_variants") == 3

    def test_automatic_resolution_is_remembered(self):
        uow = make_uow()
        catalog = _catalog(
            parts=[
                CatalogPart("3062b", "Round Brick", 15, 1),
                CatalogPart("3070b", "Tile 1 x 1", 0, 3),
            ],
            variants={"3062b": [PartColorVariant("3062b", 15, ("306201",), 2000, 2020)]},
        )
        handler = AddSetHandler(uow, catalog)
        session = handler.start("10251-1")

        first = handler.handle(session)
        assert session.resolutions[PartKey("3062b", 15)] == "306201"
        session.skip(first.choice.part.key)
        handler.handle(session)

        lookups = [arg for name, arg in catalog.calls if name == "get_part_color_variants"]
        assert lookups.count("3062b") == 1

    def test_repeating_skip_resume_creates_no_duplicates(self):
        uow = make_uow()
        handler = AddSetHandler(uow, _ambiguous_catalog())
        session = handler.start("10251-1")
        session.choose(PartKey("3626c", 14), "new")

        first = handler.handle(session)
        session.skip(first.choice.part.key)
        done = handler.handle(session)
        session.skip(first.choice.part.key)
        again = handler.handle(session)

        assert isinstance(done, SetAdded)
        assert isinstance(again, IngestionFailed)
        assert isinstance(again.error, ConflictError)
        assert len(uow.set_parts.list_for_set("10251-1")) == 2

    def test_choose_requires_element(self):
        handler = AddSetHandler(make_uow(), _ambiguous_catalog())
        session = handler.start("10251-1")
        with pytest.raises(ValidationError, match="use skip"):
            session.choose(PartKey("3626c", 14), "")


# ── Element ids on shared parts ──────────────────────────────────────────────


class TestSharedPartElements:

    def test_first_recorded_element_is_kept(self):
        uow = make_uow()
        seed_set(uow, "1-1", 1, [("3001", 4, 2)])
        first = uow.parts.get(PartKey("3001", 4))
        first.element_id = "300121"
        uow.parts.save(first)
        parts = [CatalogPart("3001", "Brick 2 x 4", 4, 6, element_id="6167070")]
        handler = AddSetHandler(uow, _catalog(parts=parts))

        _run(handler, handler.start("10251-1"))

        assert uow.parts.get(PartKey("3001", 4)).element_id == "300121"
        assert uow.parts.find_by_element_id("6167070") == []
