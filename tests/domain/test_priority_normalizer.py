"""Unit tests for the PriorityNormalizer domain service."""

import pytest

from bricksorter.domain.exceptions import EntityNotFoundError
from bricksorter.domain.model.value_objects import Priority
from bricksorter.domain.service.priority_normalizer import (
    PriorityNormalizer,
    PriorityRequest,
)
from tests.fakes import make_uow, seed_set


def _priorities(uow) -> dict[str, int]:
    return {s.id: s.priority for s in uow.sets.list_by_priority()}


class TestNormalize:

    def test_empty_collection_returns_one(self):
        uow = make_uow()
        assert PriorityNormalizer(uow).normalize() == 1

    def test_closes_gaps(self):
        uow = make_uow()
        seed_set(uow, "1-1", 3, [])
        seed_set(uow, "2-1", 7, [])
        seed_set(uow, "3-1", 12, [])

        next_priority = PriorityNormalizer(uow).normalize()

        assert next_priority == 4
        assert _priorities(uow) == {"1-1": 1, "2-1": 2, "3-1": 3}

    def test_duplicates_broken_by_newest_first(self):
        uow = make_uow()
        seed_set(uow, "10-1", 1, [])
        seed_set(uow, "20-1", 1, [])

        PriorityNormalizer(uow).normalize()

        assert _priorities(uow) == {"20-1": 1, "10-1": 2}

    def test_insert_at_requested_rank(self):
        uow = make_uow()
        for i, set_id in enumerate(["1-1", "2-1", "3-1", "4-1"], start=1):
            seed_set(uow, set_id, i, [])

        PriorityNormalizer(uow).normalize(PriorityRequest("4-1", Priority(2)))

        assert _priorities(uow) == {"1-1": 1, "4-1": 2, "2-1": 3, "3-1": 4}

    def test_move_down(self):
        uow = make_uow()
        for i, set_id in enumerate(["1-1", "2-1", "3-1"], start=1):
            seed_set(uow, set_id, i, [])

        PriorityNormalizer(uow).normalize(PriorityRequest("1-1", Priority(3)))

        assert _priorities(uow) == {"2-1": 1, "3-1": 2, "1-1": 3}

    def test_requested_rank_beyond_end_is_clamped(self):
        uow = make_uow()
        for i, set_id in enumerate(["1-1", "2-1", "3-1"], start=1):
            seed_set(uow, set_id, i, [])

        next_priority = PriorityNormalizer(uow).normalize(
            PriorityRequest("1-1", Priority(99))
        )

        assert next_priority == 4
        assert _priorities(uow) == {"2-1": 1, "3-1": 2, "1-1": 3}

    def test_result_is_dense(self):
        uow = make_uow()
        for set_id, priority in [("1-1", 5), ("2-1", 5), ("3-1", 1), ("4-1", 40)]:
            seed_set(uow, set_id, priority, [])

        PriorityNormalizer(uow).normalize(PriorityRequest("4-1", Priority(1)))

        assert sorted(_priorities(uow).values()) == [1, 2, 3, 4]

    def test_unknown_set_rejected_without_changes(self):
        uow = make_uow()
        seed_set(uow, "1-1", 4, [])

        with pytest.raises(EntityNotFoundError, match="9-1 not found"):
            PriorityNormalizer(uow).normalize(PriorityRequest("9-1", Priority(1)))

        assert _priorities(uow) == {"1-1": 4}
