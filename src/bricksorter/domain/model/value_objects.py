"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from bricksorter.domain.exceptions import ValidationError

_SET_NUMBER_RE = re.compile(r"^\d+(-\d+)?$")
_PART_NUMBER_RE = re.compile(r"^[0-9A-Za-z][\w.+-]*$")


def _require_int(value: object, label: str) -> int:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{label} must be an integer, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot allocate zero or negative parts.
    """

    value: int

    def __post_init__(self) -> None:
        _require_int(self.value, "Quantity")
        if self.value <= 0:
            raise ValidationError("Quantity must be greater than 0")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Priority:
    """A rank in the allocation order; 1 is served first."""

    value: int

    def __post_init__(self) -> None:
        _require_int(self.value, "Priority")
        if self.value <= 0:
            raise ValidationError("Priority must be greater than 0")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SetNumber:
    """A catalog set number such as ``75192-1``.

    A bare number is completed with the ``-1`` variant suffix, which is
    how the catalog names the first (usually only) release of a set.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _SET_NUMBER_RE.match(self.value):
            raise ValidationError(f"Invalid set number: {self.value!r}")

    @staticmethod
    def parse(raw: str) -> SetNumber:
        raw = (raw or "").strip()
        if raw.isdigit():
            raw = f"{raw}-1"
        return SetNumber(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class PartKey:
    """Canonical identity of a part: design number plus colour.

    The set-specific element id is deliberately *not* part of the
    identity; several elements can share one ``(part_num, color_id)``.
    """

    part_num: str
    color_id: int

    def __post_init__(self) -> None:
        if not isinstance(self.part_num, str) or not _PART_NUMBER_RE.match(
            self.part_num
        ):
            raise ValidationError(f"Invalid part number: {self.part_num!r}")
        _require_int(self.color_id, "Color ID")

    @staticmethod
    def of(part_num: str, color_id: str | int) -> PartKey:
        """Convenient factory that coerces a textual colour id safely."""
        try:
            color = int(str(color_id).strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid color ID: {color_id!r}") from exc
        return PartKey(part_num.strip(), color)

    def __str__(self) -> str:
        return f"{self.part_num} (color: {self.color_id})"
