"""LegoSet aggregate: a set in the collection and its allocation standing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LegoSet:
    """A set being collected towards.

    ``completion`` is the allocated/needed ratio in [0, 1].  A
    ``soft_completed`` set has been marked done by hand: it keeps its
    data but receives no further parts until the mark is cleared.
    """

    id: str
    name: str
    priority: int
    completion: float = 0.0
    soft_completed: bool = False

    @property
    def display_completion(self) -> float:
        """Completion as shown to the user; a soft-completed set is done."""
        return 1.0 if self.soft_completed else self.completion
