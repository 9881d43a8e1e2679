"""Domain service: Element Resolver.

A catalog inventory line sometimes names only a design number and a
colour.  To store it we need a concrete element, so the resolver looks at
every mold of the design in that colour and either picks the single
element that exists or hands the choice back to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bricksorter.domain.exceptions import ExternalServiceError
from bricksorter.domain.model.catalog import CatalogPart, CatalogSet, PartColorVariant
from bricksorter.domain.repository.catalog_client import CatalogClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementChoice:
    """A part the resolver could not settle on its own.

    ``candidates`` lists elements produced in the set's release year
    first; ``timely`` is that leading subset.  An empty ``candidates``
    means the catalog knows no element at all and the part can only be
    skipped.
    """

    part: CatalogPart
    lego_set: CatalogSet
    candidates: tuple[str, ...]
    timely: tuple[str, ...] = ()

    @property
    def default(self) -> str | None:
        return self.candidates[0] if self.candidates else None


class ElementResolver:

    def __init__(self, catalog: CatalogClient) -> None:
        self._catalog = catalog

    def resolve(self, part: CatalogPart, lego_set: CatalogSet) -> str | ElementChoice:
        """Return the element id for *part*, or an ``ElementChoice``."""
        try:
            variants = self._variants_in_color(part)
        except ExternalServiceError as exc:
            raise ExternalServiceError(
                f"Failed to resolve element for part {part.part_num}: {exc}"
            ) from exc

        timely: list[str] = []
        others: list[str] = []
        for variant in variants:
            bucket = timely if variant.was_produced_in(lego_set.year) else others
            for element_id in variant.element_ids:
                if element_id not in timely and element_id not in others:
                    bucket.append(element_id)

        candidates = tuple(timely + others)
        if len(candidates) == 1:
            logger.debug("Resolved %s to element %s", part.key, candidates[0])
            return candidates[0]

        logger.debug(
            "Part %s in set %s needs a decision between %d elements",
            part.key, lego_set.set_num, len(candidates),
        )
        return ElementChoice(
            part=part,
            lego_set=lego_set,
            candidates=candidates,
            timely=tuple(timely),
        )

    def _variants_in_color(self, part: CatalogPart) -> list[PartColorVariant]:
        family = list(dict.fromkeys((part.part_num, *part.mold_variants)))
        found: list[PartColorVariant] = []
        for part_num in family:
            found.extend(
                v
                for v in self._catalog.get_part_color_variants(part_num)
                if v.color_id == part.color_id
            )
        return found
