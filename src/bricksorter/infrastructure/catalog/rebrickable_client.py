"""Rebrickable-backed implementation of CatalogClient."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import requests

from bricksorter.domain.exceptions import EntityNotFoundError, ExternalServiceError
from bricksorter.domain.model.catalog import CatalogPart, CatalogSet, PartColorVariant
from bricksorter.domain.repository.catalog_client import CatalogClient
from bricksorter.infrastructure.config import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


@contextmanager
def _malformed_reply(what: str) -> Iterator[None]:
    """Turn a reply missing expected fields into an ExternalServiceError."""
    try:
        yield
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ExternalServiceError(
            f"Unexpected Rebrickable reply for {what}: {exc!r}"
        ) from exc


class RebrickableCatalogClient(CatalogClient):

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._color_names: dict[int, str] = {}

    # --- CatalogClient interface ----------------------------------------------

    def get_set_details(self, set_number: str) -> CatalogSet:
        data = self._get(f"/sets/{set_number}/", not_found=f"Set {set_number} not found")
        with _malformed_reply(f"set {set_number}"):
            return CatalogSet(
                set_num=data["set_num"],
                name=data.get("name") or "",
                year=int(data.get("year") or 0),
            )

    def get_set_parts(self, set_number: str) -> list[CatalogPart]:
        parts: list[CatalogPart] = []
        url: str | None = f"/sets/{set_number}/parts/"
        params: dict[str, Any] | None = {"inc_part_details": 1, "page_size": PAGE_SIZE}
        while url:
            page = self._get(url, params=params, not_found=f"Set {set_number} not found")
            with _malformed_reply(f"parts of set {set_number}"):
                parts.extend(self._to_catalog_part(raw) for raw in page.get("results", []))
                # "next" already carries the query string
                url, params = page.get("next"), None
        logger.debug("Fetched %d inventory lines for set %s", len(parts), set_number)
        return parts

    def get_part_color_variants(self, part_num: str) -> list[PartColorVariant]:
        try:
            details = self._get(f"/parts/{part_num}/", not_found=f"Part {part_num} not found")
            colors = self._get(
                f"/parts/{part_num}/colors/",
                params={"page_size": PAGE_SIZE},
                not_found=f"Part {part_num} not found",
            )
        except EntityNotFoundError:
            logger.debug("Catalog has no part %s", part_num)
            return []

        with _malformed_reply(f"colors of part {part_num}"):
            return [
                PartColorVariant(
                    part_num=part_num,
                    color_id=int(raw["color_id"]),
                    element_ids=tuple(str(e) for e in raw.get("elements") or ()),
                    year_from=details.get("year_from"),
                    year_to=details.get("year_to"),
                )
                for raw in colors.get("results", [])
            ]

    def color_name(self, color_id: int) -> str:
        if color_id not in self._color_names:
            data = self._get(f"/colors/{color_id}/", not_found=f"Color {color_id} not found")
            with _malformed_reply(f"color {color_id}"):
                self._color_names[color_id] = data.get("name") or str(color_id)
        return self._color_names[color_id]

    # --- HTTP helpers ---------------------------------------------------------

    def _get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        not_found: str | None = None,
    ) -> dict:
        if not self._api_key:
            raise ExternalServiceError("REBRICKABLE_API_KEY environment variable is not set")

        if not url.startswith("http"):
            url = f"{self._base_url}{url}"
        logger.debug("GET %s", url)
        try:
            response = self._session.get(
                url,
                params=params,
                headers={"Authorization": f"key {self._api_key}"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ExternalServiceError(f"Rebrickable API unreachable: {exc}") from exc

        if response.status_code == 404 and not_found:
            raise EntityNotFoundError(not_found)
        if response.status_code != 200:
            raise ExternalServiceError(
                f"Rebrickable API error: {response.status_code} {response.reason}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(f"Rebrickable API returned invalid JSON for {url}") from exc

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_catalog_part(raw: dict) -> CatalogPart:
        part = raw["part"]
        external = part.get("external_ids") or {}
        return CatalogPart(
            part_num=part["part_num"],
            name=part.get("name") or part["part_num"],
            color_id=int(raw["color"]["id"]),
            quantity=int(raw["quantity"]),
            is_spare=bool(raw.get("is_spare")),
            element_id=raw.get("element_id") or None,
            mold_variants=tuple(part.get("molds") or ()),
            bricklink_ids=tuple(str(i) for i in external.get("BrickLink") or ()),
        )
