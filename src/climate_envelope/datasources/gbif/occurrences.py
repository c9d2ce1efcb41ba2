"""Species occurrence fetching and parsing."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from climate_envelope.datasources.gbif import client
from climate_envelope.schemas import Observation

logger = logging.getLogger(__name__)

# Records that represent an organism actually seen at a place
BASIS_OF_RECORD = (
    "HUMAN_OBSERVATION",
    "OBSERVATION",
    "PRESERVED_SPECIMEN",
    "MACHINE_OBSERVATION",
    "MATERIAL_SAMPLE",
    "OCCURRENCE",
)


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_occurrence(rec: dict[str, Any], species: str) -> Observation:
    """Normalize one GBIF occurrence result.

    Unparseable coordinates become None; the rasterizer decides what to do
    with them.
    """
    key = rec.get("key")
    return Observation(
        species=rec.get("species") or species,
        latitude=_to_float(rec.get("decimalLatitude")),
        longitude=_to_float(rec.get("decimalLongitude")),
        id=str(key) if key is not None else None,
        source="gbif",
        observed_on=_parse_date(rec.get("eventDate")),
        country=rec.get("countryCode"),
    )


def fetch_occurrences(
    species: str,
    *,
    max_records: int = 1000,
    page_size: int = client.MAX_PAGE_SIZE,
) -> list[Observation]:
    """
    Fetch georeferenced occurrence records for a species.

    Resolves the name against the GBIF backbone first so synonyms are
    included; falls back to a plain ``scientificName`` query.

    Args:
        species: Scientific name, e.g. ``"Eucalyptus saligna"``.
        max_records: Upper bound on records fetched.
        page_size: Records per API page (max 300).

    Returns:
        Observations in GBIF's result order.

    Raises:
        DataSourceUnavailable: If GBIF cannot be reached.
    """
    params: dict[str, Any] = {
        "hasCoordinate": "true",
        "hasGeospatialIssue": "false",
        "occurrenceStatus": "PRESENT",
        "basisOfRecord": list(BASIS_OF_RECORD),
    }
    usage_key = client.match_species(species)
    if usage_key is not None:
        params["taxonKey"] = usage_key
    else:
        params["scientificName"] = species

    observations: list[Observation] = []
    for page in client.iter_occurrence_pages(params, max_records=max_records, page_size=page_size):
        observations.extend(parse_occurrence(rec, species) for rec in page)

    logger.info("Fetched %d GBIF occurrences for %s", len(observations), species)
    return observations
