"""GBIF API client: endpoints, name matching and occurrence paging.

API docs: https://techdocs.gbif.org/en/openapi/v1/occurrence
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import requests

from climate_envelope.errors import DataSourceUnavailable
from climate_envelope.services.http import session

logger = logging.getLogger(__name__)

API_BASE = "https://api.gbif.org/v1"
OCCURRENCE_SEARCH = f"{API_BASE}/occurrence/search"
SPECIES_MATCH = f"{API_BASE}/species/match"

# GBIF caps a single occurrence page at 300 records
MAX_PAGE_SIZE = 300

# Backbone matches below this confidence fall back to a name query
MIN_MATCH_CONFIDENCE = 70


def _get_json(url: str, params: dict[str, Any]) -> dict[str, Any]:
    try:
        resp = session.get(url, params=params)
        resp.raise_for_status()
        result: dict[str, Any] = resp.json()
    except (requests.RequestException, ValueError) as exc:
        msg = f"GBIF request to {url} failed: {exc}"
        raise DataSourceUnavailable(msg) from exc
    return result


def match_species(name: str) -> int | None:
    """Resolve a scientific name to a GBIF backbone ``usageKey``.

    Returns None when GBIF has no confident match.

    Raises:
        DataSourceUnavailable: If the API cannot be reached.
    """
    data = _get_json(SPECIES_MATCH, {"name": name})
    usage_key = data.get("usageKey")
    confidence = data.get("confidence", 0)
    if usage_key is None or int(confidence) < MIN_MATCH_CONFIDENCE:
        logger.info("No confident GBIF match for %r (confidence=%s)", name, confidence)
        return None
    return int(usage_key)


def iter_occurrence_pages(
    params: dict[str, Any],
    *,
    max_records: int,
    page_size: int = MAX_PAGE_SIZE,
) -> Iterator[list[dict[str, Any]]]:
    """Yield pages of raw occurrence results until exhausted or ``max_records`` reached.

    Raises:
        DataSourceUnavailable: If any page request fails.
    """
    page_size = min(page_size, MAX_PAGE_SIZE)
    offset = 0
    while offset < max_records:
        limit = min(page_size, max_records - offset)
        payload = _get_json(OCCURRENCE_SEARCH, {**params, "limit": limit, "offset": offset})
        results = payload.get("results") or []
        if not results:
            return
        yield results
        if payload.get("endOfRecords", True):
            return
        offset += len(results)
