"""GBIF occurrence data source.

Public API:
  - client: API URLs, match_species, iter_occurrence_pages
  - occurrences: fetch_occurrences, parse_occurrence
"""

from climate_envelope.datasources.gbif.client import (
    OCCURRENCE_SEARCH,
    SPECIES_MATCH,
    match_species,
)
from climate_envelope.datasources.gbif.occurrences import fetch_occurrences, parse_occurrence

__all__ = [
    "OCCURRENCE_SEARCH",
    "SPECIES_MATCH",
    "fetch_occurrences",
    "match_species",
    "parse_occurrence",
]
