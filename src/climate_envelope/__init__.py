"""Climate Envelope - characterise where a species lives in climate space.

Architecture::

    datasources/   External sources (GBIF occurrences, WorldClim rasters)
    envelope/      Pure core: rasterize -> climate join -> summary
    store.py       Cached downloads and derived outputs with TTL metadata
    flows/         Prefect orchestration (fetch occurrences, build envelopes)
    services/      Shared utilities (HTTP client with retry)

Data flow: occurrences -> occupied cells -> joined records -> summary

The core never touches the network: every raster and observation list is
passed in explicitly.
"""

__version__ = "0.1.0"

from climate_envelope.config import Settings
from climate_envelope.envelope import (
    ClimateRaster,
    GridSpec,
    JoinedRecord,
    OccupiedCell,
    SummaryRecord,
    climate_envelope,
    extract_climate,
    rasterize,
    summarize,
)
from climate_envelope.errors import DataSourceUnavailable, InvalidObservation, OutOfCoverage
from climate_envelope.schemas import Observation

__all__ = [
    "ClimateRaster",
    "DataSourceUnavailable",
    "GridSpec",
    "InvalidObservation",
    "JoinedRecord",
    "Observation",
    "OccupiedCell",
    "OutOfCoverage",
    "Settings",
    "SummaryRecord",
    "__version__",
    "climate_envelope",
    "extract_climate",
    "rasterize",
    "summarize",
]
