"""Climate envelope core (no I/O).

Pipeline: Observations -> rasterize -> OccupiedCells -> extract_climate
-> JoinedRecords -> summarize -> SummaryRecord.

Public API:
  - models: GridSpec, OccupiedCell, ClimateRaster, ClimateVariable,
            JoinedRecord, VariableSummary, SummaryRecord
  - rasterize: rasterize
  - climate: extract_climate, annual_aggregate
  - summary: summarize, quantile
  - pipeline: climate_envelope
  - serialization: occupied_cells_to_dict, joined_records_to_dict, summary_to_dict
"""

from climate_envelope.envelope.climate import annual_aggregate, extract_climate
from climate_envelope.envelope.models import (
    PREC,
    TAVG,
    TMAX,
    TMIN,
    VARIABLES,
    Aggregation,
    ClimateRaster,
    ClimateVariable,
    GridSpec,
    JoinedRecord,
    OccupiedCell,
    SummaryRecord,
    VariableSummary,
)
from climate_envelope.envelope.pipeline import climate_envelope
from climate_envelope.envelope.rasterize import rasterize
from climate_envelope.envelope.serialization import (
    joined_records_to_dict,
    occupied_cells_to_dict,
    summary_to_dict,
)
from climate_envelope.envelope.summary import DEFAULT_QUANTILES, quantile, summarize

__all__ = [
    "DEFAULT_QUANTILES",
    "PREC",
    "TAVG",
    "TMAX",
    "TMIN",
    "VARIABLES",
    "Aggregation",
    "ClimateRaster",
    "ClimateVariable",
    "GridSpec",
    "JoinedRecord",
    "OccupiedCell",
    "SummaryRecord",
    "VariableSummary",
    "annual_aggregate",
    "climate_envelope",
    "extract_climate",
    "joined_records_to_dict",
    "occupied_cells_to_dict",
    "quantile",
    "rasterize",
    "summarize",
    "summary_to_dict",
]
