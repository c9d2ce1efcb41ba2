"""Caller-facing entry point: observations in, joined records or summary out."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from climate_envelope.envelope.climate import extract_climate
from climate_envelope.envelope.models import resolve_variables
from climate_envelope.envelope.rasterize import rasterize
from climate_envelope.envelope.summary import DEFAULT_QUANTILES, summarize
from climate_envelope.schemas import OutputMode

if TYPE_CHECKING:
    from climate_envelope.envelope.models import (
        ClimateRaster,
        HasLocation,
        JoinedRecord,
        SummaryRecord,
    )


def climate_envelope(
    observations: Iterable[HasLocation],
    raster: ClimateRaster,
    *,
    variables: list[str] | tuple[str, ...] = ("prec", "tavg"),
    mode: OutputMode | str = OutputMode.SUMMARY,
    quantiles: Iterable[float] = DEFAULT_QUANTILES,
    species: str | None = None,
    strict: bool = False,
) -> list[JoinedRecord] | SummaryRecord:
    """Rasterize observations on the raster's grid, join climate, optionally summarize.

    Args:
        observations: Raw occurrence points for one species.
        raster: Climate raster; its grid defines the occupied cells.
        variables: Climate variables to join.
        mode: ``"cells"`` for per-cell records, ``"summary"`` for one record.
        quantiles: Quantile levels for summary mode.
        species: Species name carried onto the summary.
        strict: Fail on the first malformed observation instead of skipping.

    Returns:
        ``list[JoinedRecord]`` in cells mode, ``SummaryRecord`` in summary mode.
    """
    mode = OutputMode(mode)
    cells = rasterize(observations, raster.grid, strict=strict)
    records = extract_climate(cells, raster, variables)
    if mode is OutputMode.CELLS:
        return records
    annual_keys = [v.annual_key for v in resolve_variables(variables)]
    return summarize(records, quantiles, species=species, annual_keys=annual_keys)
