"""Join points against a climate raster and derive annual aggregates.

Lookup is nearest-cell (the cell containing the point), never
interpolation, and uses the same alignment rule as GridSpec.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable
from typing import TYPE_CHECKING

from climate_envelope.envelope.models import (
    Aggregation,
    ClimateRaster,
    ClimateVariable,
    JoinedRecord,
    resolve_variables,
)
from climate_envelope.envelope.rasterize import validate_coordinates
from climate_envelope.errors import InvalidObservation, OutOfCoverage

if TYPE_CHECKING:
    from climate_envelope.envelope.models import HasLocation

logger = logging.getLogger(__name__)


def annual_aggregate(monthly: list[float | None], variable: ClimateVariable) -> float | None:
    """Collapse 12 monthly values into an annual total or mean.

    Returns None if any month is missing.
    """
    if not monthly or any(v is None for v in monthly):
        return None
    values = [float(v) for v in monthly if v is not None]
    if variable.aggregation is Aggregation.SUM:
        return sum(values)
    return statistics.fmean(values)


def _missing_record(lat: float, lon: float, variables: list[ClimateVariable]) -> JoinedRecord:
    return JoinedRecord(
        latitude=lat,
        longitude=lon,
        monthly={v.name: None for v in variables},
        annual={v.annual_key: None for v in variables},
        out_of_coverage=True,
    )


def extract_climate(
    points: Iterable[HasLocation],
    raster: ClimateRaster,
    variables: list[str] | tuple[str, ...],
) -> list[JoinedRecord]:
    """Attach monthly climate values and annual aggregates to each point.

    Args:
        points: Observations or occupied cells.
        raster: Climate raster holding every requested variable.
        variables: Variable names (e.g. ``["prec", "tavg"]``).

    Returns:
        One JoinedRecord per valid input point, in input order. Points outside
        the raster come back with every value None and ``out_of_coverage=True``.
        Points with malformed coordinates are skipped.

    Raises:
        ValueError: If a variable is unknown or absent from the raster.
        InvalidObservation: If every point has a malformed coordinate.
    """
    specs = resolve_variables(variables)
    missing = [v.name for v in specs if v.name not in raster.layers]
    if missing:
        msg = f"Climate raster has no layer(s) for: {', '.join(missing)}"
        raise ValueError(msg)

    records: list[JoinedRecord] = []
    n_outside = 0
    total = 0
    rejected = 0
    for point in points:
        total += 1
        try:
            lat, lon = validate_coordinates(point)
        except InvalidObservation as exc:
            logger.debug("%s", exc)
            rejected += 1
            continue
        try:
            monthly = {v.name: raster.lookup(lat, lon, v.name) for v in specs}
        except OutOfCoverage as exc:
            logger.debug("%s", exc)
            n_outside += 1
            records.append(_missing_record(lat, lon, specs))
            continue

        annual = {v.annual_key: annual_aggregate(monthly[v.name], v) for v in specs}
        records.append(
            JoinedRecord(
                latitude=lat,
                longitude=lon,
                monthly=dict(monthly),
                annual=annual,
            )
        )

    if rejected:
        logger.warning("Skipped %d of %d points with invalid coordinates", rejected, total)
        if rejected == total:
            msg = f"All {total} points have invalid coordinates"
            raise InvalidObservation(msg)

    if n_outside:
        logger.info("%d of %d points fell outside raster coverage", n_outside, len(records))
    return records
