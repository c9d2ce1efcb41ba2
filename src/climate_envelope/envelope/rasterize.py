"""Spatial debiasing: collapse point observations onto one record per grid cell.

Dense sampling (cities, popular trails) would otherwise dominate any
climate summary. Each occupied cell is represented by its midpoint, not by
the centroid of the points that fell in it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import TYPE_CHECKING

from climate_envelope.envelope.models import GridSpec, OccupiedCell
from climate_envelope.errors import InvalidObservation

if TYPE_CHECKING:
    from climate_envelope.envelope.models import HasLocation

logger = logging.getLogger(__name__)


def validate_coordinates(obs: HasLocation) -> tuple[float, float]:
    """Return ``(latitude, longitude)`` as floats.

    Raises:
        InvalidObservation: If either coordinate is missing, non-numeric,
            or not finite.
    """
    lat = getattr(obs, "latitude", None)
    lon = getattr(obs, "longitude", None)
    try:
        lat_f = float(lat)  # type: ignore[arg-type]
        lon_f = float(lon)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        msg = f"Observation has a missing or non-numeric coordinate: ({lat}, {lon})"
        raise InvalidObservation(msg) from None
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        msg = f"Observation has a non-finite coordinate: ({lat}, {lon})"
        raise InvalidObservation(msg)
    return lat_f, lon_f


def rasterize(
    observations: Iterable[HasLocation],
    grid: GridSpec,
    *,
    strict: bool = True,
    allow_empty: bool = True,
) -> list[OccupiedCell]:
    """Deduplicate observations onto a grid, one OccupiedCell per occupied cell.

    Args:
        observations: Points with ``latitude``/``longitude`` attributes.
        grid: Grid definition; use the climate raster's grid so cells line up.
        strict: Raise on the first invalid observation. When False, invalid
            observations are skipped, unless every observation is invalid.
        allow_empty: Return ``[]`` for empty input instead of raising.

    Returns:
        Occupied cells sorted by ``(row, col)``.

    Raises:
        InvalidObservation: On a malformed coordinate (strict), when all
            observations are malformed, or on empty input with
            ``allow_empty=False``.
    """
    counts: dict[tuple[int, int], int] = {}
    total = 0
    rejected = 0

    for obs in observations:
        total += 1
        try:
            lat, lon = validate_coordinates(obs)
        except InvalidObservation:
            if strict:
                raise
            rejected += 1
            continue
        key = grid.cell_index(lat, lon)
        counts[key] = counts.get(key, 0) + 1

    if total == 0:
        if allow_empty:
            return []
        msg = "No observations to rasterize"
        raise InvalidObservation(msg)

    if rejected:
        logger.warning("Skipped %d of %d observations with invalid coordinates", rejected, total)
        if rejected == total:
            msg = f"All {total} observations have invalid coordinates"
            raise InvalidObservation(msg)

    cells: list[OccupiedCell] = []
    for row, col in sorted(counts):
        lat, lon = grid.midpoint(row, col)
        cells.append(
            OccupiedCell(
                row=row, col=col, latitude=lat, longitude=lon, n_observations=counts[row, col]
            )
        )

    logger.debug("Rasterized %d observations into %d cells", total - rejected, len(cells))
    return cells
