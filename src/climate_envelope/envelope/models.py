"""Envelope data models and climate variable definitions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from climate_envelope.errors import OutOfCoverage

if TYPE_CHECKING:
    import numpy as np

MONTHS = 12


class HasLocation(Protocol):
    """Anything with a latitude and longitude (observations, occupied cells)."""

    @property
    def latitude(self) -> float | None: ...

    @property
    def longitude(self) -> float | None: ...


class Aggregation(StrEnum):
    """How 12 monthly values collapse into one annual value."""

    SUM = "sum"
    MEAN = "mean"


@dataclass(frozen=True)
class ClimateVariable:
    """A monthly climate variable and its annual aggregate."""

    name: str
    aggregation: Aggregation
    annual_key: str


# WorldClim 2.1 monthly variables
PREC = ClimateVariable("prec", Aggregation.SUM, "map")
TAVG = ClimateVariable("tavg", Aggregation.MEAN, "mat")
TMIN = ClimateVariable("tmin", Aggregation.MEAN, "tmin_mean")
TMAX = ClimateVariable("tmax", Aggregation.MEAN, "tmax_mean")

VARIABLES: dict[str, ClimateVariable] = {v.name: v for v in (PREC, TAVG, TMIN, TMAX)}


def resolve_variables(names: list[str] | tuple[str, ...]) -> list[ClimateVariable]:
    """Look up variable definitions by name, rejecting unknown names."""
    unknown = [n for n in names if n not in VARIABLES]
    if unknown:
        msg = f"Unknown climate variable(s): {', '.join(unknown)} (known: {', '.join(VARIABLES)})"
        raise ValueError(msg)
    return [VARIABLES[n] for n in names]


@dataclass(frozen=True)
class GridSpec:
    """Fixed-resolution grid anchored at an origin (south-west corner).

    Row indices grow northwards from ``origin_lat`` and column indices grow
    eastwards from ``origin_lon``.
    """

    cell_width: float
    cell_height: float
    origin_lon: float = 0.0
    origin_lat: float = 0.0

    def __post_init__(self) -> None:
        if not (self.cell_width > 0 and self.cell_height > 0):
            msg = f"Cell size must be positive, got {self.cell_width} x {self.cell_height}"
            raise ValueError(msg)

    @classmethod
    def square(cls, size: float, origin_lon: float = 0.0, origin_lat: float = 0.0) -> GridSpec:
        return cls(size, size, origin_lon, origin_lat)

    def row(self, latitude: float) -> int:
        return math.floor((latitude - self.origin_lat) / self.cell_height)

    def col(self, longitude: float) -> int:
        return math.floor((longitude - self.origin_lon) / self.cell_width)

    def cell_index(self, latitude: float, longitude: float) -> tuple[int, int]:
        """Return the ``(row, col)`` of the cell containing a point."""
        return self.row(latitude), self.col(longitude)

    def midpoint(self, row: int, col: int) -> tuple[float, float]:
        """Return the ``(latitude, longitude)`` at the centre of a cell."""
        return (
            self.origin_lat + (row + 0.5) * self.cell_height,
            self.origin_lon + (col + 0.5) * self.cell_width,
        )


@dataclass(frozen=True)
class OccupiedCell:
    """One grid cell holding at least one observation, located at its midpoint."""

    row: int
    col: int
    latitude: float
    longitude: float
    n_observations: int = 1


@dataclass
class ClimateRaster:
    """Gridded monthly climate normals.

    ``layers`` maps a variable name to a ``(12, nrows, ncols)`` array stored
    north-up (array row 0 is the northern edge), with NaN for no-data cells.
    """

    grid: GridSpec
    nrows: int
    ncols: int
    layers: dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name, stack in self.layers.items():
            if stack.shape != (MONTHS, self.nrows, self.ncols):
                msg = (
                    f"Layer '{name}' has shape {stack.shape}, "
                    f"expected {(MONTHS, self.nrows, self.ncols)}"
                )
                raise ValueError(msg)

    @property
    def variables(self) -> list[str]:
        return list(self.layers)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(west, south, east, north) extent in degrees."""
        g = self.grid
        return (
            g.origin_lon,
            g.origin_lat,
            g.origin_lon + self.ncols * g.cell_width,
            g.origin_lat + self.nrows * g.cell_height,
        )

    def array_index(self, latitude: float, longitude: float) -> tuple[int, int]:
        """Map a point to its ``(array_row, array_col)``.

        Raises:
            OutOfCoverage: If the point falls outside the raster extent.
        """
        row, col = self.grid.cell_index(latitude, longitude)
        if not (0 <= row < self.nrows and 0 <= col < self.ncols):
            raise OutOfCoverage(latitude, longitude)
        return self.nrows - 1 - row, col

    def lookup(self, latitude: float, longitude: float, variable: str) -> list[float | None]:
        """Return the 12 monthly values of the cell containing a point.

        No-data months come back as None.

        Raises:
            OutOfCoverage: If the point falls outside the raster extent.
            KeyError: If the raster has no layer for ``variable``.
        """
        stack = self.layers[variable]
        i, j = self.array_index(latitude, longitude)
        values: list[float | None] = []
        for v in stack[:, i, j].tolist():
            values.append(v if math.isfinite(v) else None)
        return values


@dataclass
class JoinedRecord:
    """Climate values attached to one point."""

    latitude: float
    longitude: float
    monthly: dict[str, list[float | None] | None] = field(default_factory=dict)
    annual: dict[str, float | None] = field(default_factory=dict)
    out_of_coverage: bool = False


@dataclass
class VariableSummary:
    """Distribution of one annual aggregate across occupied cells."""

    mean: float
    quantiles: dict[float, float]
    n: int


@dataclass
class SummaryRecord:
    """Collapsed climate envelope for one species.

    A variable mapped to None had no usable values at all.
    """

    species: str | None
    n_cells: int
    n_excluded: int
    variables: dict[str, VariableSummary | None] = field(default_factory=dict)
