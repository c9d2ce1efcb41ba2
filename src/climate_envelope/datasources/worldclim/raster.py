"""Read monthly GeoTIFFs into a ClimateRaster."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import rasterio
from rasterio.errors import RasterioError

from climate_envelope.envelope.models import MONTHS, ClimateRaster, GridSpec
from climate_envelope.errors import DataSourceUnavailable

if TYPE_CHECKING:
    from rasterio.transform import Affine

logger = logging.getLogger(__name__)

# Tolerance when comparing grids read from different files, in degrees
GRID_TOLERANCE = 1e-9


def grid_from_transform(transform: Affine, height: int) -> GridSpec:
    """Derive a GridSpec (south-west origin) from a north-up affine transform.

    Raises:
        ValueError: If the transform is rotated or not north-up.
    """
    if transform.b != 0 or transform.d != 0 or transform.e >= 0:
        msg = f"Only north-up, unrotated rasters are supported: {transform}"
        raise ValueError(msg)
    cell_height = -transform.e
    return GridSpec(
        cell_width=transform.a,
        cell_height=cell_height,
        origin_lon=transform.c,
        origin_lat=transform.f - height * cell_height,
    )


def _same_grid(a: GridSpec, b: GridSpec) -> bool:
    return all(
        math.isclose(x, y, abs_tol=GRID_TOLERANCE)
        for x, y in (
            (a.cell_width, b.cell_width),
            (a.cell_height, b.cell_height),
            (a.origin_lon, b.origin_lon),
            (a.origin_lat, b.origin_lat),
        )
    )


def _read_band(path: Path) -> tuple[np.ndarray, GridSpec]:
    with rasterio.open(path) as src:
        if src.crs is not None and not src.crs.is_geographic:
            msg = f"{path.name} is not in geographic coordinates ({src.crs})"
            raise ValueError(msg)
        band = src.read(1, masked=True)
        grid = grid_from_transform(src.transform, src.height)
    data = np.ma.filled(band.astype(np.float32), np.nan)
    return data, grid


def load_raster(paths: Mapping[str, Sequence[Path]]) -> ClimateRaster:
    """Build a ClimateRaster from 12 monthly GeoTIFFs per variable.

    Args:
        paths: Variable name -> January..December GeoTIFF paths.

    Returns:
        ClimateRaster whose grid is read from the files.

    Raises:
        DataSourceUnavailable: If a file is missing or unreadable, a variable
            does not have exactly 12 months, or the files disagree on grid.
    """
    if not paths:
        msg = "No climate layers given"
        raise DataSourceUnavailable(msg)

    grid: GridSpec | None = None
    shape: tuple[int, int] | None = None
    layers: dict[str, np.ndarray] = {}

    for variable, month_paths in paths.items():
        if len(month_paths) != MONTHS:
            msg = f"Variable '{variable}' needs {MONTHS} monthly files, got {len(month_paths)}"
            raise DataSourceUnavailable(msg)

        bands: list[np.ndarray] = []
        for path in month_paths:
            try:
                data, file_grid = _read_band(Path(path))
            except (RasterioError, OSError, ValueError) as exc:
                msg = f"Could not read climate raster {path}: {exc}"
                raise DataSourceUnavailable(msg) from exc

            if grid is None:
                grid, shape = file_grid, data.shape
            elif data.shape != shape or not _same_grid(grid, file_grid):
                msg = f"{path} is not aligned with the other climate layers"
                raise DataSourceUnavailable(msg)
            bands.append(data)

        layers[variable] = np.stack(bands)

    if grid is None or shape is None:
        msg = "No climate layers could be read"
        raise DataSourceUnavailable(msg)
    nrows, ncols = shape
    logger.info(
        "Loaded %s on a %dx%d grid (%.4f deg cells)",
        ", ".join(layers),
        nrows,
        ncols,
        grid.cell_width,
    )
    return ClimateRaster(grid=grid, nrows=nrows, ncols=ncols, layers=layers)
