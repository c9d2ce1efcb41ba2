"""WorldClim 2.1 download locations and naming conventions.

Docs: https://www.worldclim.org/data/worldclim21.html

Each variable ships as one zip of 12 monthly GeoTIFFs named
``wc2.1_{resolution}_{variable}_{MM}.tif`` on a global lon/lat grid
anchored at (-180, -90).
"""

from __future__ import annotations

BASE_URL = "https://geodata.ucdavis.edu/climate/worldclim/2_1/base"

# Resolution label -> cell size in degrees
RESOLUTIONS: dict[str, float] = {
    "10m": 10 / 60,
    "5m": 5 / 60,
    "2.5m": 2.5 / 60,
    "30s": 30 / 3600,
}

VARIABLES = ("prec", "tavg", "tmin", "tmax")


def check_resolution(resolution: str) -> None:
    if resolution not in RESOLUTIONS:
        msg = f"Unknown WorldClim resolution {resolution!r} (choose from {', '.join(RESOLUTIONS)})"
        raise ValueError(msg)


def dataset_name(variable: str, resolution: str) -> str:
    """``("prec", "10m")`` -> ``"wc2.1_10m_prec"``."""
    check_resolution(resolution)
    if variable not in VARIABLES:
        msg = f"Unknown WorldClim variable {variable!r} (choose from {', '.join(VARIABLES)})"
        raise ValueError(msg)
    return f"wc2.1_{resolution}_{variable}"


def archive_url(variable: str, resolution: str) -> str:
    return f"{BASE_URL}/{dataset_name(variable, resolution)}.zip"


def month_filename(variable: str, resolution: str, month: int) -> str:
    if not 1 <= month <= 12:
        msg = f"Month must be 1-12, got {month}"
        raise ValueError(msg)
    return f"{dataset_name(variable, resolution)}_{month:02d}.tif"
