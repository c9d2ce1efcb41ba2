"""WorldClim 2.1 monthly climate normals.

Public API:
  - client: URLs, resolutions, file naming
  - download: download_variable (cached in the data store's reference tier)
  - raster: load_raster, grid_from_transform
"""

from climate_envelope.datasources.worldclim.client import RESOLUTIONS, archive_url
from climate_envelope.datasources.worldclim.download import download_variable
from climate_envelope.datasources.worldclim.raster import grid_from_transform, load_raster

__all__ = [
    "RESOLUTIONS",
    "archive_url",
    "download_variable",
    "grid_from_transform",
    "load_raster",
]
