"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, low-level requests
    └── {feature}.py      # Fetch/load functions (one per concept)

Sources:
  - gbif/        Occurrence records for a species (GBIF REST API)
  - worldclim/   Monthly climate normals as GeoTIFF rasters (WorldClim 2.1)

Every failure to reach or read a source is raised as
``climate_envelope.errors.DataSourceUnavailable``; the envelope core never
sees a ``requests`` or ``rasterio`` exception.
"""
