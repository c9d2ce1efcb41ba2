"""
Error taxonomy.

- ``InvalidObservation``: malformed coordinate, rejected at ingestion.
- ``OutOfCoverage``: a point falls outside the climate raster's extent.
  Raised by raster lookups and recorded per record by the climate join.
- ``DataSourceUnavailable``: occurrence or raster source unreachable.
  Fatal for the whole call.
"""

from __future__ import annotations


class EnvelopeError(Exception):
    """Base class for climate-envelope errors."""


class InvalidObservation(EnvelopeError, ValueError):
    """An observation has a missing or non-finite coordinate."""


class OutOfCoverage(EnvelopeError, LookupError):
    """A point lies outside the extent covered by a climate raster."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"Point ({latitude}, {longitude}) is outside raster coverage")


class DataSourceUnavailable(EnvelopeError):
    """An external occurrence or raster source could not be reached or read."""
