"""
Domain models shared across data sources.

Pydantic models for records normalized from external APIs. Coordinates are
deliberately unconstrained here: occurrence databases do return missing or
garbage coordinates, and rejecting them is the rasterizer's job.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field


class OutputMode(StrEnum):
    """What the caller-facing envelope call returns."""

    CELLS = "cells"
    SUMMARY = "summary"


class Observation(BaseModel):
    """A single occurrence record for one species."""

    model_config = {"frozen": True, "str_strip_whitespace": True}

    species: str = Field(..., description="Scientific name")
    latitude: float | None = None
    longitude: float | None = None
    id: str | None = Field(default=None, description="Source record ID")
    source: str = "gbif"
    observed_on: date | None = None
    country: str | None = None
