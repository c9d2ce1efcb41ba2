"""
Prefect flow computing the climate envelope of one or more species.

Run locally:
    python -m climate_envelope.flows.envelope "Eucalyptus saligna" "Eucalyptus grandis"
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from prefect import flow, task

from climate_envelope.config import get_settings
from climate_envelope.datasources import gbif, worldclim
from climate_envelope.envelope import (
    DEFAULT_QUANTILES,
    ClimateRaster,
    climate_envelope,
    joined_records_to_dict,
    summary_to_dict,
)
from climate_envelope.schemas import Observation, OutputMode
from climate_envelope.store import DataStore

OCCURRENCE_TTL = timedelta(days=7)


@task(name="fetch-occurrences", retries=2, retry_delay_seconds=10)
def fetch_occurrences(
    species: str, max_records: int = 1000, page_size: int = 300
) -> list[dict[str, Any]]:
    """Fetch GBIF occurrences for a species as JSON-ready dicts."""
    observations = gbif.fetch_occurrences(species, max_records=max_records, page_size=page_size)
    return [obs.model_dump(mode="json") for obs in observations]


@task(name="save-occurrences")
def save_occurrences(
    store: DataStore, species: str, occurrences: list[dict[str, Any]]
) -> Path:
    """Cache raw occurrences in the store."""
    return store.write(
        store.occurrences_path(species),
        occurrences,
        source="gbif.org",
        valid_until=datetime.now(UTC) + OCCURRENCE_TTL,
        species=species,
    )


@task(name="load-climate")
def load_climate(
    store: DataStore, variables: list[str], resolution: str = "10m"
) -> ClimateRaster:
    """Download (once) and load WorldClim layers for the requested variables."""
    paths = {v: worldclim.download_variable(v, resolution, store) for v in variables}
    return worldclim.load_raster(paths)


@task(name="save-envelope")
def save_envelope(
    store: DataStore,
    species: str,
    mode: OutputMode,
    result: Any,
    variables: list[str],
    n_observations: int,
) -> Path:
    """Write an envelope result under ``derived/``."""
    return store.write(
        store.envelope_path(species, mode.value),
        result,
        source="climate-envelope",
        species=species,
        mode=mode.value,
        variables=variables,
        n_observations=n_observations,
    )


def get_occurrences(
    store: DataStore, species: str, max_records: int = 1000
) -> list[Observation]:
    """Return cached occurrences for a species, fetching them if stale."""
    path = store.occurrences_path(species)
    if store.is_fresh(path):
        print(f"Occurrences for {species} are fresh, skipping fetch.")
        raw = store.read(path) or []
    else:
        print(f"Fetching GBIF occurrences for {species}...")
        raw = fetch_occurrences(species, max_records)
        out = save_occurrences(store, species, raw)
        print(f"Saved {len(raw)} occurrences to {out}")
    return [Observation.model_validate(r) for r in raw]


def run_species(
    store: DataStore,
    species: str,
    raster: ClimateRaster,
    variables: list[str],
    mode: OutputMode,
    quantiles: list[float],
    max_records: int,
) -> dict[str, Any] | list[dict[str, Any]]:
    observations = get_occurrences(store, species, max_records)
    result = climate_envelope(
        observations,
        raster,
        variables=variables,
        mode=mode,
        quantiles=quantiles,
        species=species,
    )
    if mode is OutputMode.CELLS:
        payload: Any = joined_records_to_dict(result)  # type: ignore[arg-type]
        print(f"{species}: {len(payload)} occupied cells")
    else:
        payload = summary_to_dict(result)  # type: ignore[arg-type]
        print(f"{species}: summary over {payload['n_cells']} occupied cells")

    save_envelope(
        store, species, mode, payload, variables=variables, n_observations=len(observations)
    )
    return payload


@flow(name="climate-envelope", log_prints=True)
def envelope_flow(
    species: list[str],
    mode: str = "summary",
    variables: list[str] | None = None,
    quantiles: list[float] | None = None,
    resolution: str = "10m",
    max_records: int = 1000,
    data_dir: Path | None = None,
) -> dict[str, Any]:
    """
    Compute climate envelopes for each species.

    The climate raster is loaded once and shared read-only; each species
    is otherwise independent. ``data_dir`` defaults to the configured
    ``Settings.data_dir``.
    """
    ds = DataStore(data_dir if data_dir is not None else get_settings().data_dir)
    output_mode = OutputMode(mode)
    variables = variables or ["prec", "tavg"]
    quantiles = quantiles or list(DEFAULT_QUANTILES)

    print(f"Loading WorldClim {resolution} layers: {', '.join(variables)}")
    raster = load_climate(ds, variables, resolution)

    return {
        name: run_species(ds, name, raster, variables, output_mode, quantiles, max_records)
        for name in species
    }


if __name__ == "__main__":
    result = envelope_flow(sys.argv[1:] or ["Eucalyptus saligna"])
    print(f"Flow complete: {list(result)}")
