"""JSON serialization helpers for envelope results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from climate_envelope.envelope.models import JoinedRecord, OccupiedCell, SummaryRecord


def _round(value: float | None, digits: int) -> float | None:
    return None if value is None else round(value, digits)


def _quantile_key(level: float) -> str:
    """0.05 -> "q05", 0.5 -> "q50", 0.975 -> "q97.5"."""
    pct = round(level * 100, 6)
    return f"q{int(pct):02d}" if pct == int(pct) else f"q{pct:g}"


def occupied_cells_to_dict(cells: list[OccupiedCell]) -> list[dict[str, Any]]:
    return [
        {
            "row": c.row,
            "col": c.col,
            "latitude": c.latitude,
            "longitude": c.longitude,
            "n_observations": c.n_observations,
        }
        for c in cells
    ]


def joined_records_to_dict(records: list[JoinedRecord], digits: int = 2) -> list[dict[str, Any]]:
    """Serialize joined records to a JSON-compatible list."""
    return [
        {
            "latitude": r.latitude,
            "longitude": r.longitude,
            "out_of_coverage": r.out_of_coverage,
            "monthly": {
                name: None if values is None else [_round(v, digits) for v in values]
                for name, values in r.monthly.items()
            },
            "annual": {key: _round(v, digits) for key, v in r.annual.items()},
        }
        for r in records
    ]


def summary_to_dict(summary: SummaryRecord, digits: int = 2) -> dict[str, Any]:
    """Serialize a SummaryRecord to a JSON-compatible dict.

    Variables with no usable values serialize as None.
    """
    variables: dict[str, Any] = {}
    for key, stats in summary.variables.items():
        if stats is None:
            variables[key] = None
            continue
        variables[key] = {
            "n": stats.n,
            "mean": round(stats.mean, digits),
            **{_quantile_key(q): round(v, digits) for q, v in stats.quantiles.items()},
        }
    return {
        "species": summary.species,
        "n_cells": summary.n_cells,
        "n_excluded": summary.n_excluded,
        "variables": variables,
    }
