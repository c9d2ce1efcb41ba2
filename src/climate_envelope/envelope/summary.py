"""Collapse joined records into a per-species climate envelope.

Quantiles use linear interpolation between order statistics: for ``n``
sorted values and level ``p``, ``h = (n - 1) * p`` and the result is
``x[floor(h)] + (h - floor(h)) * (x[floor(h) + 1] - x[floor(h)])``
(Hyndman & Fan type 7, numpy's ``method="linear"``).
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Sequence

import numpy as np

from climate_envelope.envelope.models import JoinedRecord, SummaryRecord, VariableSummary

DEFAULT_QUANTILES = (0.05, 0.5, 0.95)


def _check_level(level: float) -> None:
    if not 0.0 <= level <= 1.0:
        msg = f"Quantile level must be within [0, 1], got {level}"
        raise ValueError(msg)


def quantile(values: Sequence[float], level: float) -> float:
    """Return the ``level`` quantile of ``values`` (linear interpolation).

    Raises:
        ValueError: If ``values`` is empty or ``level`` is outside [0, 1].
    """
    _check_level(level)
    if not values:
        msg = "quantile() requires at least one value"
        raise ValueError(msg)
    return float(np.quantile(values, level, method="linear"))


def summarize_values(values: Sequence[float], levels: Iterable[float]) -> VariableSummary | None:
    """Mean and quantiles of one variable, or None when there are no values."""
    if not values:
        return None
    ordered = sorted(values)
    unique_levels = sorted(set(levels))
    estimates = np.quantile(ordered, unique_levels, method="linear") if unique_levels else []
    return VariableSummary(
        mean=statistics.fmean(ordered),
        quantiles={q: float(v) for q, v in zip(unique_levels, estimates, strict=True)},
        n=len(ordered),
    )


def summarize(
    records: Iterable[JoinedRecord],
    quantiles: Iterable[float] = DEFAULT_QUANTILES,
    *,
    species: str | None = None,
    annual_keys: Iterable[str] = (),
) -> SummaryRecord:
    """Summarize the annual aggregates of joined records.

    Each annual aggregate is summarized independently: a record missing one
    variable still contributes to the others.

    Args:
        records: Joined records with annual aggregates attached.
        quantiles: Quantile levels in [0, 1].
        species: Name stored on the result.
        annual_keys: Aggregates to report even when no record carries them
            (e.g. ``["map", "mat"]``), so an empty input still lists them.

    Returns:
        SummaryRecord with one entry per annual aggregate requested or seen
        in the records. Entries with no usable values are None.
    """
    levels = list(quantiles)
    for level in levels:
        _check_level(level)

    records = list(records)
    by_key: dict[str, list[float]] = {key: [] for key in annual_keys}
    for rec in records:
        for key, value in rec.annual.items():
            values = by_key.setdefault(key, [])
            if value is not None and math.isfinite(value):
                values.append(value)

    return SummaryRecord(
        species=species,
        n_cells=len(records),
        n_excluded=sum(1 for r in records if r.out_of_coverage),
        variables={key: summarize_values(vals, levels) for key, vals in sorted(by_key.items())},
    )
