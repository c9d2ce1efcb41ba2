"""Tests for grid definitions and occurrence rasterization."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

import pytest

from climate_envelope.envelope import GridSpec, OccupiedCell, rasterize
from climate_envelope.errors import InvalidObservation
from climate_envelope.schemas import Observation


@dataclass
class Point:
    latitude: float | None
    longitude: float | None


def obs(lat: float | None, lon: float | None) -> Observation:
    return Observation(species="Eucalyptus saligna", latitude=lat, longitude=lon)


ONE_DEGREE = GridSpec.square(1.0)


# =============================================================================
# GridSpec
# =============================================================================


class TestGridSpec:
    """Tests for cell indexing and midpoints."""

    def test_cell_index_floor(self) -> None:
        assert ONE_DEGREE.cell_index(10.01, 130.02) == (10, 130)

    def test_negative_coordinates_floor_down(self) -> None:
        """floor, not truncation: -0.5 belongs to cell -1."""
        assert ONE_DEGREE.cell_index(-0.5, -33.2) == (-1, -34)

    def test_point_on_boundary_belongs_to_upper_cell(self) -> None:
        assert ONE_DEGREE.cell_index(11.0, 131.0) == (11, 131)

    def test_midpoint(self) -> None:
        assert ONE_DEGREE.midpoint(10, 130) == (10.5, 130.5)

    def test_offset_origin(self) -> None:
        grid = GridSpec(cell_width=0.5, cell_height=0.25, origin_lon=-180.0, origin_lat=-90.0)
        row, col = grid.cell_index(-89.9, -179.4)
        assert (row, col) == (0, 1)
        assert grid.midpoint(row, col) == (-89.875, -179.25)

    def test_rejects_non_positive_cell_size(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            GridSpec(cell_width=0.0, cell_height=1.0)


# =============================================================================
# rasterize
# =============================================================================


class TestRasterize:
    """Tests for deduplicating observations onto grid cells."""

    def test_worked_example(self) -> None:
        """Two nearby points share a cell; the third has its own."""
        observations = [obs(10.01, 130.02), obs(10.02, 130.01), obs(20.00, 140.00)]

        cells = rasterize(observations, ONE_DEGREE)

        assert len(cells) == 2
        assert (cells[0].latitude, cells[0].longitude) == (10.5, 130.5)
        assert (cells[0].row, cells[0].col) == (10, 130)
        assert cells[0].n_observations == 2
        assert (cells[1].latitude, cells[1].longitude) == (20.5, 140.5)
        assert cells[1].n_observations == 1

    def test_midpoint_not_centroid(self) -> None:
        """Cell location ignores where inside the cell the points were."""
        cells = rasterize([obs(10.9, 130.9), obs(10.8, 130.95)], ONE_DEGREE)
        assert cells == [
            OccupiedCell(row=10, col=130, latitude=10.5, longitude=130.5, n_observations=2)
        ]

    def test_order_independent(self) -> None:
        rng = random.Random(42)
        observations = [obs(rng.uniform(-40, 40), rng.uniform(100, 160)) for _ in range(200)]
        shuffled = observations[:]
        rng.shuffle(shuffled)

        assert rasterize(observations, ONE_DEGREE) == rasterize(shuffled, ONE_DEGREE)

    def test_idempotent(self) -> None:
        observations = [obs(-33.87, 151.21), obs(-33.86, 151.20), obs(-37.81, 144.96)]
        assert rasterize(observations, ONE_DEGREE) == rasterize(observations, ONE_DEGREE)

    def test_cardinality_bound(self) -> None:
        rng = random.Random(7)
        observations = [obs(rng.uniform(0, 3), rng.uniform(0, 3)) for _ in range(100)]
        cells = rasterize(observations, ONE_DEGREE)
        assert len(cells) <= len(observations)
        distinct = {ONE_DEGREE.cell_index(o.latitude, o.longitude) for o in observations}
        assert len(cells) == len(distinct)
        assert sum(c.n_observations for c in cells) == len(observations)

    def test_distinct_cells_keep_count(self) -> None:
        observations = [obs(0.5, 0.5), obs(1.5, 0.5), obs(0.5, 1.5)]
        assert len(rasterize(observations, ONE_DEGREE)) == len(observations)

    def test_unique_cells(self) -> None:
        observations = [obs(5.1, 5.1)] * 10 + [obs(5.9, 5.9)] * 3
        cells = rasterize(observations, ONE_DEGREE)
        assert len({(c.row, c.col) for c in cells}) == len(cells) == 1

    def test_accepts_any_located_object(self) -> None:
        cells = rasterize([Point(1.2, 2.3)], ONE_DEGREE)
        assert (cells[0].latitude, cells[0].longitude) == (1.5, 2.5)

    def test_accepts_generator(self) -> None:
        cells = rasterize((obs(i + 0.5, 0.5) for i in range(3)), ONE_DEGREE)
        assert [c.row for c in cells] == [0, 1, 2]


class TestRasterizeEdgeCases:
    """Invalid and empty input handling."""

    def test_empty_input_returns_empty(self) -> None:
        assert rasterize([], ONE_DEGREE) == []

    def test_empty_input_can_be_rejected(self) -> None:
        with pytest.raises(InvalidObservation, match="No observations"):
            rasterize([], ONE_DEGREE, allow_empty=False)

    @pytest.mark.parametrize(
        ("lat", "lon"),
        [(None, 130.0), (10.0, None), (math.nan, 130.0), (10.0, math.inf), (-math.inf, 0.0)],
    )
    def test_strict_rejects_bad_coordinates(self, lat: float | None, lon: float | None) -> None:
        with pytest.raises(InvalidObservation):
            rasterize([obs(10.0, 130.0), obs(lat, lon)], ONE_DEGREE)

    def test_non_numeric_coordinate_rejected(self) -> None:
        with pytest.raises(InvalidObservation, match="non-numeric"):
            rasterize([Point("north", 1.0)], ONE_DEGREE)  # type: ignore[arg-type]

    def test_lenient_skips_bad_coordinates(self, caplog: pytest.LogCaptureFixture) -> None:
        observations = [obs(10.2, 130.2), obs(None, 130.0), obs(math.nan, 1.0)]

        cells = rasterize(observations, ONE_DEGREE, strict=False)

        assert len(cells) == 1
        assert cells[0].n_observations == 1
        assert "Skipped 2 of 3" in caplog.text

    def test_lenient_fails_when_all_invalid(self) -> None:
        with pytest.raises(InvalidObservation, match="All 2 observations"):
            rasterize([obs(None, None), obs(math.nan, 1.0)], ONE_DEGREE, strict=False)
