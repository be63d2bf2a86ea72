"""Tests for approximate Irish grid references."""

from __future__ import annotations

from mushroom_map.analysis.grid_reference import (
    grid_coordinates,
    irish_grid_10km,
    lat_lng_to_irish_grid,
)


class TestLatLngToIrishGrid:
    """Test 1 km reference generation."""

    def test_dublin(self) -> None:
        assert lat_lng_to_irish_grid(53.3498, -6.2603) == "K1543"

    def test_format(self) -> None:
        ref = lat_lng_to_irish_grid(52.6638, -8.6267)
        assert len(ref) == 5
        assert ref[0].isalpha()
        assert ref[1:].isdigit()

    def test_nearby_points_share_reference(self) -> None:
        assert lat_lng_to_irish_grid(53.3498, -6.2603) == lat_lng_to_irish_grid(53.3499, -6.2604)

    def test_letter_index_clamped(self) -> None:
        # Far south-west of the grid origin clamps to the first letter
        assert lat_lng_to_irish_grid(40.0, -20.0)[0] == "V"
        # Far north-east clamps to the last letter
        assert lat_lng_to_irish_grid(70.0, 10.0)[0] == "Z"


class TestIrishGrid10km:
    """Test coarsening to 10 km squares."""

    def test_coarsens(self) -> None:
        assert irish_grid_10km("K1543") == "K14"
        assert irish_grid_10km("N0599") == "N09"

    def test_short_reference_unchanged(self) -> None:
        assert irish_grid_10km("K14") == "K14"
        assert irish_grid_10km("") == ""


class TestGridCoordinates:
    """Test the stored grid bundle."""

    def test_keeps_exact_position(self) -> None:
        grid = grid_coordinates(53.3498, -6.2603)
        assert (grid.lat, grid.lng) == (53.3498, -6.2603)
        assert grid.grid1km == "K1543"
        assert grid.grid10km == "K14"
