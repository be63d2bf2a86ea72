"""Tests for grid snapping and viewer-dependent location disclosure."""

from __future__ import annotations

import pytest

from mushroom_map.analysis.privacy import (
    can_view_exact,
    display_coordinates,
    effective_privacy,
    snap_to_1km,
    snap_to_10km,
    snap_to_grid,
)
from mushroom_map.reference.geography import GRID_1KM, GRID_10KM
from mushroom_map.reference.roles import Role
from mushroom_map.schemas import PrivacyLevel

LAT = 53.3498
LNG = -6.2603

PRIVILEGED = [Role.MOD, Role.BIOLOGIST, Role.ADMIN]
NON_PRIVILEGED = [None, Role.USER, Role.TRUSTED, "SOMETHING_ELSE"]


class TestSnapToGrid:
    """Test the rounding primitive."""

    def test_rounds_to_nearest_multiple(self) -> None:
        assert snap_to_grid(0.26, 0.74, 0.5, 0.5) == (0.5, 0.5)
        assert snap_to_grid(-0.26, -0.74, 0.5, 0.5) == (-0.5, -0.5)

    def test_half_rounds_up(self) -> None:
        assert snap_to_grid(0.25, -0.25, 0.5, 0.5) == (0.5, 0.0)

    @pytest.mark.parametrize("cell", [GRID_1KM, GRID_10KM])
    @pytest.mark.parametrize(
        ("lat", "lng"),
        [(53.3498, -6.2603), (51.8985, -8.4756), (55.2, -7.9), (52.0, -10.499), (0.0, 0.0)],
    )
    def test_idempotent(self, cell, lat: float, lng: float) -> None:
        once = snap_to_grid(lat, lng, cell.lat_deg, cell.lng_deg)
        twice = snap_to_grid(*once, cell.lat_deg, cell.lng_deg)
        assert twice == once

    def test_nearby_points_share_1km_cell(self) -> None:
        first = snap_to_1km(53.3498, -6.2603)
        second = snap_to_1km(53.3501, -6.2606)
        assert first == second

    def test_1km_stays_close(self) -> None:
        result = snap_to_1km(LAT, LNG)
        assert result.lat == pytest.approx(LAT, abs=0.005)
        assert result.lng == pytest.approx(LNG, abs=0.007)

    def test_10km_stays_close(self) -> None:
        result = snap_to_10km(LAT, LNG)
        assert result.lat == pytest.approx(LAT, abs=0.05)
        assert result.lng == pytest.approx(LNG, abs=0.07)


class TestDisplayCoordinates:
    """Test the disclosure policy."""

    def test_exact_not_sensitive_returns_raw(self) -> None:
        result = display_coordinates(LAT, LNG, PrivacyLevel.EXACT, False)
        assert (result.lat, result.lng) == (LAT, LNG)

    def test_1km_level(self) -> None:
        result = display_coordinates(LAT, LNG, PrivacyLevel.GRID_1KM, False)
        assert result == snap_to_1km(LAT, LNG)
        assert result.lat != LAT

    def test_10km_level(self) -> None:
        result = display_coordinates(LAT, LNG, PrivacyLevel.GRID_10KM, False, Role.ADMIN)
        assert result == snap_to_10km(LAT, LNG)

    def test_missing_level_defaults_to_1km(self) -> None:
        assert display_coordinates(LAT, LNG, None) == snap_to_1km(LAT, LNG)

    @pytest.mark.parametrize("viewer", NON_PRIVILEGED)
    @pytest.mark.parametrize("level", list(PrivacyLevel))
    def test_sensitive_forces_10km_for_non_privileged(self, viewer, level: PrivacyLevel) -> None:
        result = display_coordinates(LAT, LNG, level, True, viewer)
        assert result == snap_to_10km(LAT, LNG)

    @pytest.mark.parametrize("viewer", PRIVILEGED)
    def test_sensitive_exact_raw_for_privileged(self, viewer: Role) -> None:
        result = display_coordinates(LAT, LNG, PrivacyLevel.EXACT, True, viewer)
        assert (result.lat, result.lng) == (LAT, LNG)

    @pytest.mark.parametrize("viewer", PRIVILEGED)
    def test_privileged_see_owner_level(self, viewer: Role) -> None:
        assert display_coordinates(LAT, LNG, PrivacyLevel.GRID_1KM, True, viewer) == snap_to_1km(LAT, LNG)

    def test_role_given_as_string(self) -> None:
        result = display_coordinates(LAT, LNG, PrivacyLevel.EXACT, True, "mod")
        assert (result.lat, result.lng) == (LAT, LNG)


class TestCanViewExact:
    """Test the boolean companion stays in step with display_coordinates."""

    def test_exact_not_sensitive(self) -> None:
        assert can_view_exact(PrivacyLevel.EXACT, False) is True

    def test_sensitive_user(self) -> None:
        assert can_view_exact(PrivacyLevel.EXACT, True, Role.USER) is False

    def test_privileged_on_sensitive(self) -> None:
        assert can_view_exact(PrivacyLevel.EXACT, True, Role.MOD) is True
        assert can_view_exact(PrivacyLevel.EXACT, True, Role.BIOLOGIST) is True

    def test_grid_level(self) -> None:
        assert can_view_exact(PrivacyLevel.GRID_1KM, False) is False
        assert can_view_exact(PrivacyLevel.GRID_10KM, False, Role.ADMIN) is False

    @pytest.mark.parametrize("viewer", NON_PRIVILEGED + PRIVILEGED)
    @pytest.mark.parametrize("sensitive", [True, False])
    @pytest.mark.parametrize("level", list(PrivacyLevel))
    def test_matches_display(self, level: PrivacyLevel, sensitive: bool, viewer) -> None:
        coords = display_coordinates(LAT, LNG, level, sensitive, viewer)
        is_raw = (coords.lat, coords.lng) == (LAT, LNG)
        assert can_view_exact(level, sensitive, viewer) is is_raw


class TestEffectivePrivacy:
    """Test the shared decision rule."""

    def test_sensitive_override(self) -> None:
        assert effective_privacy(PrivacyLevel.EXACT, True, None) == PrivacyLevel.GRID_10KM

    def test_owner_choice(self) -> None:
        assert effective_privacy(PrivacyLevel.GRID_10KM, False, Role.USER) == PrivacyLevel.GRID_10KM
        assert effective_privacy(PrivacyLevel.EXACT, True, Role.ADMIN) == PrivacyLevel.EXACT
