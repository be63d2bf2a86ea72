"""Location privacy: grid snapping and viewer-dependent coordinate disclosure.

Exact coordinates are always stored; what a viewer sees is decided here.
One rule (``effective_privacy``) drives both ``display_coordinates`` and
``can_view_exact`` so the two can never disagree:

1. Sensitive species + non-privileged viewer → 10 km grid, whatever the
   owner chose.
2. Otherwise the owner's level: EXACT → raw, GRID_10KM → 10 km, else 1 km.

Snapping is deterministic and idempotent, and every point inside a cell
collapses to the same output, so re-submitting a sighting at slightly
different precision reveals nothing new.
"""

from __future__ import annotations

import math

from mushroom_map.reference.geography import GRID_1KM, GRID_10KM, GridCell
from mushroom_map.reference.roles import Role, is_privileged
from mushroom_map.schemas import Coordinates, PrivacyLevel

# Decimal places kept after snapping; removes float noise like 53.352000000000004
SNAP_DECIMALS = 10

_CELLS: dict[PrivacyLevel, GridCell] = {
    PrivacyLevel.GRID_1KM: GRID_1KM,
    PrivacyLevel.GRID_10KM: GRID_10KM,
}


def _round_to_cell(value: float, cell_size: float) -> float:
    # Round half up, like Math.round, rather than Python's banker's rounding.
    return round(math.floor(value / cell_size + 0.5) * cell_size, SNAP_DECIMALS)


def snap_to_grid(
    lat: float, lng: float, cell_size_lat: float, cell_size_lng: float
) -> tuple[float, float]:
    """Round each coordinate to the nearest multiple of its cell size."""
    return _round_to_cell(lat, cell_size_lat), _round_to_cell(lng, cell_size_lng)


def snap_to_cell(lat: float, lng: float, cell: GridCell) -> Coordinates:
    """Snap to one of the preset grid cells."""
    snapped_lat, snapped_lng = snap_to_grid(lat, lng, cell.lat_deg, cell.lng_deg)
    return Coordinates(lat=snapped_lat, lng=snapped_lng)


def snap_to_1km(lat: float, lng: float) -> Coordinates:
    return snap_to_cell(lat, lng, GRID_1KM)


def snap_to_10km(lat: float, lng: float) -> Coordinates:
    return snap_to_cell(lat, lng, GRID_10KM)


def effective_privacy(
    privacy_level: PrivacyLevel | None,
    species_sensitive: bool,
    viewer_role: Role | str | None = None,
) -> PrivacyLevel:
    """Precision actually granted to ``viewer_role`` for this observation."""
    if species_sensitive and not is_privileged(viewer_role):
        return PrivacyLevel.GRID_10KM
    return privacy_level or PrivacyLevel.GRID_1KM


def display_coordinates(
    lat: float,
    lng: float,
    privacy_level: PrivacyLevel | None,
    species_sensitive: bool = False,
    viewer_role: Role | str | None = None,
) -> Coordinates:
    """Coordinates safe to return to ``viewer_role``.

    Args:
        lat: Exact stored latitude.
        lng: Exact stored longitude.
        privacy_level: Owner's chosen precision (None means the 1 km default).
        species_sensitive: Whether the consensus species is flagged sensitive.
        viewer_role: Role of the viewer; None for anonymous visitors.

    Returns:
        Raw coordinates only when the effective level is EXACT, otherwise
        the grid-snapped pair.
    """
    level = effective_privacy(privacy_level, species_sensitive, viewer_role)
    if level == PrivacyLevel.EXACT:
        return Coordinates(lat=lat, lng=lng)
    return snap_to_cell(lat, lng, _CELLS[level])


def can_view_exact(
    privacy_level: PrivacyLevel | None,
    species_sensitive: bool,
    viewer_role: Role | str | None = None,
) -> bool:
    """Whether the viewer may be offered the exact location at all."""
    return effective_privacy(privacy_level, species_sensitive, viewer_role) == PrivacyLevel.EXACT
