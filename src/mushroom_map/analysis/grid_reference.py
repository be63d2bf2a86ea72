"""Approximate Irish National Grid references for stored observations.

This is a simplified mapping, not a real ITM projection: the island is
normalized onto a 5x5 block of lettered 100 km squares and each square is
split into a 100x100 grid, giving references like ``N1523`` (1 km) and
``N12`` (10 km). Good enough for grouping records by square; do not use it
for surveying.
"""

from __future__ import annotations

import math

from mushroom_map.reference.geography import (
    IRISH_GRID_LETTERS,
    IRISH_GRID_ORIGIN_LAT,
    IRISH_GRID_ORIGIN_LNG,
    IRISH_GRID_SPAN_LAT,
    IRISH_GRID_SPAN_LNG,
    IRISH_GRID_SQUARES,
)
from mushroom_map.schemas import GridCoordinates


def lat_lng_to_irish_grid(lat: float, lng: float) -> str:
    """1 km grid reference: square letter + 2-digit easting + 2-digit northing."""
    norm_lat = (lat - IRISH_GRID_ORIGIN_LAT) / IRISH_GRID_SPAN_LAT * IRISH_GRID_SQUARES
    norm_lng = (lng - IRISH_GRID_ORIGIN_LNG) / IRISH_GRID_SPAN_LNG * IRISH_GRID_SQUARES

    letter_index = math.floor(norm_lat) * IRISH_GRID_SQUARES + math.floor(norm_lng)
    letter_index = max(0, min(letter_index, len(IRISH_GRID_LETTERS) - 1))
    letter = IRISH_GRID_LETTERS[letter_index]

    eastings = math.floor((norm_lng % 1) * 100) % 100
    northings = math.floor((norm_lat % 1) * 100) % 100
    return f"{letter}{eastings:02d}{northings:02d}"


def irish_grid_10km(grid1km: str) -> str:
    """Coarsen a 1 km reference to its 10 km square (``N1523`` → ``N12``)."""
    if len(grid1km) < 5:
        return grid1km

    letter = grid1km[0]
    eastings = int(grid1km[1:3]) // 10
    northings = int(grid1km[3:5]) // 10
    return f"{letter}{eastings}{northings}"


def grid_coordinates(lat: float, lng: float) -> GridCoordinates:
    """Grid references stored alongside the exact position at write time."""
    grid1km = lat_lng_to_irish_grid(lat, lng)
    return GridCoordinates(lat=lat, lng=lng, grid1km=grid1km, grid10km=irish_grid_10km(grid1km))
