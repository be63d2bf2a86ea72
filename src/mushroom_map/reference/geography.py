"""Grid cell presets and geographic bounds for Ireland."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GridCell:
    """Size of one privacy grid cell in degrees."""

    lat_deg: float
    lng_deg: float
    label: str


# ~1 km and ~10 km at Irish latitudes (longitude degrees are shorter up here)
GRID_1KM = GridCell(lat_deg=0.009, lng_deg=0.014, label="1km")
GRID_10KM = GridCell(lat_deg=0.09, lng_deg=0.14, label="10km")


@dataclass(frozen=True)
class BoundingBox:
    """SW/NE lat-lng bounding box."""

    swlat: float
    swlng: float
    nelat: float
    nelng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.swlat <= lat <= self.nelat and self.swlng <= lng <= self.nelng


# Accepted submission area (island of Ireland, generous margins)
IRELAND_BBOX = BoundingBox(swlat=51.0, swlng=-11.0, nelat=56.0, nelng=-5.0)

# Simplified Irish National Grid: the island is normalized onto a 5x5 block
# of 100 km squares starting at 51.4N, 10.5W and spanning 4.0 x 5.1 degrees.
IRISH_GRID_ORIGIN_LAT: float = 51.4
IRISH_GRID_ORIGIN_LNG: float = -10.5
IRISH_GRID_SPAN_LAT: float = 4.0
IRISH_GRID_SPAN_LNG: float = 5.1
IRISH_GRID_SQUARES: int = 5
IRISH_GRID_LETTERS: str = "VWXYZABCDEFGHJKLMNOPQRSTUVWXYZ"
