"""Pure decision engines: consensus voting and location privacy.

Dependency rule: analysis/ imports ``schemas`` and ``reference`` only.
It never touches the store, never logs and never raises for well-typed
input. Callers in ``services/`` and ``flows/`` persist the results.

Modules:
  - consensus: vote weights, identification scores, consensus resolution
  - privacy: grid snapping and viewer-dependent coordinate disclosure
  - grid_reference: approximate Irish National Grid references

Adding an analysis module
-------------------------
1. Create ``analysis/{name}.py`` with pure functions.
2. Re-export in ``__init__.py`` and add tests in ``tests/test_{name}.py``.
"""

from mushroom_map.analysis.consensus import (
    apply_consensus,
    can_resolve_directly,
    has_consensus,
    identification_score,
    process_consensus,
    rank_identifications,
    recalculate,
    reputation_change,
    voter_weight,
)
from mushroom_map.analysis.grid_reference import (
    grid_coordinates,
    irish_grid_10km,
    lat_lng_to_irish_grid,
)
from mushroom_map.analysis.privacy import (
    can_view_exact,
    display_coordinates,
    effective_privacy,
    snap_to_1km,
    snap_to_10km,
    snap_to_cell,
    snap_to_grid,
)

__all__ = [
    "apply_consensus",
    "can_resolve_directly",
    "can_view_exact",
    "display_coordinates",
    "effective_privacy",
    "grid_coordinates",
    "has_consensus",
    "identification_score",
    "irish_grid_10km",
    "lat_lng_to_irish_grid",
    "process_consensus",
    "rank_identifications",
    "recalculate",
    "reputation_change",
    "snap_to_10km",
    "snap_to_1km",
    "snap_to_cell",
    "snap_to_grid",
    "voter_weight",
]
