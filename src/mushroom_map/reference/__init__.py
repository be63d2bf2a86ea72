"""Static reference data.

Tables that never change at runtime: role weights, privileged roles,
reputation constants, grid cell sizes and Irish grid constants.

Adding a new module:
1. Create ``reference/{name}.py`` with constants/dataclasses
2. Re-export from this ``__init__.py``
"""

from mushroom_map.reference.geography import GRID_1KM as GRID_1KM
from mushroom_map.reference.geography import GRID_10KM as GRID_10KM
from mushroom_map.reference.geography import IRELAND_BBOX as IRELAND_BBOX
from mushroom_map.reference.geography import BoundingBox as BoundingBox
from mushroom_map.reference.geography import GridCell as GridCell
from mushroom_map.reference.roles import PRIVILEGED_ROLES as PRIVILEGED_ROLES
from mushroom_map.reference.roles import ROLE_WEIGHTS as ROLE_WEIGHTS
from mushroom_map.reference.roles import Role as Role
from mushroom_map.reference.roles import is_privileged as is_privileged
from mushroom_map.reference.roles import parse_role as parse_role
