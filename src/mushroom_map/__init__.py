"""Mushroom Map - community mushroom sightings with weighted consensus and location privacy.

Architecture::

    reference/     Static tables (role weights, privileged roles, grid cell sizes)
    schemas.py     Pydantic domain models + input validation
    analysis/      Pure engines (consensus voting, geo-privacy, Irish grid refs)
    store.py       JSON observation store with metadata envelopes
    services/      Write/read-path callers (propose, vote, resolve, masked views)
    flows/         Prefect orchestration (nightly consensus recalculation)

Data flow: services → analysis (pure) → store; flows re-run analysis over the store.

Extension points (see each package's docstring):
  - New pure rule:     analysis/__init__.py
  - New reference:     reference/__init__.py
"""

__version__ = "0.1.0"

from mushroom_map.config import Settings
from mushroom_map.schemas import Identification, Observation, Vote

__all__ = ["Identification", "Observation", "Settings", "Vote", "__version__"]
