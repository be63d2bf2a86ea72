"""
Prefect flow that recalculates consensus for every open observation.

Meant to run nightly as a safety net behind the per-vote recalculation:
scores are rebuilt from the full vote set, so any drift in cached scores
(or a change in role weights) is corrected.

Run locally:
    python -m mushroom_map.flows.consensus

Run with Prefect dashboard:
    prefect server start &
    python -m mushroom_map.flows.consensus
"""

from __future__ import annotations

from typing import Any

from prefect import flow, task

from mushroom_map.analysis import consensus
from mushroom_map.config import get_settings
from mushroom_map.schemas import Observation, ObservationStatus
from mushroom_map.store import ObservationStore

store = ObservationStore(get_settings().data_dir)

SOURCE = "flows.consensus"

# Observations with no proposals have nothing to recalculate.
OPEN_STATUSES = frozenset({ObservationStatus.HAS_CANDIDATES, ObservationStatus.CONSENSUS})


@task(name="load-open-observations")
def load_open_observations() -> list[Observation]:
    """Load observations that have (or had) identification candidates."""
    return [obs for obs in store.load_all() if obs.status in OPEN_STATUSES]


@task(name="recalculate-observation")
def recalculate_observation(observation: Observation, threshold: int, margin: int) -> bool:
    """Recompute scores and consensus for one observation and save it if anything changed.

    The record is reloaded under its lock so votes cast since
    ``load_open_observations`` ran are included.

    Returns:
        True if the observation was written back.
    """
    with store.lock(observation.id):
        current = store.load(observation.id) or observation
        before = current.model_dump()
        consensus.recalculate(current, threshold, margin)
        if current.model_dump() == before:
            return False
        store.save(current, source=SOURCE)
    return True


@flow(name="recalculate-consensus", log_prints=True)
def recalculate_all(threshold: int | None = None, margin: int | None = None) -> dict[str, Any]:
    """
    Recalculate consensus across the store.

    A failure on one observation is counted and reported; the rest still run.
    """
    settings = get_settings()
    threshold = threshold if threshold is not None else settings.consensus_threshold
    margin = margin if margin is not None else settings.consensus_margin

    print("Starting consensus recalculation...")
    observations = load_open_observations()

    updated = 0
    errors = 0
    for observation in observations:
        try:
            if recalculate_observation(observation, threshold, margin):
                updated += 1
        except (OSError, ValueError) as exc:
            print(f"Error processing observation {observation.id}: {exc}")
            errors += 1

    print(f"Consensus recalculation complete: {updated} updated, {errors} errors")
    return {"processed": len(observations), "updated": updated, "errors": errors}


if __name__ == "__main__":
    result = recalculate_all()
    print(f"Flow complete: {result}")
