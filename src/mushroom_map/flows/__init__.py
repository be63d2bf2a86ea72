"""
Prefect flows.

Flows:
- consensus: Nightly recalculation of identification scores and consensus

Usage (local):
    python -m mushroom_map.flows.consensus

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'recalculate-consensus/default'
"""
