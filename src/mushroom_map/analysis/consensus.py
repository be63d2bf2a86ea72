"""Weighted voting and consensus resolution.

Each vote counts ``value * weight`` where weight comes from the voter's role
plus a small reputation bonus, so one expert can outweigh several new
accounts. An observation reaches consensus when its top identification
clears an absolute threshold AND leads the runner-up by a margin::

    weight    = ROLE_WEIGHTS[role] + min(reputation // 100, 2)
    score     = sum(vote.value * weight(vote.voter))
    consensus = top >= threshold and top - runner_up >= margin

Scores are always recomputed from the full vote set; the ``score`` stored on
an identification is a cache for display only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mushroom_map.reference.roles import (
    CORRECT_REWARD,
    DEFAULT_ROLE_WEIGHT,
    EXPERT_CORRECT_REWARD,
    INCORRECT_PENALTY,
    MAX_REPUTATION_BONUS,
    REPUTATION_PER_BONUS,
    ROLE_WEIGHTS,
    Role,
    is_privileged,
    parse_role,
)
from mushroom_map.schemas import ConsensusResult, ObservationStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mushroom_map.schemas import Identification, Observation, Vote

DEFAULT_THRESHOLD = 10
DEFAULT_MARGIN = 5


def voter_weight(role: Role | str | None, reputation: int) -> int:
    """Weight of one vote: role base weight plus a capped reputation bonus.

    Unrecognized roles get the default base weight of 1. The bonus is floored,
    so negative reputation lowers the weight (a USER at -150 weighs -1).
    """
    parsed = parse_role(role)
    base = ROLE_WEIGHTS.get(parsed, DEFAULT_ROLE_WEIGHT) if parsed else DEFAULT_ROLE_WEIGHT
    bonus = min(reputation // REPUTATION_PER_BONUS, MAX_REPUTATION_BONUS)
    return base + bonus


def identification_score(votes: Iterable[Vote]) -> int:
    """Weighted net approval of one identification (0 for no votes)."""
    return sum(vote.value * voter_weight(vote.voter.role, vote.voter.reputation) for vote in votes)


def has_consensus(
    top_score: int,
    runner_up_score: int,
    threshold: int = DEFAULT_THRESHOLD,
    margin: int = DEFAULT_MARGIN,
) -> bool:
    """True iff the top score clears ``threshold`` and leads by at least ``margin``."""
    return top_score >= threshold and top_score - runner_up_score >= margin


def rank_identifications(
    identifications: Iterable[Identification],
) -> list[tuple[Identification, int]]:
    """Score and sort identifications, best first.

    Ties go to the earliest-created identification, then to the lowest id,
    so the winner never depends on input order.
    """
    scored = [(ident, identification_score(ident.votes)) for ident in identifications]
    scored.sort(key=lambda pair: (-pair[1], pair[0].created_at, pair[0].id))
    return scored


def process_consensus(
    identifications: Iterable[Identification],
    threshold: int = DEFAULT_THRESHOLD,
    margin: int = DEFAULT_MARGIN,
) -> ConsensusResult:
    """Decide the observation status and consensus winner from current votes.

    Pure: the caller persists the returned transition. Must be re-run after
    every vote because any vote can reorder all identifications.
    """
    ranked = rank_identifications(identifications)
    if not ranked:
        return ConsensusResult(winner_id=None, new_status=ObservationStatus.NEEDS_ID)

    top, top_score = ranked[0]
    runner_up_score = ranked[1][1] if len(ranked) > 1 else 0

    if has_consensus(top_score, runner_up_score, threshold, margin):
        return ConsensusResult(winner_id=top.id, new_status=ObservationStatus.CONSENSUS)

    return ConsensusResult(winner_id=None, new_status=ObservationStatus.HAS_CANDIDATES)


def apply_consensus(observation: Observation, result: ConsensusResult) -> Observation:
    """Write recomputed scores, consensus flags and status onto ``observation``.

    Mutates and returns the same object.
    """
    for ident in observation.identifications:
        ident.score = identification_score(ident.votes)
        ident.is_consensus = ident.id == result.winner_id
    observation.status = result.new_status
    return observation


def recalculate(
    observation: Observation,
    threshold: int = DEFAULT_THRESHOLD,
    margin: int = DEFAULT_MARGIN,
) -> ConsensusResult:
    """Recompute consensus for ``observation`` from scratch and apply it."""
    result = process_consensus(observation.identifications, threshold, margin)
    apply_consensus(observation, result)
    return result


def can_resolve_directly(role: Role | str | None) -> bool:
    """Privileged roles may force a consensus without waiting for votes."""
    return is_privileged(role)


def reputation_change(is_correct_identification: bool, voter_role: Role | str | None) -> int:
    """Reputation delta for a proposer once their identification is judged."""
    if not is_correct_identification:
        return INCORRECT_PENALTY
    return EXPERT_CORRECT_REWARD if parse_role(voter_role) == Role.BIOLOGIST else CORRECT_REWARD
