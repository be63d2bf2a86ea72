"""
Write- and read-path operations on observations.

Every mutation that can change ranking (new proposal, vote, direct
resolution) reloads the observation, recomputes consensus from the full vote
set and saves the result. Scores are never incremented in place.

Usage::

    from mushroom_map.services import observations as svc

    obs = svc.create_observation(store, "user-1", ObservationCreate(lat=53.35, lng=-6.26))
    ident = svc.propose_identification(store, obs.id, "user-2", IdentificationCreate())
    svc.cast_vote(store, obs.id, ident.id, Voter(id="user-3", role=Role.BIOLOGIST), VoteCreate(value=1))
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from mushroom_map.analysis import consensus, privacy
from mushroom_map.analysis.grid_reference import grid_coordinates
from mushroom_map.exceptions import (
    IdentificationNotFoundError,
    ObservationNotFoundError,
    PermissionDeniedError,
    SelfVoteError,
)
from mushroom_map.schemas import (
    Identification,
    IdentificationCreate,
    Observation,
    ObservationCreate,
    ObservationStatus,
    PrivacyLevel,
    Species,
    Vote,
    VoteCreate,
    Voter,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mushroom_map.reference.roles import Role
    from mushroom_map.store import ObservationStore

logger = logging.getLogger(__name__)

SOURCE = "services.observations"


def _new_id() -> str:
    return uuid.uuid4().hex


def _require_observation(store: ObservationStore, observation_id: str) -> Observation:
    observation = store.load(observation_id)
    if observation is None:
        raise ObservationNotFoundError(observation_id)
    return observation


def create_observation(store: ObservationStore, user_id: str, data: ObservationCreate) -> Observation:
    """Store a new sighting with its Irish grid references."""
    grid = grid_coordinates(data.lat, data.lng)
    observation = Observation(
        id=_new_id(),
        user_id=user_id,
        lat=data.lat,
        lng=data.lng,
        grid1km=grid.grid1km,
        grid10km=grid.grid10km,
        privacy_level=data.privacy_level,
        notes=data.notes,
    )
    store.save(observation, source=SOURCE)
    logger.info("created observation %s at %s", observation.id, grid.grid1km)
    return observation


def propose_identification(
    store: ObservationStore,
    observation_id: str,
    proposer_id: str,
    data: IdentificationCreate,
) -> Identification:
    """Add a species proposal; the observation now has candidates."""
    identification = Identification(
        id=_new_id(),
        proposer_id=proposer_id,
        species_id=data.species_id,
        rationale=data.rationale,
        confidence=data.confidence,
        method=data.method,
    )
    with store.lock(observation_id):
        observation = _require_observation(store, observation_id)
        observation.identifications.append(identification)
        if observation.status == ObservationStatus.NEEDS_ID:
            observation.status = ObservationStatus.HAS_CANDIDATES
        store.save(observation, source=SOURCE)
    logger.info("identification %s proposed on %s", identification.id, observation_id)
    return identification


def cast_vote(
    store: ObservationStore,
    observation_id: str,
    identification_id: str,
    voter: Voter,
    data: VoteCreate,
    threshold: int = consensus.DEFAULT_THRESHOLD,
    margin: int = consensus.DEFAULT_MARGIN,
) -> Observation:
    """Upsert ``voter``'s vote and recompute consensus for the observation.

    The observation is locked from load to save, so concurrent votes on the
    same observation are applied one after another.

    Raises:
        ObservationNotFoundError: No such observation.
        IdentificationNotFoundError: The observation has no such identification.
        SelfVoteError: The voter proposed the identification.
    """
    with store.lock(observation_id):
        observation = _require_observation(store, observation_id)
        identification = observation.get_identification(identification_id)
        if identification is None:
            raise IdentificationNotFoundError(identification_id)

        if identification.proposer_id == voter.id:
            raise SelfVoteError

        existing = identification.vote_by(voter.id)
        if existing is not None:
            existing.value = data.value
            existing.voter = voter
        else:
            identification.votes.append(Vote(voter=voter, value=data.value))

        result = consensus.recalculate(observation, threshold, margin)
        store.save(observation, source=SOURCE)
    logger.info(
        "vote %+d by %s on %s: status=%s winner=%s",
        data.value,
        voter.id,
        identification_id,
        result.new_status,
        result.winner_id,
    )
    return observation


def resolve_consensus(
    store: ObservationStore,
    observation_id: str,
    identification_id: str,
    resolver_role: Role | str | None,
) -> Observation:
    """Force ``identification_id`` as consensus (moderators, biologists, admins)."""
    if not consensus.can_resolve_directly(resolver_role):
        msg = f"Role {resolver_role!r} cannot resolve consensus directly"
        raise PermissionDeniedError(msg)

    with store.lock(observation_id):
        observation = _require_observation(store, observation_id)
        if observation.get_identification(identification_id) is None:
            raise IdentificationNotFoundError(identification_id)

        for ident in observation.identifications:
            ident.score = consensus.identification_score(ident.votes)
            ident.is_consensus = ident.id == identification_id
        observation.status = ObservationStatus.CONSENSUS
        store.save(observation, source=SOURCE, resolved_by=str(resolver_role))
    logger.info("consensus on %s resolved to %s by %s", observation_id, identification_id, resolver_role)
    return observation


def is_sensitive(observation: Observation, species: Mapping[str, Species]) -> bool:
    """Whether the observation's consensus species is flagged sensitive."""
    winner = observation.consensus_identification
    if winner is None or winner.species_id is None:
        return False
    match = species.get(winner.species_id)
    return match.sensitive if match else False


# Grid references finer than the effective level are withheld.
_VISIBLE_GRID_REFS = {
    PrivacyLevel.EXACT: ("grid1km", "grid10km"),
    PrivacyLevel.GRID_1KM: ("grid1km", "grid10km"),
    PrivacyLevel.GRID_10KM: ("grid10km",),
}


def view_observation(
    observation: Observation,
    species: Mapping[str, Species],
    viewer_role: Role | str | None = None,
) -> dict[str, Any]:
    """Serialize an observation for ``viewer_role`` with location masking applied.

    Coordinates and grid references are both limited to the effective
    privacy level, so a 10 km view never carries the 1 km reference.
    """
    sensitive = is_sensitive(observation, species)
    level = privacy.effective_privacy(observation.privacy_level, sensitive, viewer_role)
    exact = privacy.can_view_exact(observation.privacy_level, sensitive, viewer_role)
    coords = privacy.display_coordinates(
        observation.lat, observation.lng, observation.privacy_level, sensitive, viewer_role
    )

    view = observation.model_dump(mode="json")
    view["lat"] = coords.lat
    view["lng"] = coords.lng
    for field in ("grid1km", "grid10km"):
        if field not in _VISIBLE_GRID_REFS[level]:
            view[field] = None
    view["privacy_applied"] = not exact
    if exact:
        view["exact_location"] = {"lat": observation.lat, "lng": observation.lng}
    return view
