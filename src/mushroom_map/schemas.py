"""
Domain models for mushroom map.

Pydantic models for observations, identifications and votes, plus the
input schemas that validate user submissions before they reach the engines.
The engines themselves assume well-formed input.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from mushroom_map.reference.geography import IRELAND_BBOX
from mushroom_map.reference.roles import Role


def _utcnow() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# Enums
# =============================================================================


class PrivacyLevel(StrEnum):
    """Owner-chosen location precision."""

    EXACT = "EXACT"
    GRID_1KM = "GRID_1KM"
    GRID_10KM = "GRID_10KM"


class ObservationStatus(StrEnum):
    """Identification progress of an observation."""

    NEEDS_ID = "NEEDS_ID"
    HAS_CANDIDATES = "HAS_CANDIDATES"
    CONSENSUS = "CONSENSUS"


class IdentificationMethod(StrEnum):
    """How an identification was proposed."""

    AI = "AI"
    HUMAN = "HUMAN"


# =============================================================================
# Voting
# =============================================================================


class Voter(BaseModel):
    """Snapshot of a voter's trust at scoring time (not a live reference)."""

    id: str
    # Unknown role strings are kept as-is and scored with the default weight.
    role: Role | str = Field(default=Role.USER, union_mode="left_to_right")
    reputation: int = 0


class Vote(BaseModel):
    """One user's endorsement (+1) or rejection (-1) of an identification."""

    voter: Voter
    value: Literal[-1, 1]
    created_at: datetime = Field(default_factory=_utcnow)


class Identification(BaseModel):
    """A proposed species label for an observation."""

    id: str
    proposer_id: str
    species_id: str | None = None
    rationale: str | None = Field(default=None, max_length=1000)
    confidence: float | None = Field(default=None, ge=0, le=1)
    method: IdentificationMethod = IdentificationMethod.HUMAN
    score: int = Field(default=0, description="Cached weighted score; recomputed on every vote")
    is_consensus: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    votes: list[Vote] = Field(default_factory=list)

    def vote_by(self, voter_id: str) -> Vote | None:
        """Return the existing vote cast by ``voter_id``, if any."""
        for vote in self.votes:
            if vote.voter.id == voter_id:
                return vote
        return None


# =============================================================================
# Species & observations
# =============================================================================


class Species(BaseModel):
    """A mushroom species; sensitive species get extra location protection."""

    id: str
    latin_name: str
    common_en: str | None = None
    sensitive: bool = False


class Observation(BaseModel):
    """A sighting. ``lat``/``lng`` are exact and never shown without masking."""

    id: str
    user_id: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    grid1km: str | None = None
    grid10km: str | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.GRID_1KM
    status: ObservationStatus = ObservationStatus.NEEDS_ID
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    identifications: list[Identification] = Field(default_factory=list)

    def get_identification(self, identification_id: str) -> Identification | None:
        for ident in self.identifications:
            if ident.id == identification_id:
                return ident
        return None

    @property
    def consensus_identification(self) -> Identification | None:
        """The identification currently flagged as consensus, if any."""
        return next((i for i in self.identifications if i.is_consensus), None)


class Coordinates(BaseModel):
    """A coordinate pair that is safe to show to a given viewer."""

    lat: float
    lng: float


class GridCoordinates(BaseModel):
    """Exact position plus stored Irish grid references."""

    lat: float
    lng: float
    grid1km: str
    grid10km: str


class ConsensusResult(BaseModel):
    """Outcome of a consensus evaluation; the caller applies it."""

    winner_id: str | None = None
    new_status: ObservationStatus


# =============================================================================
# Input schemas (API boundary validation)
# =============================================================================


class ObservationCreate(BaseModel):
    """Payload for submitting a new observation."""

    model_config = {"str_strip_whitespace": True}

    lat: float
    lng: float
    notes: str | None = Field(default=None, max_length=2000)
    privacy_level: PrivacyLevel = PrivacyLevel.GRID_1KM

    @model_validator(mode="after")
    def _within_ireland(self) -> ObservationCreate:
        if not IRELAND_BBOX.contains(self.lat, self.lng):
            msg = f"Location ({self.lat}, {self.lng}) is outside Ireland"
            raise ValueError(msg)
        return self


class IdentificationCreate(BaseModel):
    """Payload for proposing an identification."""

    model_config = {"str_strip_whitespace": True}

    species_id: str | None = None
    confidence: float | None = Field(default=None, ge=0, le=1)
    rationale: str | None = Field(default=None, max_length=1000)
    method: IdentificationMethod = IdentificationMethod.HUMAN


class VoteCreate(BaseModel):
    """Payload for voting on an identification."""

    value: Literal[-1, 1]

