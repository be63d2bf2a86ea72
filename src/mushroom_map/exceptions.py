"""Domain errors raised by the service layer."""

from __future__ import annotations


class MushroomMapError(Exception):
    """Base class for all domain errors."""


class ObservationNotFoundError(MushroomMapError):
    def __init__(self, observation_id: str) -> None:
        super().__init__(f"Observation not found: {observation_id}")
        self.observation_id = observation_id


class IdentificationNotFoundError(MushroomMapError):
    def __init__(self, identification_id: str) -> None:
        super().__init__(f"Identification not found: {identification_id}")
        self.identification_id = identification_id


class SelfVoteError(MushroomMapError):
    """A user tried to vote on their own identification."""

    def __init__(self) -> None:
        super().__init__("Cannot vote on your own identification")


class PermissionDeniedError(MushroomMapError):
    """The acting role is not allowed to perform the operation."""
