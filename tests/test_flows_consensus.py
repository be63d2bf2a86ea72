"""
Tests for the consensus recalculation flow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mushroom_map.flows import consensus as flow_module
from mushroom_map.reference.roles import Role
from mushroom_map.schemas import (
    Identification,
    Observation,
    ObservationStatus,
    Vote,
    Voter,
)
from mushroom_map.store import ObservationStore

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def _vote(voter_id: str, role: Role, value: int = 1) -> Vote:
    return Vote(voter=Voter(id=voter_id, role=role), value=value)


def _observation(obs_id: str, status: ObservationStatus, votes: list[Vote]) -> Observation:
    return Observation(
        id=obs_id,
        user_id="owner",
        lat=53.35,
        lng=-6.26,
        status=status,
        identifications=[Identification(id=f"{obs_id}-i1", proposer_id="p", score=99, votes=votes)]
        if status != ObservationStatus.NEEDS_ID
        else [],
    )


class TestLoadOpenObservations:
    """Test selecting observations to recalculate."""

    def test_skips_needs_id(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        store = ObservationStore(tmp_path)
        monkeypatch.setattr(flow_module, "store", store)
        store.save(_observation("a", ObservationStatus.NEEDS_ID, []))
        store.save(_observation("b", ObservationStatus.HAS_CANDIDATES, []))
        store.save(_observation("c", ObservationStatus.CONSENSUS, []))

        result = flow_module.load_open_observations()

        assert [o.id for o in result] == ["b", "c"]


class TestRecalculateObservation:
    """Test recalculating one observation."""

    def test_writes_scores_and_status(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        store = ObservationStore(tmp_path)
        monkeypatch.setattr(flow_module, "store", store)
        obs = _observation(
            "b",
            ObservationStatus.HAS_CANDIDATES,
            [_vote("x", Role.BIOLOGIST), _vote("y", Role.ADMIN)],
        )

        assert flow_module.recalculate_observation(obs, 10, 5) is True

        loaded = store.load("b")
        assert loaded is not None
        assert loaded.status == ObservationStatus.CONSENSUS
        assert loaded.identifications[0].score == 10
        assert loaded.identifications[0].is_consensus is True
        assert store.read_meta("b")["source"] == "flows.consensus"


class TestRecalculateAll:
    """Test the full flow."""

    def test_corrects_stale_consensus(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        store = ObservationStore(tmp_path)
        monkeypatch.setattr(flow_module, "store", store)

        stale = _observation("stale", ObservationStatus.CONSENSUS, [_vote("u", Role.USER)])
        stale.identifications[0].is_consensus = True
        store.save(stale)
        store.save(_observation("fresh", ObservationStatus.HAS_CANDIDATES, [_vote("m", Role.MOD)]))
        store.save(_observation("empty", ObservationStatus.NEEDS_ID, []))

        result = flow_module.recalculate_all(threshold=10, margin=5)

        assert result == {"processed": 2, "updated": 2, "errors": 0}
        reloaded = store.load("stale")
        assert reloaded is not None
        assert reloaded.status == ObservationStatus.HAS_CANDIDATES
        assert reloaded.identifications[0].is_consensus is False
        assert reloaded.identifications[0].score == 1

    def test_lower_threshold_from_arguments(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        store = ObservationStore(tmp_path)
        monkeypatch.setattr(flow_module, "store", store)
        store.save(_observation("b", ObservationStatus.HAS_CANDIDATES, [_vote("m", Role.MOD)]))

        flow_module.recalculate_all(threshold=3, margin=3)

        reloaded = store.load("b")
        assert reloaded is not None
        assert reloaded.status == ObservationStatus.CONSENSUS

    def test_unchanged_observation_not_written(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        store = ObservationStore(tmp_path)
        monkeypatch.setattr(flow_module, "store", store)
        obs = _observation("b", ObservationStatus.HAS_CANDIDATES, [_vote("x", Role.BIOLOGIST)])
        obs.identifications[0].score = 5
        store.save(obs, source="services.observations")

        assert flow_module.recalculate_observation(obs, 10, 5) is False
        assert store.read_meta("b")["source"] == "services.observations"

    def test_reloads_record_before_recalculating(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        store = ObservationStore(tmp_path)
        monkeypatch.setattr(flow_module, "store", store)
        snapshot = _observation("b", ObservationStatus.HAS_CANDIDATES, [_vote("x", Role.BIOLOGIST)])
        latest = snapshot.model_copy(deep=True)
        latest.identifications[0].votes.append(_vote("y", Role.BIOLOGIST))
        store.save(latest)

        flow_module.recalculate_observation(snapshot, 10, 5)

        reloaded = store.load("b")
        assert reloaded is not None
        assert len(reloaded.identifications[0].votes) == 2
        assert reloaded.status == ObservationStatus.CONSENSUS
