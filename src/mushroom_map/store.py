"""JSON observation store with metadata envelopes.

Each observation lives in ``observations/{id}.json`` wrapped in an envelope::

    {"meta": {"source": "...", "updated_at": "..."}, "data": {...observation...}}

Writes go to a temp file in the same directory and are moved into place with
``os.replace``, so readers never see a half-written record. Read-modify-write
callers hold ``store.lock(observation_id)`` from load to save; the lock is a
``filelock`` file next to the record and works across threads and processes.

The exact coordinates are stored here; nothing read from the store should be
shown to a viewer without going through ``analysis.privacy``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 (used at runtime)
from typing import Any

from filelock import FileLock

from mushroom_map.schemas import Observation, Species

logger = logging.getLogger(__name__)

OBSERVATIONS_DIR = "observations"
SPECIES_FILE = "species.json"
LOCK_TIMEOUT_SECONDS = 30


class ObservationStore:
    """Reads and writes observation records under ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.observations = base_dir / OBSERVATIONS_DIR

    def lock(self, observation_id: str) -> FileLock:
        """Exclusive lock for one observation record.

        Use as a context manager around load, modify and save::

            with store.lock(obs_id):
                obs = store.load(obs_id)
                ...
                store.save(obs)
        """
        full = self._resolve(self._relative(observation_id))
        full.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(f"{full}.lock", timeout=LOCK_TIMEOUT_SECONDS)

    def save(self, observation: Observation, source: str = "mushroom-map", **params: Any) -> Path:
        """Write ``observation`` wrapped in a metadata envelope.

        Args:
            observation: Record to persist (overwrites any previous version).
            source: Identifier of the writer (service, flow name, ...).
            **params: Extra metadata fields.

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(self._relative(observation.id))

        meta: dict[str, Any] = {
            "source": source,
            "updated_at": datetime.now(UTC).isoformat(),
        }
        if params:
            meta.update(params)

        self._write_json(full, {"meta": meta, "data": observation.model_dump(mode="json")})
        logger.debug("saved observation %s to %s", observation.id, full)
        return full

    def load(self, observation_id: str) -> Observation | None:
        """Load one observation, or None if it doesn't exist."""
        full = self._resolve(self._relative(observation_id))
        if not full.exists():
            return None
        return self._read(full)

    def load_all(self) -> list[Observation]:
        """Load every stored observation, ordered by id."""
        if not self.observations.exists():
            return []
        records = [self._read(path) for path in self.observations.glob("*.json")]
        return sorted(records, key=lambda obs: obs.id)

    def read_meta(self, observation_id: str) -> dict[str, Any]:
        """Return the envelope metadata for an observation ({} if missing)."""
        full = self._resolve(self._relative(observation_id))
        if not full.exists():
            return {}
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        return envelope.get("meta", {})

    def save_species(self, species: list[Species], source: str = "mushroom-map") -> Path:
        """Replace the species catalogue (used for sensitivity lookups)."""
        full = self._resolve(Path(SPECIES_FILE))
        envelope = {
            "meta": {"source": source, "updated_at": datetime.now(UTC).isoformat()},
            "data": [s.model_dump(mode="json") for s in species],
        }
        self._write_json(full, envelope)
        return full

    def load_species(self) -> dict[str, Species]:
        """Species catalogue keyed by id ({} if none has been saved)."""
        full = self._resolve(Path(SPECIES_FILE))
        if not full.exists():
            return {}
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        records = [Species.model_validate(item) for item in envelope.get("data", [])]
        return {s.id: s for s in records}

    @staticmethod
    def _relative(observation_id: str) -> Path:
        return Path(OBSERVATIONS_DIR) / f"{observation_id}.json"

    @staticmethod
    def _write_json(full: Path, payload: dict[str, Any]) -> None:
        full.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=full.parent, prefix=f".{full.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, full)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read(self, full: Path) -> Observation:
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        return Observation.model_validate(envelope.get("data", envelope))

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
