"""In-memory record and concept stores.

Dictionary-backed implementations of the store ports for tests and for
hosts that embed the handlers without a record server. Nothing is
persisted across processes.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from datetime import UTC, datetime

from contenthandler.store.base import RAW_VIEW, ConceptStore, RecordStore
from contenthandler.store.models import Concept, Encounter, EncounterType, Obs, Patient

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class InMemoryRecordStore(RecordStore):
    """Encounter store keyed by id, with a uuid index and an obs index."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._encounters: dict[int, Encounter] = {}
        self._by_uuid: dict[str, int] = {}
        self._obs: dict[int, Obs] = {}
        self._next_encounter_id = 1
        self._next_obs_id = 1

    def save_encounter(self, encounter: Encounter) -> Encounter:
        with self._lock:
            if encounter.encounter_id is None:
                encounter.encounter_id = self._next_encounter_id
                self._next_encounter_id += 1
            for obs in encounter.obs:
                if obs.obs_id is None:
                    obs.obs_id = self._next_obs_id
                    self._next_obs_id += 1
                self._obs[obs.obs_id] = obs
            self._encounters[encounter.encounter_id] = encounter
            self._by_uuid[encounter.uuid] = encounter.encounter_id
        logger.debug(
            "Saved encounter %s with %d obs", encounter.encounter_id, len(encounter.obs)
        )
        return encounter

    def get_encounter(self, encounter_id: int) -> Encounter | None:
        with self._lock:
            return self._encounters.get(encounter_id)

    def get_encounter_by_uuid(self, uuid: str) -> Encounter | None:
        with self._lock:
            encounter_id = self._by_uuid.get(uuid)
            if encounter_id is None:
                return None
            return self._encounters.get(encounter_id)

    def get_encounters(
        self,
        patient: Patient,
        *,
        encounter_types: Sequence[EncounterType] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Encounter]:
        if date_from is not None:
            date_from = _as_utc(date_from)
        if date_to is not None:
            date_to = _as_utc(date_to)
        type_uuids = {t.uuid for t in encounter_types} if encounter_types else None
        with self._lock:
            candidates = list(self._encounters.values())

        results: list[Encounter] = []
        for enc in candidates:
            if enc.patient is None or enc.patient.uuid != patient.uuid:
                continue
            if type_uuids is not None and (
                enc.encounter_type is None or enc.encounter_type.uuid not in type_uuids
            ):
                continue
            if date_from is not None and _as_utc(enc.encounter_datetime) < date_from:
                continue
            if date_to is not None and _as_utc(enc.encounter_datetime) > date_to:
                continue
            results.append(enc)
        results.sort(key=lambda e: (_as_utc(e.encounter_datetime), e.encounter_id or 0))
        return results

    def get_complex_obs(self, obs_id: int, view: str = RAW_VIEW) -> Obs | None:
        with self._lock:
            return self._obs.get(obs_id)

    def encounter_count(self) -> int:
        """Return the number of stored encounters."""
        with self._lock:
            return len(self._encounters)


class InMemoryConceptStore(ConceptStore):
    """Concept store with exact-name lookup.

    Duplicate names are not rejected. Lookup returns the earliest saved
    concept with the name.
    """

    def __init__(self, concepts: Sequence[Concept] = ()) -> None:
        self._lock = threading.Lock()
        self._concepts: list[Concept] = []
        self._next_id = 1
        for concept in concepts:
            self.save_concept(concept)

    def get_concept_by_name(self, name: str) -> Concept | None:
        with self._lock:
            for concept in self._concepts:
                if concept.name == name:
                    return concept
        return None

    def save_concept(self, concept: Concept) -> Concept:
        with self._lock:
            if concept.concept_id is None:
                concept.concept_id = self._next_id
                self._next_id += 1
            if not any(c is concept for c in self._concepts):
                self._concepts.append(concept)
        return concept

    def find_concepts(self, name_prefix: str = "") -> list[Concept]:
        """Return concepts whose name starts with ``name_prefix``."""
        with self._lock:
            return [c for c in self._concepts if c.name.startswith(name_prefix)]
