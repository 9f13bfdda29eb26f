"""Abstract ports for the external record and vocabulary stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from contenthandler.store.models import Concept, Encounter, EncounterType, Obs, Patient

# View name for loading a complex observation with its attached object untouched.
RAW_VIEW = "RAW_VIEW"


class RecordStore(ABC):
    """Persists encounters and the observations they own.

    Implementations are responsible for their own locking. Callers may
    invoke any method concurrently from several threads.
    """

    @abstractmethod
    def save_encounter(self, encounter: Encounter) -> Encounter:
        """Persist an encounter, assigning ids to it and its observations."""

    @abstractmethod
    def get_encounter(self, encounter_id: int) -> Encounter | None:
        """Return an encounter by numeric id, or ``None``."""

    @abstractmethod
    def get_encounter_by_uuid(self, uuid: str) -> Encounter | None:
        """Return an encounter by uuid, or ``None``."""

    @abstractmethod
    def get_encounters(
        self,
        patient: Patient,
        *,
        encounter_types: Sequence[EncounterType] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Encounter]:
        """Return a patient's encounters, oldest first.

        Args:
            patient: Subject to search.
            encounter_types: Restrict to these types. ``None`` or empty
                means any type.
            date_from: Inclusive lower bound on the encounter datetime.
            date_to: Inclusive upper bound on the encounter datetime.

        Naive bounds are taken to be UTC.
        """

    @abstractmethod
    def get_complex_obs(self, obs_id: int, view: str = RAW_VIEW) -> Obs | None:
        """Load an observation together with its complex data."""


class ConceptStore(ABC):
    """Vocabulary lookups for observation concepts."""

    @abstractmethod
    def get_concept_by_name(self, name: str) -> Concept | None:
        """Return the concept with exactly this name, or ``None``."""

    @abstractmethod
    def save_concept(self, concept: Concept) -> Concept:
        """Persist a concept, assigning an id if it has none."""
