"""Record store data models: patients, encounters, observations, concepts.

These mirror the shape of a clinical record server closely enough for the
content handlers to work against. An Encounter owns its observations and
provider assignments by value; the store's ids and uuids are the only
cross references.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

COMPLEX_DATATYPE = "Complex"


def _new_uuid() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Reference entities
# ---------------------------------------------------------------------------


class Patient(BaseModel):
    """The subject an encounter is recorded against."""

    model_config = ConfigDict(frozen=True)

    patient_id: int
    uuid: str = Field(default_factory=_new_uuid)
    name: str = ""


class Provider(BaseModel):
    """A clinician or system participating in an encounter."""

    model_config = ConfigDict(frozen=True)

    provider_id: int
    uuid: str = Field(default_factory=_new_uuid)
    name: str = ""


class EncounterRole(BaseModel):
    """The role a provider plays in an encounter."""

    model_config = ConfigDict(frozen=True)

    name: str
    uuid: str = Field(default_factory=_new_uuid)


class EncounterType(BaseModel):
    """Classifies an encounter, e.g. "Clinical Document"."""

    model_config = ConfigDict(frozen=True)

    name: str
    uuid: str = Field(default_factory=_new_uuid)


class Concept(BaseModel):
    """A vocabulary entry used to classify observations."""

    concept_id: int | None = None
    uuid: str = Field(default_factory=_new_uuid)
    name: str
    description: str = ""
    datatype: str = "N/A"
    concept_class: str = "Misc"
    handler: str | None = None

    @property
    def is_complex(self) -> bool:
        return self.datatype == COMPLEX_DATATYPE


# ---------------------------------------------------------------------------
# Encounter graph
# ---------------------------------------------------------------------------


class ComplexData(BaseModel):
    """An opaque object attached to a complex observation."""

    title: str
    data: Any = None


class Obs(BaseModel):
    """A single observation inside an encounter."""

    obs_id: int | None = None
    uuid: str = Field(default_factory=_new_uuid)
    concept: Concept
    person: Patient | None = None
    obs_datetime: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    complex_data: ComplexData | None = None

    @property
    def is_complex(self) -> bool:
        return self.concept.is_complex


class EncounterProvider(BaseModel):
    """A provider assigned to an encounter under a role."""

    role: EncounterRole
    provider: Provider


class Encounter(BaseModel):
    """A parent record grouping observations for one patient visit."""

    encounter_id: int | None = None
    uuid: str = Field(default_factory=_new_uuid)
    patient: Patient | None = None
    encounter_type: EncounterType | None = None
    encounter_datetime: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    providers: list[EncounterProvider] = Field(default_factory=list)
    obs: list[Obs] = Field(default_factory=list)

    def add_obs(self, obs: Obs) -> None:
        self.obs.append(obs)

    def add_provider(self, role: EncounterRole, provider: Provider) -> None:
        self.providers.append(EncounterProvider(role=role, provider=provider))
