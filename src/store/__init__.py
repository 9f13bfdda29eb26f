"""Record store ports, models and an in-memory implementation."""

from contenthandler.store.base import RAW_VIEW, ConceptStore, RecordStore
from contenthandler.store.memory import InMemoryConceptStore, InMemoryRecordStore
from contenthandler.store.models import (
    ComplexData,
    Concept,
    Encounter,
    EncounterProvider,
    EncounterRole,
    EncounterType,
    Obs,
    Patient,
    Provider,
)

__all__ = [
    "RAW_VIEW",
    "ComplexData",
    "Concept",
    "ConceptStore",
    "Encounter",
    "EncounterProvider",
    "EncounterRole",
    "EncounterType",
    "InMemoryConceptStore",
    "InMemoryRecordStore",
    "Obs",
    "Patient",
    "Provider",
    "RecordStore",
]
