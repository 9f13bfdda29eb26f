"""Base class for content handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from contenthandler.content.models import Content
from contenthandler.store.models import (
    Encounter,
    EncounterRole,
    EncounterType,
    Patient,
    Provider,
)


class ContentHandler(ABC):
    """Maps Content to and from records in a record store.

    Each handler claims one discriminator, either a MIME content type or
    a (type code, format code) pair, and only returns stored content that
    matches it. Handlers hold no mutable state after construction.
    """

    @abstractmethod
    def save_content(
        self,
        patient: Patient,
        providers_by_role: Mapping[EncounterRole, Iterable[Provider]],
        encounter_type: EncounterType | None,
        content: Content,
    ) -> Encounter:
        """Store ``content`` in a new encounter for ``patient``.

        Every call creates a new encounter; nothing is de-duplicated.

        Returns:
            The saved encounter.
        """

    @abstractmethod
    def fetch_content(self, encounter_ref: int | str) -> Content | None:
        """Return the first matching content of an encounter.

        Args:
            encounter_ref: Encounter id (``int``) or uuid (``str``).

        Returns:
            The content, or ``None`` if the encounter is unknown or holds
            nothing this handler recognizes.
        """

    @abstractmethod
    def query_encounters(
        self,
        patient: Patient,
        encounter_types: Sequence[EncounterType] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Content]:
        """Return all matching content across a patient's encounters.

        Either date bound may be ``None`` for an open range. Returns an
        empty list when nothing matches.
        """

    @abstractmethod
    def clone_handler(self) -> ContentHandler:
        """Return a new, independent handler with the same discriminator."""
