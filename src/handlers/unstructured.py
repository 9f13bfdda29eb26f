"""Content handler that stores data as unstructured blobs.

Each Content is attached as-is to a single complex observation inside a
new encounter. The observation's concept is an "Unstructured Attachment"
concept named after the handler's title, created on first use.

Retrieval scans complex observations whose concept carries the
attachment prefix and keeps those whose stored Content has the same
title as the handler. Attached objects that are not Content are logged
and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime

from contenthandler.config import HANDLER_KEY_PROPERTY, ConfigSource
from contenthandler.content.models import CodedValue, Content
from contenthandler.handlers.base import ContentHandler
from contenthandler.store.base import RAW_VIEW, ConceptStore, RecordStore
from contenthandler.store.models import (
    COMPLEX_DATATYPE,
    ComplexData,
    Concept,
    Encounter,
    EncounterRole,
    EncounterType,
    Obs,
    Patient,
    Provider,
)

logger = logging.getLogger(__name__)

ATTACHMENT_CONCEPT_BASE_NAME = "Unstructured Attachment"
ATTACHMENT_CONCEPT_DESCRIPTION = "Represents a generic unstructured data attachment"
ATTACHMENT_CONCEPT_CLASS = "Misc"


class UnstructuredDataHandler(ContentHandler):
    """Stores and retrieves content as opaque attachments.

    Construct with either a MIME ``content_type`` or both ``type_code``
    and ``format_code``, never both forms.

    Args:
        content_type: MIME type this handler claims.
        type_code: Type code this handler claims.
        format_code: Format code this handler claims. Its code is the
            handler's title; the type code does not take part in matching.
        records: Store holding encounters and observations.
        concepts: Vocabulary used to look up or create attachment concepts.
        config: Supplies the handler key for newly created concepts.

    Raises:
        ValueError: If neither or both discriminator forms are given.
    """

    def __init__(
        self,
        content_type: str | None = None,
        *,
        type_code: CodedValue | None = None,
        format_code: CodedValue | None = None,
        records: RecordStore,
        concepts: ConceptStore,
        config: ConfigSource,
    ) -> None:
        has_codes = type_code is not None or format_code is not None
        if content_type is not None and has_codes:
            raise ValueError("Pass either content_type or type_code/format_code, not both")
        if content_type is None:
            if type_code is None or format_code is None:
                raise ValueError("Both type_code and format_code are required without content_type")
        elif not content_type:
            raise ValueError("content_type must not be empty")

        self._content_type = content_type
        self._type_code = type_code
        self._format_code = format_code
        self._records = records
        self._concepts = concepts
        self._config = config

    def __repr__(self) -> str:
        if self._content_type is not None:
            return f"{type(self).__name__}(content_type={self._content_type!r})"
        return (
            f"{type(self).__name__}(type_code={self._type_code!s}, "
            f"format_code={self._format_code!s})"
        )

    @property
    def content_type(self) -> str | None:
        return self._content_type

    @property
    def type_code(self) -> CodedValue | None:
        return self._type_code

    @property
    def format_code(self) -> CodedValue | None:
        return self._format_code

    @property
    def title(self) -> str:
        """Title used to name the attachment concept and to filter content."""
        if self._content_type is not None:
            return self._content_type
        return build_type_format_code_title(self._type_code, self._format_code)

    @property
    def concept_name(self) -> str:
        return f"{ATTACHMENT_CONCEPT_BASE_NAME} ({self.title})"

    # ── Save ─────────────────────────────────────────────────────

    def save_content(
        self,
        patient: Patient,
        providers_by_role: Mapping[EncounterRole, Iterable[Provider]],
        encounter_type: EncounterType | None,
        content: Content,
    ) -> Encounter:
        """Create and persist an encounter holding ``content``.

        The encounter is stamped with the current time and carries every
        (role, provider) pair from ``providers_by_role``.
        """
        obs = self._create_attachment_obs(content)
        obs.person = patient

        enc = Encounter(
            patient=patient,
            encounter_type=encounter_type,
            encounter_datetime=obs.obs_datetime,
        )
        enc.add_obs(obs)
        for role, providers in providers_by_role.items():
            for provider in providers:
                enc.add_provider(role, provider)

        saved = self._records.save_encounter(enc)
        logger.debug(
            "Saved content %s as encounter %s (%s)", content.content_id, saved.uuid, self.title
        )
        return saved

    def _create_attachment_obs(self, content: Content) -> Obs:
        return Obs(
            concept=self._get_attachment_concept(),
            complex_data=ComplexData(title=self.title, data=content),
            obs_datetime=datetime.now(tz=UTC),
        )

    def _get_attachment_concept(self) -> Concept:
        """Look up the attachment concept by name, creating it when absent.

        Two callers creating the same concept at once may both succeed;
        the store decides which one later lookups return.
        """
        name = self.concept_name
        concept = self._concepts.get_concept_by_name(name)
        if concept is None:
            concept = Concept(
                name=name,
                description=ATTACHMENT_CONCEPT_DESCRIPTION,
                datatype=COMPLEX_DATATYPE,
                concept_class=ATTACHMENT_CONCEPT_CLASS,
                handler=self._config.get_property(HANDLER_KEY_PROPERTY),
            )
            concept = self._concepts.save_concept(concept)
            logger.info("Created attachment concept %r", name)
        return concept

    # ── Fetch / query ────────────────────────────────────────────

    def fetch_content(self, encounter_ref: int | str) -> Content | None:
        if isinstance(encounter_ref, str):
            enc = self._records.get_encounter_by_uuid(encounter_ref)
        else:
            enc = self._records.get_encounter(encounter_ref)
        if enc is None:
            return None

        found = self._contents_from_encounter(enc)
        return found[0] if found else None

    def query_encounters(
        self,
        patient: Patient,
        encounter_types: Sequence[EncounterType] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Content]:
        encounters = self._records.get_encounters(
            patient,
            encounter_types=encounter_types,
            date_from=date_from,
            date_to=date_to,
        )
        results: list[Content] = []
        for enc in encounters or []:
            results.extend(self._contents_from_encounter(enc))
        return results

    def _contents_from_encounter(self, enc: Encounter) -> list[Content]:
        title = self.title
        results: list[Content] = []
        for obs in enc.obs:
            if not (obs.is_complex and is_attachment_concept(obs.concept)):
                continue

            complex_obs = (
                self._records.get_complex_obs(obs.obs_id, RAW_VIEW) if obs.obs_id is not None else obs
            )
            data = None
            if complex_obs is not None and complex_obs.complex_data is not None:
                data = complex_obs.complex_data.data

            if not isinstance(data, Content):
                logger.warning(
                    "Unprocessable content found in unstructured data obs (obs_id=%s)", obs.obs_id
                )
                continue

            if self._content_title(data) == title:
                results.append(data)
        return results

    def _content_title(self, content: Content) -> str | None:
        if self._content_type is not None:
            return content.content_type
        if content.format_code is None:
            return None
        return build_type_format_code_title(content.type_code, content.format_code)

    # ── Cloning ──────────────────────────────────────────────────

    def clone_handler(self) -> UnstructuredDataHandler:
        if self._content_type is not None:
            return UnstructuredDataHandler(
                self._content_type,
                records=self._records,
                concepts=self._concepts,
                config=self._config,
            )
        return UnstructuredDataHandler(
            type_code=self._type_code,
            format_code=self._format_code,
            records=self._records,
            concepts=self._concepts,
            config=self._config,
        )


def build_type_format_code_title(
    type_code: CodedValue | None, format_code: CodedValue | None
) -> str:
    """Title for a type/format pair: the format code's code."""
    if format_code is None:
        raise ValueError("A format code is required to build a title")
    return format_code.code


def is_attachment_concept(concept: Concept) -> bool:
    return concept.name.startswith(ATTACHMENT_CONCEPT_BASE_NAME)
