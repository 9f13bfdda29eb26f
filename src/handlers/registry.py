"""Handler registry: routes content to the handler registered for it.

Handlers are registered as prototypes under a MIME content type or a
(type code, format code) pair. Lookups hand out ``clone_handler()``
copies, so callers never share a registered instance. Anything without
a registration falls back to an ``UnstructuredDataHandler`` for the
requested discriminator.
"""

from __future__ import annotations

import logging
import threading

from contenthandler.config import ConfigSource
from contenthandler.content.models import CodedValue, Content
from contenthandler.errors import AlreadyRegisteredError, InvalidCodedValueError
from contenthandler.handlers.base import ContentHandler
from contenthandler.handlers.unstructured import UnstructuredDataHandler
from contenthandler.store.base import ConceptStore, RecordStore

logger = logging.getLogger(__name__)


def _is_complete(value: CodedValue | None) -> bool:
    return value is not None and bool(value.coding_scheme) and bool(value.code)


def _check_coded_value(value: CodedValue, label: str) -> None:
    if not _is_complete(value):
        raise InvalidCodedValueError(
            f"{label} must have a coding scheme and a code (got {value!s})"
        )


def _check_content_type(content_type: str) -> None:
    if not content_type:
        raise ValueError("content_type must not be empty")


class HandlerRegistry:
    """Thread-safe registry of content handlers.

    Args:
        records: Record store given to default unstructured handlers.
        concepts: Concept store given to default unstructured handlers.
        config: Configuration given to default unstructured handlers.
    """

    def __init__(
        self,
        *,
        records: RecordStore,
        concepts: ConceptStore,
        config: ConfigSource,
    ) -> None:
        self._records = records
        self._concepts = concepts
        self._config = config
        self._lock = threading.Lock()
        self._by_content_type: dict[str, ContentHandler] = {}
        self._by_type_format: dict[tuple[CodedValue, CodedValue], ContentHandler] = {}

    # ── Registration ─────────────────────────────────────────────

    def register_content_type_handler(self, content_type: str, handler: ContentHandler) -> None:
        """Register ``handler`` for a MIME type.

        Raises:
            AlreadyRegisteredError: If the content type already has a handler.
            ValueError: If the content type is empty.
        """
        _check_content_type(content_type)
        with self._lock:
            if content_type in self._by_content_type:
                raise AlreadyRegisteredError(
                    f"A handler is already registered for content type {content_type!r}"
                )
            self._by_content_type[content_type] = handler
        logger.debug("Registered %r for content type %s", handler, content_type)

    def register_type_format_handler(
        self, type_code: CodedValue, format_code: CodedValue, handler: ContentHandler
    ) -> None:
        """Register ``handler`` for a type/format code pair.

        Raises:
            AlreadyRegisteredError: If the pair already has a handler.
            InvalidCodedValueError: If either code is incomplete.
        """
        _check_coded_value(type_code, "type_code")
        _check_coded_value(format_code, "format_code")
        key = (type_code, format_code)
        with self._lock:
            if key in self._by_type_format:
                raise AlreadyRegisteredError(
                    f"A handler is already registered for type {type_code!s} "
                    f"and format {format_code!s}"
                )
            self._by_type_format[key] = handler
        logger.debug("Registered %r for type %s, format %s", handler, type_code, format_code)

    def deregister_content_type_handler(self, content_type: str) -> None:
        with self._lock:
            self._by_content_type.pop(content_type, None)

    def deregister_type_format_handler(self, type_code: CodedValue, format_code: CodedValue) -> None:
        with self._lock:
            self._by_type_format.pop((type_code, format_code), None)

    # ── Lookup ───────────────────────────────────────────────────

    def get_content_handler(self, content_type: str) -> ContentHandler:
        """Return a handler for a MIME type, defaulting to an unstructured one."""
        _check_content_type(content_type)
        with self._lock:
            prototype = self._by_content_type.get(content_type)
        if prototype is not None:
            return prototype.clone_handler()
        return UnstructuredDataHandler(
            content_type,
            records=self._records,
            concepts=self._concepts,
            config=self._config,
        )

    def get_type_format_handler(
        self, type_code: CodedValue, format_code: CodedValue
    ) -> ContentHandler:
        """Return a handler for a type/format pair, defaulting to an unstructured one."""
        _check_coded_value(type_code, "type_code")
        _check_coded_value(format_code, "format_code")
        with self._lock:
            prototype = self._by_type_format.get((type_code, format_code))
        if prototype is not None:
            return prototype.clone_handler()
        return UnstructuredDataHandler(
            type_code=type_code,
            format_code=format_code,
            records=self._records,
            concepts=self._concepts,
            config=self._config,
        )

    def get_handler_for(self, content: Content) -> ContentHandler:
        """Route a Content to a handler.

        A registered type/format handler wins over a registered content
        type handler. Without either, the default unstructured handler is
        keyed by type/format when both codes are present and complete,
        otherwise by content type.

        Raises:
            ValueError: If the content has neither codes nor a content type.
        """
        has_codes = _is_complete(content.type_code) and _is_complete(content.format_code)
        with self._lock:
            if has_codes:
                prototype = self._by_type_format.get((content.type_code, content.format_code))
                if prototype is not None:
                    logger.debug("Routing %s by type/format", content.content_id)
                    return prototype.clone_handler()
            if content.content_type:
                prototype = self._by_content_type.get(content.content_type)
                if prototype is not None:
                    logger.debug("Routing %s by content type", content.content_id)
                    return prototype.clone_handler()

        if has_codes:
            return self.get_type_format_handler(content.type_code, content.format_code)
        if content.content_type:
            return self.get_content_handler(content.content_type)
        raise ValueError(
            f"Content {content.content_id} has no type/format codes and no content type"
        )
