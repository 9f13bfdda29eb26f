"""Content handlers: the handler contract, the unstructured handler and the registry."""

from contenthandler.handlers.base import ContentHandler
from contenthandler.handlers.registry import HandlerRegistry
from contenthandler.handlers.unstructured import (
    ATTACHMENT_CONCEPT_BASE_NAME,
    UnstructuredDataHandler,
)

__all__ = [
    "ATTACHMENT_CONCEPT_BASE_NAME",
    "ContentHandler",
    "HandlerRegistry",
    "UnstructuredDataHandler",
]
