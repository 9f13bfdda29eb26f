"""Content handlers for storing encapsulated payloads in a clinical record store."""

from contenthandler.content.models import (
    CodedValue,
    CompressionFormat,
    Content,
    Representation,
)
from contenthandler.errors import (
    AlreadyRegisteredError,
    CodecError,
    ContentHandlerError,
    InvalidCodedValueError,
    InvalidRepresentationError,
    UnsupportedCompressionError,
)
from contenthandler.handlers import ContentHandler, HandlerRegistry, UnstructuredDataHandler

__version__ = "1.0.0"

__all__ = [
    "AlreadyRegisteredError",
    "CodecError",
    "CodedValue",
    "CompressionFormat",
    "Content",
    "ContentHandler",
    "ContentHandlerError",
    "HandlerRegistry",
    "InvalidCodedValueError",
    "InvalidRepresentationError",
    "Representation",
    "UnstructuredDataHandler",
    "UnsupportedCompressionError",
]
