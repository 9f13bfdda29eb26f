"""Exception hierarchy for the content handler library.

"Not found" is never an exception here: lookups return ``None`` or an
empty list. Malformed stored data is logged and skipped by the handlers.
"""


class ContentHandlerError(Exception):
    """Base error for the content handler library."""


class InvalidRepresentationError(ContentHandlerError):
    """Raised when a Content's representation, compression and URL flags disagree."""


class CodecError(ContentHandlerError):
    """Raised when a payload cannot be encoded or decoded."""


class UnsupportedCompressionError(CodecError):
    """Raised for compression formats that are recognized but not implemented (``Z``)."""


class AlreadyRegisteredError(ContentHandlerError):
    """Raised when a handler is registered for a key that is already taken."""


class InvalidCodedValueError(ContentHandlerError):
    """Raised when a coded value is missing its coding scheme or code."""
