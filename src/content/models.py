"""Content envelope models: pure Pydantic v2 data types.

A ``Content`` follows the HL7 ED (Encapsulated Data) datatype with the
addition of a type code and a format code. The format code is a globally
unique code identifying the content's format (IHE, for example, assigns
format codes to XDS document formats).

Both models are frozen. A Content is identified by its ``content_id``
alone: two instances with the same id compare equal whatever their
payloads are.
"""

from __future__ import annotations

from enum import StrEnum
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, model_validator

from contenthandler.errors import InvalidRepresentationError


class Representation(StrEnum):
    """How the payload bytes are represented."""

    TXT = "TXT"
    B64 = "B64"
    # Only valid for URL payloads: the data stored at the URL is binary.
    BINARY = "BINARY"


class CompressionFormat(StrEnum):
    """Compression algorithm applied to the content."""

    DF = "DF"  # deflate, RFC 1951
    GZ = "GZ"  # gzip, RFC 1952
    ZL = "ZL"  # zlib, RFC 1950
    # Unix compress. Deprecated by HL7; recognized but never encoded or decoded.
    Z = "Z"


@total_ordering
class CodedValue(BaseModel):
    """A code from a coding scheme, e.g. a LOINC code."""

    model_config = ConfigDict(frozen=True)

    coding_scheme: str
    code: str

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CodedValue):
            return NotImplemented
        return (self.coding_scheme, self.code) < (other.coding_scheme, other.code)

    def __str__(self) -> str:
        return f"{self.coding_scheme}:{self.code}"


@total_ordering
class Content(BaseModel):
    """An encapsulated data payload plus its metadata.

    The payload either holds the content itself or, when ``payload_is_url``
    is set, a UTF-8 URL referencing where the content can be retrieved.
    In the URL case every other field (content type, encoding, compression)
    describes the referenced data, not the URL string.

    Raises:
        InvalidRepresentationError: If an inline payload is compressed but
            not base64, an inline payload claims a BINARY representation,
            or a URL payload is not valid UTF-8.
    """

    model_config = ConfigDict(frozen=True)

    content_id: str
    payload: bytes
    payload_is_url: bool = False
    type_code: CodedValue | None = None
    format_code: CodedValue | None = None
    content_type: str | None = None
    encoding: str | None = None
    representation: Representation = Representation.TXT
    compression_format: CompressionFormat | None = None
    language: str | None = None

    @model_validator(mode="after")
    def _check_representation(self) -> Content:
        if self.is_compressed and not self.payload_is_url and self.representation != Representation.B64:
            raise InvalidRepresentationError("Compressed payload must be Base64 encoded")
        if not self.payload_is_url and self.representation == Representation.BINARY:
            raise InvalidRepresentationError("Binary payload must be Base64 encoded")
        if self.payload_is_url:
            try:
                self.payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise InvalidRepresentationError("URL payload must be valid UTF-8") from exc
        return self

    @classmethod
    def text(
        cls,
        content_id: str,
        payload: bytes,
        type_code: CodedValue | None,
        format_code: CodedValue | None,
        content_type: str | None,
    ) -> Content:
        """Build an uncompressed inline text payload, e.g. an XML document."""
        return cls(
            content_id=content_id,
            payload=payload,
            type_code=type_code,
            format_code=format_code,
            content_type=content_type,
        )

    @property
    def is_compressed(self) -> bool:
        return self.compression_format is not None

    @property
    def payload_url(self) -> str | None:
        """The referenced URL, or ``None`` for inline payloads."""
        if not self.payload_is_url:
            return None
        return self.payload.decode("utf-8")

    # Identity is the content id only.

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Content):
            return NotImplemented
        return self.content_id == other.content_id

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Content):
            return NotImplemented
        return self.content_id < other.content_id

    def __hash__(self) -> int:
        return hash(self.content_id)
