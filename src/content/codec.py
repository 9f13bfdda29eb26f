"""Payload codec: base64 armoring and deflate / gzip / zlib compression.

Encoding compresses first and then base64-armors; decoding reverses the
two steps. The legacy ``Z`` (Unix compress) format is rejected by every
function here with ``UnsupportedCompressionError``.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import zlib
from typing import Any

from contenthandler.content.models import CompressionFormat, Content, Representation
from contenthandler.errors import (
    CodecError,
    InvalidRepresentationError,
    UnsupportedCompressionError,
)

# zlib wbits for each container. Negative means a raw deflate stream.
_WBITS: dict[CompressionFormat, int] = {
    CompressionFormat.DF: -zlib.MAX_WBITS,
    CompressionFormat.ZL: zlib.MAX_WBITS,
}


def _check_supported(fmt: CompressionFormat) -> None:
    if fmt == CompressionFormat.Z:
        raise UnsupportedCompressionError("Compress (Z) format is not supported")


def compress(data: bytes, fmt: CompressionFormat) -> bytes:
    """Compress ``data`` with the given format."""
    _check_supported(fmt)
    if fmt == CompressionFormat.GZ:
        return gzip.compress(data)
    compressor = zlib.compressobj(wbits=_WBITS[fmt])
    return compressor.compress(data) + compressor.flush()


def decompress(data: bytes, fmt: CompressionFormat) -> bytes:
    """Decompress ``data`` with the given format.

    Raises:
        UnsupportedCompressionError: For ``Z``.
        CodecError: If the data is not a valid stream for the format.
    """
    _check_supported(fmt)
    try:
        if fmt == CompressionFormat.GZ:
            return gzip.decompress(data)
        return zlib.decompress(data, wbits=_WBITS[fmt])
    except (zlib.error, gzip.BadGzipFile, EOFError) as exc:
        raise CodecError(f"Invalid {fmt} compressed data: {exc}") from exc


def encode_payload(
    raw: bytes,
    representation: Representation,
    compression_format: CompressionFormat | None = None,
) -> bytes:
    """Turn raw content bytes into a payload for the given representation.

    Raises:
        InvalidRepresentationError: If compression is requested without
            base64, or the representation is BINARY.
        UnsupportedCompressionError: For ``Z``.
    """
    if representation == Representation.BINARY:
        raise InvalidRepresentationError("Binary representation only applies to URL payloads")
    if compression_format is not None:
        if representation != Representation.B64:
            raise InvalidRepresentationError("Compressed payload must be Base64 encoded")
        raw = compress(raw, compression_format)
    if representation == Representation.B64:
        return base64.b64encode(raw)
    return raw


def get_raw_data(content: Content) -> bytes:
    """Return the decoded, decompressed bytes of an inline payload.

    Raises:
        CodecError: If the payload is a URL or is not valid base64.
        UnsupportedCompressionError: If the content declares ``Z``.
    """
    if content.payload_is_url:
        raise CodecError(f"Content {content.content_id} references a URL, not inline data")

    data = content.payload
    if content.representation == Representation.B64:
        try:
            data = base64.b64decode(data, validate=True)
        except binascii.Error as exc:
            raise CodecError(f"Content {content.content_id} is not valid Base64: {exc}") from exc
    if content.compression_format is not None:
        data = decompress(data, content.compression_format)
    return data


def build_content(
    content_id: str,
    raw: bytes,
    *,
    representation: Representation = Representation.TXT,
    compression_format: CompressionFormat | None = None,
    **metadata: Any,
) -> Content:
    """Encode ``raw`` and wrap it in a new Content.

    ``metadata`` is passed through to the Content constructor (type code,
    format code, content type, encoding, language).
    """
    payload = encode_payload(raw, representation, compression_format)
    return Content(
        content_id=content_id,
        payload=payload,
        representation=representation,
        compression_format=compression_format,
        **metadata,
    )
