"""Content domain: the encapsulated payload envelope and its codec."""

from contenthandler.content.codec import (
    build_content,
    compress,
    decompress,
    encode_payload,
    get_raw_data,
)
from contenthandler.content.models import (
    CodedValue,
    CompressionFormat,
    Content,
    Representation,
)

__all__ = [
    "CodedValue",
    "CompressionFormat",
    "Content",
    "Representation",
    "build_content",
    "compress",
    "decompress",
    "encode_payload",
    "get_raw_data",
]
