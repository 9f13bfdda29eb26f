"""Tests for the payload codec."""

import base64
import gzip
import zlib

import pytest
from contenthandler.content.codec import (
    build_content,
    compress,
    decompress,
    encode_payload,
    get_raw_data,
)
from contenthandler.content.models import CompressionFormat, Content, Representation
from contenthandler.errors import (
    CodecError,
    InvalidRepresentationError,
    UnsupportedCompressionError,
)

RAW = b"<ClinicalDocument>" + b"observation " * 50 + b"</ClinicalDocument>"


class TestCompress:
    def test_gzip_is_a_gzip_stream(self):
        assert gzip.decompress(compress(RAW, CompressionFormat.GZ)) == RAW

    def test_zlib_is_a_zlib_stream(self):
        assert zlib.decompress(compress(RAW, CompressionFormat.ZL)) == RAW

    def test_deflate_is_a_raw_stream(self):
        data = compress(RAW, CompressionFormat.DF)
        assert zlib.decompress(data, wbits=-zlib.MAX_WBITS) == RAW
        with pytest.raises(zlib.error):
            zlib.decompress(data)

    @pytest.mark.parametrize("fmt", [CompressionFormat.DF, CompressionFormat.GZ, CompressionFormat.ZL])
    def test_decompress_reverses_compress(self, fmt):
        assert decompress(compress(RAW, fmt), fmt) == RAW

    def test_compress_z_unsupported(self):
        with pytest.raises(UnsupportedCompressionError):
            compress(RAW, CompressionFormat.Z)

    def test_decompress_z_unsupported(self):
        with pytest.raises(UnsupportedCompressionError):
            decompress(b"\x1f\x9d", CompressionFormat.Z)

    def test_unsupported_is_a_codec_error(self):
        assert issubclass(UnsupportedCompressionError, CodecError)

    def test_corrupt_data_raises_codec_error(self):
        with pytest.raises(CodecError) as exc_info:
            decompress(b"not compressed", CompressionFormat.GZ)
        assert not isinstance(exc_info.value, UnsupportedCompressionError)


class TestEncodePayload:
    def test_text_is_unchanged(self):
        assert encode_payload(RAW, Representation.TXT) == RAW

    def test_base64(self):
        assert encode_payload(RAW, Representation.B64) == base64.b64encode(RAW)

    def test_compressed_base64(self):
        payload = encode_payload(RAW, Representation.B64, CompressionFormat.GZ)
        assert gzip.decompress(base64.b64decode(payload)) == RAW

    def test_compressed_text_rejected(self):
        with pytest.raises(InvalidRepresentationError):
            encode_payload(RAW, Representation.TXT, CompressionFormat.DF)

    def test_binary_rejected(self):
        with pytest.raises(InvalidRepresentationError):
            encode_payload(RAW, Representation.BINARY)

    def test_z_rejected(self):
        with pytest.raises(UnsupportedCompressionError):
            encode_payload(RAW, Representation.B64, CompressionFormat.Z)


class TestGetRawData:
    def test_text_payload(self):
        content = Content(content_id="c1", payload=RAW)
        assert get_raw_data(content) == RAW

    def test_base64_payload(self):
        content = Content(
            content_id="c1",
            payload=base64.b64encode(RAW),
            representation=Representation.B64,
        )
        assert get_raw_data(content) == RAW

    def test_compressed_payload(self):
        content = build_content(
            "c1",
            RAW,
            representation=Representation.B64,
            compression_format=CompressionFormat.ZL,
        )
        assert get_raw_data(content) == RAW

    def test_url_payload_raises(self):
        content = Content(
            content_id="c1",
            payload=b"https://repo.example/doc/1",
            payload_is_url=True,
            representation=Representation.BINARY,
        )
        with pytest.raises(CodecError):
            get_raw_data(content)

    def test_invalid_base64_raises(self):
        content = Content(content_id="c1", payload=b"@@@", representation=Representation.B64)
        with pytest.raises(CodecError):
            get_raw_data(content)

    def test_z_content_raises_unsupported(self):
        content = Content(
            content_id="c1",
            payload=base64.b64encode(b"\x1f\x9d\x90"),
            representation=Representation.B64,
            compression_format=CompressionFormat.Z,
        )
        with pytest.raises(UnsupportedCompressionError):
            get_raw_data(content)


class TestBuildContent:
    def test_passes_metadata_through(self):
        content = build_content(
            "c1",
            RAW,
            representation=Representation.B64,
            compression_format=CompressionFormat.DF,
            content_type="text/xml",
            encoding="UTF-8",
        )
        assert content.content_id == "c1"
        assert content.content_type == "text/xml"
        assert content.encoding == "UTF-8"
        assert content.is_compressed is True
        assert content.representation == Representation.B64

    def test_defaults_to_text(self):
        content = build_content("c1", RAW)
        assert content.payload == RAW
        assert content.representation == Representation.TXT
