"""Tests for container layout constants and header records."""

import struct

from ctce8_cfg.container.layout import (
    CFG_MAGIC,
    CHUNK_SIZE,
    FILE_SIZE_OFFSET,
    FIXED_HEADER_SIZE,
    MODEL_LENGTH_OFFSET,
    MODEL_OFFSET,
    PREFIX_FIXED_FIELDS,
    SIGNATURE,
    CfgHeader,
    ChunkHeader,
    build_prefix,
    cfg_header_offset,
    container_size,
    data_size,
    decode_device_model,
    encode_device_model,
    file_size_field,
    header_crc,
)
from ctce8_cfg.utils.crc import crc32


def test_record_sizes():
    """Header records must match their on-disk widths."""
    assert CfgHeader.STRUCT.size == CfgHeader.SIZE == 60
    assert ChunkHeader.STRUCT.size == ChunkHeader.SIZE == 12


def test_fixed_fields_cover_prefix():
    """Fixed fields plus the file size field tile bytes 0..MODEL_LENGTH_OFFSET."""
    covered = set()
    for offset, value in PREFIX_FIXED_FIELDS:
        span = set(range(offset, offset + len(value)))
        assert not covered & span
        covered |= span
    covered |= set(range(FILE_SIZE_OFFSET, FILE_SIZE_OFFSET + 4))
    assert covered == set(range(MODEL_LENGTH_OFFSET))


def test_build_prefix_layout():
    """Prefix holds the signature, LE file size and the BE length-prefixed model."""
    prefix = build_prefix(1000, b"ZXHN F450")
    assert len(prefix) == FIXED_HEADER_SIZE + 9
    assert prefix[:16] == SIGNATURE
    assert prefix[0x18:0x1C] == b"\x04\x00\x00\x00"
    assert prefix[0x80:0x84] == b"\x04\x03\x02\x01"
    assert struct.unpack_from("<I", prefix, FILE_SIZE_OFFSET)[0] == 1000 - 128
    assert struct.unpack_from(">I", prefix, MODEL_LENGTH_OFFSET)[0] == 9
    assert prefix[MODEL_OFFSET:] == b"ZXHN F450"


def test_size_arithmetic():
    assert cfg_header_offset(9) == 149
    assert data_size(100) == 160
    assert container_size(9, 100) == 149 + 160
    assert file_size_field(container_size(9, 100)) == 309 - 128


def test_cfg_header_to_bytes():
    header = CfgHeader(uncompressed_size=0x1234, data_size=0x80, payload_crc=0xDEADBEEF)
    raw = header.to_bytes()
    assert len(raw) == 60
    assert raw[:8] == CFG_MAGIC
    assert struct.unpack_from(">5I", raw, 8) == (0x1234, 0x80, CHUNK_SIZE, 0xDEADBEEF, 0)
    assert raw[28:] == b"\x00" * 32


def test_cfg_header_sealed():
    """Sealing writes the CRC of the first 24 header bytes at offset 24."""
    header = CfgHeader(uncompressed_size=10, data_size=90, payload_crc=1).sealed()
    raw = header.to_bytes()
    assert header.header_crc == crc32(raw[:24])
    assert header.header_crc == header_crc(raw)
    assert struct.unpack_from(">I", raw, 24)[0] == header.header_crc


def test_cfg_header_from_bytes():
    header = CfgHeader(uncompressed_size=5, data_size=85, payload_crc=7).sealed()
    assert CfgHeader.from_bytes(header.to_bytes()) == header


def test_chunk_header():
    header = ChunkHeader(uncompressed_size=3, compressed_size=11, end_offset=0)
    assert header.to_bytes() == bytes.fromhex("00000003 0000000B 00000000")
    assert header.is_last
    assert not ChunkHeader(1, 2, 3).is_last
    assert ChunkHeader.from_bytes(b"\xff" + header.to_bytes(), 1) == header


def test_device_model_field():
    assert encode_device_model(b"F450") == b"\x00\x00\x00\x04F450"
    assert decode_device_model(b"ZXHN F450") == "ZXHN F450"
    assert decode_device_model(b"F450\x00\x00\x00") == "F450"


def test_device_model_keeps_inner_spaces():
    """Only padding is stripped; spaces are part of the model name."""
    assert decode_device_model(b"ZXHN  F450 ") == "ZXHN  F450 "
