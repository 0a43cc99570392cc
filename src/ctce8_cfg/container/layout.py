"""Binary layout of the CTCE8 configuration container.

Single source of truth for offsets, widths and magic values; the parser
and the builder both read the format from here.

Container layout (integers are big-endian u32 unless noted)::

    +--------+------+-------------------------------------------------+
    | Offset | Size | Field                                           |
    +--------+------+-------------------------------------------------+
    | 0x00   | 16   | Signature 99999999 44444444 55555555 AAAAAAAA   |
    | 0x10   | 8    | Reserved (zero)                                 |
    | 0x18   | 4    | Marker 0x04000000                               |
    | 0x1C   | 32   | Reserved (zero)                                 |
    | 0x3C   | 4    | Marker 0x40000000                               |
    | 0x40   | 8    | Marker 0x02000000 0x80000000                    |
    | 0x48   | 4    | File size - 128 (little-endian!)                |
    | 0x4C   | 52   | Reserved (zero)                                 |
    | 0x80   | 8    | Marker 0x04030201 0x00000000                    |
    | 0x88   | 4    | Device model length N                           |
    | 0x8C   | N    | Device model, ASCII                             |
    | 0x8C+N | 60   | Cfg header                                      |
    | ...    | ...  | Chunk stream                                    |
    +--------+------+-------------------------------------------------+

Cfg header (60 bytes)::

    +-------+------------------+-----------+-----------+-------------+------------+---------------+
    | Magic | Uncompressed len | Data size | Chunk size| Payload CRC | Header CRC | Reserved (32) |
    | 8 B   | 4 B              | 4 B       | 4 B       | 4 B         | 4 B        | 32 B          |
    +-------+------------------+-----------+-----------+-------------+------------+---------------+

- Data size: cfg header + chunk stream length
- Payload CRC: CRC-32 chained over every compressed chunk body
- Header CRC: CRC-32 over the first 24 bytes of the cfg header

Each chunk is a 12-byte header (uncompressed size, compressed size, end
offset) followed by an independent zlib stream. The end offset is
relative to the start of the cfg header and is 0 on the last chunk.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from ..utils.crc import crc32

# ─── CONTAINER PREFIX ────────────────────────────────────────────────

SIGNATURE = bytes.fromhex("99999999 44444444 55555555 AAAAAAAA")

FILE_SIZE_OFFSET = 0x48
FILE_SIZE_BIAS = 128  # stored file size excludes the first 128 bytes
MODEL_LENGTH_OFFSET = 0x88
MODEL_OFFSET = 0x8C
FIXED_HEADER_SIZE = MODEL_OFFSET  # 140

MODEL_MAX_LENGTH = 64
MODEL_PADDING = b"\x00"

# (offset, expected bytes) for every constant field before the device model
PREFIX_FIXED_FIELDS: tuple[tuple[int, bytes], ...] = (
    (0x00, SIGNATURE),
    (0x10, b"\x00" * 8),
    (0x18, bytes.fromhex("04000000")),
    (0x1C, b"\x00" * 32),
    (0x3C, bytes.fromhex("40000000")),
    (0x40, bytes.fromhex("02000000 80000000")),
    (0x4C, b"\x00" * 52),
    (0x80, bytes.fromhex("04030201 00000000")),
)

# ─── CFG HEADER ──────────────────────────────────────────────────────

CFG_MAGIC = bytes.fromhex("01020304 00000000")
CHUNK_SIZE = 0x10000
CFG_HEADER_CRC_SPAN = 24

# Offsets relative to the start of the cfg header
CFG_FIXED_FIELDS: tuple[tuple[int, bytes], ...] = (
    (0x00, CFG_MAGIC),
    (0x10, CHUNK_SIZE.to_bytes(4, "big")),
    (0x1C, b"\x00" * 32),
)

# ─── CHUNK STREAM ────────────────────────────────────────────────────

COMPRESSION_LEVEL = 9
MIN_ZLIB_STREAM_SIZE = 8  # zlib.compress(b"", 9): header, empty block, ADLER32
LAST_CHUNK_END_OFFSET = 0


@dataclass(frozen=True)
class CfgHeader:
    """The 60-byte header that precedes the chunk stream."""

    STRUCT: ClassVar[struct.Struct] = struct.Struct(">8s5I32s")
    SIZE: ClassVar[int] = 60

    uncompressed_size: int
    data_size: int
    payload_crc: int
    header_crc: int = 0
    chunk_size: int = CHUNK_SIZE

    def to_bytes(self) -> bytes:
        return self.STRUCT.pack(
            CFG_MAGIC,
            self.uncompressed_size,
            self.data_size,
            self.chunk_size,
            self.payload_crc,
            self.header_crc,
            b"\x00" * 32,
        )

    def sealed(self) -> CfgHeader:
        """Return a copy with ``header_crc`` computed over the header."""
        return CfgHeader(
            uncompressed_size=self.uncompressed_size,
            data_size=self.data_size,
            payload_crc=self.payload_crc,
            header_crc=header_crc(self.to_bytes()),
            chunk_size=self.chunk_size,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> CfgHeader:
        _, uncompressed, stream_size, chunk_size, payload_crc, hdr_crc, _ = (
            cls.STRUCT.unpack_from(data)
        )
        return cls(
            uncompressed_size=uncompressed,
            data_size=stream_size,
            payload_crc=payload_crc,
            header_crc=hdr_crc,
            chunk_size=chunk_size,
        )


@dataclass(frozen=True)
class ChunkHeader:
    """The 12-byte header in front of every compressed chunk."""

    STRUCT: ClassVar[struct.Struct] = struct.Struct(">3I")
    SIZE: ClassVar[int] = 12

    uncompressed_size: int
    compressed_size: int
    end_offset: int

    @property
    def is_last(self) -> bool:
        return self.end_offset == LAST_CHUNK_END_OFFSET

    def to_bytes(self) -> bytes:
        return self.STRUCT.pack(
            self.uncompressed_size, self.compressed_size, self.end_offset
        )

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> ChunkHeader:
        return cls(*cls.STRUCT.unpack_from(data, offset))


MIN_TAIL_SIZE = CfgHeader.SIZE + ChunkHeader.SIZE + MIN_ZLIB_STREAM_SIZE


# ─── SIZE ARITHMETIC ─────────────────────────────────────────────────

def header_crc(cfg_header: bytes) -> int:
    """CRC-32 over the part of the cfg header that the header CRC covers."""
    return crc32(cfg_header[:CFG_HEADER_CRC_SPAN])


def cfg_header_offset(model_length: int) -> int:
    """Offset of the cfg header for a device model of ``model_length`` bytes."""
    return MODEL_OFFSET + model_length


def data_size(stream_length: int) -> int:
    """Value of the cfg header's data size field."""
    return CfgHeader.SIZE + stream_length


def container_size(model_length: int, stream_length: int) -> int:
    """Total container length for the given model and chunk stream lengths."""
    return cfg_header_offset(model_length) + data_size(stream_length)


def file_size_field(total_size: int) -> int:
    """Value stored at :data:`FILE_SIZE_OFFSET` for a container of ``total_size``."""
    return total_size - FILE_SIZE_BIAS


# ─── DEVICE MODEL FIELD ──────────────────────────────────────────────

def encode_device_model(model: bytes) -> bytes:
    """Length-prefixed device model field as written at :data:`MODEL_LENGTH_OFFSET`.

    The device writes the model without terminator or padding.
    """
    return len(model).to_bytes(4, "big") + model


def decode_device_model(raw: bytes) -> str:
    """Recover the model string from its field, dropping trailing padding.

    Raises:
        UnicodeDecodeError: If the field is not ASCII.
    """
    return raw.rstrip(MODEL_PADDING).decode("ascii")


def build_prefix(total_size: int, model: bytes) -> bytes:
    """Fixed header plus device model field for a container of ``total_size``."""
    buf = bytearray(FIXED_HEADER_SIZE)
    for offset, expected in PREFIX_FIXED_FIELDS:
        buf[offset : offset + len(expected)] = expected
    buf[FILE_SIZE_OFFSET : FILE_SIZE_OFFSET + 4] = struct.pack(
        "<I", file_size_field(total_size)
    )
    return bytes(buf[:MODEL_LENGTH_OFFSET]) + encode_device_model(model)
