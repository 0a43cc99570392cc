"""Chunk stream: the zlib-compressed framing around the configuration payload.

The payload is cut into :data:`~.layout.CHUNK_SIZE` pieces and each piece is
compressed on its own. Every chunk carries its own sizes and the offset of
the next chunk, which is the inner framing the parser walks and the
builder lays out.
"""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass

from ..errors import ChecksumMismatchError, LengthOutOfRangeError, PayloadMalformedError
from ..utils.crc import crc32_chain
from .layout import (
    CHUNK_SIZE,
    COMPRESSION_LEVEL,
    LAST_CHUNK_END_OFFSET,
    CfgHeader,
    ChunkHeader,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawChunk:
    """A chunk located in a container buffer, before decompression."""

    offset: int  # absolute offset of the chunk header
    header: ChunkHeader
    body: bytes

    def __repr__(self) -> str:
        return (
            f"RawChunk(offset=0x{self.offset:X}, "
            f"sizes={self.header.uncompressed_size}/{self.header.compressed_size}, "
            f"end=0x{self.header.end_offset:X})"
        )


@dataclass(frozen=True)
class ChunkStream:
    """A serialized chunk stream and the payload CRC over its bodies."""

    data: bytes
    payload_crc: int
    chunk_count: int


def split_payload(payload: bytes) -> list[bytes]:
    """Cut ``payload`` into chunk-sized pieces.

    An empty payload still yields one (empty) piece so that every
    container holds at least one chunk.
    """
    pieces = [payload[i : i + CHUNK_SIZE] for i in range(0, len(payload), CHUNK_SIZE)]
    return pieces or [b""]


def build_chunk_stream(payload: bytes) -> ChunkStream:
    """Compress ``payload`` into a chunk stream.

    End offsets count from the start of the cfg header, so the first
    chunk header sits at ``CfgHeader.SIZE``. The final chunk is marked
    with end offset 0, including when it is a full-size chunk.
    """
    pieces = split_payload(payload)
    end_offset = CfgHeader.SIZE
    stream = bytearray()
    bodies: list[bytes] = []

    for index, piece in enumerate(pieces):
        body = zlib.compress(piece, COMPRESSION_LEVEL)
        end_offset += ChunkHeader.SIZE + len(body)
        is_last = index == len(pieces) - 1
        header = ChunkHeader(
            uncompressed_size=len(piece),
            compressed_size=len(body),
            end_offset=LAST_CHUNK_END_OFFSET if is_last else end_offset,
        )
        stream += header.to_bytes()
        stream += body
        bodies.append(body)

    logger.debug(
        "Compressed %d bytes into %d chunk(s), %d bytes",
        len(payload), len(pieces), len(stream),
    )
    return ChunkStream(
        data=bytes(stream),
        payload_crc=crc32_chain(bodies),
        chunk_count=len(pieces),
    )


def read_chunk_stream(data: bytes, cfg_offset: int, stream_end: int) -> list[RawChunk]:
    """Locate every chunk between the cfg header and ``stream_end``.

    Only bounds are checked here; sizes and CRCs are verified by the
    caller once all regions are known to lie inside the buffer.

    Raises:
        LengthOutOfRangeError: If a chunk header or body crosses ``stream_end``,
            or a chunk claims more than ``CHUNK_SIZE`` uncompressed bytes.
    """
    chunks: list[RawChunk] = []
    pos = cfg_offset + CfgHeader.SIZE
    region = stream_end - cfg_offset

    while True:
        index = len(chunks)
        body_start = pos + ChunkHeader.SIZE
        if body_start > stream_end:
            raise LengthOutOfRangeError(
                f"chunk[{index}].header", body_start - cfg_offset, region
            )
        header = ChunkHeader.from_bytes(data, pos)
        if header.uncompressed_size > CHUNK_SIZE:
            raise LengthOutOfRangeError(
                f"chunk[{index}].uncompressed_size", header.uncompressed_size, CHUNK_SIZE
            )

        if header.is_last:
            body_end = stream_end
        else:
            body_end = cfg_offset + header.end_offset
            if not body_start <= body_end <= stream_end:
                raise LengthOutOfRangeError(
                    f"chunk[{index}].end_offset", header.end_offset, region
                )

        if body_start + header.compressed_size > stream_end:
            raise LengthOutOfRangeError(
                f"chunk[{index}].compressed_size",
                header.compressed_size,
                stream_end - body_start,
            )

        chunks.append(RawChunk(offset=pos, header=header, body=data[body_start:body_end]))
        if header.is_last:
            return chunks
        pos = body_end


def inflate_chunk(chunk: RawChunk, index: int) -> bytes:
    """Decompress one chunk and check its uncompressed size.

    Output is capped one byte past the declared size, so a body that
    inflates further stops there instead of being expanded in full.

    Raises:
        PayloadMalformedError: If the body is not exactly one zlib stream.
        ChecksumMismatchError: If the inflated length differs from the header.
    """
    expected = chunk.header.uncompressed_size
    decompressor = zlib.decompressobj()
    try:
        out = decompressor.decompress(chunk.body, expected + 1)
    except zlib.error as e:
        raise PayloadMalformedError(f"chunk[{index}] does not inflate: {e}") from e
    if len(out) > expected or decompressor.unconsumed_tail:
        # Inflated size is only known to exceed the header
        raise ChecksumMismatchError(
            f"chunk[{index}].uncompressed_size", expected, len(out)
        )
    if not decompressor.eof or decompressor.unused_data:
        raise PayloadMalformedError(
            f"chunk[{index}] is not a single complete zlib stream"
        )
    if len(out) != expected:
        raise ChecksumMismatchError(
            f"chunk[{index}].uncompressed_size", expected, len(out)
        )
    return out
