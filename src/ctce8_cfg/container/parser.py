"""Container parser: bytes -> validated configuration document and device model.

Checks run in a fixed order so the same corrupt file always produces the
same error:

1. minimum size
2. fixed markers of the prefix
3. length fields and the regions they describe
4. device model field
5. chunk extraction
6. integrity fields (sizes and CRCs)
7. XML well-formedness

Any failed check aborts the parse; nothing is recovered partially.
"""

from __future__ import annotations

import logging
import struct

from ..errors import (
    BadMagicError,
    ChecksumMismatchError,
    LengthOutOfRangeError,
    PayloadMalformedError,
    TooShortError,
)
from ..models.document import ConfigDocument
from ..models.result import ChunkInfo, ParseResult
from ..utils.crc import crc32_chain
from .chunks import RawChunk, inflate_chunk, read_chunk_stream
from .layout import (
    CFG_FIXED_FIELDS,
    FILE_SIZE_BIAS,
    FILE_SIZE_OFFSET,
    FIXED_HEADER_SIZE,
    MIN_TAIL_SIZE,
    MODEL_LENGTH_OFFSET,
    MODEL_MAX_LENGTH,
    MODEL_OFFSET,
    PREFIX_FIXED_FIELDS,
    CfgHeader,
    cfg_header_offset,
    data_size,
    decode_device_model,
    file_size_field,
    header_crc,
)

logger = logging.getLogger(__name__)


def _check_fixed_fields(
    data: bytes, fields: tuple[tuple[int, bytes], ...], base: int = 0
) -> None:
    for offset, expected in fields:
        start = base + offset
        actual = data[start : start + len(expected)]
        if actual != expected:
            raise BadMagicError(start, expected, actual)


def _check_integrity(field: str, stored: int, computed: int) -> None:
    if stored != computed:
        raise ChecksumMismatchError(field, stored, computed)


def parse(data: bytes) -> ParseResult:
    """Parse a complete container buffer.

    Args:
        data: The whole container file.

    Returns:
        The configuration document and device model.

    Raises:
        TooShortError, BadMagicError, LengthOutOfRangeError,
        ChecksumMismatchError, PayloadMalformedError: On the first failed check.
    """
    data = bytes(data)
    size = len(data)

    # 1. Minimum size
    if size < FIXED_HEADER_SIZE:
        raise TooShortError(size, FIXED_HEADER_SIZE)

    # 2. Prefix markers
    _check_fixed_fields(data, PREFIX_FIXED_FIELDS)

    # 3. Length fields
    stored_file_size = struct.unpack_from("<I", data, FILE_SIZE_OFFSET)[0]
    if stored_file_size + FILE_SIZE_BIAS > size:
        raise LengthOutOfRangeError(
            "file_size", stored_file_size, file_size_field(size)
        )

    model_length = struct.unpack_from(">I", data, MODEL_LENGTH_OFFSET)[0]
    if model_length > MODEL_MAX_LENGTH or MODEL_OFFSET + model_length > size:
        raise LengthOutOfRangeError(
            "device_model_length",
            model_length,
            min(MODEL_MAX_LENGTH, size - MODEL_OFFSET),
        )

    cfg_offset = cfg_header_offset(model_length)
    if size - cfg_offset < MIN_TAIL_SIZE:
        raise TooShortError(size, cfg_offset + MIN_TAIL_SIZE)

    _check_fixed_fields(data, CFG_FIXED_FIELDS, base=cfg_offset)
    raw_cfg_header = data[cfg_offset : cfg_offset + CfgHeader.SIZE]
    cfg_header = CfgHeader.from_bytes(raw_cfg_header)

    stream_end = cfg_offset + cfg_header.data_size
    if stream_end > size:
        raise LengthOutOfRangeError(
            "data_size", cfg_header.data_size, size - cfg_offset
        )

    # 4. Device model
    try:
        device_model = decode_device_model(data[MODEL_OFFSET:cfg_offset])
    except UnicodeDecodeError as e:
        raise PayloadMalformedError(f"device model is not ASCII: {e}") from e

    # 5. Chunks
    chunks = read_chunk_stream(data, cfg_offset, stream_end)
    logger.debug(
        "Container %d bytes, model %r, %d chunk(s)", size, device_model, len(chunks)
    )

    # 6. Integrity fields
    _check_integrity("header_crc", cfg_header.header_crc, header_crc(raw_cfg_header))
    _check_integrity("file_size", stored_file_size, file_size_field(size))
    stream_length = size - cfg_offset - CfgHeader.SIZE
    _check_integrity("data_size", cfg_header.data_size, data_size(stream_length))
    for index, chunk in enumerate(chunks):
        _check_integrity(
            f"chunk[{index}].compressed_size",
            chunk.header.compressed_size,
            len(chunk.body),
        )
    _check_integrity(
        "payload_crc",
        cfg_header.payload_crc,
        crc32_chain(chunk.body for chunk in chunks),
    )
    payload = b"".join(inflate_chunk(chunk, index) for index, chunk in enumerate(chunks))
    _check_integrity("uncompressed_size", cfg_header.uncompressed_size, len(payload))

    # 7. Document
    document = ConfigDocument(payload)
    document.check_well_formed()

    return ParseResult(
        document=document,
        device_model=device_model,
        chunks=tuple(_chunk_info(chunk, cfg_offset) for chunk in chunks),
    )


def _chunk_info(chunk: RawChunk, cfg_offset: int) -> ChunkInfo:
    return ChunkInfo(
        offset=chunk.offset - cfg_offset,
        uncompressed_size=chunk.header.uncompressed_size,
        compressed_size=chunk.header.compressed_size,
        end_offset=chunk.header.end_offset,
    )
