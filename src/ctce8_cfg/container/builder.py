"""Container builder: configuration document + device model -> container bytes.

Every length and CRC is recomputed from the serialized payload, using
the same layout helpers the parser checks against, so a built container
always parses back to its inputs.
"""

from __future__ import annotations

import logging

from ..errors import IdentifierNotAsciiError, IdentifierTooLongError
from ..models.document import ConfigDocument
from .chunks import build_chunk_stream
from .layout import (
    MODEL_MAX_LENGTH,
    CfgHeader,
    build_prefix,
    container_size,
    data_size,
)

logger = logging.getLogger(__name__)


def _document_bytes(document: ConfigDocument | bytes | str) -> bytes:
    if isinstance(document, ConfigDocument):
        return document.data
    if isinstance(document, str):
        return document.encode("utf-8")
    return bytes(document)


def encode_model(device_model: str) -> bytes:
    """Validate the device model and return its ASCII bytes.

    Raises:
        IdentifierNotAsciiError: If the model contains non-ASCII characters.
        IdentifierTooLongError: If it exceeds :data:`MODEL_MAX_LENGTH` bytes.
    """
    try:
        model = device_model.encode("ascii")
    except UnicodeEncodeError as e:
        raise IdentifierNotAsciiError(device_model) from e
    if len(model) > MODEL_MAX_LENGTH:
        raise IdentifierTooLongError(len(model), MODEL_MAX_LENGTH)
    return model


def build(document: ConfigDocument | bytes | str, device_model: str) -> bytes:
    """Serialize a configuration document into a container.

    The document is written verbatim; its content is not validated.

    Args:
        document: The XML document, as a :class:`ConfigDocument`, bytes or text.
        device_model: Exact model string the device embeds, e.g. ``"ZXHN F450"``.

    Returns:
        The container bytes.

    Raises:
        IdentifierNotAsciiError, IdentifierTooLongError: If the model is unusable.
    """
    model = encode_model(device_model)
    payload = _document_bytes(document)

    stream = build_chunk_stream(payload)
    total = container_size(len(model), len(stream.data))
    cfg_header = CfgHeader(
        uncompressed_size=len(payload),
        data_size=data_size(len(stream.data)),
        payload_crc=stream.payload_crc,
    ).sealed()

    logger.debug(
        "Built container for %r: %d bytes, %d chunk(s), payload CRC 0x%08X",
        device_model, total, stream.chunk_count, stream.payload_crc,
    )
    return build_prefix(total, model) + cfg_header.to_bytes() + stream.data
