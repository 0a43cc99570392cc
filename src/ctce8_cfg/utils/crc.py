"""CRC-32 (IEEE 802.3) as used by the device firmware.

The firmware chains the checksum across compressed chunks: each chunk's
CRC is seeded with the value produced by the previous one, starting
from 0. ``zlib.crc32`` with a running value is exactly that digest.
"""

from __future__ import annotations

import zlib
from collections.abc import Iterable


def crc32(data: bytes, seed: int = 0) -> int:
    """Return the CRC-32 of ``data`` continued from ``seed``."""
    return zlib.crc32(data, seed) & 0xFFFFFFFF


def crc32_chain(blocks: Iterable[bytes], seed: int = 0) -> int:
    """Fold :func:`crc32` over ``blocks`` in order."""
    value = seed
    for block in blocks:
        value = crc32(block, value)
    return value


def verify_crc32(expected: int, data: bytes, seed: int = 0) -> bool:
    """Check a stored CRC against the one computed over ``data``."""
    return crc32(data, seed) == expected
