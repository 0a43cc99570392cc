"""Result of a successful container parse."""

from __future__ import annotations

from dataclasses import dataclass

from .document import ConfigDocument


@dataclass(frozen=True)
class ChunkInfo:
    """Where one compressed chunk sat in the container, and its sizes."""

    offset: int
    uncompressed_size: int
    compressed_size: int
    end_offset: int

    def to_dict(self) -> dict:
        return {
            "offset": self.offset,
            "uncompressed_size": self.uncompressed_size,
            "compressed_size": self.compressed_size,
            "end_offset": self.end_offset,
        }


@dataclass(frozen=True)
class ParseResult:
    """Configuration document and device model recovered from a container."""

    document: ConfigDocument
    device_model: str
    chunks: tuple[ChunkInfo, ...] = ()

    def to_dict(self) -> dict:
        """Summary suitable for JSON output (the document itself is omitted)."""
        return {
            "device_model": self.device_model,
            "document_size": len(self.document),
            "chunk_count": len(self.chunks),
            "chunks": [chunk.to_dict() for chunk in self.chunks],
        }

    def __iter__(self):
        # Allows ``document, model = parse(data)``
        yield self.document
        yield self.device_model

    def __repr__(self) -> str:
        return (
            f"ParseResult(device_model={self.device_model!r}, "
            f"document_size={len(self.document)}, chunks={len(self.chunks)})"
        )
