"""MCP server entry point for CTCE8 configuration containers.

Exposes unpack/pack/inspect tools, format resources and an editing
prompt via the Model Context Protocol using the official Python MCP SDK
with stdio transport.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from .container import build, parse
from .container.layout import (
    CFG_HEADER_CRC_SPAN,
    CHUNK_SIZE,
    COMPRESSION_LEVEL,
    FILE_SIZE_BIAS,
    FILE_SIZE_OFFSET,
    FIXED_HEADER_SIZE,
    MODEL_LENGTH_OFFSET,
    MODEL_MAX_LENGTH,
    MODEL_OFFSET,
    PREFIX_FIXED_FIELDS,
    CfgHeader,
    ChunkHeader,
)
from .errors import ContainerError
from .models.file_formats import import_cfg, pack_file, unpack_file

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "ctce8-cfg",
    instructions="Unpack and repack CTCE8 configuration files of ZXHN optical network terminals",
)

# Summaries of containers handled in this session, keyed by resolved path
_recent: dict[str, dict[str, Any]] = {}


def _error(exc: Exception) -> dict[str, Any]:
    """Convert a codec or I/O failure into a tool result."""
    code = getattr(exc, "code", "E_IO")
    logger.warning("%s: %s", code, exc)
    return {"error": str(exc), "code": code}


def _missing(path: str) -> dict[str, Any]:
    return {"error": f"File not found: {path}", "code": "E_IO"}


def _remember(path: Path, summary: dict[str, Any]) -> None:
    _recent[str(path.resolve())] = summary


def _first_difference(a: bytes, b: bytes) -> int | None:
    for offset, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return offset
    if len(a) != len(b):
        return min(len(a), len(b))
    return None


# ─── CONTAINER TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def unpack_config(cfg_path: str, xml_path: str | None = None) -> dict[str, Any]:
    """Unpack a .cfg container into an editable XML file.

    The device model embedded in the container is reported; it is needed
    again, unchanged, to pack the edited XML.

    Args:
        cfg_path: Path to the .cfg file exported from the device.
        xml_path: Output XML path (default: cfg_path with .xml suffix).
    """
    source = Path(cfg_path)
    if not source.exists():
        return _missing(cfg_path)
    target = Path(xml_path) if xml_path else source.with_suffix(".xml")

    try:
        result = unpack_file(source, target)
    except (ContainerError, OSError) as e:
        return _error(e)

    summary = result.to_dict()
    _remember(source, summary)
    return {
        "unpacked": True,
        "xml_path": str(target),
        "device_model": result.device_model,
        "document_size": len(result.document),
        "chunk_count": len(result.chunks),
    }


@mcp.tool()
def pack_config(xml_path: str, cfg_path: str, device_model: str) -> dict[str, Any]:
    """Pack an XML document into a .cfg container the device accepts.

    Args:
        xml_path: Path to the XML document.
        cfg_path: Output .cfg path.
        device_model: Exact model string, as reported by unpack_config
                      (case- and spacing-sensitive, e.g. "ZXHN F450").
    """
    source = Path(xml_path)
    if not source.exists():
        return _missing(xml_path)

    try:
        path = pack_file(source, cfg_path, device_model)
    except (ContainerError, OSError) as e:
        return _error(e)

    return {
        "packed": True,
        "cfg_path": str(path),
        "device_model": device_model,
        "size": path.stat().st_size,
    }


@mcp.tool()
def inspect_config(cfg_path: str) -> dict[str, Any]:
    """Validate a .cfg container and describe its structure without writing anything.

    Args:
        cfg_path: Path to the .cfg file.
    """
    source = Path(cfg_path)
    if not source.exists():
        return _missing(cfg_path)

    try:
        result = import_cfg(source)
        root_tag = result.document.root_tag
    except (ContainerError, OSError) as e:
        return _error(e)

    summary = result.to_dict()
    summary["root_tag"] = root_tag
    summary["size"] = source.stat().st_size
    _remember(source, summary)
    return summary


@mcp.tool()
def verify_roundtrip(cfg_path: str) -> dict[str, Any]:
    """Check that repacking an unmodified container reproduces it byte for byte.

    Args:
        cfg_path: Path to the .cfg file.
    """
    source = Path(cfg_path)
    if not source.exists():
        return _missing(cfg_path)

    try:
        original = source.read_bytes()
        result = parse(original)
        rebuilt = build(result.document, result.device_model)
    except (ContainerError, OSError) as e:
        return _error(e)

    offset = _first_difference(original, rebuilt)
    response: dict[str, Any] = {
        "identical": offset is None,
        "device_model": result.device_model,
        "original_size": len(original),
        "rebuilt_size": len(rebuilt),
    }
    if offset is not None:
        response["first_difference"] = offset
    return response


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("ctce8://format/layout")
def resource_format_layout() -> str:
    """Offsets, widths and magic values of the container format."""
    layout = {
        "fixed_header_size": FIXED_HEADER_SIZE,
        "fixed_fields": [
            {"offset": offset, "value": value.hex(" ")}
            for offset, value in PREFIX_FIXED_FIELDS
        ],
        "file_size": {"offset": FILE_SIZE_OFFSET, "bias": FILE_SIZE_BIAS, "endian": "little"},
        "device_model": {
            "length_offset": MODEL_LENGTH_OFFSET,
            "offset": MODEL_OFFSET,
            "max_length": MODEL_MAX_LENGTH,
        },
        "cfg_header": {"size": CfgHeader.SIZE, "crc_span": CFG_HEADER_CRC_SPAN},
        "chunk": {
            "header_size": ChunkHeader.SIZE,
            "max_uncompressed": CHUNK_SIZE,
            "zlib_level": COMPRESSION_LEVEL,
        },
    }
    return json.dumps(layout, indent=2)


@mcp.resource("ctce8://containers/recent")
def resource_recent_containers() -> str:
    """Containers unpacked or inspected in this session."""
    return json.dumps({"containers": _recent}, indent=2)


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def edit_config(cfg_path: str, change: str) -> str:
    """Walk through changing a setting in a device configuration file.

    Args:
        cfg_path: Path to the .cfg file exported from the device.
        change: The setting change to make (e.g., "enable telnet").
    """
    return f"""Unpack {cfg_path} using the unpack_config tool and note the device_model.
Find the XML elements that control: {change}

Rules:
- Edit only the values needed for the change
- Keep the original encoding, whitespace and line endings
- Do not reformat or re-indent the document

Then use pack_config with the same device_model and run inspect_config on
the result before loading it onto the device."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
