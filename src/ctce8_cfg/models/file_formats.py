"""File handlers for .cfg containers and their .xml documents.

.cfg — binary container as exported by the device web UI
.xml — the configuration document, editable by hand between unpack and pack
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..container import build, parse
from .document import ConfigDocument
from .result import ParseResult

logger = logging.getLogger(__name__)


def import_cfg(path: str | Path) -> ParseResult:
    """Read and parse a container file.

    Raises:
        ParseError: If the container fails validation.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    result = parse(path.read_bytes())
    logger.info(
        "Parsed %s (model %r, %d bytes of XML)",
        path, result.device_model, len(result.document),
    )
    return result


def export_cfg(
    document: ConfigDocument | bytes | str,
    path: str | Path,
    device_model: str,
) -> Path:
    """Build a container and write it to ``path``.

    Returns:
        The path written to.
    """
    path = Path(path)
    data = build(document, device_model)
    path.write_bytes(data)
    logger.info("Wrote %s (%d bytes, model %r)", path, len(data), device_model)
    return path


def import_xml(path: str | Path) -> ConfigDocument:
    """Load an XML document exactly as it is stored on disk."""
    return ConfigDocument(Path(path).read_bytes())


def export_xml(document: ConfigDocument, path: str | Path) -> Path:
    path = Path(path)
    path.write_bytes(document.data)
    return path


def unpack_file(cfg_path: str | Path, xml_path: str | Path) -> ParseResult:
    """Unpack a container file into an XML file.

    Returns:
        The parse result, so callers can report the device model needed
        to pack the document again.
    """
    result = import_cfg(cfg_path)
    export_xml(result.document, xml_path)
    return result


def pack_file(
    xml_path: str | Path, cfg_path: str | Path, device_model: str
) -> Path:
    """Pack an XML file into a container file for ``device_model``."""
    return export_cfg(import_xml(xml_path), cfg_path, device_model)
