"""Tests for .cfg and .xml file handlers."""

import tempfile
from pathlib import Path

from ctce8_cfg.container.builder import build
from ctce8_cfg.errors import BadMagicError
from ctce8_cfg.models.document import ConfigDocument
from ctce8_cfg.models.file_formats import (
    export_cfg,
    export_xml,
    import_cfg,
    import_xml,
    pack_file,
    unpack_file,
)

MODEL = "ZXHN F450"
XML = b'<?xml version="1.0"?>\r\n<DB>\r\n<Tbl name="FWSC"/>\r\n</DB>\r\n'


def test_export_cfg_writes_container():
    """Exported file holds exactly the built container."""
    with tempfile.TemporaryDirectory() as tmp:
        path = export_cfg(ConfigDocument(XML), Path(tmp) / "out.cfg", MODEL)
        assert path.read_bytes() == build(XML, MODEL)


def test_import_cfg():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "in.cfg"
        path.write_bytes(build(XML, MODEL))
        result = import_cfg(str(path))
    assert result.device_model == MODEL
    assert result.document.data == XML


def test_xml_roundtrip_preserves_bytes():
    """XML files are read and written without re-encoding."""
    with tempfile.TemporaryDirectory() as tmp:
        path = export_xml(ConfigDocument(XML), Path(tmp) / "doc.xml")
        assert path.read_bytes() == XML
        assert import_xml(path) == ConfigDocument(XML)


def test_unpack_then_pack_is_identical():
    """Unpack to XML, pack again with the reported model: same file."""
    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        original = tmp / "config.cfg"
        original.write_bytes(build(XML, MODEL))

        result = unpack_file(original, tmp / "config.xml")
        assert (tmp / "config.xml").read_bytes() == XML

        repacked = pack_file(tmp / "config.xml", tmp / "repacked.cfg", result.device_model)
        assert repacked.read_bytes() == original.read_bytes()


def test_pack_edited_document():
    with tempfile.TemporaryDirectory() as tmp:
        tmp = Path(tmp)
        edited = XML.replace(b"FWSC", b"FWALG")
        (tmp / "config.xml").write_bytes(edited)
        pack_file(tmp / "config.xml", tmp / "config.cfg", MODEL)
        assert import_cfg(tmp / "config.cfg").document.data == edited


def test_import_invalid_cfg():
    """A file that is not a container raises a specific error."""
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "bogus.cfg"
        path.write_bytes(b"\x00" * 512)
        try:
            import_cfg(path)
            assert False, "Should have raised BadMagicError"
        except BadMagicError as e:
            assert e.offset == 0


def test_unpack_missing_file():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            unpack_file(Path(tmp) / "missing.cfg", Path(tmp) / "out.xml")
            assert False, "Should have raised OSError"
        except OSError:
            pass
        assert not (Path(tmp) / "out.xml").exists()
