"""Tests for the configuration document model."""

from ctce8_cfg.errors import PayloadMalformedError
from ctce8_cfg.models.document import ConfigDocument
from ctce8_cfg.models.result import ChunkInfo, ParseResult


def test_from_text_and_text():
    doc = ConfigDocument.from_text("<DB>\n</DB>\n")
    assert doc.data == b"<DB>\n</DB>\n"
    assert doc.text == "<DB>\n</DB>\n"
    assert len(doc) == 11


def test_text_rejects_non_utf8():
    """Latin-1 bytes are not silently replaced when decoded."""
    doc = ConfigDocument(b'<DB name="caf\xe9"/>')
    try:
        doc.text
        assert False, "Should have raised UnicodeDecodeError"
    except UnicodeDecodeError:
        pass
    assert ConfigDocument.from_text(doc.data.decode("latin-1"), "latin-1") == doc


def test_root_tag():
    assert ConfigDocument(b'<?xml version="1.0"?><DB><Tbl/></DB>').root_tag == "DB"


def test_equality_is_byte_equality():
    """Whitespace differences make documents unequal."""
    assert ConfigDocument(b"<DB/>") == ConfigDocument(b"<DB/>")
    assert ConfigDocument(b"<DB/>") != ConfigDocument(b"<DB />")


def test_check_well_formed():
    ConfigDocument(b"<DB><Tbl/></DB>").check_well_formed()
    for bad in (b"", b"   \n", b"<DB>", b"plain text", b"<a></b>"):
        try:
            ConfigDocument(bad).check_well_formed()
            assert False, f"Should have rejected {bad!r}"
        except PayloadMalformedError:
            pass


def test_parse_result_summary():
    result = ParseResult(
        document=ConfigDocument(b"<DB/>"),
        device_model="ZXHN F450",
        chunks=(ChunkInfo(offset=60, uncompressed_size=5, compressed_size=13, end_offset=0),),
    )
    summary = result.to_dict()
    assert summary["device_model"] == "ZXHN F450"
    assert summary["document_size"] == 5
    assert summary["chunk_count"] == 1
    assert summary["chunks"][0]["compressed_size"] == 13


def test_parse_result_unpacks():
    document, model = ParseResult(ConfigDocument(b"<DB/>"), "F450")
    assert document.data == b"<DB/>"
    assert model == "F450"


def test_repr():
    assert repr(ConfigDocument(b"<DB/>")) == "ConfigDocument(size=5)"
    assert "F450" in repr(ParseResult(ConfigDocument(b"<DB/>"), "F450"))
