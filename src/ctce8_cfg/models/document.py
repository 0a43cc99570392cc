"""Configuration document carried inside a container."""

from __future__ import annotations

from dataclasses import dataclass
from xml.etree.ElementTree import Element, ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from ..errors import PayloadMalformedError


@dataclass(frozen=True)
class ConfigDocument:
    """The device settings as XML, kept byte-for-byte.

    The codec never rewrites the document: the exact bytes are what get
    compressed and checksummed, so whitespace and line endings survive
    a parse/build round trip unchanged.
    """

    data: bytes

    @classmethod
    def from_text(cls, text: str, encoding: str = "utf-8") -> ConfigDocument:
        return cls(data=text.encode(encoding))

    @property
    def text(self) -> str:
        """The document decoded as UTF-8.

        Raises:
            UnicodeDecodeError: If the bytes are not UTF-8. Use ``data`` for
                documents in other encodings.
        """
        return self.data.decode("utf-8")

    def parse_xml(self) -> Element:
        """Parse the document into an element tree.

        The firmware may NUL-terminate the document; those trailing
        bytes are ignored for parsing only.

        Raises:
            PayloadMalformedError: If the document is not well-formed XML.
        """
        body = self.data.rstrip(b"\x00")
        if not body.strip():
            raise PayloadMalformedError("document is empty")
        try:
            return fromstring(body)
        except (ParseError, DefusedXmlException) as e:
            raise PayloadMalformedError(f"not well-formed XML: {e}") from e

    def check_well_formed(self) -> None:
        self.parse_xml()

    @property
    def root_tag(self) -> str:
        return self.parse_xml().tag

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"ConfigDocument(size={len(self.data)})"
