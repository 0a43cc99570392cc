"""Pack and unpack CTCE8 configuration containers of ZXHN optical terminals."""

from .container import build, parse
from .errors import (
    BadMagicError,
    BuildError,
    ChecksumMismatchError,
    ContainerError,
    IdentifierNotAsciiError,
    IdentifierTooLongError,
    LengthOutOfRangeError,
    ParseError,
    PayloadMalformedError,
    TooShortError,
)
from .models import ChunkInfo, ConfigDocument, ParseResult

__version__ = "0.1.0"
