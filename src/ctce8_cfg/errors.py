"""Validation errors raised by the container codec.

Each error names the structural check that failed, so callers can show
the operator *why* a file was rejected instead of a generic parse error.
All of them are ``ValueError`` subclasses and carry a stable ``code``.
"""

from __future__ import annotations


class ContainerError(ValueError):
    """Base class for every codec failure."""

    code = "E_CONTAINER"


class ParseError(ContainerError):
    """A container failed one of the parser's structural checks."""

    code = "E_PARSE"


class BuildError(ContainerError):
    """The builder refused its input."""

    code = "E_BUILD"


class TooShortError(ParseError):
    """Buffer is smaller than the minimum structural size."""

    code = "E_TOO_SHORT"

    def __init__(self, length: int, minimum: int) -> None:
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Container too short: {length} bytes (need at least {minimum})"
        )


class BadMagicError(ParseError):
    """A fixed marker did not hold its expected value."""

    code = "E_BAD_MAGIC"

    def __init__(self, offset: int, expected: bytes, actual: bytes) -> None:
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Bad magic at offset 0x{offset:X}: expected {expected.hex(' ')}, "
            f"got {actual.hex(' ')}"
        )


class LengthOutOfRangeError(ParseError):
    """A declared region extends past the end of the buffer."""

    code = "E_LENGTH_OUT_OF_RANGE"

    def __init__(self, field: str, value: int, limit: int) -> None:
        self.field = field
        self.value = value
        self.limit = limit
        super().__init__(
            f"Length field '{field}' out of range: {value} (limit {limit})"
        )


class ChecksumMismatchError(ParseError):
    """An integrity field disagrees with the value recomputed from the data."""

    code = "E_CHECKSUM_MISMATCH"

    def __init__(self, field: str, expected: int, actual: int) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Integrity field '{field}' mismatch: stored 0x{expected:08X}, "
            f"computed 0x{actual:08X}"
        )


class PayloadMalformedError(ParseError):
    """The recovered payload is not a well-formed configuration document."""

    code = "E_PAYLOAD_MALFORMED"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Payload malformed: {reason}")


class IdentifierTooLongError(BuildError):
    """Device model string does not fit its field."""

    code = "E_IDENTIFIER_TOO_LONG"

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(
            f"Device model is {length} bytes, field holds at most {limit}"
        )


class IdentifierNotAsciiError(BuildError):
    """Device model string contains non-ASCII characters."""

    code = "E_IDENTIFIER_NOT_ASCII"

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Device model must be ASCII, got {identifier!r}")
