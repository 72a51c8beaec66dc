"""
elfkit Error Hierarchy
=======================

Typed exceptions raised while decoding an ELF image.  Every failure aborts
the decode in progress; there is no partial result.  Errors raised by the
underlying stream (:class:`OSError`) are never wrapped and reach the
caller untouched.
"""

from __future__ import annotations


class ElfError(Exception):
    """Base class for every decoding failure raised by elfkit."""

    pass


class InvalidMagicError(ElfError):
    """The first four bytes are not ``0x7F 'E' 'L' 'F'``."""

    def __init__(self, found: bytes = b"") -> None:
        self.found = found
        super().__init__(f"Invalid ELF magic: {found!r}")


class InvalidFormatError(ElfError):
    """The image is structurally malformed.

    Args:
        message: Optional diagnostic.  ``None`` when the failure carries
                 no further detail (e.g. a short identification block).
    """

    def __init__(self, message: str | None = None) -> None:
        self.message = message
        super().__init__(message or "Invalid ELF format")


class TruncatedDataError(InvalidFormatError):
    """A read returned fewer bytes than the structure requires."""

    def __init__(self, expected: int, got: int, what: str = "data") -> None:
        self.expected = expected
        self.got = got
        super().__init__(
            f"Truncated {what}: expected {expected} bytes, got {got}"
        )


class NotSupportedError(ElfError):
    """The image uses a feature that is intentionally not decoded."""

    pass
