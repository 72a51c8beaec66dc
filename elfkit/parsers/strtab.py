"""
String Table Resolver
======================

String tables are nul-separated byte strings indexed by byte offset.
Section names and symbol names are both resolved here.

Bytes are widened one-to-one to characters (Latin-1) without any charset
validation, so names containing non-ASCII bytes are preserved byte for
byte but will not round-trip through a strict UTF-8 decode.
"""

from __future__ import annotations

from elfkit.core.errors import InvalidFormatError


def get_string(data: bytes, start: int) -> str:
    """Return the string starting at *start* and ending before the next NUL.

    Raises:
        InvalidFormatError: No NUL byte at or after *start* (this includes
            a *start* past the end of *data*).
    """
    end = data.find(0, start)
    if end == -1:
        raise InvalidFormatError(
            f"Unterminated string at offset {start} in {len(data)}-byte table"
        )
    return data[start:end].decode("latin-1")
