"""
Endianness-Aware Scalar Reader
===============================

The single place where bytes become integers.  A :class:`ScalarReader` is
bound to the byte order and word class read from the identification
block and never changes them for the lifetime of a decode; every header,
table and symbol record goes through it.

``word()`` is the class-dependent field: 4 bytes in ELF32 and 8 bytes in
ELF64 (addresses, offsets, sizes, ``sh_flags``).
"""

from __future__ import annotations

import io
import struct
import sys
from typing import BinaryIO

from elfkit.core.errors import InvalidFormatError, TruncatedDataError
from elfkit.core.types import ElfClass, Endianness


_FORMATS: dict[int, str] = {1: "B", 2: "H", 4: "I", 8: "Q"}

# Larger reads are taken in pieces; a bogus size then stops at end of stream.
_CHUNK_SIZE = 1 << 20


def _compile(endianness: Endianness) -> dict[int, struct.Struct]:
    prefix = "<" if endianness is Endianness.LITTLE else ">"
    return {width: struct.Struct(prefix + code) for width, code in _FORMATS.items()}


_STRUCTS: dict[Endianness, dict[int, struct.Struct]] = {
    Endianness.LITTLE: _compile(Endianness.LITTLE),
    Endianness.BIG: _compile(Endianness.BIG),
}


def check_extent(value: int, what: str) -> int:
    """Reject an offset or size the platform cannot address."""
    if not 0 <= value <= sys.maxsize:
        raise InvalidFormatError(f"{what} value {value:#x} is out of range")
    return value


def read_exact(stream: BinaryIO, size: int, what: str = "data") -> bytes:
    """Read exactly *size* bytes or raise :class:`TruncatedDataError`."""
    check_extent(size, f"{what} size")
    if size <= _CHUNK_SIZE:
        data = stream.read(size)
    else:
        parts: list[bytes] = []
        remaining = size
        try:
            while remaining:
                chunk = stream.read(min(remaining, _CHUNK_SIZE))
                if not chunk:
                    break
                parts.append(chunk)
                remaining -= len(chunk)
            data = b"".join(parts)
        except MemoryError as exc:
            raise InvalidFormatError(f"{what} of {size} bytes does not fit in memory") from exc
    if len(data) != size:
        raise TruncatedDataError(size, len(data), what)
    return data


class ScalarReader:
    """Decode unsigned fields of a fixed byte order and word class.

    Args:
        stream: Seekable binary stream positioned anywhere.
        endianness: Byte order from ``EI_DATA``.
        elf_class: Word class from ``EI_CLASS``.
    """

    __slots__ = ("_stream", "_structs", "endianness", "elf_class", "word_size")

    def __init__(
        self,
        stream: BinaryIO,
        endianness: Endianness,
        elf_class: ElfClass,
    ) -> None:
        self._stream = stream
        self._structs = _STRUCTS[endianness]
        self.endianness = endianness
        self.elf_class = elf_class
        self.word_size = 8 if elf_class is ElfClass.ELF64 else 4

    @classmethod
    def over_bytes(
        cls, data: bytes, endianness: Endianness, elf_class: ElfClass
    ) -> ScalarReader:
        """Reader over an in-memory buffer (e.g. a loaded section payload)."""
        return cls(io.BytesIO(data), endianness, elf_class)

    # ------------------------------------------------------------------ #
    #  Positioning
    # ------------------------------------------------------------------ #

    def seek(self, offset: int, what: str = "offset") -> None:
        check_extent(offset, what)
        try:
            self._stream.seek(offset)
        except OverflowError as exc:
            raise InvalidFormatError(f"{what} {offset:#x} cannot be reached") from exc

    def tell(self) -> int:
        return self._stream.tell()

    def stream_length(self) -> int:
        """Total stream length; the current position is preserved."""
        here = self._stream.tell()
        end = self._stream.seek(0, io.SEEK_END)
        self._stream.seek(here)
        return end

    # ------------------------------------------------------------------ #
    #  Scalars
    # ------------------------------------------------------------------ #

    def read_bytes(self, size: int, what: str = "data") -> bytes:
        return read_exact(self._stream, size, what)

    def uint(self, width: int) -> int:
        """Read one unsigned integer of *width* bytes (1, 2, 4 or 8)."""
        packer = self._structs[width]
        return packer.unpack(self.read_bytes(width, f"{width * 8}-bit field"))[0]

    def u8(self) -> int:
        return self.uint(1)

    def u16(self) -> int:
        return self.uint(2)

    def u32(self) -> int:
        return self.uint(4)

    def u64(self) -> int:
        return self.uint(8)

    def word(self) -> int:
        """Read a class-width field: 4 bytes for ELF32, 8 for ELF64."""
        return self.uint(self.word_size)
