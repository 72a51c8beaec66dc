"""
Ident Decoder
==============

Decodes the fixed 16-byte identification prefix (``e_ident``).  Its class
and byte-order bytes select the layout of everything that follows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from elfkit.core import constants as C
from elfkit.core.errors import InvalidFormatError, InvalidMagicError
from elfkit.core.types import ElfClass, Endianness, OsAbi


@dataclass(frozen=True, slots=True)
class Ident:
    """Decoded ``e_ident`` bytes."""
    elf_class: ElfClass
    endianness: Endianness
    version: int
    osabi: OsAbi
    abi_version: int


def parse_ident(raw: bytes) -> Ident:
    """Validate and decode an identification block.

    Args:
        raw: The bytes read from the start of the image.

    Raises:
        InvalidFormatError: Fewer than 16 bytes, or an unrecognised class
            or byte-order byte.
        InvalidMagicError: The first four bytes are not ``\\x7fELF``.
    """
    if len(raw) < C.EI_NIDENT:
        raise InvalidFormatError()
    if raw[:4] != C.ELF_MAGIC:
        raise InvalidMagicError(bytes(raw[:4]))

    try:
        elf_class = ElfClass(raw[C.EI_CLASS])
    except ValueError:
        raise InvalidFormatError(f"Invalid EI_CLASS: {raw[C.EI_CLASS]}") from None

    try:
        endianness = Endianness(raw[C.EI_DATA])
    except ValueError:
        raise InvalidFormatError(f"Invalid EI_DATA: {raw[C.EI_DATA]}") from None

    # EI_VERSION is kept as-is; the 4-byte e_version word is what gets checked
    return Ident(
        elf_class=elf_class,
        endianness=endianness,
        version=raw[C.EI_VERSION],
        osabi=OsAbi(raw[C.EI_OSABI]),
        abi_version=raw[C.EI_ABIVERSION],
    )


def read_ident(stream: BinaryIO) -> Ident:
    """Read and decode the identification block at the stream's position."""
    return parse_ident(stream.read(C.EI_NIDENT))
