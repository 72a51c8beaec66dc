"""
elfkit Value Types
===================

Closed enumerations for the two identification flags that fix the byte
layout of a whole image (class and byte order), plus integer *code* types
for the ELF fields whose value space is open.

Open-set fields (architecture, segment type, section type, symbol type,
...) gain new values over time.  They are modelled as :class:`int`
subclasses that keep the raw number and look it up in a name table on
demand, so an unrecognised value decodes and round-trips instead of
failing to construct::

    >>> Machine(62).name
    'EM_X86_64'
    >>> Machine(0x1234).known
    False
    >>> str(Machine(0x1234))
    'unknown (0x1234)'
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from elfkit.core import constants as C


# ---------------------------------------------------------------------------
# Closed identification enums
# ---------------------------------------------------------------------------

class ElfClass(enum.IntEnum):
    """Word width of the image (``EI_CLASS``)."""
    ELF32 = C.ELFCLASS32
    ELF64 = C.ELFCLASS64

    @property
    def bits(self) -> int:
        return 32 if self is ElfClass.ELF32 else 64


class Endianness(enum.IntEnum):
    """Byte order of every multi-byte field (``EI_DATA``)."""
    LITTLE = C.ELFDATA2LSB
    BIG = C.ELFDATA2MSB

    @property
    def label(self) -> str:
        return "little" if self is Endianness.LITTLE else "big"


# ---------------------------------------------------------------------------
# Integer code base
# ---------------------------------------------------------------------------

class _IntCode(int):
    """Integer that validates and serialises as a plain ``int`` in pydantic."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.int_schema(ge=0),
            serialization=core_schema.plain_serializer_function_ser_schema(int),
        )


class OpenCode(_IntCode):
    """Raw numeric code drawn from an open set of named values.

    Subclasses bind ``_names`` (symbolic names) and optionally
    ``_descriptions`` (human text used by :func:`str`).
    """

    _names: ClassVar[dict[int, str]] = {}
    _descriptions: ClassVar[dict[int, str]] = {}

    @property
    def name(self) -> str | None:
        """Symbolic name, or ``None`` for an unrecognised value."""
        return self._names.get(int(self))

    @property
    def known(self) -> bool:
        return int(self) in self._names

    def __str__(self) -> str:
        text = self._descriptions.get(int(self)) or self.name
        if text is None:
            return f"unknown ({int(self):#x})"
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name or hex(int(self))})"


class OsAbi(OpenCode):
    _names = C.OSABI_NAMES
    _descriptions = C.OSABI_DESCRIPTIONS


class FileType(OpenCode):
    _names = C.ET_NAMES
    _descriptions = C.ET_DESCRIPTIONS


class Machine(OpenCode):
    _names = C.EM_NAMES
    _descriptions = C.EM_DESCRIPTIONS


class SegmentType(OpenCode):
    _names = C.PT_NAMES


class SectionType(OpenCode):
    _names = C.SHT_NAMES


class SymbolType(OpenCode):
    _names = C.STT_NAMES
    _descriptions = C.STT_DESCRIPTIONS


class SymbolBinding(OpenCode):
    _names = C.STB_NAMES


class SymbolVisibility(OpenCode):
    _names = C.STV_NAMES


# ---------------------------------------------------------------------------
# Flag words
# ---------------------------------------------------------------------------

class SegmentFlags(_IntCode):
    """``p_flags`` bitmask; renders as a fixed-width ``RWE`` column."""

    @property
    def readable(self) -> bool:
        return bool(self & C.PF_R)

    @property
    def writable(self) -> bool:
        return bool(self & C.PF_W)

    @property
    def executable(self) -> bool:
        return bool(self & C.PF_X)

    def __str__(self) -> str:
        return "".join((
            "R" if self.readable else " ",
            "W" if self.writable else " ",
            "E" if self.executable else " ",
        ))

    def __repr__(self) -> str:
        return f"SegmentFlags({int(self):#x})"


class SectionFlags(_IntCode):
    """``sh_flags`` bitmask; renders with readelf key letters."""

    def has(self, flag: int) -> bool:
        return bool(self & flag)

    def __str__(self) -> str:
        return "".join(
            letter for bit, letter in C.SHF_LETTERS if self & bit
        )

    def __repr__(self) -> str:
        return f"SectionFlags({int(self):#x})"
