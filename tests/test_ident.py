"""Tests for the identification block decoder."""

from __future__ import annotations

import pytest

from elfkit.core import constants as C
from elfkit.core.errors import InvalidFormatError, InvalidMagicError
from elfkit.core.types import ElfClass, Endianness
from elfkit.parsers.ident import parse_ident


def _ident(cls: int = 2, data: int = 1, osabi: int = 0, abiver: int = 0) -> bytes:
    return (b"\x7fELF" + bytes([cls, data, 1, osabi, abiver])).ljust(16, b"\0")


class TestParseIdent:

    @pytest.mark.parametrize(
        "cls, data, elf_class, endianness",
        [
            (1, 1, ElfClass.ELF32, Endianness.LITTLE),
            (1, 2, ElfClass.ELF32, Endianness.BIG),
            (2, 1, ElfClass.ELF64, Endianness.LITTLE),
            (2, 2, ElfClass.ELF64, Endianness.BIG),
        ],
    )
    def test_class_and_byte_order(
        self, cls: int, data: int, elf_class: ElfClass, endianness: Endianness
    ) -> None:
        ident = parse_ident(_ident(cls, data))
        assert ident.elf_class is elf_class
        assert ident.endianness is endianness
        assert ident.version == 1

    def test_osabi_and_abi_version(self) -> None:
        ident = parse_ident(_ident(osabi=C.ELFOSABI_LINUX, abiver=7))
        assert ident.osabi == C.ELFOSABI_LINUX
        assert ident.osabi.name == "ELFOSABI_LINUX"
        assert ident.abi_version == 7

    def test_unknown_osabi_is_kept(self) -> None:
        ident = parse_ident(_ident(osabi=0x61))
        assert int(ident.osabi) == 0x61
        assert not ident.osabi.known

    def test_bad_magic(self) -> None:
        raw = b"MZ\x90\x00" + _ident()[4:]
        with pytest.raises(InvalidMagicError) as excinfo:
            parse_ident(raw)
        assert excinfo.value.found == b"MZ\x90\x00"

    def test_short_block(self) -> None:
        with pytest.raises(InvalidFormatError) as excinfo:
            parse_ident(b"\x7fELF\x02\x01")
        assert excinfo.value.message is None

    @pytest.mark.parametrize("cls", [0, 3, 0xFF])
    def test_bad_class(self, cls: int) -> None:
        with pytest.raises(InvalidFormatError, match="EI_CLASS"):
            parse_ident(_ident(cls=cls))

    @pytest.mark.parametrize("data", [0, 3])
    def test_bad_byte_order(self, data: int) -> None:
        with pytest.raises(InvalidFormatError, match="EI_DATA"):
            parse_ident(_ident(data=data))
