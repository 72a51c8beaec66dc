"""Tests for string table lookups and on-demand symbol decoding."""

from __future__ import annotations

import io

import pytest

from elfkit.core import constants as C
from elfkit.core.errors import InvalidFormatError, TruncatedDataError
from elfkit.core.models import ElfFile
from elfkit.parsers.elf_parser import ELFDecoder
from elfkit.parsers.strtab import get_string
from elfkit.parsers.symbols import decode_symbols, split_info, split_other

from tests.elf_builder import (
    ElfImage,
    SectionDef,
    SymbolDef,
    build,
    pack_symbols,
)


def decode(raw: bytes) -> ElfFile:
    return ELFDecoder(io.BytesIO(raw)).decode()


# ---------------------------------------------------------------------------
# String tables
# ---------------------------------------------------------------------------

class TestGetString:

    TABLE = b"\0.text\0.bss\0"

    @pytest.mark.parametrize(
        "start, expected",
        [(0, ""), (1, ".text"), (7, ".bss"), (2, "text"), (11, "")],
    )
    def test_lookup(self, start: int, expected: str) -> None:
        assert get_string(self.TABLE, start) == expected

    def test_missing_terminator(self) -> None:
        with pytest.raises(InvalidFormatError):
            get_string(b"\0abc", 1)

    def test_start_past_end(self) -> None:
        with pytest.raises(InvalidFormatError):
            get_string(self.TABLE, len(self.TABLE) + 5)

    def test_bytes_map_one_to_one(self) -> None:
        assert get_string(b"\xff\x80A\0", 0) == "\xff\x80A"


# ---------------------------------------------------------------------------
# st_info / st_other
# ---------------------------------------------------------------------------

def test_split_info() -> None:
    sym_type, binding = split_info(0x12)
    assert sym_type == C.STT_FUNC
    assert binding == C.STB_GLOBAL


def test_split_other_keeps_low_bits() -> None:
    assert split_other(0xFE) == C.STV_HIDDEN
    assert split_other(0x03) == C.STV_PROTECTED


# ---------------------------------------------------------------------------
# Symbol tables
# ---------------------------------------------------------------------------

class TestSymbols:

    def test_sample_table(self, sample: ElfFile) -> None:
        symtab = sample.get_section(".symtab")
        symbols = sample.get_symbols(symtab)
        assert [s.name for s in symbols] == [
            "", "counter", "main", "helper", "puts", "abs_value",
        ]

        null, counter, main, helper, puts, absval = symbols
        assert null.value == 0 and null.shndx == C.SHN_UNDEF
        assert counter.type == C.STT_OBJECT and counter.binding == C.STB_LOCAL
        assert (counter.value, counter.size, counter.shndx) == (0x2000, 4, 3)
        assert main.type == C.STT_FUNC and main.binding == C.STB_GLOBAL
        assert (main.value, main.size, main.shndx) == (0x1000, 16, 1)
        assert helper.binding == C.STB_WEAK
        assert helper.visibility == C.STV_HIDDEN
        assert puts.section_label == "UND"
        assert absval.section_label == "ABS"
        assert absval.value == 42
        assert main.section_label == "1"

    def test_record_count_follows_payload(self, sample: ElfFile) -> None:
        symtab = sample.get_section(".symtab")
        record = C.SYM_SIZE[sample.header.elf_class]
        assert len(sample.get_symbols(symtab)) == symtab.header.size // record

    def test_minimal_32bit_little_endian(self) -> None:
        # One NUL-prefixed string table "\0foo\0bar\0" and st_info 0x12.
        strtab = b"\0foo\0bar\0"
        symtab = (
            (1).to_bytes(4, "little") + (0x400).to_bytes(4, "little")
            + (8).to_bytes(4, "little") + bytes([0x12, 0]) + (1).to_bytes(2, "little")
            + (5).to_bytes(4, "little") + bytes(8) + bytes([0x01, 0])
            + (0xFFF2).to_bytes(2, "little")
        )
        image = ElfImage(elf_class=C.ELFCLASS32, endian="<", sections=[
            SectionDef(".symtab", C.SHT_SYMTAB, symtab, link=2),
            SectionDef(".strtab", C.SHT_STRTAB, strtab),
        ])
        elf = decode(build(image))
        foo, bar = elf.get_symbols(elf.get_section(".symtab"))
        assert foo.name == "foo"
        assert foo.type == C.STT_FUNC and int(foo.type) == 2
        assert foo.binding == C.STB_GLOBAL and int(foo.binding) == 1
        assert (foo.value, foo.size, foo.shndx) == (0x400, 8, 1)
        assert bar.name == "bar"
        assert bar.type == C.STT_OBJECT and bar.binding == C.STB_LOCAL
        assert bar.section_label == "COM"

    def test_dynsym_is_a_symbol_table(self, layout: tuple[int, str]) -> None:
        elf_class, endian = layout
        symtab, strtab = pack_symbols(
            [SymbolDef(), SymbolDef(name="dlopen", info=0x12)], elf_class, endian
        )
        image = ElfImage(elf_class=elf_class, endian=endian, sections=[
            SectionDef(".dynstr", C.SHT_STRTAB, strtab),
            SectionDef(".dynsym", C.SHT_DYNSYM, symtab, link=1),
        ])
        elf = decode(build(image))
        assert [s.name for s in elf.symbol_tables()] == [".dynsym"]
        assert [s.name for s in elf.get_symbols(elf.get_section(".dynsym"))] == ["", "dlopen"]

    def test_unknown_type_and_binding(self) -> None:
        symtab, strtab = pack_symbols([SymbolDef(name="odd", info=0xDE)], 2, "<")
        image = ElfImage(sections=[
            SectionDef(".symtab", C.SHT_SYMTAB, symtab, link=2),
            SectionDef(".strtab", C.SHT_STRTAB, strtab),
        ])
        elf = decode(build(image))
        (odd,) = elf.get_symbols(elf.get_section(".symtab"))
        assert int(odd.type) == 0xE and not odd.type.known
        assert int(odd.binding) == 0xD and not odd.binding.known

    def test_non_symbol_section_is_empty(self, sample: ElfFile) -> None:
        assert sample.get_symbols(sample.get_section(".text")) == []
        assert decode_symbols(sample, sample.get_section(".strtab")) == []

    def test_empty_symbol_table(self) -> None:
        image = ElfImage(sections=[SectionDef(".symtab", C.SHT_SYMTAB, b"", link=0)])
        elf = decode(build(image))
        assert elf.get_symbols(elf.get_section(".symtab")) == []

    def test_all_symbols(self, sample: ElfFile) -> None:
        tables = sample.all_symbols()
        assert list(tables) == [4]
        assert len(tables[4]) == 6

    def test_all_symbols_with_duplicate_names(self) -> None:
        symtab, strtab = pack_symbols([SymbolDef(), SymbolDef(name="x")], 2, "<")
        image = ElfImage(sections=[
            SectionDef(".symtab", C.SHT_SYMTAB, symtab, link=3),
            SectionDef(".symtab", C.SHT_SYMTAB, symtab[:24], link=3),
            SectionDef(".strtab", C.SHT_STRTAB, strtab),
        ])
        tables = decode(build(image)).all_symbols()
        assert sorted(tables) == [1, 2]
        assert [len(t) for t in tables.values()] == [2, 1]

    def test_link_out_of_range(self) -> None:
        symtab, _ = pack_symbols([SymbolDef()], 2, "<")
        image = ElfImage(sections=[SectionDef(".symtab", C.SHT_SYMTAB, symtab, link=99)])
        elf = decode(build(image))
        with pytest.raises(InvalidFormatError, match="links to section 99"):
            elf.get_symbols(elf.get_section(".symtab"))

    def test_partial_trailing_record(self) -> None:
        symtab, strtab = pack_symbols([SymbolDef(), SymbolDef(name="x")], 2, "<")
        image = ElfImage(sections=[
            SectionDef(".symtab", C.SHT_SYMTAB, symtab[:-5], link=2),
            SectionDef(".strtab", C.SHT_STRTAB, strtab),
        ])
        elf = decode(build(image))
        with pytest.raises(TruncatedDataError):
            elf.get_symbols(elf.get_section(".symtab"))

    def test_bad_name_offset(self) -> None:
        symtab, _ = pack_symbols([SymbolDef(name="x")], 2, "<")
        image = ElfImage(sections=[
            SectionDef(".symtab", C.SHT_SYMTAB, symtab, link=2),
            SectionDef(".strtab", C.SHT_STRTAB, b"\0"),
        ])
        elf = decode(build(image))
        with pytest.raises(InvalidFormatError):
            elf.get_symbols(elf.get_section(".symtab"))

    def test_decoding_is_repeatable(self, sample64: ElfFile) -> None:
        symtab = sample64.get_section(".symtab")
        assert sample64.get_symbols(symtab) == sample64.get_symbols(symtab)
