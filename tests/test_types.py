"""Tests for the open-set code types, flag words and model serialisation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from elfkit.core import constants as C
from elfkit.core.models import FileHeader, ProgramHeader, SectionHeader, Symbol
from elfkit.core.types import (
    ElfClass,
    Endianness,
    FileType,
    Machine,
    OsAbi,
    SectionFlags,
    SectionType,
    SegmentFlags,
    SegmentType,
    SymbolBinding,
    SymbolType,
)


class TestOpenCode:

    def test_known_value(self) -> None:
        machine = Machine(C.EM_X86_64)
        assert machine == 62
        assert machine.known
        assert machine.name == "EM_X86_64"
        assert str(machine) == "Advanced Micro Devices X86-64"
        assert repr(machine) == "Machine(EM_X86_64)"

    def test_unknown_value(self) -> None:
        machine = Machine(0xBEEF)
        assert not machine.known
        assert machine.name is None
        assert str(machine) == "unknown (0xbeef)"
        assert repr(machine) == "Machine(0xbeef)"

    def test_behaves_as_int(self) -> None:
        codes = {SectionType(C.SHT_SYMTAB): "symtab"}
        assert codes[C.SHT_SYMTAB] == "symtab"
        assert SegmentType(C.PT_LOAD) + 1 == 2
        assert SymbolType(2) == SymbolType(C.STT_FUNC)

    @pytest.mark.parametrize(
        "code, text",
        [
            (OsAbi(C.ELFOSABI_SYSV), "UNIX System V"),
            (FileType(C.ET_DYN), "DYN (Shared object file)"),
            (SectionType(C.SHT_NOBITS), "NOBITS"),
            (SymbolBinding(C.STB_WEAK), "WEAK"),
        ],
    )
    def test_str(self, code: int, text: str) -> None:
        assert str(code) == text

    def test_standard_section_type_values(self) -> None:
        assert SectionType(14).name == "INIT_ARRAY"
        assert SectionType(17).name == "GROUP"
        assert SectionType(19).name == "NUM"


class TestFlags:

    @pytest.mark.parametrize(
        "value, text",
        [
            (C.PF_R, "R  "),
            (C.PF_R | C.PF_W, "RW "),
            (C.PF_R | C.PF_X, "R E"),
            (C.PF_R | C.PF_W | C.PF_X, "RWE"),
            (0, "   "),
        ],
    )
    def test_segment_flags(self, value: int, text: str) -> None:
        assert str(SegmentFlags(value)) == text

    def test_section_flag_letters(self) -> None:
        flags = SectionFlags(C.SHF_WRITE | C.SHF_ALLOC | C.SHF_TLS)
        assert str(flags) == "WAT"
        assert flags.has(C.SHF_TLS)
        assert not flags.has(C.SHF_EXECINSTR)
        assert str(SectionFlags(0)) == ""


class TestModels:

    def test_header_serialises_codes_as_ints(self) -> None:
        hdr = FileHeader(
            elf_class=ElfClass.ELF32,
            endianness=Endianness.BIG,
            machine=Machine(0x7777),
            file_type=FileType(C.ET_REL),
        )
        dumped = hdr.model_dump(mode="json")
        assert dumped["machine"] == 0x7777
        assert dumped["file_type"] == C.ET_REL
        assert dumped["elf_class"] == 1

    def test_plain_ints_are_wrapped(self) -> None:
        ph = ProgramHeader(type=C.PT_NOTE, flags=C.PF_R)
        assert isinstance(ph.type, SegmentType)
        assert ph.type.name == "NOTE"
        assert isinstance(ph.flags, SegmentFlags)

    def test_models_are_frozen(self) -> None:
        sh = SectionHeader(name=".text")
        with pytest.raises(ValidationError):
            sh.name = ".data"  # type: ignore[misc]

    def test_section_label(self) -> None:
        assert Symbol(shndx=C.SHN_COMMON).section_label == "COM"
        assert Symbol(shndx=7).section_label == "7"

    def test_elf_class_bits(self) -> None:
        assert ElfClass.ELF32.bits == 32
        assert ElfClass.ELF64.bits == 64
        assert Endianness.BIG.label == "big"
