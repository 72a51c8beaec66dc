"""
elfkit Data Models
===================

Pydantic models for a decoded ELF image.  Every model is frozen: an
:class:`ElfFile` is built once, top to bottom, by the decoder and is
read-only afterwards.  Sections are held in an index-addressable list so
``sh_link`` and ``e_shstrndx`` stay plain integer indices.

Symbol tables are *not* decoded with the file; call
:meth:`ElfFile.get_symbols` for the sections you need.

References:
    - TIS Committee. (1995). Executable and Linkable Format (ELF) Specification.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from elfkit.core import constants as C
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
    SymbolVisibility,
)


_FROZEN = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# File header
# ---------------------------------------------------------------------------

class FileHeader(BaseModel):
    """Identification and file header fields.

    Attributes:
        elf_class: 32-bit or 64-bit layout.
        endianness: Byte order of all multi-byte fields.
        osabi: Target OS ABI (open set).
        abi_version: ABI version byte, stored verbatim.
        file_type: Relocatable, executable, shared object, core (open set).
        machine: Target architecture (open set).
        entry: Virtual address of the program entry point.
        flags: Processor-specific ``e_flags`` word.
        ph_offset: File offset of the program header table.
        sh_offset: File offset of the section header table.
        header_size: Declared size of this header (``e_ehsize``).
        ph_entsize: Declared program header entry size.
        ph_count: Number of program headers.
        sh_entsize: Declared section header entry size.
        sh_count: Number of section headers.
        shstrndx: Index of the section holding section names.
    """
    model_config = _FROZEN

    elf_class: ElfClass
    endianness: Endianness
    osabi: OsAbi = OsAbi(C.ELFOSABI_NONE)
    abi_version: int = 0
    file_type: FileType = FileType(C.ET_NONE)
    machine: Machine = Machine(C.EM_NONE)
    entry: int = 0
    flags: int = 0
    ph_offset: int = 0
    sh_offset: int = 0
    header_size: int = 0
    ph_entsize: int = 0
    ph_count: int = 0
    sh_entsize: int = 0
    sh_count: int = 0
    shstrndx: int = 0

    @property
    def is_64bit(self) -> bool:
        return self.elf_class is ElfClass.ELF64

    def __str__(self) -> str:
        return (
            f"File Header for {self.elf_class.name} {self.endianness.label}-endian "
            f"{self.file_type} for {self.osabi} {self.machine}"
        )


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------

class ProgramHeader(BaseModel):
    """One program header table entry (a loadable segment descriptor)."""
    model_config = _FROZEN

    type: SegmentType
    offset: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    flags: SegmentFlags = SegmentFlags(0)
    align: int = 0

    def __str__(self) -> str:
        return (
            f"Program Header: Type: {self.type} Offset: {self.offset:#010x} "
            f"VirtAddr: {self.vaddr:#010x} PhysAddr: {self.paddr:#010x} "
            f"FileSize: {self.filesz:#06x} MemSize: {self.memsz:#06x} "
            f"Flags: {self.flags} Align: {self.align:#x}"
        )


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

class SectionHeader(BaseModel):
    """One section header table entry.

    ``name`` is empty until the decoder's name-resolution stage has run.
    """
    model_config = _FROZEN

    name: str = ""
    type: SectionType = SectionType(C.SHT_NULL)
    flags: SectionFlags = SectionFlags(0)
    addr: int = 0
    offset: int = 0
    size: int = 0
    link: int = 0
    info: int = 0
    addralign: int = 0
    entsize: int = 0

    def __str__(self) -> str:
        return (
            f"Section Header: Name: {self.name} Type: {self.type} "
            f"Flags: {int(self.flags):#x} Addr: {self.addr:#010x} "
            f"Offset: {self.offset:#06x} Size: {self.size:#06x} "
            f"Link: {self.link} Info: {self.info:#x} "
            f"AddrAlign: {self.addralign} EntSize: {self.entsize}"
        )


class Section(BaseModel):
    """A section header together with exactly ``header.size`` payload bytes.

    NOBITS sections carry an all-zero payload that was never read from
    the underlying stream.
    """
    model_config = _FROZEN

    index: int
    header: SectionHeader
    data: bytes = Field(default=b"", repr=False)

    @property
    def name(self) -> str:
        return self.header.name

    @property
    def is_nobits(self) -> bool:
        return self.header.type == C.SHT_NOBITS

    @property
    def is_symbol_table(self) -> bool:
        return self.header.type in (C.SHT_SYMTAB, C.SHT_DYNSYM)

    def __str__(self) -> str:
        return str(self.header)


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

class Symbol(BaseModel):
    """A decoded symbol table record with its name resolved."""
    model_config = _FROZEN

    name: str = ""
    value: int = 0
    size: int = 0
    type: SymbolType = SymbolType(C.STT_NOTYPE)
    binding: SymbolBinding = SymbolBinding(C.STB_LOCAL)
    visibility: SymbolVisibility = SymbolVisibility(C.STV_DEFAULT)
    shndx: int = 0

    @property
    def section_label(self) -> str:
        """``UND``/``ABS``/``COM`` for reserved indices, else the index."""
        return C.SHN_LABELS.get(self.shndx, str(self.shndx))

    def __str__(self) -> str:
        return (
            f"Symbol: Value: {self.value:#010x} Size: {self.size:#06x} "
            f"Type: {self.type} Bind: {self.binding} Vis: {self.visibility} "
            f"Section: {self.shndx} Name: {self.name}"
        )


# ---------------------------------------------------------------------------
# Root aggregate
# ---------------------------------------------------------------------------

class ElfFile(BaseModel):
    """A fully decoded ELF image.

    Usage::

        elf = elfkit.open_path("/bin/ls")
        dynsym = elf.get_section(".dynsym")
        if dynsym is not None:
            for sym in elf.get_symbols(dynsym):
                print(sym.name)
    """
    model_config = _FROZEN

    header: FileHeader
    program_headers: list[ProgramHeader] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)

    @property
    def is_64bit(self) -> bool:
        return self.header.is_64bit

    @property
    def is_little_endian(self) -> bool:
        return self.header.endianness is Endianness.LITTLE

    def get_section(self, name: str) -> Optional[Section]:
        """Return the first section whose name equals *name* exactly."""
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def get_symbols(self, section: Section) -> list[Symbol]:
        """Decode the symbols held by *section*.

        Sections that are neither SYMTAB nor DYNSYM yield an empty list.

        Raises:
            InvalidFormatError: If the linked string table index is out of
                range or a symbol name cannot be resolved.
            TruncatedDataError: If the section ends inside a record.
        """
        from elfkit.parsers.symbols import decode_symbols

        return decode_symbols(self, section)

    def symbol_tables(self) -> list[Section]:
        """All SYMTAB and DYNSYM sections, in table order."""
        return [s for s in self.sections if s.is_symbol_table]

    def all_symbols(self) -> dict[int, list[Symbol]]:
        """Decode every symbol table, keyed by section index.

        Names are not unique (and are all empty without a section name
        table), so the index is the only stable key.
        """
        return {s.index: self.get_symbols(s) for s in self.symbol_tables()}

    def __str__(self) -> str:
        parts = [f"{{ {self.header} }}", "{ "]
        parts.extend(str(ph) for ph in self.program_headers)
        parts.append(" } { ")
        parts.extend(str(s) for s in self.sections)
        parts.append(" }")
        return "".join(parts)
