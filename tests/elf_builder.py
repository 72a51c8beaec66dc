"""
In-memory ELF image builder for the test-suite.

Lays an image out as::

    file header | program headers | section payloads | section headers

Section 0 is always the NULL section and, unless disabled, a
``.shstrtab`` holding every section name is appended last.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from elfkit.core import constants as C


_EHDR = {C.ELFCLASS32: "HHIIIIIHHHHHH", C.ELFCLASS64: "HHIQQQIHHHHHH"}
_PHDR = {C.ELFCLASS32: "IIIIIIII", C.ELFCLASS64: "IIQQQQQQ"}
_SHDR = {C.ELFCLASS32: "IIIIIIIIII", C.ELFCLASS64: "IIQQQQIIQQ"}
_SYM = {C.ELFCLASS32: "IIIBBH", C.ELFCLASS64: "IBBHQQ"}

LAYOUTS = [
    (C.ELFCLASS32, "<"),
    (C.ELFCLASS32, ">"),
    (C.ELFCLASS64, "<"),
    (C.ELFCLASS64, ">"),
]


@dataclass
class SectionDef:
    name: str
    type: int = C.SHT_PROGBITS
    data: bytes = b""
    flags: int = 0
    addr: int = 0
    link: int = 0
    info: int = 0
    addralign: int = 1
    entsize: int = 0
    # NOBITS only: declared size, no bytes in the file
    size: int = 0
    # Overrides for malformed images
    offset: int | None = None
    name_offset: int | None = None


@dataclass
class SegmentDef:
    type: int = C.PT_LOAD
    flags: int = C.PF_R
    offset: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0


@dataclass
class SymbolDef:
    name: str = ""
    value: int = 0
    size: int = 0
    info: int = 0
    other: int = 0
    shndx: int = 0


@dataclass
class ElfImage:
    """Everything needed to lay out one image."""
    elf_class: int = C.ELFCLASS64
    endian: str = "<"
    file_type: int = C.ET_EXEC
    machine: int = C.EM_X86_64
    osabi: int = C.ELFOSABI_SYSV
    abi_version: int = 0
    version: int = C.EV_CURRENT
    entry: int = 0
    flags: int = 0
    segments: list[SegmentDef] = field(default_factory=list)
    sections: list[SectionDef] = field(default_factory=list)
    add_shstrtab: bool = True
    shstrndx: int | None = None


def pack_symbols(
    symbols: list[SymbolDef], elf_class: int, endian: str
) -> tuple[bytes, bytes]:
    """Return ``(symtab payload, strtab payload)`` for *symbols*."""
    strtab = bytearray(b"\0")
    offsets: dict[str, int] = {"": 0}
    for sym in symbols:
        if sym.name not in offsets:
            offsets[sym.name] = len(strtab)
            strtab += sym.name.encode("latin-1") + b"\0"

    fmt = struct.Struct(endian + _SYM[elf_class])
    out = bytearray()
    for sym in symbols:
        name = offsets[sym.name]
        if elf_class == C.ELFCLASS64:
            out += fmt.pack(name, sym.info, sym.other, sym.shndx, sym.value, sym.size)
        else:
            out += fmt.pack(name, sym.value, sym.size, sym.info, sym.other, sym.shndx)
    return bytes(out), bytes(strtab)


def build(image: ElfImage) -> bytes:
    """Serialise *image* to bytes."""
    ec, en = image.elf_class, image.endian
    sections = [SectionDef(name="", type=C.SHT_NULL, addralign=0)]
    sections += image.sections

    shstrtab = bytearray(b"\0")
    if image.add_shstrtab:
        sections.append(SectionDef(name=".shstrtab", type=C.SHT_STRTAB))

    name_offsets: list[int] = []
    for sec in sections:
        if sec.name_offset is not None:
            name_offsets.append(sec.name_offset)
        elif sec.name:
            name_offsets.append(len(shstrtab))
            shstrtab += sec.name.encode("latin-1") + b"\0"
        else:
            name_offsets.append(0)
    if image.add_shstrtab:
        sections[-1].data = bytes(shstrtab)

    ehsize = C.EHDR_SIZE[ec]
    phsize = C.PHDR_SIZE[ec]
    shsize = C.SHDR_SIZE[ec]

    phoff = ehsize if image.segments else 0
    cursor = ehsize + len(image.segments) * phsize
    payload = bytearray()
    placed: list[tuple[int, int]] = []
    for sec in sections:
        if sec.type == C.SHT_NULL:
            placed.append((0, 0))
        elif sec.type == C.SHT_NOBITS:
            placed.append((sec.offset if sec.offset is not None else cursor, sec.size))
        else:
            offset = sec.offset if sec.offset is not None else cursor
            placed.append((offset, len(sec.data)))
            if sec.offset is None:
                payload += sec.data
                cursor += len(sec.data)

    pad = (-cursor) % 8
    payload += bytes(pad)
    shoff = cursor + pad

    if image.shstrndx is not None:
        shstrndx = image.shstrndx
    else:
        shstrndx = len(sections) - 1 if image.add_shstrtab else C.SHN_UNDEF

    ident = bytes([
        0x7F, ord("E"), ord("L"), ord("F"),
        ec,
        C.ELFDATA2LSB if en == "<" else C.ELFDATA2MSB,
        C.EV_CURRENT,
        image.osabi,
        image.abi_version,
    ]).ljust(C.EI_NIDENT, b"\0")

    out = bytearray(ident)
    out += struct.pack(
        en + _EHDR[ec],
        image.file_type, image.machine, image.version,
        image.entry, phoff, shoff, image.flags,
        ehsize, phsize, len(image.segments), shsize, len(sections), shstrndx,
    )

    ph = struct.Struct(en + _PHDR[ec])
    for seg in image.segments:
        if ec == C.ELFCLASS64:
            out += ph.pack(seg.type, seg.flags, seg.offset, seg.vaddr,
                           seg.paddr, seg.filesz, seg.memsz, seg.align)
        else:
            out += ph.pack(seg.type, seg.offset, seg.vaddr, seg.paddr,
                           seg.filesz, seg.memsz, seg.flags, seg.align)

    out += payload

    sh = struct.Struct(en + _SHDR[ec])
    for sec, name_off, (offset, size) in zip(sections, name_offsets, placed):
        out += sh.pack(
            name_off, sec.type, sec.flags, sec.addr, offset, size,
            sec.link, sec.info, sec.addralign, sec.entsize,
        )
    return bytes(out)


# ---------------------------------------------------------------------------
# Canned sample
# ---------------------------------------------------------------------------

TEXT = bytes(range(0x40, 0x50))
DATA = b"hello world\0"

SAMPLE_SYMBOLS = [
    SymbolDef(),
    SymbolDef(name="counter", value=0x2000, size=4,
              info=(C.STB_LOCAL << 4) | C.STT_OBJECT, shndx=3),
    SymbolDef(name="main", value=0x1000, size=16,
              info=(C.STB_GLOBAL << 4) | C.STT_FUNC, shndx=1),
    SymbolDef(name="helper", value=0x1008, size=8,
              info=(C.STB_WEAK << 4) | C.STT_FUNC, other=C.STV_HIDDEN, shndx=1),
    SymbolDef(name="puts", info=(C.STB_GLOBAL << 4) | C.STT_FUNC, shndx=C.SHN_UNDEF),
    SymbolDef(name="abs_value", value=42,
              info=(C.STB_GLOBAL << 4) | C.STT_NOTYPE, shndx=C.SHN_ABS),
]


def sample_image(elf_class: int = C.ELFCLASS64, endian: str = "<") -> ElfImage:
    """A small executable-shaped image.

    Section indices: 1 .text, 2 .data, 3 .bss, 4 .symtab, 5 .strtab,
    6 .shstrtab.
    """
    symtab, strtab = pack_symbols(SAMPLE_SYMBOLS, elf_class, endian)
    return ElfImage(
        elf_class=elf_class,
        endian=endian,
        entry=0x1000,
        segments=[
            SegmentDef(type=C.PT_LOAD, flags=C.PF_R | C.PF_X, offset=0,
                       vaddr=0x1000, paddr=0x1000, filesz=0x200,
                       memsz=0x200, align=0x1000),
            SegmentDef(type=C.PT_GNU_STACK, flags=C.PF_R | C.PF_W, align=16),
        ],
        sections=[
            SectionDef(".text", C.SHT_PROGBITS, TEXT,
                       flags=C.SHF_ALLOC | C.SHF_EXECINSTR, addr=0x1000,
                       addralign=16),
            SectionDef(".data", C.SHT_PROGBITS, DATA,
                       flags=C.SHF_WRITE | C.SHF_ALLOC, addr=0x2000,
                       addralign=4),
            SectionDef(".bss", C.SHT_NOBITS, flags=C.SHF_WRITE | C.SHF_ALLOC,
                       addr=0x3000, size=16, addralign=8),
            SectionDef(".symtab", C.SHT_SYMTAB, symtab, link=5, info=2,
                       addralign=8, entsize=C.SYM_SIZE[elf_class]),
            SectionDef(".strtab", C.SHT_STRTAB, strtab),
        ],
    )


def sample_bytes(elf_class: int = C.ELFCLASS64, endian: str = "<") -> bytes:
    return build(sample_image(elf_class, endian))
