"""
ELF Format Constants
=====================

Numeric constants of the Executable and Linkable Format together with the
name tables used to label the open numeric sets (architecture, segment
type, section type, ...).  A value missing from a table is still a valid
value; it is simply rendered as unknown.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
    - Linux man page: elf(5).
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Identification block
# ---------------------------------------------------------------------------

EI_NIDENT: int = 16
ELF_MAGIC: bytes = b"\x7fELF"

EI_CLASS: int = 4
EI_DATA: int = 5
EI_VERSION: int = 6
EI_OSABI: int = 7
EI_ABIVERSION: int = 8

ELFCLASS32: int = 1
ELFCLASS64: int = 2

ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

EV_CURRENT: int = 1

# OS ABI
ELFOSABI_NONE: int = 0
ELFOSABI_SYSV: int = 0
ELFOSABI_HPUX: int = 1
ELFOSABI_NETBSD: int = 2
ELFOSABI_LINUX: int = 3
ELFOSABI_SOLARIS: int = 6
ELFOSABI_AIX: int = 7
ELFOSABI_IRIX: int = 8
ELFOSABI_FREEBSD: int = 9
ELFOSABI_TRU64: int = 10
ELFOSABI_MODESTO: int = 11
ELFOSABI_OPENBSD: int = 12

OSABI_NAMES: dict[int, str] = {
    ELFOSABI_SYSV: "ELFOSABI_SYSV",
    ELFOSABI_HPUX: "ELFOSABI_HPUX",
    ELFOSABI_NETBSD: "ELFOSABI_NETBSD",
    ELFOSABI_LINUX: "ELFOSABI_LINUX",
    ELFOSABI_SOLARIS: "ELFOSABI_SOLARIS",
    ELFOSABI_AIX: "ELFOSABI_AIX",
    ELFOSABI_IRIX: "ELFOSABI_IRIX",
    ELFOSABI_FREEBSD: "ELFOSABI_FREEBSD",
    ELFOSABI_TRU64: "ELFOSABI_TRU64",
    ELFOSABI_MODESTO: "ELFOSABI_MODESTO",
    ELFOSABI_OPENBSD: "ELFOSABI_OPENBSD",
}

OSABI_DESCRIPTIONS: dict[int, str] = {
    ELFOSABI_SYSV: "UNIX System V",
    ELFOSABI_HPUX: "HP-UX",
    ELFOSABI_NETBSD: "NetBSD",
    ELFOSABI_LINUX: "Linux with GNU extensions",
    ELFOSABI_SOLARIS: "Solaris",
    ELFOSABI_AIX: "AIX",
    ELFOSABI_IRIX: "SGI Irix",
    ELFOSABI_FREEBSD: "FreeBSD",
    ELFOSABI_TRU64: "Compaq TRU64 UNIX",
    ELFOSABI_MODESTO: "Novell Modesto",
    ELFOSABI_OPENBSD: "OpenBSD",
}


# ---------------------------------------------------------------------------
# File type
# ---------------------------------------------------------------------------

ET_NONE: int = 0
ET_REL: int = 1   # Relocatable
ET_EXEC: int = 2  # Executable
ET_DYN: int = 3   # Shared object / PIE
ET_CORE: int = 4  # Core dump

ET_NAMES: dict[int, str] = {
    ET_NONE: "ET_NONE",
    ET_REL: "ET_REL",
    ET_EXEC: "ET_EXEC",
    ET_DYN: "ET_DYN",
    ET_CORE: "ET_CORE",
}

ET_DESCRIPTIONS: dict[int, str] = {
    ET_NONE: "NONE (No file type)",
    ET_REL: "REL (Relocatable file)",
    ET_EXEC: "EXEC (Executable file)",
    ET_DYN: "DYN (Shared object file)",
    ET_CORE: "CORE (Core file)",
}


# ---------------------------------------------------------------------------
# Machine architectures
# ---------------------------------------------------------------------------

EM_NONE: int = 0
EM_SPARC: int = 2
EM_386: int = 3
EM_68K: int = 4
EM_MIPS: int = 8
EM_PPC: int = 20
EM_PPC64: int = 21
EM_S390: int = 22
EM_ARM: int = 40
EM_SH: int = 42
EM_IA_64: int = 50
EM_X86_64: int = 62
EM_AVR: int = 83
EM_XTENSA: int = 94
EM_AARCH64: int = 183
EM_RISCV: int = 243
EM_BPF: int = 247

EM_NAMES: dict[int, str] = {
    0: "EM_NONE",
    1: "EM_M32",
    2: "EM_SPARC",
    3: "EM_386",
    4: "EM_68K",
    5: "EM_88K",
    7: "EM_860",
    8: "EM_MIPS",
    9: "EM_S370",
    10: "EM_MIPS_RS3_LE",
    15: "EM_PARISC",
    17: "EM_VPP500",
    18: "EM_SPARC32PLUS",
    19: "EM_960",
    20: "EM_PPC",
    21: "EM_PPC64",
    22: "EM_S390",
    36: "EM_V800",
    37: "EM_FR20",
    38: "EM_RH32",
    39: "EM_RCE",
    40: "EM_ARM",
    41: "EM_FAKE_ALPHA",
    42: "EM_SH",
    43: "EM_SPARCV9",
    44: "EM_TRICORE",
    45: "EM_ARC",
    46: "EM_H8_300",
    47: "EM_H8_300H",
    48: "EM_H8S",
    49: "EM_H8_500",
    50: "EM_IA_64",
    51: "EM_MIPS_X",
    52: "EM_COLDFIRE",
    53: "EM_68HC12",
    54: "EM_MMA",
    55: "EM_PCP",
    56: "EM_NCPU",
    57: "EM_NDR1",
    58: "EM_STARCORE",
    59: "EM_ME16",
    60: "EM_ST100",
    61: "EM_TINYJ",
    62: "EM_X86_64",
    63: "EM_PDSP",
    66: "EM_FX66",
    67: "EM_ST9PLUS",
    68: "EM_ST7",
    69: "EM_68HC16",
    70: "EM_68HC11",
    71: "EM_68HC08",
    72: "EM_68HC05",
    73: "EM_SVX",
    74: "EM_ST19",
    75: "EM_VAX",
    76: "EM_CRIS",
    77: "EM_JAVELIN",
    78: "EM_FIREPATH",
    79: "EM_ZSP",
    80: "EM_MMIX",
    81: "EM_HUANY",
    82: "EM_PRISM",
    83: "EM_AVR",
    84: "EM_FR30",
    85: "EM_D10V",
    86: "EM_D30V",
    87: "EM_V850",
    88: "EM_M32R",
    89: "EM_MN10300",
    90: "EM_MN10200",
    91: "EM_PJ",
    92: "EM_OPENRISC",
    93: "EM_ARC_A5",
    94: "EM_XTENSA",
    183: "EM_AARCH64",
    188: "EM_TILEPRO",
    189: "EM_MICROBLAZE",
    191: "EM_TILEGX",
    243: "EM_RISCV",
    247: "EM_BPF",
}

EM_DESCRIPTIONS: dict[int, str] = {
    EM_NONE: "None",
    EM_SPARC: "SPARC",
    EM_386: "Intel 80386",
    EM_68K: "Motorola 68000",
    EM_MIPS: "MIPS R3000",
    EM_PPC: "PowerPC",
    EM_PPC64: "PowerPC64",
    EM_S390: "IBM S/390",
    EM_ARM: "ARM",
    EM_SH: "Renesas / SuperH SH",
    EM_IA_64: "Intel IA-64",
    EM_X86_64: "Advanced Micro Devices X86-64",
    EM_AVR: "Atmel AVR 8-bit microcontroller",
    EM_XTENSA: "Tensilica Xtensa Processor",
    EM_AARCH64: "AArch64",
    EM_RISCV: "RISC-V",
    EM_BPF: "Linux BPF",
}


# ---------------------------------------------------------------------------
# Program header (segment) types and flags
# ---------------------------------------------------------------------------

PT_NULL: int = 0
PT_LOAD: int = 1
PT_DYNAMIC: int = 2
PT_INTERP: int = 3
PT_NOTE: int = 4
PT_SHLIB: int = 5
PT_PHDR: int = 6
PT_TLS: int = 7
PT_GNU_EH_FRAME: int = 0x6474E550
PT_GNU_STACK: int = 0x6474E551
PT_GNU_RELRO: int = 0x6474E552
PT_GNU_PROPERTY: int = 0x6474E553

PT_NAMES: dict[int, str] = {
    PT_NULL: "NULL",
    PT_LOAD: "LOAD",
    PT_DYNAMIC: "DYNAMIC",
    PT_INTERP: "INTERP",
    PT_NOTE: "NOTE",
    PT_SHLIB: "SHLIB",
    PT_PHDR: "PHDR",
    PT_TLS: "TLS",
    PT_GNU_EH_FRAME: "GNU_EH_FRAME",
    PT_GNU_STACK: "GNU_STACK",
    PT_GNU_RELRO: "GNU_RELRO",
    PT_GNU_PROPERTY: "GNU_PROPERTY",
}

PF_X: int = 0x1  # Execute
PF_W: int = 0x2  # Write
PF_R: int = 0x4  # Read


# ---------------------------------------------------------------------------
# Section header types and flags
# ---------------------------------------------------------------------------

SHT_NULL: int = 0
SHT_PROGBITS: int = 1
SHT_SYMTAB: int = 2
SHT_STRTAB: int = 3
SHT_RELA: int = 4
SHT_HASH: int = 5
SHT_DYNAMIC: int = 6
SHT_NOTE: int = 7
SHT_NOBITS: int = 8
SHT_REL: int = 9
SHT_SHLIB: int = 10
SHT_DYNSYM: int = 11
SHT_INIT_ARRAY: int = 14
SHT_FINI_ARRAY: int = 15
SHT_PREINIT_ARRAY: int = 16
SHT_GROUP: int = 17
SHT_SYMTAB_SHNDX: int = 18
SHT_NUM: int = 19
SHT_GNU_ATTRIBUTES: int = 0x6FFFFFF5
SHT_GNU_HASH: int = 0x6FFFFFF6
SHT_GNU_LIBLIST: int = 0x6FFFFFF7
SHT_GNU_VERDEF: int = 0x6FFFFFFD
SHT_GNU_VERNEED: int = 0x6FFFFFFE
SHT_GNU_VERSYM: int = 0x6FFFFFFF
SHT_ARM_EXIDX: int = 0x70000001
SHT_ARM_ATTRIBUTES: int = 0x70000003

SHT_NAMES: dict[int, str] = {
    SHT_NULL: "NULL",
    SHT_PROGBITS: "PROGBITS",
    SHT_SYMTAB: "SYMTAB",
    SHT_STRTAB: "STRTAB",
    SHT_RELA: "RELA",
    SHT_HASH: "HASH",
    SHT_DYNAMIC: "DYNAMIC",
    SHT_NOTE: "NOTE",
    SHT_NOBITS: "NOBITS",
    SHT_REL: "REL",
    SHT_SHLIB: "SHLIB",
    SHT_DYNSYM: "DYNSYM",
    SHT_INIT_ARRAY: "INIT_ARRAY",
    SHT_FINI_ARRAY: "FINI_ARRAY",
    SHT_PREINIT_ARRAY: "PREINIT_ARRAY",
    SHT_GROUP: "GROUP",
    SHT_SYMTAB_SHNDX: "SYMTAB_SHNDX",
    SHT_NUM: "NUM",
    SHT_GNU_ATTRIBUTES: "GNU_ATTRIBUTES",
    SHT_GNU_HASH: "GNU_HASH",
    SHT_GNU_LIBLIST: "GNU_LIBLIST",
    SHT_GNU_VERDEF: "GNU_VERDEF",
    SHT_GNU_VERNEED: "GNU_VERNEED",
    SHT_GNU_VERSYM: "GNU_VERSYM",
    SHT_ARM_EXIDX: "ARM_EXIDX",
    SHT_ARM_ATTRIBUTES: "ARM_ATTRIBUTES",
}

SHF_WRITE: int = 0x1
SHF_ALLOC: int = 0x2
SHF_EXECINSTR: int = 0x4
SHF_MERGE: int = 0x10
SHF_STRINGS: int = 0x20
SHF_INFO_LINK: int = 0x40
SHF_LINK_ORDER: int = 0x80
SHF_OS_NONCONFORMING: int = 0x100
SHF_GROUP: int = 0x200
SHF_TLS: int = 0x400

# readelf key letters, in display order
SHF_LETTERS: tuple[tuple[int, str], ...] = (
    (SHF_WRITE, "W"),
    (SHF_ALLOC, "A"),
    (SHF_EXECINSTR, "X"),
    (SHF_MERGE, "M"),
    (SHF_STRINGS, "S"),
    (SHF_INFO_LINK, "I"),
    (SHF_LINK_ORDER, "L"),
    (SHF_OS_NONCONFORMING, "O"),
    (SHF_GROUP, "G"),
    (SHF_TLS, "T"),
)


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

STT_NOTYPE: int = 0
STT_OBJECT: int = 1
STT_FUNC: int = 2
STT_SECTION: int = 3
STT_FILE: int = 4
STT_COMMON: int = 5
STT_TLS: int = 6
STT_GNU_IFUNC: int = 10

STT_NAMES: dict[int, str] = {
    STT_NOTYPE: "NOTYPE",
    STT_OBJECT: "OBJECT",
    STT_FUNC: "FUNC",
    STT_SECTION: "SECTION",
    STT_FILE: "FILE",
    STT_COMMON: "COMMON",
    STT_TLS: "TLS",
    STT_GNU_IFUNC: "IFUNC",
}

STT_DESCRIPTIONS: dict[int, str] = {
    STT_NOTYPE: "unspecified",
    STT_OBJECT: "data object",
    STT_FUNC: "code object",
    STT_SECTION: "section",
    STT_FILE: "file name",
    STT_COMMON: "common data object",
    STT_TLS: "thread-local data object",
    STT_GNU_IFUNC: "indirect code object",
}

STB_LOCAL: int = 0
STB_GLOBAL: int = 1
STB_WEAK: int = 2
STB_GNU_UNIQUE: int = 10

STB_NAMES: dict[int, str] = {
    STB_LOCAL: "LOCAL",
    STB_GLOBAL: "GLOBAL",
    STB_WEAK: "WEAK",
    STB_GNU_UNIQUE: "UNIQUE",
}

STV_DEFAULT: int = 0
STV_INTERNAL: int = 1
STV_HIDDEN: int = 2
STV_PROTECTED: int = 3

STV_NAMES: dict[int, str] = {
    STV_DEFAULT: "DEFAULT",
    STV_INTERNAL: "INTERNAL",
    STV_HIDDEN: "HIDDEN",
    STV_PROTECTED: "PROTECTED",
}

# Special section indices
SHN_UNDEF: int = 0
SHN_LORESERVE: int = 0xFF00
SHN_ABS: int = 0xFFF1
SHN_COMMON: int = 0xFFF2
SHN_XINDEX: int = 0xFFFF

SHN_LABELS: dict[int, str] = {
    SHN_UNDEF: "UND",
    SHN_ABS: "ABS",
    SHN_COMMON: "COM",
    SHN_XINDEX: "XINDEX",
}


# ---------------------------------------------------------------------------
# Record sizes per class
# ---------------------------------------------------------------------------

EHDR_SIZE: dict[int, int] = {ELFCLASS32: 52, ELFCLASS64: 64}
PHDR_SIZE: dict[int, int] = {ELFCLASS32: 32, ELFCLASS64: 56}
SHDR_SIZE: dict[int, int] = {ELFCLASS32: 40, ELFCLASS64: 64}
SYM_SIZE: dict[int, int] = {ELFCLASS32: 16, ELFCLASS64: 24}
