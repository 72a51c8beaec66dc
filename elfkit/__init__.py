"""
elfkit -- ELF Decoder
======================

Decodes Executable and Linkable Format images (object files, executables,
shared libraries, core dumps) into an immutable in-memory model: file
header, program headers, sections with their payloads, and on-demand
symbol tables.  ELF32/ELF64 in either byte order are supported.

Usage::

    import elfkit

    elf = elfkit.open_path("/bin/ls")
    print(elf.header.machine, len(elf.sections))
    dynsym = elf.get_section(".dynsym")
    if dynsym is not None:
        names = [sym.name for sym in elf.get_symbols(dynsym)]

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

__version__ = "1.0.0"

from elfkit.core.engine import ElfEngine, open_path, open_stream
from elfkit.core.errors import (
    ElfError,
    InvalidFormatError,
    InvalidMagicError,
    NotSupportedError,
    TruncatedDataError,
)
from elfkit.core.models import (
    ElfFile,
    FileHeader,
    ProgramHeader,
    Section,
    SectionHeader,
    Symbol,
)

__all__ = [
    "ElfEngine",
    "ElfError",
    "ElfFile",
    "FileHeader",
    "InvalidFormatError",
    "InvalidMagicError",
    "NotSupportedError",
    "ProgramHeader",
    "Section",
    "SectionHeader",
    "Symbol",
    "TruncatedDataError",
    "open_path",
    "open_stream",
    "__version__",
]
