"""
Symbol Table Decoder
=====================

Decodes SYMTAB / DYNSYM sections on demand.  Names come from the string
table section named by the symbol table's ``sh_link`` field, which the
main decode has already loaded.

Record layouts (byte widths)::

    ELF32: name(4) value(4) size(4) info(1) other(1) shndx(2)   = 16
    ELF64: name(4) info(1) other(1) shndx(2) value(8) size(8)   = 24

Records are consumed until the section payload is exhausted; ``sh_entsize``
is not consulted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from elfkit.core.errors import InvalidFormatError
from elfkit.core.models import Section, Symbol
from elfkit.core.types import SymbolBinding, SymbolType, SymbolVisibility
from elfkit.parsers.reader import ScalarReader
from elfkit.parsers.strtab import get_string

if TYPE_CHECKING:
    from elfkit.core.models import ElfFile


logger = logging.getLogger(__name__)


def split_info(info: int) -> tuple[SymbolType, SymbolBinding]:
    """Split ``st_info`` into (type, binding): low and high nibble."""
    return SymbolType(info & 0xF), SymbolBinding(info >> 4)


def split_other(other: int) -> SymbolVisibility:
    """Visibility is the low two bits of ``st_other``."""
    return SymbolVisibility(other & 0x3)


def _read_symbol(reader: ScalarReader, strtab: bytes) -> Symbol:
    if reader.word_size == 8:
        name = reader.u32()
        info = reader.u8()
        other = reader.u8()
        shndx = reader.u16()
        value = reader.u64()
        size = reader.u64()
    else:
        name = reader.u32()
        value = reader.u32()
        size = reader.u32()
        info = reader.u8()
        other = reader.u8()
        shndx = reader.u16()

    sym_type, binding = split_info(info)
    return Symbol(
        name=get_string(strtab, name),
        value=value,
        size=size,
        type=sym_type,
        binding=binding,
        visibility=split_other(other),
        shndx=shndx,
    )


def iter_symbols(elf: ElfFile, section: Section) -> Iterator[Symbol]:
    """Yield the symbols of *section* one record at a time.

    Nothing is yielded for sections that are not symbol tables.

    Raises:
        InvalidFormatError: ``sh_link`` is not a valid section index, or a
            name offset has no terminating NUL in the linked table.
        TruncatedDataError: The payload ends inside a record.
    """
    if not section.is_symbol_table:
        return

    link = section.header.link
    if link >= len(elf.sections):
        raise InvalidFormatError(
            f"Symbol table {section.name!r} links to section {link}, "
            f"but the file has {len(elf.sections)} sections"
        )
    strtab = elf.sections[link].data

    reader = ScalarReader.over_bytes(
        section.data, elf.header.endianness, elf.header.elf_class
    )
    end = len(section.data)
    while reader.tell() < end:
        yield _read_symbol(reader, strtab)


def decode_symbols(elf: ElfFile, section: Section) -> list[Symbol]:
    """Decode every symbol of *section* into a list, in record order."""
    symbols = list(iter_symbols(elf, section))
    logger.debug(
        "Decoded %d symbols from %s (strings from section %d)",
        len(symbols), section.name or f"section {section.index}",
        section.header.link,
    )
    return symbols
