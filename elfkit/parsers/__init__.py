"""
elfkit Parsers
===============

The decoding stages: scalar reader, identification block, headers and
tables, string tables and symbol tables.
"""

from elfkit.parsers.elf_parser import ELFDecoder
from elfkit.parsers.reader import ScalarReader
from elfkit.parsers.strtab import get_string
from elfkit.parsers.symbols import decode_symbols, iter_symbols

__all__ = [
    "ELFDecoder",
    "ScalarReader",
    "decode_symbols",
    "get_string",
    "iter_symbols",
]
