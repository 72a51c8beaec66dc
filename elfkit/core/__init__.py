"""
elfkit Core Module
===================

Data models, value types, errors and the decode engine.
"""

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
from elfkit.core.engine import ElfEngine

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
]
