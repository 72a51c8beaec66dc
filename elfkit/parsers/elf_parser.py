"""
ELF Binary Decoder
===================

Stream-based decoder for the Executable and Linkable Format.  Both ELF32
and ELF64, little- and big-endian, are supported; every multi-byte field
is read through one :class:`~elfkit.parsers.reader.ScalarReader` bound to
the identification block's class and byte order.

Decoding runs as strictly ordered stages, each consuming what the previous
one produced:

    1. Identification block (class, byte order, OS ABI)
    2. File header (type, machine, version, table offsets and counts)
    3. Program header table
    4. Section header table (names deferred, raw offsets kept aside)
    5. Section payloads, for *every* section
    6. Section names, from the ``e_shstrndx`` string table payload

Symbol tables are left to :func:`elfkit.parsers.symbols.decode_symbols`.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from elfkit.core import constants as C
from elfkit.core.errors import InvalidFormatError, NotSupportedError
from elfkit.core.models import (
    ElfFile,
    FileHeader,
    ProgramHeader,
    Section,
    SectionHeader,
)
from elfkit.core.types import (
    FileType,
    Machine,
    SectionFlags,
    SectionType,
    SegmentFlags,
    SegmentType,
)
from elfkit.parsers.ident import Ident, read_ident
from elfkit.parsers.reader import ScalarReader, check_extent
from elfkit.parsers.strtab import get_string


logger = logging.getLogger(__name__)


class ELFDecoder:
    """Decode one ELF image from a seekable binary stream.

    Usage::

        with open("/bin/true", "rb") as fh:
            elf = ELFDecoder(fh).decode()

    Args:
        stream: Readable, seekable binary stream.  Offsets are absolute,
                so the image must start at stream position 0.
        check_bounds: Fail fast when a header table or a file-backed
                section lies past the end of the stream, instead of
                failing on the first short read.
        max_section_size: Reject file-backed sections declaring more bytes
                than this.  ``0`` disables the limit.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        check_bounds: bool = False,
        max_section_size: int = 0,
    ) -> None:
        self._stream = stream
        self._check_bounds = check_bounds
        self._max_section_size = max_section_size
        self._reader: ScalarReader | None = None
        self._stream_length: int | None = None

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def decode(self) -> ElfFile:
        """Run every stage and return the decoded image.

        Raises:
            InvalidMagicError: Bad magic bytes.
            InvalidFormatError: Malformed ident, bad version word, short
                read, out-of-range string table index or unterminated name.
            NotSupportedError: Extended section numbering.
            OSError: Propagated from the stream.
        """
        self._stream.seek(0)
        ident = read_ident(self._stream)
        self._reader = ScalarReader(self._stream, ident.endianness, ident.elf_class)
        logger.debug(
            "Ident: %s %s-endian, OS ABI %s",
            ident.elf_class.name, ident.endianness.label, ident.osabi,
        )

        if self._check_bounds:
            self._stream_length = self._reader.stream_length()

        header = self._decode_file_header(ident)
        program_headers = self._decode_program_headers(header)
        section_headers, name_offsets = self._decode_section_headers(header)
        sections = self._load_sections(section_headers)
        sections = self._resolve_section_names(header, sections, name_offsets)

        logger.debug(
            "Decoded %s: %d program headers, %d sections",
            header.machine, len(program_headers), len(sections),
        )
        return ElfFile(
            header=header,
            program_headers=program_headers,
            sections=sections,
        )

    # ------------------------------------------------------------------ #
    #  File header
    # ------------------------------------------------------------------ #

    def _decode_file_header(self, ident: Ident) -> FileHeader:
        r = self._reader
        file_type = FileType(r.u16())
        machine = Machine(r.u16())

        version = r.u32()
        if version != C.EV_CURRENT:
            raise InvalidFormatError(f"Invalid version: {version}")

        entry = r.word()
        ph_offset = r.word()
        sh_offset = r.word()
        flags = r.u32()
        header_size = r.u16()
        ph_entsize = r.u16()
        ph_count = r.u16()
        sh_entsize = r.u16()
        sh_count = r.u16()
        shstrndx = r.u16()

        logger.debug(
            "Header: %s, %s, entry %#x, %d segments @%#x, %d sections @%#x",
            file_type, machine, entry, ph_count, ph_offset, sh_count, sh_offset,
        )
        return FileHeader(
            elf_class=ident.elf_class,
            endianness=ident.endianness,
            osabi=ident.osabi,
            abi_version=ident.abi_version,
            file_type=file_type,
            machine=machine,
            entry=entry,
            flags=flags,
            ph_offset=ph_offset,
            sh_offset=sh_offset,
            header_size=header_size,
            ph_entsize=ph_entsize,
            ph_count=ph_count,
            sh_entsize=sh_entsize,
            sh_count=sh_count,
            shstrndx=shstrndx,
        )

    # ------------------------------------------------------------------ #
    #  Program headers
    # ------------------------------------------------------------------ #

    def _decode_program_headers(self, header: FileHeader) -> list[ProgramHeader]:
        """Decode the program header table in file order.

        ELF64 moves ``p_flags`` up to directly after ``p_type``; ELF32
        keeps it after ``p_memsz``.
        """
        r = self._reader
        if header.ph_count:
            self._ensure_within(
                "program header table",
                header.ph_offset,
                header.ph_count * C.PHDR_SIZE[header.elf_class],
            )
            r.seek(header.ph_offset, "e_phoff")

        program_headers: list[ProgramHeader] = []
        for _ in range(header.ph_count):
            seg_type = SegmentType(r.u32())
            if header.is_64bit:
                flags = r.u32()
                offset = r.u64()
                vaddr = r.u64()
                paddr = r.u64()
                filesz = r.u64()
                memsz = r.u64()
                align = r.u64()
            else:
                offset = r.u32()
                vaddr = r.u32()
                paddr = r.u32()
                filesz = r.u32()
                memsz = r.u32()
                flags = r.u32()
                align = r.u32()

            program_headers.append(ProgramHeader(
                type=seg_type,
                offset=offset,
                vaddr=vaddr,
                paddr=paddr,
                filesz=filesz,
                memsz=memsz,
                flags=SegmentFlags(flags),
                align=align,
            ))

        logger.debug("Program headers: %d", len(program_headers))
        return program_headers

    # ------------------------------------------------------------------ #
    #  Section headers
    # ------------------------------------------------------------------ #

    def _decode_section_headers(
        self, header: FileHeader
    ) -> tuple[list[SectionHeader], list[int]]:
        """Decode the section header table.

        Returns:
            The headers (with empty names) and, in parallel, the raw
            ``sh_name`` offsets still to be resolved.
        """
        r = self._reader
        if header.sh_count:
            self._ensure_within(
                "section header table",
                header.sh_offset,
                header.sh_count * C.SHDR_SIZE[header.elf_class],
            )
            r.seek(header.sh_offset, "e_shoff")

        headers: list[SectionHeader] = []
        name_offsets: list[int] = []
        for _ in range(header.sh_count):
            name_offsets.append(r.u32())
            sh_type = SectionType(r.u32())
            flags = r.word()
            addr = r.word()
            offset = r.word()
            size = r.word()
            link = r.u32()
            info = r.u32()
            addralign = r.word()
            entsize = r.word()

            headers.append(SectionHeader(
                type=sh_type,
                flags=SectionFlags(flags),
                addr=addr,
                offset=offset,
                size=size,
                link=link,
                info=info,
                addralign=addralign,
                entsize=entsize,
            ))

        logger.debug("Section headers: %d", len(headers))
        return headers, name_offsets

    # ------------------------------------------------------------------ #
    #  Section payloads
    # ------------------------------------------------------------------ #

    def _load_sections(self, headers: list[SectionHeader]) -> list[Section]:
        """Attach exactly ``size`` payload bytes to every section.

        NOBITS sections get a zero-filled buffer; the stream is not read.
        """
        r = self._reader
        sections: list[Section] = []
        for index, sh in enumerate(headers):
            if sh.type == C.SHT_NOBITS:
                data = _zero_fill(sh.size, index)
            else:
                if self._max_section_size and sh.size > self._max_section_size:
                    raise InvalidFormatError(
                        f"Section {index} declares {sh.size} bytes, "
                        f"above the {self._max_section_size}-byte limit"
                    )
                self._ensure_within(f"section {index}", sh.offset, sh.size)
                r.seek(sh.offset, f"section {index} offset")
                data = r.read_bytes(sh.size, f"section {index}")
            sections.append(Section(index=index, header=sh, data=data))

        logger.debug(
            "Section data: %d bytes loaded",
            sum(len(s.data) for s in sections if not s.is_nobits),
        )
        return sections

    # ------------------------------------------------------------------ #
    #  Section names
    # ------------------------------------------------------------------ #

    def _resolve_section_names(
        self,
        header: FileHeader,
        sections: list[Section],
        name_offsets: list[int],
    ) -> list[Section]:
        """Rebuild each section with its name taken from ``e_shstrndx``.

        ``SHN_UNDEF`` means the file has no section name table; every
        name then stays empty.
        """
        if not sections or header.shstrndx == C.SHN_UNDEF:
            return sections
        if header.shstrndx == C.SHN_XINDEX:
            raise NotSupportedError(
                "Extended section numbering (e_shstrndx == SHN_XINDEX)"
            )
        if header.shstrndx >= len(sections):
            raise InvalidFormatError(
                f"e_shstrndx {header.shstrndx} out of range "
                f"({len(sections)} sections)"
            )

        strtab = sections[header.shstrndx].data
        resolved = [
            section.model_copy(update={
                "header": section.header.model_copy(
                    update={"name": get_string(strtab, offset)}
                ),
            })
            for section, offset in zip(sections, name_offsets)
        ]
        logger.debug("Section names resolved from section %d", header.shstrndx)
        return resolved

    # ------------------------------------------------------------------ #
    #  Bounds checking
    # ------------------------------------------------------------------ #

    def _ensure_within(self, what: str, offset: int, size: int) -> None:
        """With bounds checking on, require ``[offset, offset+size)`` in the stream."""
        if self._stream_length is None:
            return
        if offset + size > self._stream_length:
            raise InvalidFormatError(
                f"{what} at {offset:#x} (+{size:#x}) extends past end of "
                f"stream ({self._stream_length:#x} bytes)"
            )


def _zero_fill(size: int, index: int) -> bytes:
    """In-memory image of a NOBITS section."""
    check_extent(size, f"section {index} size")
    try:
        return bytes(size)
    except MemoryError as exc:
        raise InvalidFormatError(
            f"Section {index} declares {size} zero bytes, which do not fit in memory"
        ) from exc
