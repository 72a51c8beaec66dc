"""
elfkit Console Output
======================

Rich-powered terminal display for decoded ELF images, laid out the way
``readelf`` presents the same information: a file header panel, the
program and section header tables, one table per symbol table, and an
optional canonical hexdump of a section payload.

Uses the ElfkitConsole abstraction for consistent styling.

References:
    - Rich library: https://github.com/Textualize/rich
    - GNU binutils ``readelf`` output conventions.
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shared.console import ElfkitConsole

from elfkit.core.models import ElfFile, ProgramHeader, Section, Symbol


_HEXDUMP_WIDTH = 16


def _addr(value: int, is_64bit: bool) -> str:
    return f"{value:016x}" if is_64bit else f"{value:08x}"


def hexdump_lines(data: bytes, base: int = 0) -> list[str]:
    """Format *data* as canonical ``offset  hex  |ascii|`` lines."""
    lines: list[str] = []
    for pos in range(0, len(data), _HEXDUMP_WIDTH):
        chunk = data[pos:pos + _HEXDUMP_WIDTH]
        hex_part = " ".join(f"{b:02x}" for b in chunk)
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(
            f"{base + pos:08x}  {hex_part:<{_HEXDUMP_WIDTH * 3 - 1}}  |{text}|"
        )
    return lines


class ElfConsoleOutput:
    """Render ElfFile models to the terminal via Rich.

    Usage::

        output = ElfConsoleOutput(max_symbols=50)
        output.display(elf)
    """

    def __init__(
        self,
        console: ElfkitConsole | None = None,
        max_symbols: int = 0,
    ) -> None:
        """Initialise the console output renderer.

        Args:
            console: Optional ElfkitConsole instance.  A new one is
                     created if not provided.
            max_symbols: Rows rendered per symbol table, 0 for all.
        """
        self._console: ElfkitConsole = console or ElfkitConsole()
        self._max_symbols = max_symbols

    def display(
        self,
        elf: ElfFile,
        *,
        header: bool = True,
        segments: bool = True,
        sections: bool = True,
        symbols: bool = True,
        symbol_section: str | None = None,
    ) -> None:
        """Display the selected parts of a decoded image.

        Args:
            elf: The decoded image.
            header: Show the file header panel.
            segments: Show the program header table.
            sections: Show the section header table.
            symbols: Show symbol tables.
            symbol_section: Restrict symbol output to the named section.
        """
        if header:
            self.display_header(elf)
        if segments:
            self.display_program_headers(elf)
        if sections:
            self.display_sections(elf)
        if symbols:
            if symbol_section is not None:
                section = elf.get_section(symbol_section)
                if section is None:
                    self._console.warning(f"No section named {symbol_section!r}")
                    return
                tables = [section]
            else:
                tables = elf.symbol_tables()
            if not tables:
                self._console.info("No symbol tables present.")
            for section in tables:
                self.display_symbols(elf, section)

    def display_header(self, elf: ElfFile) -> None:
        """Display the file header panel."""
        hdr = elf.header
        lines: list[str] = [
            f"[bold]Class:[/bold]          {hdr.elf_class.name}",
            f"[bold]Data:[/bold]           {hdr.endianness.label}-endian",
            f"[bold]OS/ABI:[/bold]         {escape(str(hdr.osabi))}",
            f"[bold]ABI Version:[/bold]    {hdr.abi_version}",
            f"[bold]Type:[/bold]           {escape(str(hdr.file_type))}",
            f"[bold]Machine:[/bold]        {escape(str(hdr.machine))}",
            f"[bold]Entry Point:[/bold]    0x{hdr.entry:x}",
            f"[bold]Flags:[/bold]          0x{hdr.flags:x}",
            f"[bold]Program Headers:[/bold] {hdr.ph_count} at offset {hdr.ph_offset} "
            f"({hdr.ph_entsize} bytes each)",
            f"[bold]Section Headers:[/bold] {hdr.sh_count} at offset {hdr.sh_offset} "
            f"({hdr.sh_entsize} bytes each)",
            f"[bold]Names Index:[/bold]    {hdr.shstrndx}",
        ]
        panel = Panel(
            "\n".join(lines),
            title="[bold bright_cyan]ELF Header[/bold bright_cyan]",
            border_style="bright_cyan",
            padding=(1, 2),
        )
        self._console.rich.print(panel)
        self._console.blank()

    def display_program_headers(self, elf: ElfFile) -> None:
        """Display the program header table."""
        self._console.section("Program Headers")
        if not elf.program_headers:
            self._console.info("There are no program headers in this file.")
            self._console.blank()
            return

        rows = [self._segment_row(ph, elf.is_64bit) for ph in elf.program_headers]
        self._console.table(
            "",
            ["Type", "Offset", "VirtAddr", "PhysAddr", "FileSiz", "MemSiz", "Flg", "Align"],
            rows,
            styles=["bold", "", "", "", "", "", "bright_yellow", "dim"],
        )
        self._console.blank()

    def display_sections(self, elf: ElfFile) -> None:
        """Display the section header table."""
        self._console.section("Section Headers")
        if not elf.sections:
            self._console.info("There are no sections in this file.")
            self._console.blank()
            return

        tbl = Table(
            title="",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("Nr", style="dim", justify="right")
        tbl.add_column("Name", style="bold", min_width=12)
        tbl.add_column("Type")
        tbl.add_column("Flg", style="bright_yellow")
        tbl.add_column("Addr", justify="right")
        tbl.add_column("Off", justify="right")
        tbl.add_column("Size", justify="right")
        tbl.add_column("Lk", justify="right")
        tbl.add_column("Inf", justify="right")
        tbl.add_column("Al", justify="right")
        tbl.add_column("ES", justify="right")

        for section in elf.sections:
            sh = section.header
            type_label = _short(sh.type.name, "SHT_", int(sh.type))
            tbl.add_row(
                str(section.index),
                escape(section.name),
                escape(type_label),
                str(sh.flags),
                _addr(sh.addr, elf.is_64bit),
                f"{sh.offset:06x}",
                f"{sh.size:06x}",
                str(sh.link),
                str(sh.info),
                str(sh.addralign),
                f"{sh.entsize:02x}",
            )

        self._console.rich.print(tbl)
        self._console.print(
            "[dim]Key to Flags: W (write), A (alloc), X (execute), M (merge), "
            "S (strings), I (info), L (link order), O (extra OS processing), "
            "G (group), T (TLS)[/dim]"
        )
        self._console.blank()

    def display_symbols(self, elf: ElfFile, section: Section) -> None:
        """Display the symbols held by *section*."""
        symbols = elf.get_symbols(section)
        self._console.section(f"Symbol table '{section.name}'")

        if not symbols:
            self._console.info(f"Section '{section.name}' holds no symbols.")
            self._console.blank()
            return

        shown = symbols
        caption = f"{len(symbols)} entries"
        if self._max_symbols and len(symbols) > self._max_symbols:
            shown = symbols[: self._max_symbols]
            caption = f"{len(symbols)} entries, first {self._max_symbols} shown"

        rows = [
            self._symbol_row(num, sym, elf.is_64bit)
            for num, sym in enumerate(shown)
        ]
        self._console.table(
            "",
            ["Num", "Value", "Size", "Type", "Bind", "Vis", "Ndx", "Name"],
            rows,
            caption=caption,
            styles=["dim", "", "", "bright_green", "bright_blue", "", "", "bold"],
        )
        self._console.blank()

    def hexdump(self, section: Section, limit: int = 256) -> None:
        """Hexdump the first *limit* payload bytes of *section* (0 = all)."""
        self._console.section(f"Hex dump of section '{section.name}'")
        if section.is_nobits:
            self._console.info(
                f"Section '{section.name}' has no data in the file "
                f"({section.header.size} zero bytes in memory)."
            )
            self._console.blank()
            return

        data = section.data if limit <= 0 else section.data[:limit]
        lines = hexdump_lines(data, base=section.header.addr)
        if not lines:
            self._console.info(f"Section '{section.name}' is empty.")
        for line in lines:
            self._console.print(escape(line))
        if len(data) < len(section.data):
            self._console.print(
                f"[dim]... {len(section.data) - len(data)} more bytes[/dim]"
            )
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Row builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _segment_row(ph: ProgramHeader, is_64bit: bool) -> list[str]:
        type_label = _short(ph.type.name, "PT_", int(ph.type))
        return [
            type_label,
            f"0x{ph.offset:06x}",
            f"0x{_addr(ph.vaddr, is_64bit)}",
            f"0x{_addr(ph.paddr, is_64bit)}",
            f"0x{ph.filesz:06x}",
            f"0x{ph.memsz:06x}",
            str(ph.flags),
            f"0x{ph.align:x}",
        ]

    @staticmethod
    def _symbol_row(num: int, sym: Symbol, is_64bit: bool) -> list[str]:
        return [
            f"{num}:",
            _addr(sym.value, is_64bit),
            str(sym.size),
            _short(sym.type.name, "STT_", int(sym.type)),
            _short(sym.binding.name, "STB_", int(sym.binding)),
            _short(sym.visibility.name, "STV_", int(sym.visibility)),
            sym.section_label,
            sym.name,
        ]


def _short(name: str | None, prefix: str, raw: int) -> str:
    """Strip the constant prefix from a code name, readelf style."""
    if name is None:
        return f"<{raw:#x}>"
    return name[len(prefix):] if name.startswith(prefix) else name
