"""
elfkit CLI -- ELF Inspector
============================

Click-based command-line interface for the elfkit decoder.  Prints the
file header, program headers, section headers and symbol tables of an ELF
image in a ``readelf``-like layout, hexdumps individual sections, and
writes machine-readable JSON reports.

Usage::

    # Everything
    elfkit /bin/ls

    # Only the section header table
    elfkit /bin/ls --sections

    # Dynamic symbols only
    elfkit /bin/ls --symbols --section .dynsym

    # Hexdump of .rodata
    elfkit /bin/ls --dump .rodata

    # JSON to stdout, or to a file (relative paths go under [global] output_dir)
    elfkit /bin/ls --json
    elfkit /bin/ls --output report.json
    elfkit /bin/ls --output /tmp/ls.json

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from shared.config import ElfkitConfig
from shared.console import ElfkitConsole
from shared.logger import ElfkitLogger

from elfkit import __version__
from elfkit.core.engine import ElfEngine
from elfkit.core.errors import ElfError
from elfkit.core.models import ElfFile
from elfkit.output.console import ElfConsoleOutput
from elfkit.output.report import ElfReportGenerator


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command("elfkit")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--header", "-H", "show_header", is_flag=True, default=False,
              help="Show the ELF file header.")
@click.option("--segments", "-l", "show_segments", is_flag=True, default=False,
              help="Show the program header table.")
@click.option("--sections", "-S", "show_sections", is_flag=True, default=False,
              help="Show the section header table.")
@click.option("--symbols", "-s", "show_symbols", is_flag=True, default=False,
              help="Show symbol tables.")
@click.option(
    "--section",
    "symbol_section",
    default=None,
    metavar="NAME",
    help="Restrict symbol output to the named section.",
)
@click.option(
    "--dump", "-x",
    "dump_section",
    default=None,
    metavar="NAME",
    help="Hexdump the payload of the named section.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Output the report as JSON to stdout.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this path (relative paths go under output_dir).",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to an elfkit.toml configuration file.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable verbose/debug output.",
)
@click.version_option(__version__, prog_name="elfkit")
def elfkit_cli(
    path: str,
    show_header: bool,
    show_segments: bool,
    show_sections: bool,
    show_symbols: bool,
    symbol_section: str | None,
    dump_section: str | None,
    json_output: bool,
    output_path: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """elfkit -- ELF Inspector.

    Decode an ELF object file, executable, shared library or core dump
    and display its headers, sections and symbols.

    PATH is the path to the ELF file to inspect.

    Examples:

    \b
        # Full listing
        elfkit /usr/bin/ls

    \b
        # Symbols of one table, JSON report alongside
        elfkit libc.so.6 --symbols --section .dynsym -o libc.json
    """
    console = ElfkitConsole()

    try:
        config = ElfkitConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Cannot load configuration: {exc}")
        sys.exit(1)

    settings = config.global_settings
    log_level = "DEBUG" if verbose else settings.log_level
    # Keep stdout parseable in JSON mode unless debug output was requested.
    console_logs = verbose or not json_output

    logger = ElfkitLogger(
        "engine",
        log_level=log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
        console_output=console_logs,
    )
    if verbose:
        ElfkitLogger(
            "parsers",
            log_level="DEBUG",
            log_file=settings.log_file,
            json_logs=settings.log_json,
        )

    engine = ElfEngine(config=config, logger=logger)

    try:
        if json_output:
            elf = engine.open_path(path)
        else:
            console.banner(path, f"elfkit {__version__}")
            with console.status(f"Decoding {path}..."):
                elf = engine.open_path(path)
    except (ElfError, OSError) as exc:
        console.error(f"Cannot decode {path}: {exc}")
        sys.exit(1)

    report_gen = ElfReportGenerator()

    try:
        if json_output:
            click.echo(json.dumps(report_gen.build(elf), indent=2, default=str))
        else:
            _display(
                console,
                config,
                elf,
                show_header=show_header,
                show_segments=show_segments,
                show_sections=show_sections,
                show_symbols=show_symbols,
                symbol_section=symbol_section,
                dump_section=dump_section,
            )

        if output_path:
            report_path = report_gen.generate_json(
                elf, _report_target(output_path, config.global_settings.output_dir)
            )
            if not json_output:
                console.success(f"JSON report saved: {report_path}")
    except (ElfError, OSError) as exc:
        console.error(str(exc))
        sys.exit(1)


def _report_target(output_path: str, output_dir: str) -> Path:
    """Absolute paths are kept; relative ones are placed under *output_dir*."""
    target = Path(output_path)
    return target if target.is_absolute() else Path(output_dir) / target


def _display(
    console: ElfkitConsole,
    config: ElfkitConfig,
    elf: ElfFile,
    *,
    show_header: bool,
    show_segments: bool,
    show_sections: bool,
    show_symbols: bool,
    symbol_section: str | None,
    dump_section: str | None,
) -> None:
    """Render the selected parts of *elf* to the console."""
    output = ElfConsoleOutput(console=console, max_symbols=config.output.max_symbols)

    if symbol_section is not None:
        show_symbols = True
    selected = show_header or show_segments or show_sections or show_symbols

    if selected:
        output.display(
            elf,
            header=show_header,
            segments=show_segments,
            sections=show_sections,
            symbols=show_symbols,
            symbol_section=symbol_section,
        )
    elif dump_section is None:
        output.display(elf)

    if dump_section is not None:
        section = elf.get_section(dump_section)
        if section is None:
            raise ElfError(f"No section named {dump_section!r}")
        output.hexdump(section, limit=config.output.hexdump_bytes)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfkit`` console script and ``python -m elfkit``."""
    elfkit_cli()


if __name__ == "__main__":
    main()
