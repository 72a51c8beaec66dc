"""
elfkit Console Interface
=========================

A thin layer over :class:`rich.console.Console` giving every elfkit front
end the same palette: boxed banners, rule-style section headings,
severity-tagged one-line messages and bordered tables.

Text handed to the helpers is always escaped, so section and symbol names
read from a file can never be interpreted as Rich markup.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.theme import Theme


_THEME = Theme(
    {
        "elfkit.banner": "bold bright_cyan",
        "elfkit.section": "bold bright_magenta",
        "elfkit.success": "bold green",
        "elfkit.warning": "bold yellow",
        "elfkit.error": "bold red",
        "elfkit.info": "bold bright_blue",
        "elfkit.dim": "dim white",
    }
)

# severity -> (theme style, prefix)
_SEVERITIES: dict[str, tuple[str, str]] = {
    "success": ("elfkit.success", "[✔] SUCCESS:"),
    "warning": ("elfkit.warning", "[⚠] WARNING:"),
    "error": ("elfkit.error", "[✘] ERROR:"),
    "info": ("elfkit.info", "[ℹ] INFO:"),
}


class ElfkitConsole:
    """Styled console shared by the elfkit front ends.

    Usage::

        con = ElfkitConsole()
        con.section("Section Headers")
        con.table("", ["Nr", "Name"], [(1, ".text")])
        con.success("Decoded 31 sections")

    Args:
        quiet:  Swallow all output.
        record: Keep a copy of everything printed for :meth:`export_text`.
        width:  Fixed width; ``None`` lets Rich detect it.
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        self._console = Console(
            theme=_THEME,
            highlight=False,
            quiet=quiet,
            record=record,
            width=width,
        )

    @property
    def rich(self) -> Console:
        """The wrapped Rich console, for renderables built elsewhere."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Headings
    # ------------------------------------------------------------------ #

    def banner(self, title: str, subtitle: str = "") -> None:
        """Boxed title, e.g. the path being inspected."""
        body = f"[elfkit.banner]{escape(title)}[/elfkit.banner]"
        if subtitle:
            body = f"{body}\n[elfkit.dim]{escape(subtitle)}[/elfkit.dim]"
        self._console.print(Panel(body, border_style="bright_cyan", expand=False))

    def section(self, title: str) -> None:
        self._console.rule(f"  {escape(title)}  ", style="elfkit.section", characters="─")
        self._console.print()

    # ------------------------------------------------------------------ #
    #  One-line messages
    # ------------------------------------------------------------------ #

    def _message(self, severity: str, message: str) -> None:
        style, prefix = _SEVERITIES[severity]
        self._console.print(f"[{style}]{prefix}[/{style}] {escape(message)}")

    def success(self, message: str) -> None:
        self._message("success", message)

    def warning(self, message: str) -> None:
        self._message("warning", message)

    def error(self, message: str) -> None:
        self._message("error", message)

    def info(self, message: str) -> None:
        self._message("info", message)

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Print a bordered table; every cell is stringified and escaped.

        ``styles`` gives a Rich style per column, matched by position.
        """
        styles = list(styles or ())
        styles += [""] * (len(columns) - len(styles))

        tbl = Table(
            title=title or None,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for name, style in zip(columns, styles):
            tbl.add_column(name, style=style)
        for row in rows:
            tbl.add_row(*[escape(str(cell)) for cell in row])
        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Misc
    # ------------------------------------------------------------------ #

    @contextmanager
    def status(self, message: str) -> Iterator[Status]:
        """Spinner shown while the block runs (inert when not a terminal)."""
        with self._console.status(
            f"[elfkit.info]{escape(message)}[/elfkit.info]",
            spinner="dots",
            spinner_style="bright_cyan",
        ) as spinner:
            yield spinner

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._console.print()

    def export_text(self) -> str:
        """Recorded output as plain text; needs ``record=True``."""
        return self._console.export_text()
