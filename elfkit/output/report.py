"""
elfkit Report Generator
========================

Generates JSON reports from decoded ELF images.  The report follows a
structured format suitable for machine consumption and diffing between
builds: every header field is emitted as a plain integer alongside its
symbolic name, and section payloads are summarised by size and SHA-256
digest instead of being embedded.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from elfkit import __version__
from elfkit.core.models import ElfFile, Section, Symbol
from elfkit.core.types import OpenCode


def _code(value: OpenCode) -> dict[str, Any]:
    return {"value": int(value), "name": value.name}


class ElfReportGenerator:
    """Build and write JSON reports for :class:`ElfFile` instances.

    Usage::

        generator = ElfReportGenerator()
        generator.generate_json(elf, "report.json")
    """

    def build(self, elf: ElfFile, include_symbols: bool = True) -> dict[str, Any]:
        """Build the report dictionary.

        Args:
            elf: The decoded image.
            include_symbols: Decode and include every symbol table.

        Returns:
            A JSON-serialisable dictionary.
        """
        header = elf.header.model_dump(mode="json")
        for key in ("osabi", "file_type", "machine"):
            header[key] = _code(getattr(elf.header, key))
        header["elf_class"] = elf.header.elf_class.name
        header["endianness"] = elf.header.endianness.label

        report: dict[str, Any] = {
            "report_type": "elfkit_image",
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "header": header,
            "program_headers": [
                {
                    **ph.model_dump(mode="json"),
                    "type": _code(ph.type),
                    "flags": {"value": int(ph.flags), "text": str(ph.flags).strip()},
                }
                for ph in elf.program_headers
            ],
            "sections": [self._section_entry(s) for s in elf.sections],
        }

        if include_symbols:
            report["symbols"] = [
                {
                    "section": section.index,
                    "name": section.name,
                    "entries": [self._symbol_entry(sym) for sym in elf.get_symbols(section)],
                }
                for section in elf.symbol_tables()
            ]

        return report

    def generate_json(self, elf: ElfFile, output_path: str | Path) -> Path:
        """Write the report for *elf* to *output_path*.

        Returns:
            The absolute path of the generated report.
        """
        report_data = self.build(elf)

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report_data, f, indent=2, ensure_ascii=False, default=str)

        return path.resolve()

    # ------------------------------------------------------------------ #
    #  Entry builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _section_entry(section: Section) -> dict[str, Any]:
        entry = section.header.model_dump(mode="json")
        entry["index"] = section.index
        entry["type"] = _code(section.header.type)
        entry["flags"] = {
            "value": int(section.header.flags),
            "text": str(section.header.flags),
        }
        # NOBITS payloads are synthesised zeros; a digest would be noise.
        entry["sha256"] = (
            None if section.is_nobits else hashlib.sha256(section.data).hexdigest()
        )
        return entry

    @staticmethod
    def _symbol_entry(sym: Symbol) -> dict[str, Any]:
        return {
            "name": sym.name,
            "value": sym.value,
            "size": sym.size,
            "type": _code(sym.type),
            "binding": _code(sym.binding),
            "visibility": _code(sym.visibility),
            "shndx": sym.shndx,
            "section": sym.section_label,
        }
