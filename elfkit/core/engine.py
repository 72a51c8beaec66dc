"""
elfkit Decode Engine
=====================

Consumer-facing entry point: opens a path or an already-open stream, runs
the :class:`~elfkit.parsers.elf_parser.ELFDecoder` with the configured
decoder options, and logs the decode under the ``decode`` operation.

Usage::

    engine = ElfEngine()
    elf = engine.open_path("/bin/ls")
    text = elf.get_section(".text")
"""

from __future__ import annotations

import functools
import io
import os
from typing import BinaryIO

from shared.config import ElfkitConfig
from shared.logger import ElfkitLogger

from elfkit.core.errors import ElfError
from elfkit.core.models import ElfFile
from elfkit.parsers.elf_parser import ELFDecoder


@functools.lru_cache(maxsize=None)
def _library_logger() -> ElfkitLogger:
    """Silent logger shared by engines built without one."""
    return ElfkitLogger("library", console_output=False)


class ElfEngine:
    """Open and decode ELF images.

    Args:
        config: elfkit configuration.  Defaults are used if not provided.
        logger: Logger instance.  A silent one is created if not provided.
    """

    def __init__(
        self,
        config: ElfkitConfig | None = None,
        logger: ElfkitLogger | None = None,
    ) -> None:
        self._config: ElfkitConfig = config or ElfkitConfig()
        self._logger: ElfkitLogger = logger or _library_logger()

    @property
    def config(self) -> ElfkitConfig:
        return self._config

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def open_path(self, path: str | os.PathLike[str]) -> ElfFile:
        """Open *path* and decode it.

        Raises:
            OSError: The file cannot be opened or read.
            ElfError: The contents are not a decodable ELF image.
        """
        with open(path, "rb") as fh:
            return self._decode(fh, os.fspath(path))

    def open_stream(self, stream: BinaryIO) -> ElfFile:
        """Decode an already-open, seekable binary stream.

        The stream is not closed.
        """
        return self._decode(stream, getattr(stream, "name", "<stream>"))

    def decode_bytes(self, data: bytes, label: str = "<memory>") -> ElfFile:
        """Decode an image held in memory."""
        return self._decode(io.BytesIO(data), label)

    # ------------------------------------------------------------------ #
    #  Internal
    # ------------------------------------------------------------------ #

    def _decode(self, stream: BinaryIO, label: str) -> ElfFile:
        opts = self._config.decoder
        decoder = ELFDecoder(
            stream,
            check_bounds=opts.check_bounds,
            max_section_size=opts.max_section_size,
        )
        with self._logger.operation("decode"):
            try:
                with self._logger.timed(f"decode {label}"):
                    elf = decoder.decode()
            except ElfError as exc:
                self._logger.error("Decoding %s failed: %s", label, exc)
                raise
            self._logger.info(
                "%s: %s %s, %d segments, %d sections",
                label,
                elf.header.elf_class.name,
                elf.header.machine,
                len(elf.program_headers),
                len(elf.sections),
            )
        return elf


# ---------------------------------------------------------------------------
# Module-level convenience
# ---------------------------------------------------------------------------

def open_path(
    path: str | os.PathLike[str], *, config: ElfkitConfig | None = None
) -> ElfFile:
    """Decode the ELF file at *path*."""
    return ElfEngine(config=config).open_path(path)


def open_stream(stream: BinaryIO, *, config: ElfkitConfig | None = None) -> ElfFile:
    """Decode an ELF image from an open, seekable binary stream."""
    return ElfEngine(config=config).open_stream(stream)
