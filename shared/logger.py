"""
elfkit Structured Logger
=========================

:class:`ElfkitLogger` configures the stdlib logger ``elfkit.<component>``
with a Rich console handler on stderr and, optionally, a rotating log file
holding plain text or JSON lines.

Library modules log through ``logging.getLogger(__name__)``.  Because the
handlers carry the context filter, records propagated from child loggers
(``elfkit.parsers.elf_parser`` under ``ElfkitLogger("parsers")``) are
stamped with the same component and operation fields as records logged
through the facade.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(operation)s | %(message)s"
_TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Keyword arguments the stdlib logging calls understand themselves
_STDLIB_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


# ---------------------------------------------------------------------------
# Record context
# ---------------------------------------------------------------------------

class _ContextFilter(logging.Filter):
    """Stamp ``component`` and ``operation`` onto every record it sees."""

    def __init__(self, component: str) -> None:
        super().__init__()
        self.component = component
        self.operation: str | None = None

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = self.component
        if getattr(record, "operation", None) is None:
            record.operation = self.operation or "-"
        return True


class _JsonLinesFormatter(logging.Formatter):
    """One JSON object per record::

        {"time": ..., "level": ..., "logger": ..., "component": ...,
         "operation": ..., "message": ..., "fields": {...}, "traceback": ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: dict[str, Any] = {
            "time": stamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": getattr(record, "component", None),
            "operation": getattr(record, "operation", None),
            "message": record.getMessage(),
        }
        fields = getattr(record, "elfkit_fields", None)
        if fields:
            line["fields"] = fields
        if record.exc_info and record.exc_info[1] is not None:
            line["traceback"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


# ---------------------------------------------------------------------------
# Handler factories
# ---------------------------------------------------------------------------

def _console_handler(level: int) -> logging.Handler:
    theme = Theme({
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    })
    handler = RichHandler(
        level=level,
        console=Console(theme=theme, stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    return handler


def _file_handler(
    path: Path,
    level: int,
    *,
    json_lines: bool,
    max_bytes: int,
    backup_count: int,
) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    if json_lines:
        handler.setFormatter(_JsonLinesFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, _TEXT_DATEFMT))
    return handler


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

class ElfkitLogger:
    """Configure and log through ``elfkit.<component>``.

    Re-creating a facade for the same component replaces its handlers, so
    the most recent configuration wins.

    Usage::

        log = ElfkitLogger("engine", log_level="DEBUG", log_file="elfkit.log")
        with log.operation("decode"), log.timed("decode /bin/ls"):
            elf = decoder.decode()
        log.info("decoded", sections=len(elf.sections))

    Args:
        component:      Logger suffix; the stdlib logger is ``elfkit.<component>``.
        log_level:      Minimum severity name.
        log_file:       Rotating log file path, or ``None`` for no file.
        json_logs:      Write JSON lines instead of text to *log_file*.
        max_bytes:      Rotation threshold for *log_file*.
        backup_count:   Rotated files kept.
        console_output: Attach the Rich stderr handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

        self._component = component
        self._context = _ContextFilter(component)
        self._logger = logging.getLogger(f"elfkit.{component}")
        self._logger.setLevel(level)
        self._logger.propagate = False

        for old in list(self._logger.handlers):
            self._logger.removeHandler(old)
            old.close()

        handlers: list[logging.Handler] = []
        if console_output:
            handlers.append(_console_handler(level))
        if log_file is not None:
            handlers.append(_file_handler(
                Path(log_file), level,
                json_lines=json_logs,
                max_bytes=max_bytes,
                backup_count=backup_count,
            ))
        if not handlers:
            handlers.append(logging.NullHandler())

        for handler in handlers:
            handler.addFilter(self._context)
            self._logger.addHandler(handler)

    # ------------------------------------------------------------------ #
    #  Context
    # ------------------------------------------------------------------ #

    @contextmanager
    def operation(self, name: str) -> Iterator[ElfkitLogger]:
        """Tag every record emitted inside the block with *name*."""
        previous = self._context.operation
        self._context.operation = name
        try:
            yield self
        finally:
            self._context.operation = previous

    def timed(self, label: str) -> _Stopwatch:
        """Log *label* at DEBUG on entry and with the elapsed time on exit."""
        return _Stopwatch(self, label)

    # ------------------------------------------------------------------ #
    #  Emitting
    # ------------------------------------------------------------------ #

    def _log(self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in _STDLIB_KWARGS}
        if fields:
            extra = dict(kwargs.pop("extra", None) or {})
            extra["elfkit_fields"] = fields
            kwargs["extra"] = extra
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, args, kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, kwargs)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def component(self) -> str:
        return self._component

    @property
    def underlying(self) -> logging.Logger:
        """The configured stdlib :class:`logging.Logger`."""
        return self._logger


class _Stopwatch:
    """Context manager behind :meth:`ElfkitLogger.timed`."""

    def __init__(self, log: ElfkitLogger, label: str) -> None:
        self._log = log
        self._label = label
        self._start = 0.0

    def __enter__(self) -> _Stopwatch:
        self._start = time.perf_counter()
        self._log.debug("Started: %s", self._label)
        return self

    def __exit__(self, *exc: Any) -> None:
        self._log.debug("Completed: %s (%.3f sec)", self._label, self.elapsed)

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._start
