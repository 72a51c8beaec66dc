"""
elfkit Configuration Management
================================

Dataclass configuration for the decoder and its front ends, persisted as
TOML.  Configuration lives outside the code (Wiggins, 2011): the file is
looked up at ``$ELFKIT_CONFIG`` if that variable is set, otherwise at
``elfkit.toml`` in the project root, and every key is optional.

Example ``elfkit.toml``::

    [global]
    log_level = "DEBUG"
    log_file = "logs/elfkit.log"

    [decoder]
    check_bounds = true
    max_section_size = 268435456

    [output]
    max_symbols = 200

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import os
import sys
from dataclasses import MISSING, asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, TypeVar

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
_ENV_VAR = "ELFKIT_CONFIG"

_T = TypeVar("_T")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class DecoderConfig:
    """``[decoder]``: how images are read.

    ``check_bounds`` measures the stream once and rejects header tables
    and file-backed sections lying past its end before reading them.
    """

    check_bounds: bool = False
    max_section_size: int = 0  # bytes, 0 = unlimited


@dataclass(slots=True)
class OutputConfig:
    """``[output]``: console rendering limits."""

    max_symbols: int = 0  # rows per symbol table, 0 = all
    hexdump_bytes: int = 256  # 0 = whole section


@dataclass(slots=True)
class GlobalConfig:
    """``[global]``: logging and output locations."""

    log_level: str = "INFO"
    log_file: str | None = None
    log_json: bool = False
    output_dir: str = "output"


@dataclass(slots=True)
class ElfkitConfig:
    """Root of the configuration tree.

    Usage:
        >>> config = ElfkitConfig.load()                 # default lookup
        >>> config = ElfkitConfig.load("ci.toml")        # explicit file
        >>> config.decoder.check_bounds
        False
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> ElfkitConfig:
        """Read a TOML file into a config tree.

        Args:
            path: File to read.  ``None`` means ``$ELFKIT_CONFIG`` or,
                  failing that, ``<project root>/elfkit.toml``.

        Raises:
            FileNotFoundError: An explicitly named file (argument or
                environment variable) does not exist.
            ValueError: The file is not valid TOML, or a key has the
                wrong type or an out-of-range value.
        """
        explicit = path if path is not None else os.environ.get(_ENV_VAR) or None
        config_path = Path(explicit) if explicit else _PROJECT_ROOT / "elfkit.toml"

        if not config_path.is_file():
            if explicit:
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls()

        with config_path.open("rb") as fh:
            raw = tomllib.load(fh)

        return cls(
            global_settings=_section(GlobalConfig, raw, "global"),
            decoder=_section(DecoderConfig, raw, "decoder"),
            output=_section(OutputConfig, raw, "output"),
        )

    def to_dict(self) -> dict[str, Any]:
        """The whole tree as nested plain dictionaries."""
        return asdict(self)


def _section(cls: type[_T], raw: dict[str, Any], name: str) -> _T:
    """Build section *cls* from table ``[name]``, ignoring unknown keys.

    Each value must match the type of the field's default; integer
    limits must not be negative.
    """
    table = raw.get(name, {})
    if not isinstance(table, dict):
        raise ValueError(f"[{name}] must be a table")

    values: dict[str, Any] = {}
    for f in fields(cls):  # type: ignore[arg-type]
        if f.name not in table:
            continue
        value = table[f.name]
        default = f.default if f.default is not MISSING else None
        if default is None:
            ok = value is None or isinstance(value, str)
        elif isinstance(default, bool):
            ok = isinstance(value, bool)
        elif isinstance(default, int):
            ok = isinstance(value, int) and not isinstance(value, bool) and value >= 0
        else:
            ok = isinstance(value, type(default))
        if not ok:
            raise ValueError(f"[{name}] {f.name} = {value!r} is not valid")
        values[f.name] = value
    return cls(**values)


# ---------------------------------------------------------------------------
# Module-level convenience
# ---------------------------------------------------------------------------

_cached: ElfkitConfig | None = None


def get_config(path: str | Path | None = None) -> ElfkitConfig:
    """Load once and share; passing *path* forces a reload."""
    global _cached
    if _cached is None or path is not None:
        _cached = ElfkitConfig.load(path)
    return _cached
