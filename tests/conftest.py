"""Shared fixtures for the elfkit test-suite."""

from __future__ import annotations

import pytest

from elfkit.core.engine import ElfEngine
from elfkit.core.models import ElfFile

from tests.elf_builder import LAYOUTS, sample_bytes


def _layout_id(layout: tuple[int, str]) -> str:
    elf_class, endian = layout
    return f"{'32' if elf_class == 1 else '64'}{'le' if endian == '<' else 'be'}"


@pytest.fixture(params=LAYOUTS, ids=_layout_id)
def layout(request: pytest.FixtureRequest) -> tuple[int, str]:
    """Every (class, byte order) combination."""
    return request.param


@pytest.fixture
def engine() -> ElfEngine:
    return ElfEngine()


@pytest.fixture
def sample(engine: ElfEngine, layout: tuple[int, str]) -> ElfFile:
    """The canned sample image decoded in every layout."""
    return engine.decode_bytes(sample_bytes(*layout))


@pytest.fixture
def sample64(engine: ElfEngine) -> ElfFile:
    return engine.decode_bytes(sample_bytes())


@pytest.fixture
def sample_path(tmp_path):
    """The 64-bit little-endian sample written to disk."""
    path = tmp_path / "sample.elf"
    path.write_bytes(sample_bytes())
    return path
