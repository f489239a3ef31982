"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from tempsweep.types.models import CandidateRoot
from tests.fixtures.filesystem import build_scenario


@pytest.fixture
def scan_root(tmp_path: Path) -> Path:
    """Empty directory used as a candidate root.

    Named neutrally so the path-fragment rule only fires for subdirectories
    the test creates.
    """
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture
def scenario(scan_root: Path) -> dict[str, Path]:
    """Reference tree with one extension match, one path match and one keeper."""
    return build_scenario(scan_root)


@pytest.fixture
def user_temp_root(scan_root: Path) -> CandidateRoot:
    """Candidate root for ``scan_root`` in a non-download category."""
    return CandidateRoot(path=str(scan_root), category="User Temp")


@pytest.fixture
def progress_values() -> list[float]:
    """List collecting progress values; pass ``progress_values.append`` as sink."""
    return []


@pytest.fixture
def restore_root_logger() -> Generator[logging.Logger, None, None]:
    """Restore root logger handlers and level after a test reconfigures logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    try:
        yield root_logger
    finally:
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)
