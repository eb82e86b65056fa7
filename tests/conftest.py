"""Shared fixtures for deploysync tests."""

import os
from pathlib import Path
from typing import Optional

import pytest

from deploysync.output import OutputFormatter


def write_file(path: Path, content: str = "x", mtime: Optional[float] = None) -> Path:
    """Write a file, creating parents, and optionally set its mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def quiet_output():
    """Output formatter that prints nothing."""
    return OutputFormatter(quiet=True)


@pytest.fixture
def roots(tmp_path):
    """Create empty source, destination and backup roots."""
    source = tmp_path / "prod"
    dest = tmp_path / "test"
    backup = tmp_path / "backup"
    source.mkdir()
    dest.mkdir()
    return source, dest, backup


@pytest.fixture
def make_file():
    """Provide the write_file helper (path, content="x", mtime=None)."""
    return write_file
