"""Shared pytest fixtures.

Puts `bin/lib` on the import path so the tests run from a plain
checkout, and builds `Config` values around temporary trees.
"""

import os
import sys
from pathlib import Path

import pytest

_LIB_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "bin", "lib"))
if _LIB_PATH not in sys.path:
    sys.path.insert(0, _LIB_PATH)

from dotty.config import Config  # noqa: E402


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Empty source tree."""
    path = tmp_path / "root"
    path.mkdir()
    return path


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Empty destination tree."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def make_config(root: Path, home: Path):
    """Return a factory for configs over the temporary trees."""
    def factory(**overrides) -> Config:
        return Config(root=root, home=home, **overrides)
    return factory


def write(path: Path, content: str | bytes) -> Path:
    """Create a file and its parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        content = content.encode("utf-8")
    path.write_bytes(content)
    return path
