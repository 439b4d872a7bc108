"""Path resolution and descriptor pairing."""

# ============================================================
# Imports
# ============================================================

import os
from pathlib import Path
from typing import Mapping

from .errors import ConfigError


# ============================================================
# Configuration
# ============================================================

DESCRIPTOR_SUFFIX = ".lua"


# ============================================================
# Home Resolution
# ============================================================

def resolve_home(environ: Mapping[str, str]) -> Path:
    """Return the destination root from HOME, failing when it is unset or empty."""
    home = environ.get("HOME", "")
    if not home:
        raise ConfigError("HOME environment variable must be set")
    return Path(os.path.abspath(home))


def expand_path(spec: str | os.PathLike, home: Path) -> Path:
    """
    Expand a home-relative or absolute path specification.

    `~` and `~/...` are resolved against the given home instead of the
    process environment. Relative paths are made absolute against the
    current directory. Symlinks are never resolved, so the result stays
    stable as a symlink target across runs.

    Args:
        spec: Path as written by the user
        home: Destination root used for `~`

    Returns:
        Absolute path
    """
    text = os.fspath(spec)
    if text == "~":
        return home
    if text.startswith("~/"):
        return Path(os.path.abspath(os.path.join(home, text[2:])))
    return Path(os.path.abspath(text))


# ============================================================
# Descriptor Pairing
# ============================================================

def descriptor_path_for(source_path: Path) -> Path:
    """Return the descriptor path that belongs to a source file."""
    return source_path.with_name(source_path.name + DESCRIPTOR_SUFFIX)


def described_path_for(path: Path) -> Path | None:
    """Return the source file a descriptor-named path would describe, if any."""
    name = path.name
    if not name.endswith(DESCRIPTOR_SUFFIX) or name == DESCRIPTOR_SUFFIX:
        return None
    return path.with_name(name[:-len(DESCRIPTOR_SUFFIX)])


def is_descriptor(path: Path) -> bool:
    """
    Check whether a file acts as a descriptor.

    A `.lua` file only counts as a descriptor when the leaf entry it would
    describe exists next to it: a file, or a symlink of any kind (symlinks
    are linked as leaves, even when they point at directories or nowhere).
    Orphaned `.lua` files and `.lua` files next to real directories are
    ordinary entries.
    """
    if not path.is_file():
        return False
    described = described_path_for(path)
    return described is not None and (described.is_symlink() or described.is_file())
