"""Destination mutations: symlinks, transformed writes, overrides."""

# ============================================================
# Imports
# ============================================================

import os
import stat
import tempfile
from pathlib import Path

from .errors import ReconcileIOError
from .models import Include


# ============================================================
# Entry Point
# ============================================================

def materialize(
    decision: Include,
    source_path: Path,
    destination_path: Path,
    dry_run: bool,
    replace: bool = False,
) -> None:
    """
    Realize an include decision at the destination.

    Args:
        decision: Include decision for the entry
        source_path: Exact symlink target for non-transform entries
        destination_path: Path to create in the destination tree
        dry_run: Skip every filesystem mutation
        replace: Remove the existing file or symlink first (override mode)
    """
    if dry_run:
        return

    create_parent_directories(destination_path)

    if replace:
        remove_existing(destination_path)

    if decision.transform is not None:
        write_atomic(destination_path, decision.transform)
    else:
        create_symlink(source_path, destination_path)


# ============================================================
# Operations
# ============================================================

def create_parent_directories(destination_path: Path) -> None:
    """Create missing parent directories of the destination."""
    try:
        destination_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ReconcileIOError.wrap(destination_path.parent, "create directory", e) from e


def remove_existing(destination_path: Path) -> None:
    """Remove a single file or symlink; directories are never removed."""
    try:
        mode = destination_path.lstat().st_mode
        if stat.S_ISDIR(mode):
            raise ReconcileIOError(destination_path, "Refusing to remove directory")
        destination_path.unlink()
    except OSError as e:
        raise ReconcileIOError.wrap(destination_path, "remove", e) from e


def create_symlink(source_path: Path, destination_path: Path) -> None:
    """Create a symlink whose target is exactly the given source path."""
    try:
        os.symlink(source_path, destination_path)
    except OSError as e:
        raise ReconcileIOError.wrap(destination_path, "create symlink", e) from e


def write_atomic(destination_path: Path, content: bytes) -> None:
    """Write content via a temporary sibling file renamed into place."""
    try:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{destination_path.name}.",
            suffix=".tmp",
            dir=destination_path.parent,
        )
    except OSError as e:
        raise ReconcileIOError.wrap(destination_path, "write", e) from e

    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(content)
        os.chmod(temp_name, 0o644)
        os.replace(temp_name, destination_path)
    except OSError as e:
        # Never leave the temporary file behind
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise ReconcileIOError.wrap(destination_path, "write", e) from e
