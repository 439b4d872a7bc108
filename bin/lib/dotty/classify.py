"""Destination state classification."""

# ============================================================
# Imports
# ============================================================

import os
import stat
from pathlib import Path

from .errors import ReconcileIOError
from .models import Include, TargetState


# ============================================================
# Entry Point
# ============================================================

def classify(decision: Include, source_path: Path, destination_path: Path) -> TargetState:
    """
    Compare the destination against what the decision wants there.

    A symlink that already points at the exact source path short-circuits
    before any file content is read. Directories are always conflicts.

    Args:
        decision: Include decision for the entry
        source_path: Path the symlink should point to
        destination_path: Path in the destination tree

    Returns:
        Current state of the destination
    """
    # Inspect the destination without following symlinks
    try:
        destination_stat = destination_path.lstat()
    except FileNotFoundError:
        return TargetState.ABSENT
    except OSError as e:
        raise ReconcileIOError.wrap(destination_path, "inspect", e) from e

    if decision.transform is not None:
        return classify_written(decision.transform, destination_path, destination_stat)

    return classify_linked(source_path, destination_path, destination_stat)


# ============================================================
# Classification
# ============================================================

def classify_written(content: bytes, destination_path: Path, destination_stat: os.stat_result) -> TargetState:
    """Classify a destination that should hold transformed content."""
    if not stat.S_ISREG(destination_stat.st_mode):
        return TargetState.CONFLICT

    if read_bytes(destination_path) == content:
        return TargetState.ALREADY_WRITTEN
    return TargetState.CONFLICT


def classify_linked(source_path: Path, destination_path: Path, destination_stat: os.stat_result) -> TargetState:
    """Classify a destination that should be a symlink to the source."""
    # Already linked: compare raw link text, not canonical paths
    if stat.S_ISLNK(destination_stat.st_mode):
        try:
            link_target = os.readlink(destination_path)
        except OSError as e:
            raise ReconcileIOError.wrap(destination_path, "read symlink", e) from e

        if link_target == os.fspath(source_path):
            return TargetState.ALREADY_LINKED
        return TargetState.CONFLICT

    if not stat.S_ISREG(destination_stat.st_mode) or not source_path.is_file():
        return TargetState.CONFLICT

    # Identical regular files are eligible for override
    if destination_stat.st_size == source_path.stat().st_size:
        if read_bytes(destination_path) == read_bytes(source_path):
            return TargetState.CONTENT_IDENTICAL

    return TargetState.CONFLICT


# ============================================================
# Supporting Code
# ============================================================

def read_bytes(path: Path) -> bytes:
    """Read a file's bytes, wrapping failures with the path."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise ReconcileIOError.wrap(path, "read", e) from e
