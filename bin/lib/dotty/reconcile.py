"""Recursive reconciliation of the source tree into the destination tree."""

# ============================================================
# Imports
# ============================================================

import os
from pathlib import Path

from .actions import materialize
from .classify import classify
from .config import Config
from .errors import ReconcileIOError
from .models import (
    CONFLICT,
    DEFAULT_DECISION,
    OVERRIDDEN,
    PLANNED,
    SKIPPED,
    Counters,
    Decision,
    Exclude,
    LinkEntry,
    TargetState,
)
from .output import Color, print_detail, print_entry_status
from .paths import DESCRIPTOR_SUFFIX, descriptor_path_for, is_descriptor
from .policy import evaluate


# ============================================================
# Entry Point
# ============================================================

def reconcile(config: Config, relative: Path = Path()) -> Counters:
    """
    Reconcile one directory level and everything below it.

    Process:
    1. List entries of `root / relative` in name order
    2. Recurse into subdirectories, adding their counters
    3. Ignore descriptors; they are consumed with their source file
    4. Decide, classify, and materialize every other file

    Args:
        config: Resolved run configuration
        relative: Directory below the source root to walk

    Returns:
        Counters for this directory and all its descendants
    """
    source_dir = config.root / relative
    counters = Counters()

    for entry in list_entries(source_dir):
        source_path = source_dir / entry.name

        # Recurse into real directories only
        if entry.is_dir(follow_symlinks=False):
            if config.verbose:
                print_detail(f"Entering {source_path}", color=config.color)
            counters += reconcile(config, relative / entry.name)
            continue

        # Descriptors are read together with the file they describe
        if is_descriptor(source_path):
            continue

        if config.verbose and entry.name.endswith(DESCRIPTOR_SUFFIX):
            print_detail(f"Orphaned descriptor treated as a file: {source_path}", color=config.color)

        counters += reconcile_file(config, relative, source_path)

    return counters


def list_entries(source_dir: Path) -> list[os.DirEntry]:
    """List directory entries sorted by name."""
    try:
        with os.scandir(source_dir) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise ReconcileIOError.wrap(source_dir, "read directory", e) from e


# ============================================================
# Files
# ============================================================

def reconcile_file(config: Config, relative: Path, source_path: Path) -> Counters:
    """Decide, classify, and realize a single source file."""
    decision = decide(config, source_path)

    # Excluded entries never touch the destination
    if isinstance(decision, Exclude):
        print_entry_status("Skipped by lua", Color.GRAY, source_path, color=config.color)
        return SKIPPED

    destination_path = config.home / relative / decision.destination_name(source_path.name)
    entry = LinkEntry(source_path=source_path, destination_path=destination_path, decision=decision)

    state = classify(decision, source_path, destination_path)
    return apply_state(config, entry, state)


def decide(config: Config, source_path: Path) -> Decision:
    """Evaluate the file's descriptor, or fall back to the default decision."""
    descriptor_path = descriptor_path_for(source_path)
    # Same pairing rule the walk uses to hide descriptors
    if not is_descriptor(descriptor_path):
        return DEFAULT_DECISION

    if config.verbose:
        print_detail(f"Evaluating {descriptor_path}", color=config.color)
    return evaluate(descriptor_path, source_path, config.home)


def apply_state(config: Config, entry: LinkEntry, state: TargetState) -> Counters:
    """Turn a classified destination into an action and its counters."""
    # Nothing there yet
    if state == TargetState.ABSENT:
        materialize(entry.decision, entry.source_path, entry.destination_path, config.dry_run)
        print_created(config, entry)
        return PLANNED

    # Already in place; repeated runs stay side-effect free
    if state.is_satisfied():
        print_in_place(config, entry, state)
        return PLANNED

    # Identical content may be replaced in override mode
    if state == TargetState.CONTENT_IDENTICAL and config.override_identical and not config.dry_run:
        materialize(entry.decision, entry.source_path, entry.destination_path, config.dry_run, replace=True)
        print_entry_status("Overrode identical", Color.BLUE, entry.destination_path, entry.source_path, color=config.color)
        return OVERRIDDEN

    # Anything else is left untouched
    status = "Conflict: target exists"
    if state == TargetState.CONTENT_IDENTICAL:
        status += " (identical)"
    print_entry_status(status, Color.YELLOW, entry.destination_path, color=config.color)
    return CONFLICT


# ============================================================
# Supporting Code
# ============================================================

def print_created(config: Config, entry: LinkEntry) -> None:
    """Print the line for a newly created (or would-be created) destination."""
    if entry.is_transform:
        status = "Would write transformed file" if config.dry_run else "Wrote transformed file"
        print_entry_status(status, Color.GREEN, entry.destination_path, color=config.color)
    else:
        status = "Would symlink" if config.dry_run else "Symlinked"
        print_entry_status(status, Color.GREEN, entry.destination_path, entry.source_path, color=config.color)


def print_in_place(config: Config, entry: LinkEntry, state: TargetState) -> None:
    """Print the line for a destination that already matches."""
    if state == TargetState.ALREADY_WRITTEN:
        status = "Transformed file up to date"
    elif config.dry_run:
        status = "Would link (already in place)"
    else:
        status = "Already linked"
    print_entry_status(status, Color.GRAY, entry.destination_path, color=config.color)
