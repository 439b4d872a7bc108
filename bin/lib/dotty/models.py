"""Domain models for dotfile reconciliation."""

# ============================================================
# Imports
# ============================================================

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


# ============================================================
# Decisions
# ============================================================

@dataclass(frozen=True)
class Exclude:
    """Policy decision that keeps an entry out of the destination tree."""


@dataclass(frozen=True)
class Include:
    """
    Policy decision that materializes an entry.

    Attributes:
        rename_to: Replacement file name for the destination (single component)
        transform: Bytes to write instead of creating a symlink
    """

    rename_to: str | None = None
    transform: bytes | None = None

    def destination_name(self, source_name: str) -> str:
        """Return the file name used in the destination directory."""
        return self.rename_to if self.rename_to is not None else source_name


Decision = Exclude | Include

DEFAULT_DECISION = Include()


# ============================================================
# Target State
# ============================================================

class TargetState(Enum):
    """State of a destination path relative to the desired outcome."""

    ABSENT = "absent"
    ALREADY_LINKED = "already linked"
    ALREADY_WRITTEN = "already written"
    CONTENT_IDENTICAL = "identical"
    CONFLICT = "conflict"

    def is_satisfied(self) -> bool:
        """Check if the destination already matches and needs no mutation."""
        return self in (TargetState.ALREADY_LINKED, TargetState.ALREADY_WRITTEN)


# ============================================================
# Counters
# ============================================================

@dataclass(frozen=True)
class Counters:
    """
    Aggregate outcome counts for a subtree walk.

    Attributes:
        planned: Entries created, would be created, or already in place
        conflicts: Destinations occupied by something incompatible
        skips: Entries excluded by their descriptor
        overrides: Identical destinations replaced in override mode
    """

    planned: int = 0
    conflicts: int = 0
    skips: int = 0
    overrides: int = 0

    def __add__(self, other: object) -> 'Counters':
        if not isinstance(other, Counters):
            return NotImplemented
        return Counters(
            planned=self.planned + other.planned,
            conflicts=self.conflicts + other.conflicts,
            skips=self.skips + other.skips,
            overrides=self.overrides + other.overrides,
        )


PLANNED = Counters(planned=1)
CONFLICT = Counters(conflicts=1)
SKIPPED = Counters(skips=1)
OVERRIDDEN = Counters(planned=1, overrides=1)


# ============================================================
# Entry Models
# ============================================================

@dataclass(frozen=True)
class LinkEntry:
    """
    A source file paired with its resolved destination.

    Attributes:
        source_path: Absolute path of the managed file
        destination_path: Absolute path in the destination tree
        decision: Evaluated include decision for the file
    """

    source_path: Path
    destination_path: Path
    decision: Include

    @property
    def is_transform(self) -> bool:
        """Check if the entry is written as content instead of linked."""
        return self.decision.transform is not None
