"""Formatted output utilities."""

# ============================================================
# Imports
# ============================================================

import sys
from pathlib import Path

from .models import Counters


# ============================================================
# Configuration
# ============================================================

class Color:
    """ANSI color codes for terminal output."""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    GRAY = '\033[90m'


# ============================================================
# Output Functions
# ============================================================

def paint(text: str, code: str, color: bool) -> str:
    """Wrap text in an ANSI color code when color output is enabled."""
    if not color:
        return text
    return f"{code}{text}{Color.RESET}"


def print_info(message: str) -> None:
    """Print an informational message."""
    print(message)


def print_error(message: str, color: bool = False) -> None:
    """Print an error message to stderr with 'Error:' prefix."""
    print(paint(f"Error: {message}", Color.RED, color), file=sys.stderr)


def print_detail(message: str, color: bool = True) -> None:
    """Print a dimmed verbose-only detail line."""
    print(paint(message, Color.GRAY, color))


def print_entry_status(status: str, status_color: str, path: Path, link_source: Path | None = None, color: bool = True) -> None:
    """
    Print a formatted per-entry status line.

    Args:
        status: Status message (e.g., "Would symlink", "Conflict: target exists")
        status_color: Color constant for the status (e.g., Color.GREEN)
        path: Destination path, or source path for skipped entries
        link_source: Symlink target, appended as `-> source` when given
        color: If False, print without escape codes
    """
    line = f"{paint(status, status_color, color)} {path}"
    if link_source is not None:
        line += f" -> {link_source}"
    print(line)


# ============================================================
# Summary
# ============================================================

def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Format a count with the matching noun form."""
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural or singular + 's'}"


def format_summary(counters: Counters) -> str:
    """Render aggregate counts as a single summary line."""
    parts = [
        f"{counters.planned} planned",
        pluralize(counters.conflicts, "conflict"),
        f"{counters.skips} skipped by lua",
        pluralize(counters.overrides, "override"),
    ]
    return "Summary: " + ", ".join(parts)


def print_summary(counters: Counters, color: bool = True) -> None:
    """Print the summary line, bold when color output is enabled."""
    print()
    print(paint(format_summary(counters), Color.BOLD, color))
