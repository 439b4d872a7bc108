"""Exceptions raised while linking dotfiles."""

# ============================================================
# Imports
# ============================================================

from pathlib import Path


# ============================================================
# Exceptions
# ============================================================

class DottyError(Exception):
    """Base class for every fatal error; conflicts are never raised."""


class ConfigError(DottyError):
    """Invalid configuration detected before the walk begins."""


class DescriptorError(DottyError):
    """A Lua descriptor failed to produce a usable decision."""

    def __init__(self, descriptor_path: Path, message: str):
        super().__init__(f"{descriptor_path}: {message}")
        self.descriptor_path = descriptor_path


class ReconcileIOError(DottyError):
    """Filesystem operation failed for a specific path."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path

    @classmethod
    def wrap(cls, path: Path, action: str, error: OSError) -> 'ReconcileIOError':
        """Build an error for `action` on `path` from the underlying OSError."""
        reason = error.strerror or str(error)
        return cls(path, f"Failed to {action} ({reason})")
