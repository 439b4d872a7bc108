"""Configuration management."""

# ============================================================
# Imports
# ============================================================

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError
from .paths import expand_path, resolve_home


# ============================================================
# Configuration
# ============================================================

DEFAULT_ROOT = "~/.dotfiles"

CONFIG_FILE_BOOLEANS = ("override_identical", "verbose", "color")


@dataclass(frozen=True)
class Config:
    """
    Resolved settings for a single run.

    Attributes:
        root: Source tree holding managed files and descriptors
        home: Destination tree the source is mirrored into
        dry_run: Classify and report without touching the filesystem
        override_identical: Replace destinations proven byte-identical
        verbose: Print descriptor and directory details
        color: Emit ANSI color codes
    """

    root: Path
    home: Path
    dry_run: bool = False
    override_identical: bool = False
    verbose: bool = False
    color: bool = False

    def validate(self) -> None:
        """Fail before any mutation when the source root is unusable."""
        if not self.root.exists():
            raise ConfigError(f"Root directory not found: {self.root}")
        if not self.root.is_dir():
            raise ConfigError(f"Root is not a directory: {self.root}")


# ============================================================
# TOML Loading
# ============================================================

def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    with open(path, 'rb') as f:
        return tomllib.load(f)


def default_config_path(environ: Mapping[str, str], home: Path) -> Path:
    """Return the config file location honoring XDG_CONFIG_HOME."""
    config_home = environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else home / ".config"
    return base / "dotty" / "config.toml"


def load_config_file(path: Path, required: bool) -> dict[str, Any]:
    """
    Load settings from a TOML config file.

    Args:
        path: Config file location
        required: Whether a missing file is an error (explicit --config)

    Returns:
        Recognized settings; unknown keys are dropped
    """
    if not path.exists():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return {}

    try:
        data = load_toml(path)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    settings: dict[str, Any] = {}

    root = data.get("root")
    if root is not None:
        if not isinstance(root, str):
            raise ConfigError(f"{path}: root must be a string")
        settings["root"] = root

    for key in CONFIG_FILE_BOOLEANS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, bool):
            raise ConfigError(f"{path}: {key} must be a boolean")
        settings[key] = value

    return settings


# ============================================================
# Resolution
# ============================================================

def build_config(
    root: str | None = None,
    home: str | None = None,
    config_path: str | None = None,
    dry_run: bool = False,
    override_identical: bool | None = None,
    verbose: bool | None = None,
    color: bool | None = None,
    environ: Mapping[str, str] | None = None,
    is_tty: bool = False,
) -> Config:
    """
    Combine command-line values, the config file, and defaults.

    `None` means the flag was not given. Precedence is
    command line, then config file, then built-in default.
    """
    environ = os.environ if environ is None else environ

    # Resolve destination root first; ~ expands against it
    if home is not None:
        home_path = Path(os.path.abspath(os.path.expanduser(home)))
    else:
        home_path = resolve_home(environ)

    # Load optional settings file
    if config_path is not None:
        settings = load_config_file(expand_path(config_path, home_path), required=True)
    else:
        settings = load_config_file(default_config_path(environ, home_path), required=False)

    # Pick each value by precedence
    root_spec = root if root is not None else settings.get("root", DEFAULT_ROOT)
    if color is None:
        color = settings.get("color", is_tty and "NO_COLOR" not in environ)

    return Config(
        root=expand_path(root_spec, home_path),
        home=home_path,
        dry_run=dry_run,
        override_identical=pick(override_identical, settings, "override_identical"),
        verbose=pick(verbose, settings, "verbose"),
        color=color,
    )


def pick(flag: bool | None, settings: dict[str, Any], key: str) -> bool:
    """Return the flag if given, else the config file value, else False."""
    if flag is not None:
        return flag
    return settings.get(key, False)
