"""Dotfile linking with Lua policy descriptors."""

from .command_link import execute_link
from .config import Config, build_config
from .errors import ConfigError, DescriptorError, DottyError, ReconcileIOError
from .models import (
    Counters,
    Decision,
    Exclude,
    Include,
    LinkEntry,
    TargetState,
)
from .reconcile import reconcile

__all__ = [
    # Configuration
    'Config',
    'build_config',
    # Domain models
    'Counters',
    'Decision',
    'Exclude',
    'Include',
    'LinkEntry',
    'TargetState',
    # Errors
    'DottyError',
    'ConfigError',
    'DescriptorError',
    'ReconcileIOError',
    # Commands
    'execute_link',
    'reconcile',
]
