"""Lua descriptor evaluation.

A descriptor is a Lua chunk stored next to a managed file as
`<name>.lua`. It evaluates to either a boolean or a table:

    return false

    return {
        rename_to = ".gitconfig",
        transform = function(content)
            return content:gsub("@work", "@home")
        end,
    }

Lua values never leave this module; callers only see `Exclude` or
`Include` decisions.
"""

# ============================================================
# Imports
# ============================================================

from pathlib import Path
from typing import Any

from lupa import LuaError, LuaRuntime, LuaSyntaxError, lua_type

from .errors import DescriptorError, ReconcileIOError
from .models import Decision, Exclude, Include


# ============================================================
# Configuration
# ============================================================

FORBIDDEN_NAME_CHARACTERS = ("/", "\\")
RESERVED_NAMES = (".", "..")


# ============================================================
# Entry Point
# ============================================================

def evaluate(descriptor_path: Path, source_path: Path, home: Path | None = None) -> Decision:
    """
    Evaluate a descriptor into a decision for its source file.

    Args:
        descriptor_path: Path to the `.lua` descriptor
        source_path: Path to the file the descriptor describes
        home: Destination root, exposed to the chunk as `home`

    Returns:
        Exclude or a validated Include decision

    Raises:
        DescriptorError: The chunk failed or returned an unusable value
        ReconcileIOError: The descriptor or source file could not be read
    """
    source_text = read_text(descriptor_path, descriptor_path)

    # Every descriptor runs in its own interpreter
    runtime = LuaRuntime(register_eval=False, register_builtins=False)
    runtime.execute("python = nil; package.loaded.python = nil")
    lua_globals = runtime.globals()
    lua_globals.source_path = str(source_path)
    lua_globals.home = str(home) if home is not None else None

    value = run_chunk(runtime, descriptor_path, source_text)
    return parse_decision(descriptor_path, source_path, value)


# ============================================================
# Chunk Execution
# ============================================================

def run_chunk(runtime: LuaRuntime, descriptor_path: Path, source_text: str) -> Any:
    """Run a descriptor chunk, accepting both bare expressions and `return` blocks."""
    try:
        chunk = runtime.compile("return " + source_text)
    except LuaSyntaxError:
        try:
            chunk = runtime.compile(source_text)
        except LuaSyntaxError as e:
            raise DescriptorError(descriptor_path, f"Invalid Lua: {e}") from e

    try:
        return first_value(chunk())
    except LuaError as e:
        raise DescriptorError(descriptor_path, f"Failed to execute Lua chunk: {e}") from e
    except UnicodeDecodeError as e:
        raise DescriptorError(descriptor_path, "Lua chunk returned invalid UTF-8") from e


def get_field(descriptor_path: Path, table: Any, key: str) -> Any:
    """Read a field of the returned table; Lua strings must be valid UTF-8."""
    try:
        return table[key]
    except UnicodeDecodeError as e:
        raise DescriptorError(descriptor_path, f"{key} is not valid UTF-8") from e


def first_value(result: Any) -> Any:
    """Return the first of possibly several Lua return values."""
    if isinstance(result, tuple):
        return result[0] if result else None
    return result


def type_name(value: Any) -> str:
    """Name a returned value using Lua type names."""
    kind = lua_type(value)
    if kind is not None:
        return kind
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, (str, bytes)):
        return "string"
    return type(value).__name__


# ============================================================
# Decision Parsing
# ============================================================

def parse_decision(descriptor_path: Path, source_path: Path, value: Any) -> Decision:
    """Convert the chunk's return value into a decision."""
    # Boolean shorthand
    if isinstance(value, bool):
        return Include() if value else Exclude()

    if lua_type(value) != "table":
        raise DescriptorError(
            descriptor_path,
            f"Lua chunk must return a boolean or a table; got {type_name(value)}",
        )

    # An explicit include = false wins over every other field
    include = get_field(descriptor_path, value, "include")
    if include is not None and not isinstance(include, bool):
        raise DescriptorError(descriptor_path, f"include must be a boolean; got {type_name(include)}")
    if include is False:
        return Exclude()

    rename_to = parse_rename(descriptor_path, get_field(descriptor_path, value, "rename_to"))

    transform = None
    transform_fn = get_field(descriptor_path, value, "transform")
    if transform_fn is not None:
        transform = apply_transform(descriptor_path, source_path, transform_fn)

    return Include(rename_to=rename_to, transform=transform)


def parse_rename(descriptor_path: Path, rename_to: Any) -> str | None:
    """Validate `rename_to` as a single non-empty path component."""
    if rename_to is None:
        return None

    if not isinstance(rename_to, str):
        raise DescriptorError(descriptor_path, f"rename_to must be a string; got {type_name(rename_to)}")
    if not rename_to:
        raise DescriptorError(descriptor_path, "rename_to must not be empty")
    if any(char in rename_to for char in FORBIDDEN_NAME_CHARACTERS):
        raise DescriptorError(descriptor_path, f"rename_to must not contain path separators: {rename_to!r}")
    if rename_to in RESERVED_NAMES:
        raise DescriptorError(descriptor_path, f"rename_to must name a file: {rename_to!r}")

    return rename_to


def apply_transform(descriptor_path: Path, source_path: Path, transform_fn: Any) -> bytes:
    """Call the descriptor's transform with the source text and return the new bytes."""
    if lua_type(transform_fn) != "function":
        raise DescriptorError(descriptor_path, f"transform must be a function; got {type_name(transform_fn)}")

    content = read_text(source_path, descriptor_path)

    try:
        result = first_value(transform_fn(content))
    except LuaError as e:
        raise DescriptorError(descriptor_path, f"transform failed: {e}") from e
    except UnicodeDecodeError as e:
        raise DescriptorError(descriptor_path, "transform returned invalid UTF-8") from e

    if not isinstance(result, str):
        raise DescriptorError(descriptor_path, f"transform must return a string; got {type_name(result)}")

    return result.encode("utf-8")


# ============================================================
# Supporting Code
# ============================================================

def read_text(path: Path, descriptor_path: Path) -> str:
    """Read a file as UTF-8, blaming the descriptor for undecodable content."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ReconcileIOError.wrap(path, "read", e) from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DescriptorError(descriptor_path, f"{path} is not valid UTF-8 text") from e
