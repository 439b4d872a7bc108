"""Lua descriptor evaluation."""

import pytest

from conftest import write
from dotty.errors import DescriptorError
from dotty.models import Exclude, Include
from dotty.policy import evaluate


@pytest.fixture
def source(root):
    return write(root / "config.txt", "email = old@example.com")


def describe(source, lua):
    descriptor = write(source.with_name(source.name + ".lua"), lua)
    return evaluate(descriptor, source)


@pytest.mark.parametrize("lua, expected", [
    ("return false", Exclude()),
    ("false", Exclude()),
    ("return true", Include()),
    ("return {}", Include()),
    ("return { include = false, rename_to = 'x/y' }", Exclude()),
    ("return { include = true }", Include()),
])
def test_simple_decisions(source, lua, expected):
    assert describe(source, lua) == expected


def test_statement_block(source):
    lua = """
    local skip = 1 + 1 == 3
    return not skip
    """
    assert describe(source, lua) == Include()


def test_rename_to(source):
    assert describe(source, "return { rename_to = 'renamed.txt' }") == Include(rename_to="renamed.txt")


@pytest.mark.parametrize("name", ["", "a/b", "a\\b", "..", "."])
def test_invalid_rename_to(source, name):
    with pytest.raises(DescriptorError, match="rename_to"):
        describe(source, f"return {{ rename_to = {name!r} }}")


def test_rename_to_must_be_string(source):
    with pytest.raises(DescriptorError, match="rename_to must be a string; got number"):
        describe(source, "return { rename_to = 5 }")


def test_transform_receives_source_text(source):
    lua = """
    return {
        transform = function(content)
            return content:gsub("old@example.com", "new@example.com")
        end
    }
    """
    decision = describe(source, lua)

    assert decision == Include(transform=b"email = new@example.com")


def test_transform_with_rename(source):
    lua = """
    return {
        rename_to = ".config_renamed",
        transform = function(content) return content:upper() end,
    }
    """
    decision = describe(source, lua)

    assert decision.rename_to == ".config_renamed"
    assert decision.transform == b"EMAIL = OLD@EXAMPLE.COM"


def test_transform_error_names_descriptor(source):
    lua = "return { transform = function(content) error('boom') end }"
    with pytest.raises(DescriptorError, match="transform failed") as excinfo:
        describe(source, lua)

    assert excinfo.value.descriptor_path == source.with_name("config.txt.lua")
    assert "config.txt.lua" in str(excinfo.value)


def test_transform_must_return_string(source):
    with pytest.raises(DescriptorError, match="got number"):
        describe(source, "return { transform = function(content) return #content end }")


def test_transform_must_be_function(source):
    with pytest.raises(DescriptorError, match="transform must be a function"):
        describe(source, "return { transform = 'nope' }")


def test_transform_rejects_binary_source(root):
    source = write(root / "blob.bin", b"\xff\xfe\x00")
    with pytest.raises(DescriptorError, match="not valid UTF-8"):
        describe(source, "return { transform = function(c) return c end }")


def test_exclude_skips_transform(source):
    lua = "return { include = false, transform = function(c) error('never') end }"
    assert describe(source, lua) == Exclude()


@pytest.mark.parametrize("lua, kind", [
    ("return 'hello'", "string"),
    ("return 42", "number"),
    ("return nil", "nil"),
    ("return function() end", "function"),
])
def test_wrong_return_type(source, lua, kind):
    with pytest.raises(DescriptorError, match=f"got {kind}"):
        describe(source, lua)


def test_syntax_error(source):
    with pytest.raises(DescriptorError, match="Invalid Lua"):
        describe(source, "return {")


def test_runtime_error(source):
    with pytest.raises(DescriptorError, match="Failed to execute"):
        describe(source, "error('bad policy')")


def test_globals_expose_paths(source, home):
    descriptor = write(source.with_name("config.txt.lua"), "return { rename_to = home:match('[^/]+$') }")

    decision = evaluate(descriptor, source, home)

    assert decision.rename_to == home.name


def test_evaluation_is_deterministic(source):
    lua = "return { transform = function(c) return c:lower() end }"
    assert describe(source, lua) == describe(source, lua)


def test_descriptors_do_not_share_state(source):
    write(source.with_name("config.txt.lua"), "counter = (counter or 0) + 1\nreturn counter == 1")
    descriptor = source.with_name("config.txt.lua")

    assert evaluate(descriptor, source) == Include()
    assert evaluate(descriptor, source) == Include()


@pytest.mark.parametrize("lua, field", [
    ('return { rename_to = "\\255" }', "rename_to"),
    ('return { include = "\\255" }', "include"),
])
def test_non_utf8_field_names_descriptor(source, lua, field):
    with pytest.raises(DescriptorError, match=f"{field} is not valid UTF-8") as excinfo:
        describe(source, lua)

    assert excinfo.value.descriptor_path == source.with_name("config.txt.lua")


def test_non_utf8_return_value_names_descriptor(source):
    with pytest.raises(DescriptorError, match="returned invalid UTF-8") as excinfo:
        describe(source, 'return "\\255"')

    assert "config.txt.lua" in str(excinfo.value)


def test_python_bridge_is_not_exposed(source):
    lua = "return python == nil and package.loaded.python == nil and source_path ~= nil"
    assert describe(source, lua) == Include()
