"""Destination mutations."""

import os
from unittest import mock

import pytest

from conftest import write
from dotty.actions import materialize
from dotty.errors import ReconcileIOError
from dotty.models import Include


@pytest.fixture
def source(root):
    return write(root / "a.txt", "A")


def test_creates_symlink_with_parents(source, home):
    target = home / ".config" / "app" / "a.txt"

    materialize(Include(), source, target, dry_run=False)

    assert target.is_symlink()
    assert os.readlink(target) == str(source)


def test_writes_transform_as_regular_file(source, home):
    target = home / "nested" / "a.txt"

    materialize(Include(transform=b"written"), source, target, dry_run=False)

    assert target.is_file() and not target.is_symlink()
    assert target.read_bytes() == b"written"
    assert os.listdir(target.parent) == ["a.txt"]


def test_dry_run_does_nothing(source, home):
    target = home / "deep" / "a.txt"

    materialize(Include(), source, target, dry_run=True)
    materialize(Include(transform=b"x"), source, target, dry_run=True)

    assert not (home / "deep").exists()


def test_replace_existing_file(source, home):
    target = write(home / "a.txt", "A")

    materialize(Include(), source, target, dry_run=False, replace=True)

    assert target.is_symlink()
    assert os.readlink(target) == str(source)


def test_replace_refuses_directory(source, home):
    target = home / "a.txt"
    target.mkdir()

    with pytest.raises(ReconcileIOError, match="Refusing to remove directory"):
        materialize(Include(), source, target, dry_run=False, replace=True)

    assert target.is_dir()


def test_existing_target_without_replace_fails(source, home):
    target = write(home / "a.txt", "other")

    with pytest.raises(ReconcileIOError, match="create symlink") as excinfo:
        materialize(Include(), source, target, dry_run=False)

    assert excinfo.value.path == target
    assert target.read_text() == "other"


def test_failed_write_leaves_no_partial_file(source, home):
    target = home / "a.txt"

    with mock.patch("dotty.actions.os.replace", side_effect=OSError(28, "No space left on device")):
        with pytest.raises(ReconcileIOError, match="No space left"):
            materialize(Include(transform=b"content"), source, target, dry_run=False)

    assert os.listdir(home) == []
