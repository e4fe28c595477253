"""Tests for input discovery."""

from pathlib import Path

import pytest

from scrapdown.errors import InputNotFoundError
from scrapdown.locate import locate_inputs, matches, output_path_for, should_skip


def test_locate_single_file(tmp_path):
    """Test a file path is returned as-is regardless of pattern."""
    doc = tmp_path / "note.md"
    doc.write_text("x")
    assert locate_inputs(doc, "*.txt") == [doc]


def test_locate_directory(tmp_path):
    """Test directory scan with the default pattern."""
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "skip.md").write_text("c")
    (tmp_path / ".hidden.txt").write_text("d")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("c")

    assert locate_inputs(tmp_path) == [tmp_path / "a.txt", tmp_path / "b.txt"]


def test_locate_directory_recursive(tmp_path):
    """Test recursive patterns and hidden directories."""
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("c")
    (tmp_path / "a.txt").write_text("a")
    hidden = tmp_path / ".git"
    hidden.mkdir()
    (hidden / "x.txt").write_text("x")

    assert locate_inputs(tmp_path, "**/*.txt") == [tmp_path / "a.txt", sub / "c.txt"]


def test_locate_missing(tmp_path):
    """Test missing paths and empty directories."""
    with pytest.raises(InputNotFoundError):
        locate_inputs(tmp_path / "missing.txt")
    with pytest.raises(InputNotFoundError):
        locate_inputs(tmp_path)


def test_should_skip():
    """Test hidden and editor temp files are skipped."""
    assert should_skip(Path(".note.txt"))
    assert should_skip(Path("note.txt~"))
    assert should_skip(Path("note.txt.swp"))
    assert not should_skip(Path("note.txt"))


def test_matches(tmp_path):
    """Test pattern matching relative to a root."""
    assert matches(tmp_path / "a.txt", tmp_path, "*.txt")
    assert not matches(tmp_path / "sub" / "a.txt", tmp_path, "*.txt")
    assert matches(tmp_path / "sub" / "a.txt", tmp_path, "**/*.txt")
    assert matches(tmp_path / "a.txt", tmp_path, "**/*.txt")
    assert not matches(tmp_path / "a.md", tmp_path, "*.txt")
    assert not matches(Path("/elsewhere/a.txt"), tmp_path, "*.txt")


def test_output_path_for(tmp_path):
    """Test mapping of inputs to Markdown outputs."""
    out = tmp_path / "out"
    assert output_path_for(tmp_path / "notes" / "a.txt", tmp_path, out) == out / "notes" / "a.md"
    doc = tmp_path / "single.txt"
    assert output_path_for(doc, doc, out) == out / "single.md"
