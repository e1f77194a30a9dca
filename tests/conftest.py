from pathlib import Path

import pytest


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Directory of files requiring each other.

    file1 requires file2 and file3, file2 requires file3, file4 requires file1,
    file5 requires nothing. Requirements naming missing files are ignored.
    """
    root = tmp_path / "sources"
    root.mkdir()
    (root / "file1.txt").write_text("require 'file2.txt'\nrequire 'file3.txt' require 'missing.txt'\nbody1\n")
    (root / "file2.txt").write_text("require 'file3.txt'\nbody2\n")
    (root / "file3.txt").write_text("body3\n")
    (root / "file4.txt").write_text("require 'file1.txt'\nbody4\n")
    (root / "file5.txt").write_text("body5\n")
    return root


@pytest.fixture
def cyclic_tree(tmp_path: Path) -> Path:
    """Directory where a.txt -> b.txt -> c.txt -> a.txt require each other, plus a standalone file."""
    root = tmp_path / "cyclic"
    root.mkdir()
    (root / "a.txt").write_text("require 'b.txt'\n")
    (root / "b.txt").write_text("require 'c.txt'\n")
    (root / "c.txt").write_text("require 'a.txt'\n")
    (root / "d.txt").write_text("standalone\n")
    return root
