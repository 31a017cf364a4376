from __future__ import annotations

from pathlib import Path

import pytest

from gcassert.exceptions import WorkingDirectoryError
from gcassert.runtime.path_policy import (
    relative_display_path,
    resolve_working_directory,
    source_key,
)


def test_resolve_working_directory(tmp_path: Path) -> None:
    assert resolve_working_directory(tmp_path) == tmp_path.resolve()


def test_resolve_working_directory_rejects_missing_and_files(tmp_path: Path) -> None:
    with pytest.raises(WorkingDirectoryError):
        resolve_working_directory(tmp_path / "missing")
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(WorkingDirectoryError, match="is not a directory"):
        resolve_working_directory(target)


def test_relative_display_path(tmp_path: Path) -> None:
    assert relative_display_path(tmp_path / "pkg" / "a.go", cwd=tmp_path) == str(Path("pkg", "a.go"))
    assert relative_display_path("pkg/a.go", cwd=tmp_path) == str(Path("pkg", "a.go"))
    assert relative_display_path(tmp_path / "a.go", cwd=tmp_path / "sub") == str(Path("..", "a.go"))


@pytest.mark.parametrize("raw", ["pkg/a.go", "./pkg/a.go", "pkg//a.go", "pkg/sub/../a.go"])
def test_source_key_collapses_relative_forms(tmp_path: Path, raw: str) -> None:
    assert source_key(raw, cwd=tmp_path) == "pkg/a.go"


def test_source_key_relativizes_absolute_paths(tmp_path: Path) -> None:
    assert source_key(tmp_path / "pkg" / "a.go", cwd=tmp_path) == "pkg/a.go"
    assert source_key(str(tmp_path / "a.go"), cwd=tmp_path / "sub") == "../a.go"
