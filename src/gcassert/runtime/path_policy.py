from __future__ import annotations

import os
from pathlib import Path

from gcassert.exceptions import PathResolutionError, WorkingDirectoryError


def resolve_working_directory(root: Path | None = None) -> Path:
    try:
        base = Path.cwd() if root is None else Path(root)
        resolved = base.resolve(strict=True)
    except OSError as exc:
        raise WorkingDirectoryError(f"cannot determine working directory: {exc}") from exc
    if not resolved.is_dir():
        raise WorkingDirectoryError(f"{resolved} is not a directory")
    return resolved


def relative_display_path(path: Path | str, *, cwd: Path) -> str:
    raw = os.fspath(path)
    if not os.path.isabs(raw):
        raw = os.path.join(os.fspath(cwd), raw)
    try:
        return os.path.relpath(raw, os.fspath(cwd))
    except ValueError as exc:
        # Different drives on Windows; there is no relative form.
        raise PathResolutionError(os.fspath(path), os.fspath(cwd)) from exc


def source_key(path: Path | str, *, cwd: Path) -> str:
    """Key a source file the same way whether it came from disk or the compiler.

    The compiler prints `./x.go`, `pkg/x.go` or an absolute path depending on
    where the package lives; all of them collapse to one cwd-relative form.
    """
    raw = os.fspath(path)
    if os.path.isabs(raw):
        raw = relative_display_path(raw, cwd=cwd)
    return Path(os.path.normpath(raw)).as_posix()
