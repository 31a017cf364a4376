from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from gcassert.schema import CompilerSettings
from tests.go_helpers import FakeCompiler, write_fake_compiler


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def fake_compiler(tmp_path: Path):
    def _make(lines: list[str], *, exit_code: int = 0, stderr_lines: list[str] | None = None) -> FakeCompiler:
        return write_fake_compiler(
            tmp_path / "bin",
            lines,
            exit_code=exit_code,
            stderr_lines=stderr_lines or [],
        )

    return _make


@pytest.fixture
def settings_for():
    def _settings(compiler: FakeCompiler) -> CompilerSettings:
        return CompilerSettings(command=compiler.command)

    return _settings
