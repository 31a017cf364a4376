from __future__ import annotations

import os
from pathlib import Path

from gcassert.exceptions import PackageLoadError
from gcassert.ingest.adapter_contract import LanguageAdapter, LoadedPackages, ParsedFileUnit
from gcassert.ingest.go_syntax import parse_go_source

RECURSIVE_SUFFIX = "/..."
_SKIPPED_DIR_NAMES = frozenset({"testdata", "vendor"})


def split_pattern(pattern: str) -> tuple[str, bool]:
    """Split a package pattern into its base path and whether it recurses."""
    if pattern == "...":
        return ".", True
    if pattern.endswith(RECURSIVE_SUFFIX):
        return pattern[: -len(RECURSIVE_SUFFIX)] or "/", True
    return pattern, False


def go_build_target(pattern: str) -> str:
    if os.path.isabs(pattern) or pattern in (".", "..") or pattern.startswith(("./", "../")):
        return pattern
    return "./" + pattern


def is_go_source_name(name: str) -> bool:
    return (
        name.endswith(".go")
        and not name.endswith("_test.go")
        and not name.startswith((".", "_"))
    )


def _skip_dir(name: str) -> bool:
    return name in _SKIPPED_DIR_NAMES or name.startswith((".", "_"))


def iter_go_paths(directory: Path, *, recursive: bool) -> list[Path]:
    """List the Go files of one package directory, or of a tree of them."""
    if not recursive:
        return [
            directory / name
            for name in sorted(os.listdir(directory))
            if is_go_source_name(name) and (directory / name).is_file()
        ]
    out: list[Path] = []
    for root, dirnames, filenames in os.walk(directory, topdown=True):
        dirnames[:] = sorted(name for name in dirnames if not _skip_dir(name))
        for filename in sorted(filenames):
            if is_go_source_name(filename):
                out.append(Path(root) / filename)
    return out


class GoAdapter(LanguageAdapter):
    language_id = "go"
    file_extensions = (".go",)

    def discover_files(self, patterns: list[str], *, cwd: Path) -> list[Path]:
        out: list[Path] = []
        seen: set[Path] = set()
        for pattern in patterns:
            base, recursive = split_pattern(pattern)
            target = Path(base)
            if not target.is_absolute():
                target = cwd / target
            if target.is_file():
                if target.suffix not in self.file_extensions:
                    raise PackageLoadError(f"{pattern} is not a Go source file")
                candidates = [target]
            elif target.is_dir():
                try:
                    candidates = iter_go_paths(target, recursive=recursive)
                except OSError as exc:
                    raise PackageLoadError(f"cannot list package {pattern}: {exc}") from exc
            else:
                raise PackageLoadError(f"cannot find package {pattern}")
            for candidate in candidates:
                if candidate in seen:
                    continue
                seen.add(candidate)
                out.append(candidate)
        return out

    def parse_files(self, paths: list[Path]) -> list[ParsedFileUnit]:
        parsed_units: list[ParsedFileUnit] = []
        for path in paths:
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise PackageLoadError(f"cannot read {path}: {exc}") from exc
            parsed_units.append(ParsedFileUnit(path=path, tree=parse_go_source(text, path)))
        return parsed_units

    def build_targets(self, patterns: list[str]) -> list[str]:
        return [go_build_target(pattern) for pattern in patterns]

    def load(self, patterns: list[str], *, cwd: Path) -> LoadedPackages:
        discovered = self.discover_files(patterns, cwd=cwd)
        return LoadedPackages(
            language_id=self.language_id,
            build_targets=tuple(self.build_targets(patterns)),
            parsed_units=tuple(self.parse_files(discovered)),
        )
