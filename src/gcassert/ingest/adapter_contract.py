from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable


@runtime_checkable
class SyntaxNode(Protocol):
    """A node a directive can annotate."""

    @property
    def path(self) -> Path: ...

    @property
    def line(self) -> int: ...

    def render(self) -> str: ...


@runtime_checkable
class CommentedTree(Protocol):
    """A parsed file plus its comment-to-node association."""

    def nodes(self) -> Iterator[SyntaxNode]: ...

    def comment_texts_for(self, node: SyntaxNode) -> list[str]: ...


@dataclass(frozen=True)
class ParsedFileUnit:
    path: Path
    tree: CommentedTree


@dataclass(frozen=True)
class LoadedPackages:
    language_id: str
    build_targets: tuple[str, ...]
    parsed_units: tuple[ParsedFileUnit, ...]

    @property
    def file_paths(self) -> tuple[Path, ...]:
        return tuple(unit.path for unit in self.parsed_units)


@runtime_checkable
class LanguageAdapter(Protocol):
    language_id: str
    file_extensions: tuple[str, ...]

    def discover_files(self, patterns: list[str], *, cwd: Path) -> list[Path]: ...

    def parse_files(self, paths: list[Path]) -> list[ParsedFileUnit]: ...

    def build_targets(self, patterns: list[str]) -> list[str]: ...

    def load(self, patterns: list[str], *, cwd: Path) -> LoadedPackages: ...
