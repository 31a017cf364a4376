from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gcassert.analysis.directive_index import AssertionFailure, DirectiveIndex
from gcassert.directives import DirectiveKind
from gcassert.runtime.path_policy import relative_display_path

FAILURE_LINE_FORMAT = "{path}:{line}:\t{source}: {message}"
DIRECTIVE_LINE_FORMAT = "{path}:{line}:\t{kind}\t{source}"


class TextSink(Protocol):
    def write(self, text: str, /) -> object: ...


@dataclass(frozen=True)
class DirectiveSite:
    path: str
    line: int
    kind: DirectiveKind
    source: str


def render_failure(failure: AssertionFailure, *, cwd: Path) -> str:
    node = failure.node
    return FAILURE_LINE_FORMAT.format(
        path=relative_display_path(node.path, cwd=cwd),
        line=node.line,
        source=node.render(),
        message=failure.message,
    )


def write_failure(sink: TextSink, failure: AssertionFailure, *, cwd: Path) -> None:
    sink.write(render_failure(failure, cwd=cwd) + "\n")


def directive_sites(index: DirectiveIndex) -> list[DirectiveSite]:
    sites: list[DirectiveSite] = []
    for _, record in index.records():
        path = relative_display_path(record.node.path, cwd=index.cwd)
        source = record.node.render()
        for kind in record.directives:
            sites.append(DirectiveSite(path=path, line=record.line, kind=kind, source=source))
    return sites


def render_directive_site(site: DirectiveSite) -> str:
    return DIRECTIVE_LINE_FORMAT.format(
        path=site.path,
        line=site.line,
        kind=site.kind.value,
        source=site.source,
    )
