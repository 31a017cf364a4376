"""Run orchestration: extract, compile, correlate, sweep."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path
import shlex
import subprocess
from typing import Callable, Iterable, Iterator, Sequence

from gcassert.analysis.diagnostic_stream import iter_diagnostics
from gcassert.analysis.directive_extract import collect_directives
from gcassert.analysis.directive_index import AssertionFailure, DirectiveIndex
from gcassert.analysis.report_rendering import (
    DirectiveSite,
    TextSink,
    directive_sites,
    write_failure,
)
from gcassert.exceptions import CompilerExitError
from gcassert.ingest.adapter_contract import LanguageAdapter, LoadedPackages
from gcassert.ingest.registry import resolve_adapter
from gcassert.runtime.compiler_process import CompilerOutputStream, PopenFn, build_command
from gcassert.runtime.path_policy import resolve_working_directory
from gcassert.schema import CompilerSettings

ProgressFn = Callable[[str], None]

_OUTPUT_TAIL_LINES = 20


@dataclass(frozen=True)
class RunResult:
    failures: tuple[AssertionFailure, ...]
    directive_count: int

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


def load_directive_index(
    paths: Sequence[str],
    *,
    cwd: Path,
    adapter: LanguageAdapter | None = None,
) -> tuple[LoadedPackages, DirectiveIndex]:
    active_adapter = adapter or resolve_adapter()
    packages = active_adapter.load(list(paths), cwd=cwd)
    return packages, collect_directives(packages.parsed_units, cwd=cwd)


def _tee(lines: Iterable[str], tail: deque[str]) -> Iterator[str]:
    for line in lines:
        tail.append(line)
        yield line


def gcassert(
    paths: Sequence[str],
    sink: TextSink,
    *,
    cwd: Path | None = None,
    settings: CompilerSettings | None = None,
    popen_fn: PopenFn = subprocess.Popen,
    on_progress: ProgressFn | None = None,
) -> RunResult:
    """Check the //gcassert directives of the packages at `paths`.

    One line per violated directive is written to `sink`. Bounds-check
    failures are written as soon as the compiler reports them; missing
    inlines are written after the compiler exits. Violations are returned,
    not raised. Environment, loading and compiler failures raise
    GCAssertError subclasses; lines already written stay written.
    """
    root = resolve_working_directory(cwd)
    active_settings = settings or CompilerSettings()
    packages, index = load_directive_index(paths, cwd=root)
    if on_progress is not None:
        on_progress(
            f"found {index.directive_count} directive(s) in "
            f"{len(packages.parsed_units)} file(s)"
        )
    argv = build_command(active_settings, packages.build_targets)
    if on_progress is not None:
        on_progress(f"running {shlex.join(argv)}")

    failures: list[AssertionFailure] = []
    tail: deque[str] = deque(maxlen=_OUTPUT_TAIL_LINES)
    with CompilerOutputStream(
        argv,
        cwd=root,
        env=active_settings.environment(),
        popen_fn=popen_fn,
    ) as stream:
        for diagnostic in iter_diagnostics(_tee(stream, tail), on_unmatched=on_progress):
            for failure in index.observe_diagnostic(diagnostic):
                write_failure(sink, failure, cwd=root)
                failures.append(failure)
        exit_code = stream.wait()
    if exit_code != 0:
        raise CompilerExitError(exit_code, tuple(tail))

    for failure in index.sweep():
        write_failure(sink, failure, cwd=root)
        failures.append(failure)
    return RunResult(failures=tuple(failures), directive_count=index.directive_count)


def list_directives(paths: Sequence[str], *, cwd: Path | None = None) -> list[DirectiveSite]:
    root = resolve_working_directory(cwd)
    _, index = load_directive_index(paths, cwd=root)
    return directive_sites(index)
