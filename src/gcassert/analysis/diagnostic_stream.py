"""Parsing of the compiler's optimization diagnostics.

`go build -gcflags=-m` interleaves plain progress lines (`# pkg`) with
diagnostics of the form `path:line:column: message`. Only the latter are
turned into Diagnostic values; everything else is skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable, Iterable, Iterator

DIAGNOSTIC_LINE_RE = re.compile(r"^(?P<path>.+?):(?P<line>\d+):(?P<col>\d+): (?P<message>.*)$")

BOUNDS_CHECK_MESSAGE = "Found IsInBounds"
SLICE_BOUNDS_CHECK_MESSAGE = "Found SliceIsInBounds"
BOUNDS_CHECK_MESSAGES: tuple[str, ...] = (BOUNDS_CHECK_MESSAGE, SLICE_BOUNDS_CHECK_MESSAGE)
INLINING_CALL_PREFIX = "inlining call to"


@dataclass(frozen=True)
class Diagnostic:
    path: str
    line: int
    column: int
    message: str

    @property
    def reports_bounds_check(self) -> bool:
        return self.message in BOUNDS_CHECK_MESSAGES

    @property
    def reports_inlined_call(self) -> bool:
        return self.message.startswith(INLINING_CALL_PREFIX)


def parse_diagnostic_line(line: str) -> Diagnostic | None:
    match = DIAGNOSTIC_LINE_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    return Diagnostic(
        path=match.group("path"),
        line=int(match.group("line")),
        column=int(match.group("col")),
        message=match.group("message"),
    )


def iter_diagnostics(
    lines: Iterable[str],
    *,
    on_unmatched: Callable[[str], None] | None = None,
) -> Iterator[Diagnostic]:
    """Lazily parse diagnostics from a line stream, skipping other lines."""
    for line in lines:
        diagnostic = parse_diagnostic_line(line)
        if diagnostic is None:
            if on_unmatched is not None:
                on_unmatched(line.rstrip("\r\n"))
            continue
        yield diagnostic
