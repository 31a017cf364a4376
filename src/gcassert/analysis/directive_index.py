"""Per-line directive records and their correlation with diagnostics.

The two directive kinds have opposite evidence polarity. The compiler reports
a bounds check it could not remove, so a BCE directive fails the moment such
a diagnostic arrives and passes on silence. It only reports an inlined call
when inlining happened, so an INLINE directive needs positive evidence and
is failed by the closing sweep when none arrived.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from gcassert.analysis.diagnostic_stream import Diagnostic
from gcassert.directives import DirectiveKind
from gcassert.ingest.adapter_contract import SyntaxNode
from gcassert.invariants import never
from gcassert.runtime.path_policy import source_key

INLINE_FAILURE_MESSAGE = "call was not inlined"


@dataclass
class LineRecord:
    node: SyntaxNode
    directives: list[DirectiveKind] = field(default_factory=list)
    # Directive position -> evidence seen. Only INLINE directives get entries.
    evidence: dict[int, bool] = field(default_factory=dict)

    @property
    def line(self) -> int:
        return self.node.line


@dataclass(frozen=True)
class AssertionFailure:
    node: SyntaxNode
    kind: DirectiveKind
    message: str


class DirectiveIndex:
    def __init__(self, *, cwd: Path) -> None:
        self._cwd = cwd
        self._records: dict[str, dict[int, LineRecord]] = {}

    def __len__(self) -> int:
        return sum(len(lines) for lines in self._records.values())

    def __bool__(self) -> bool:
        return bool(self._records)

    @property
    def cwd(self) -> Path:
        return self._cwd

    @property
    def directive_count(self) -> int:
        return sum(len(record.directives) for _, record in self.records())

    def key_for(self, path: Path | str) -> str:
        return source_key(path, cwd=self._cwd)

    def record_directive(self, node: SyntaxNode, kind: DirectiveKind) -> LineRecord:
        lines = self._records.setdefault(self.key_for(node.path), {})
        record = lines.get(node.line)
        if record is None:
            record = LineRecord(node=node)
            lines[node.line] = record
        record.node = node
        record.directives.append(kind)
        return record

    def lookup(self, path: Path | str, line: int) -> LineRecord | None:
        lines = self._records.get(self.key_for(path))
        if lines is None:
            return None
        return lines.get(line)

    def records(self) -> Iterator[tuple[str, LineRecord]]:
        for path_key in sorted(self._records):
            lines = self._records[path_key]
            for line in sorted(lines):
                yield path_key, lines[line]

    def observe_diagnostic(self, diagnostic: Diagnostic) -> list[AssertionFailure]:
        """Correlate one diagnostic; return the failures it proves right now."""
        record = self.lookup(diagnostic.path, diagnostic.line)
        if record is None:
            return []
        failures: list[AssertionFailure] = []
        for position, kind in enumerate(record.directives):
            match kind:
                case DirectiveKind.BCE:
                    if diagnostic.reports_bounds_check:
                        failures.append(AssertionFailure(record.node, kind, diagnostic.message))
                case DirectiveKind.INLINE:
                    if diagnostic.reports_inlined_call:
                        record.evidence[position] = True
                case _:
                    never("unhandled directive kind", kind=kind)
        return failures

    def sweep(self) -> list[AssertionFailure]:
        """Fail the directives whose required evidence never arrived.

        Call once the diagnostic stream has ended. Ordered by file, line and
        directive position.
        """
        failures: list[AssertionFailure] = []
        for _, record in self.records():
            for position, kind in enumerate(record.directives):
                match kind:
                    case DirectiveKind.INLINE:
                        if not record.evidence.get(position, False):
                            failures.append(AssertionFailure(record.node, kind, INLINE_FAILURE_MESSAGE))
                    case DirectiveKind.BCE:
                        continue
                    case _:
                        never("unhandled directive kind", kind=kind)
        return failures
