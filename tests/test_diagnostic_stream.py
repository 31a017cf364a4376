from __future__ import annotations

import pytest

from gcassert.analysis.diagnostic_stream import (
    Diagnostic,
    iter_diagnostics,
    parse_diagnostic_line,
)


def test_parse_diagnostic_line() -> None:
    diagnostic = parse_diagnostic_line("./pkg/a.go:12:7: Found IsInBounds")
    assert diagnostic == Diagnostic(path="./pkg/a.go", line=12, column=7, message="Found IsInBounds")
    assert diagnostic.reports_bounds_check
    assert not diagnostic.reports_inlined_call


def test_message_may_contain_colons() -> None:
    diagnostic = parse_diagnostic_line("a.go:3:9: inlining call to add func(int, int) int { return a + b }: yes\r\n")
    assert diagnostic is not None
    assert diagnostic.path == "a.go"
    assert diagnostic.message == "inlining call to add func(int, int) int { return a + b }: yes"
    assert diagnostic.reports_inlined_call


@pytest.mark.parametrize(
    "line",
    [
        "# example.com/pkg",
        "./a.go:12: missing column",
        "a.go:x:1: bad line number",
        "a.go:1:2:no space before message",
        "",
    ],
)
def test_non_diagnostic_lines_are_rejected(line: str) -> None:
    assert parse_diagnostic_line(line) is None


@pytest.mark.parametrize(
    ("message", "bounds", "inlined"),
    [
        ("Found IsInBounds", True, False),
        ("Found SliceIsInBounds", True, False),
        ("Found IsInBounds extra", False, False),
        ("inlining call to pkg.f", False, True),
        ("can inline f with cost 4 as: func() int { return 1 }", False, False),
        ("Proved IsInBounds", False, False),
    ],
)
def test_message_classification(message: str, bounds: bool, inlined: bool) -> None:
    diagnostic = Diagnostic(path="a.go", line=1, column=1, message=message)
    assert diagnostic.reports_bounds_check is bounds
    assert diagnostic.reports_inlined_call is inlined


def test_iter_diagnostics_skips_and_reports_other_lines() -> None:
    skipped: list[str] = []
    lines = ["# pkg", "a.go:1:2: inlining call to f", "note\n", "b.go:3:4: Found IsInBounds"]
    diagnostics = list(iter_diagnostics(lines, on_unmatched=skipped.append))
    assert [(item.path, item.line) for item in diagnostics] == [("a.go", 1), ("b.go", 3)]
    assert skipped == ["# pkg", "note"]


def test_iter_diagnostics_is_lazy() -> None:
    def lines():
        yield "a.go:1:1: Found IsInBounds"
        raise AssertionError("read past the first diagnostic")

    assert next(iter_diagnostics(lines())).line == 1
