from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from gcassert.analysis.report_rendering import render_directive_site
from gcassert.config import load_compiler_settings
from gcassert.exceptions import GCAssertError
from gcassert.runner import gcassert as run_gcassert
from gcassert.runner import list_directives

app = typer.Typer(
    add_completion=False,
    help="Assert that Go compiler optimizations fire where //gcassert directives ask for them.",
)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_RUN_ERROR = 2


class _EchoSink:
    def write(self, text: str) -> int:
        typer.echo(text, nl=False)
        return len(text)


def _echo_err(message: str) -> None:
    typer.echo(message, err=True)


@app.command("check")
def check(
    paths: List[str] = typer.Argument(..., help="Package patterns as accepted by go build."),
    root: Path = typer.Option(Path("."), "--root", help="Working directory for loading, building and reporting."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to a gcassert.toml file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo compiler progress to stderr."),
    fail_on_violations: bool = typer.Option(True, "--fail-on-violations/--no-fail-on-violations"),
) -> None:
    """Build the packages and report every directive the compiler did not honor."""
    try:
        settings = load_compiler_settings(root=root, config_path=config)
        result = run_gcassert(
            paths,
            _EchoSink(),
            cwd=root,
            settings=settings,
            on_progress=_echo_err if verbose else None,
        )
    except GCAssertError as exc:
        _echo_err(f"gcassert: {exc}")
        raise typer.Exit(code=EXIT_RUN_ERROR) from exc
    if verbose:
        _echo_err(f"{result.failure_count} violation(s) across {result.directive_count} directive(s)")
    if result.failures and fail_on_violations:
        raise typer.Exit(code=EXIT_VIOLATIONS)


@app.command("directives")
def directives(
    paths: List[str] = typer.Argument(..., help="Package patterns as accepted by go build."),
    root: Path = typer.Option(Path("."), "--root", help="Working directory for loading and reporting."),
) -> None:
    """List the directives found in the packages without compiling them."""
    try:
        sites = list_directives(paths, cwd=root)
    except GCAssertError as exc:
        _echo_err(f"gcassert: {exc}")
        raise typer.Exit(code=EXIT_RUN_ERROR) from exc
    for site in sites:
        typer.echo(render_directive_site(site))
