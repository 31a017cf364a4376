"""Error taxonomy for gcassert runs."""

from __future__ import annotations

from typing import Mapping


class GCAssertError(RuntimeError):
    """Base class for failures that stop a run.

    Assertion failures are not errors; they are the normal output of a run.
    """


class WorkingDirectoryError(GCAssertError):
    pass


class PathResolutionError(GCAssertError):
    def __init__(self, path: str, cwd: str) -> None:
        super().__init__(f"cannot make {path} relative to {cwd}")
        self.path = path
        self.cwd = cwd


class PackageLoadError(GCAssertError):
    pass


class ConfigError(GCAssertError):
    pass


class CompilerLaunchError(GCAssertError):
    def __init__(self, argv: list[str], reason: str) -> None:
        super().__init__(f"cannot start compiler {argv[0] if argv else '<empty>'}: {reason}")
        self.argv = list(argv)


class CompilerExitError(GCAssertError):
    def __init__(self, exit_code: int, output_tail: tuple[str, ...] = ()) -> None:
        message = f"compiler exited with status {exit_code}"
        if output_tail:
            message = message + ":\n" + "\n".join(output_tail)
        super().__init__(message)
        self.exit_code = exit_code
        self.output_tail = output_tail


class CompilerOutputError(GCAssertError):
    pass


class UnknownDirectiveError(ValueError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"no such directive {tag}")
        self.tag = tag


class NeverThrown(RuntimeError):
    """Raised by never(); reaching it means an invariant was broken."""

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None) -> None:
        super().__init__(message)
        self.env = dict(env or {})
