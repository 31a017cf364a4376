"""Compiler subprocess with a concurrently drained output pipe.

`go build` writes its optimization diagnostics faster than they may be
correlated, and it blocks once the pipe buffer is full. A dedicated thread
therefore reads the merged stdout/stderr line by line and hands the lines to
the consuming side through a bounded queue, in arrival order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import queue
import subprocess
import threading
from types import TracebackType
from typing import Callable, Iterator, Mapping, Sequence

from gcassert.exceptions import CompilerLaunchError, CompilerOutputError
from gcassert.invariants import never
from gcassert.schema import CompilerSettings

DEFAULT_QUEUE_SIZE = 256
_CLOSE_POLL_SECONDS = 0.05

PopenFn = Callable[..., "subprocess.Popen[str]"]


def build_command(settings: CompilerSettings, targets: Sequence[str]) -> list[str]:
    return [
        *settings.command,
        "build",
        f"-gcflags={settings.gcflags}",
        *settings.build_flags,
        *targets,
    ]


@dataclass(frozen=True)
class _EndOfStream:
    error: BaseException | None = None


class CompilerOutputStream:
    """Owns one compiler process and the thread draining its output.

    Iterating yields output lines without their line terminators. `wait()`
    returns the exit status once the stream has ended. Leaving the context
    before the stream ends kills the process.
    """

    def __init__(
        self,
        argv: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        popen_fn: PopenFn = subprocess.Popen,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self._argv = list(argv)
        self._cwd = cwd
        self._env = dict(env) if env is not None else None
        self._popen_fn = popen_fn
        self._lines: queue.Queue[str | _EndOfStream] = queue.Queue(maxsize=max(1, queue_size))
        self._process: subprocess.Popen[str] | None = None
        self._drainer: threading.Thread | None = None
        self._finished = False

    def __enter__(self) -> CompilerOutputStream:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def start(self) -> None:
        if self._process is not None:
            never("compiler process started twice", argv=self._argv)
        try:
            self._process = self._popen_fn(
                self._argv,
                cwd=str(self._cwd),
                env=self._env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            raise CompilerLaunchError(self._argv, str(exc)) from exc
        self._drainer = threading.Thread(
            target=self._drain,
            name="gcassert-compiler-drain",
            daemon=True,
        )
        self._drainer.start()

    def _drain(self) -> None:
        process = self._process
        if process is None or process.stdout is None:
            self._lines.put(_EndOfStream())
            return
        try:
            for raw in process.stdout:
                self._lines.put(raw.rstrip("\r\n"))
        except (OSError, ValueError) as exc:
            self._lines.put(_EndOfStream(error=exc))
            return
        self._lines.put(_EndOfStream())

    def __iter__(self) -> Iterator[str]:
        if self._process is None:
            never("compiler output read before start", argv=self._argv)
        while not self._finished:
            item = self._lines.get()
            if isinstance(item, _EndOfStream):
                self._finished = True
                if item.error is not None:
                    raise CompilerOutputError(f"reading compiler output failed: {item.error}") from item.error
                return
            yield item

    def wait(self) -> int:
        if self._process is None:
            never("compiler waited on before start", argv=self._argv)
        for _ in self:
            pass
        return int(self._process.wait())

    def close(self) -> None:
        process = self._process
        if process is None:
            return
        if process.poll() is None:
            process.kill()
        drainer = self._drainer
        while drainer is not None and drainer.is_alive():
            # The drainer may be blocked on a full queue.
            try:
                self._lines.get(timeout=_CLOSE_POLL_SECONDS)
            except queue.Empty:
                continue
        process.wait()
        if process.stdout is not None:
            process.stdout.close()
