"""Fail-fast command execution with a scoped working directory.

``Shell`` is the only place the workflow touches external processes. It keeps
its own working directory instead of calling :func:`os.chdir`, so ``cd`` blocks
nest and unwind without affecting the host process.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from ..errors import CommandFailedError
from .context import RunContext
from .logging import log_event
from .process import CommandResult, run_command

Runner = Callable[..., CommandResult]

DRY_RUN_CAPTURE = "/usr/local"


@dataclass(frozen=True)
class ExecutedCommand:
    argv: tuple[str, ...]
    cwd: Path
    code: int
    duration_ms: int


class Shell:
    def __init__(
        self,
        ctx: RunContext,
        cwd: Path | None = None,
        timeout_seconds: int = 0,
        runner: Runner = run_command,
    ) -> None:
        self.ctx = ctx
        self._dirs: list[Path] = [(cwd or ctx.repo_root).resolve()]
        self.timeout_seconds = timeout_seconds
        self._runner = runner
        self.history: list[ExecutedCommand] = []

    @property
    def cwd(self) -> Path:
        return self._dirs[-1]

    @contextmanager
    def cd(self, path: str | Path) -> Iterator[Path]:
        target = Path(path)
        if not target.is_absolute():
            target = self.cwd / target
        target = target.resolve()
        log_event(self.ctx, "debug", "shell", "cd", path=str(target))
        self._dirs.append(target)
        try:
            yield target
        finally:
            self._dirs.pop()

    def run(self, *argv: str) -> CommandResult:
        """Run a command with inherited output, raising on failure."""
        return self._execute(list(argv), capture=False)

    def capture(self, *argv: str) -> str:
        """Run a command and return its stripped stdout, raising on failure."""
        return self._execute(list(argv), capture=True).stdout.strip()

    def _execute(self, argv: list[str], capture: bool) -> CommandResult:
        cwd = self.cwd
        if self.ctx.dry_run:
            log_event(self.ctx, "info", "shell", "dry-run", command=" ".join(argv), cwd=str(cwd))
            result = CommandResult(0, DRY_RUN_CAPTURE if capture else "", "", 0)
        else:
            result = self._runner(
                argv,
                cwd,
                capture=capture,
                timeout_seconds=self.timeout_seconds,
                ctx=self.ctx,
            )
        self.history.append(ExecutedCommand(tuple(argv), cwd, result.code, result.duration_ms))
        if result.code != 0:
            raise CommandFailedError.for_command(argv, cwd, result.code, result.stderr.strip())
        return result
