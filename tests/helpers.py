from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from butler_book.core.context import RunContext
from butler_book.core.process import CommandResult


@dataclass
class Call:
    argv: list[str]
    cwd: Path
    capture: bool
    timeout_seconds: int = 0


@dataclass
class RecordingRunner:
    """Stands in for ``run_command``: records calls, fails on request."""

    prefix: str = "/opt/node"
    fail_on: tuple[str, ...] | None = None
    fail_code: int = 1
    calls: list[Call] = field(default_factory=list)

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        capture: bool = True,
        timeout_seconds: int = 0,
        ctx: RunContext | None = None,
    ) -> CommandResult:
        self.calls.append(Call(list(cmd), cwd, capture, timeout_seconds))
        if self.fail_on is not None and tuple(cmd[: len(self.fail_on)]) == self.fail_on:
            return CommandResult(self.fail_code, "", "boom", 1)
        if cmd[1:] == ["config", "get", "prefix"]:
            return CommandResult(0, self.prefix + "\n", "", 1)
        return CommandResult(0, "", "", 1)

    @property
    def argvs(self) -> list[list[str]]:
        return [call.argv for call in self.calls]
