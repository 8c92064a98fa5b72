from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .exit_codes import ERR_COMMAND, ERR_CONFIG, ERR_INTERNAL


@dataclass
class ScriptError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigError(ScriptError):
    code: int = ERR_CONFIG
    kind: str = "config_error"


@dataclass
class CommandFailedError(ScriptError):
    """An external command exited non-zero (or could not be started)."""

    command: list[str] = field(default_factory=list)
    cwd: Path | None = None
    returncode: int = 1
    code: int = ERR_COMMAND
    kind: str = "command_failed"

    @classmethod
    def for_command(cls, command: list[str], cwd: Path, returncode: int, detail: str = "") -> "CommandFailedError":
        message = f"command failed with exit code {returncode}: {' '.join(command)} (cwd={cwd})"
        if detail:
            message = f"{message}\n{detail}"
        return cls(message, command=list(command), cwd=cwd, returncode=returncode)
