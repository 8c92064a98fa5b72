from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from butler_book.core.context import RunContext
from butler_book.core.shell import DRY_RUN_CAPTURE, Shell
from butler_book.errors import CommandFailedError

from helpers import RecordingRunner


def test_cd_scopes_commands_and_restores(make_ctx: Callable[..., RunContext], repo_root: Path) -> None:
    runner = RecordingRunner()
    shell = Shell(make_ctx(), runner=runner)
    with shell.cd("docs") as docs:
        assert docs == repo_root.resolve() / "docs"
        shell.run("npm", "install")
        with shell.cd("_book"):
            shell.run("ls")
        shell.run("gitbook", "build")
    shell.run("npm", "version")
    assert [call.cwd for call in runner.calls] == [
        repo_root.resolve() / "docs",
        repo_root.resolve() / "docs/_book",
        repo_root.resolve() / "docs",
        repo_root.resolve(),
    ]


def test_cd_restores_after_failure(make_ctx: Callable[..., RunContext], repo_root: Path) -> None:
    shell = Shell(make_ctx(), runner=RecordingRunner(fail_on=("gitbook",)))
    with pytest.raises(CommandFailedError) as excinfo:
        with shell.cd("docs"):
            shell.run("gitbook", "build")
    assert shell.cwd == repo_root.resolve()
    assert excinfo.value.cwd == repo_root.resolve() / "docs"
    assert "boom" in str(excinfo.value)


def test_cd_does_not_touch_process_cwd(make_ctx: Callable[..., RunContext]) -> None:
    before = Path.cwd()
    shell = Shell(make_ctx(), runner=RecordingRunner())
    with shell.cd("/"):
        assert Path.cwd() == before


def test_capture_returns_stripped_stdout(make_ctx: Callable[..., RunContext]) -> None:
    runner = RecordingRunner(prefix="/home/ci/.npm-global")
    shell = Shell(make_ctx(), runner=runner)
    assert shell.capture("npm", "config", "get", "prefix") == "/home/ci/.npm-global"
    assert runner.calls[0].capture is True


def test_run_streams_output(make_ctx: Callable[..., RunContext]) -> None:
    runner = RecordingRunner()
    Shell(make_ctx(), runner=runner).run("npm", "version")
    assert runner.calls[0].capture is False


def test_dry_run_records_without_executing(make_ctx: Callable[..., RunContext], capsys: pytest.CaptureFixture[str]) -> None:
    runner = RecordingRunner()
    shell = Shell(make_ctx(dry_run=True), runner=runner)
    shell.run("gitbook", "build")
    assert shell.capture("npm", "config", "get", "prefix") == DRY_RUN_CAPTURE
    assert runner.calls == []
    assert [item.argv for item in shell.history] == [("gitbook", "build"), ("npm", "config", "get", "prefix")]
    assert "action=dry-run" in capsys.readouterr().err


def test_history_keeps_failed_command(make_ctx: Callable[..., RunContext]) -> None:
    shell = Shell(make_ctx(), runner=RecordingRunner(fail_on=("gsutil",), fail_code=9))
    with pytest.raises(CommandFailedError):
        shell.run("gsutil", "cp")
    assert shell.history[-1].code == 9


def test_timeout_is_passed_to_every_command(make_ctx: Callable[..., RunContext]) -> None:
    runner = RecordingRunner()
    shell = Shell(make_ctx(), timeout_seconds=30, runner=runner)
    shell.run("npm", "version")
    shell.capture("npm", "config", "get", "prefix")
    assert [call.timeout_seconds for call in runner.calls] == [30, 30]


def test_docs_path_that_is_a_file_fails_as_command(make_ctx: Callable[..., RunContext], repo_root: Path) -> None:
    (repo_root / "site").write_text("", encoding="utf-8")
    shell = Shell(make_ctx())
    with pytest.raises(CommandFailedError) as excinfo:
        with shell.cd("site"):
            shell.run(sys.executable, "-c", "pass")
    assert excinfo.value.kind == "command_failed"
    assert excinfo.value.returncode == 126
