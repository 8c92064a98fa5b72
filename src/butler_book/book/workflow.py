"""The book pipeline: bootstrap toolchain, build the site, publish it.

Every step goes through :class:`~butler_book.core.shell.Shell`, which raises
:class:`~butler_book.errors.CommandFailedError` on the first failing command;
nothing here catches it, so a failure aborts the remaining steps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Literal

from ..config.model import BookConfig
from ..core.logging import log_event
from ..core.shell import Shell
from ..errors import CommandFailedError
from .publish import SKIP_UPLOAD_MESSAGE, upload_command, upload_destination

StepStatus = Literal["ok", "skipped"]

STEPS = ("print-versions", "install-toolchain", "patch-ci-dependency", "build-site", "publish-site")


@dataclass
class StepRecord:
    name: str
    status: StepStatus = "ok"
    reason: str = ""
    details: dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        row: dict[str, object] = {"name": self.name, "status": self.status}
        if self.reason:
            row["reason"] = self.reason
        row.update(self.details)
        return row


def print_versions(shell: Shell, config: BookConfig) -> StepRecord:
    shell.run(config.npm, "version")
    return StepRecord("print-versions")


def install_toolchain(shell: Shell, config: BookConfig) -> StepRecord:
    shell.run(config.npm, "install", "-g", config.toolchain_package)
    return StepRecord("install-toolchain", details={"package": config.toolchain_package})


def nested_modules_dir(prefix: str, config: BookConfig) -> str:
    return str(PurePosixPath(prefix) / config.nested_modules_path)


def patch_ci_dependency(shell: Shell, config: BookConfig) -> StepRecord:
    if not shell.ctx.ci:
        return StepRecord("patch-ci-dependency", "skipped", "not running under CI")
    prefix_cmd = [config.npm, "config", "get", "prefix"]
    prefix = shell.capture(*prefix_cmd)
    if not prefix:
        raise CommandFailedError(
            f"{' '.join(prefix_cmd)} printed no prefix (cwd={shell.cwd})",
            command=prefix_cmd,
            cwd=shell.cwd,
            returncode=0,
        )
    target = nested_modules_dir(prefix, config)
    with shell.cd(target):
        shell.run(config.npm, "install", config.compat_spec, "--save")
    return StepRecord("patch-ci-dependency", details={"path": target, "package": config.compat_spec})


def build_site(shell: Shell, config: BookConfig) -> StepRecord:
    with shell.cd(config.docs_dir) as docs:
        shell.run(config.npm, "install")
        shell.run(config.gitbook, "install")
        shell.run(config.gitbook, "build")
    return StepRecord("build-site", details={"docs_dir": str(docs)})


def publish_site(shell: Shell, config: BookConfig) -> StepRecord:
    ref = shell.ctx.ref_name
    if not ref:
        log_event(shell.ctx, "warning", "publish", "skip-upload", message=SKIP_UPLOAD_MESSAGE)
        return StepRecord("publish-site", "skipped", SKIP_UPLOAD_MESSAGE)
    shell.run(*upload_command(config, ref))
    return StepRecord("publish-site", details={"destination": upload_destination(config, ref)})


def run_book(shell: Shell, config: BookConfig) -> list[StepRecord]:
    records: list[StepRecord] = []
    for step in (print_versions, install_toolchain, patch_ci_dependency, build_site, publish_site):
        record = step(shell, config)
        log_event(shell.ctx, "info", "book", record.name, status=record.status)
        records.append(record)
    return records
