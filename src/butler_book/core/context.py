from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from . import env

LogFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    repo_root: Path
    log_json: bool
    verbose: bool
    quiet: bool
    dry_run: bool
    ci: bool
    ref_name: str | None

    @classmethod
    def from_args(
        cls,
        run_id: str | None = None,
        log_format: LogFormat | None = None,
        verbose: bool = False,
        quiet: bool = False,
        dry_run: bool = False,
        repo_root: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "RunContext":
        ci = env.is_ci(environ)
        default_run = f"book-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
        resolved_format = log_format or ("json" if ci else "text")
        return cls(
            run_id=run_id or env.getenv(env.RUN_ID, None, environ) or default_run,
            repo_root=(repo_root or Path.cwd()).resolve(),
            log_json=resolved_format == "json",
            verbose=verbose,
            quiet=quiet,
            dry_run=dry_run,
            ci=ci,
            ref_name=env.ref_name(environ),
        )
