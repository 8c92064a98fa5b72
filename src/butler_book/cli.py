from __future__ import annotations

import argparse
import json
import sys

from . import __version__
from .book import run_book, upload_destination
from .config import BookConfig, load_config
from .core.context import RunContext
from .core.logging import log_event
from .core.shell import Shell
from .errors import ScriptError
from .exit_codes import ERR_INTERNAL, ERR_USAGE, OK

TOOL = "butler-book"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=TOOL, description="build the butler book and publish it to the docs bucket")
    p.add_argument("--version", action="version", version=f"{TOOL} {__version__}")
    p.add_argument("--config", help="YAML config file (default: $BUTLER_BOOK_CONFIG or configs/book.yaml)")
    p.add_argument("--run-id", help="run identifier for log events")
    p.add_argument("--format", choices=["text", "json"], default=None, help="log format (default: json under CI)")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="log captured command output")
    vg.add_argument("--quiet", action="store_true", help="only log warnings and errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="install the toolchain, build the book, upload it when on CI")
    run_p.add_argument("--dry-run", action="store_true", help="log commands without executing them")
    run_p.add_argument("--compat-version", help="override the pinned compatibility dependency version")
    run_p.add_argument("--json", action="store_true", help="print a JSON run summary")

    plan_p = sub.add_parser("plan", help="print the commands `run` would execute")
    plan_p.add_argument("--compat-version", help="override the pinned compatibility dependency version")
    plan_p.add_argument("--json", action="store_true", help="emit JSON output")

    path_p = sub.add_parser("upload-path", help="print the bucket destination for a ref")
    path_p.add_argument("--ref", help="ref name (default: $CI_COMMIT_REF_NAME)")
    path_p.add_argument("--json", action="store_true", help="emit JSON output")

    config_p = sub.add_parser("config", help="print the resolved configuration")
    config_p.add_argument("--json", action="store_true", help="emit JSON output")
    return p


def _emit(payload: dict[str, object], as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, sort_keys=True))
    else:
        print(json.dumps(payload, indent=2, sort_keys=True))


def _emit_error(ctx: RunContext, message: str, code: int, kind: str) -> None:
    if ctx.log_json:
        payload = {
            "schema_version": 1,
            "tool": TOOL,
            "status": "fail",
            "error": {"message": message, "code": code, "kind": kind},
        }
        print(json.dumps(payload, sort_keys=True), file=sys.stderr)
    else:
        print(message, file=sys.stderr)


def _base_payload(ctx: RunContext, status: str = "ok") -> dict[str, object]:
    return {
        "schema_version": 1,
        "tool": TOOL,
        "status": status,
        "run_id": ctx.run_id,
        "ci": ctx.ci,
        "ref_name": ctx.ref_name,
    }


def _run(ctx: RunContext, config: BookConfig, ns: argparse.Namespace) -> int:
    shell = Shell(ctx, timeout_seconds=config.timeout_seconds)
    records = run_book(shell, config)
    if ns.cmd == "plan":
        commands = [
            {"cwd": str(item.cwd), "argv": list(item.argv)}
            for item in shell.history
        ]
        if ns.json:
            _emit({**_base_payload(ctx), "commands": commands}, True)
        else:
            for row in commands:
                print(f"({row['cwd']}) $ {' '.join(row['argv'])}")
        return OK
    if ns.json:
        _emit(
            {
                **_base_payload(ctx),
                "dry_run": ctx.dry_run,
                "steps": [record.to_dict() for record in records],
            },
            True,
        )
    return OK


def _upload_path(ctx: RunContext, config: BookConfig, ns: argparse.Namespace) -> int:
    ref = (ns.ref or "").strip() or ctx.ref_name
    if not ref:
        raise ScriptError("no ref given; pass --ref or set CI_COMMIT_REF_NAME", ERR_USAGE)
    destination = upload_destination(config, ref)
    if ns.json:
        _emit({**_base_payload(ctx), "ref": ref, "destination": destination}, True)
    else:
        print(destination)
    return OK


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    ctx = RunContext.from_args(
        run_id=ns.run_id,
        log_format=ns.format,
        verbose=ns.verbose,
        quiet=ns.quiet,
        dry_run=ns.cmd == "plan" or bool(getattr(ns, "dry_run", False)),
    )
    try:
        config, config_path = load_config(ctx.repo_root, ns.config)
        compat_version = getattr(ns, "compat_version", None)
        if compat_version is not None and not compat_version.strip():
            raise ScriptError("--compat-version must not be empty", ERR_USAGE, "usage_error")
        config = config.with_overrides(compat_version=compat_version)
        log_event(
            ctx,
            "info",
            "cli",
            "start",
            cmd=ns.cmd,
            config=str(config_path) if config_path else "defaults",
            ci=ctx.ci,
            dry_run=ctx.dry_run,
        )
        if ns.cmd in {"run", "plan"}:
            return _run(ctx, config, ns)
        if ns.cmd == "upload-path":
            return _upload_path(ctx, config, ns)
        if ns.cmd == "config":
            payload = {**_base_payload(ctx), "source": str(config_path) if config_path else None, "config": config.to_dict()}
            _emit(payload, ns.json)
            return OK
        return ERR_USAGE
    except ScriptError as exc:
        _emit_error(ctx, str(exc), exc.code, exc.kind)
        return exc.code
    except Exception as exc:
        _emit_error(ctx, f"internal error: {exc}", ERR_INTERNAL, "internal_error")
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
