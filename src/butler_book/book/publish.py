from __future__ import annotations

from collections.abc import Mapping

from ..config.model import BookConfig
from ..core import env

SKIP_UPLOAD_MESSAGE = "Skipping uploading book, no CI_COMMIT_REF_NAME environment variable set"


def resolve_ref(environ: Mapping[str, str] | None = None) -> str | None:
    return env.ref_name(environ)


def upload_destination(config: BookConfig, ref: str) -> str:
    ref = ref.strip()
    if not ref:
        raise ValueError("ref name must be non-empty")
    return f"{config.bucket.rstrip('/')}/{config.product}/{ref}/"


def upload_command(config: BookConfig, ref: str) -> list[str]:
    # gsutil expands the wildcard itself, no shell involved
    source = f"{config.output_dir.rstrip('/')}/*"
    return [config.gsutil, "-m", "cp", "-r", "-a", config.acl, source, upload_destination(config, ref)]
