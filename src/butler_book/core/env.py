"""Centralized environment variable helpers."""

from __future__ import annotations

import os
from collections.abc import Mapping

CI_FLAG = "CI"
REF_NAME = "CI_COMMIT_REF_NAME"
CONFIG_PATH = "BUTLER_BOOK_CONFIG"
RUN_ID = "RUN_ID"


def getenv(name: str, default: str | None = None, environ: Mapping[str, str] | None = None) -> str | None:
    source = os.environ if environ is None else environ
    return source.get(name, default)


def is_ci(environ: Mapping[str, str] | None = None) -> bool:
    # any non-empty value counts, "false" included
    return bool(getenv(CI_FLAG, "", environ))


def ref_name(environ: Mapping[str, str] | None = None) -> str | None:
    value = (getenv(REF_NAME, "", environ) or "").strip()
    return value or None
