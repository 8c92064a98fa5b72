from __future__ import annotations

import json
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from ..core import env
from ..errors import ConfigError
from .model import BookConfig

DEFAULT_CONFIG_REL = "configs/book.yaml"
SCHEMA_NAME = "book-config.schema.json"


def load_schema() -> dict[str, Any]:
    text = resources.files(__package__).joinpath(SCHEMA_NAME).read_text(encoding="utf-8")
    return json.loads(text)


def resolve_config_path(
    repo_root: Path,
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Pick the config file: ``--config``, then the env var, then the repo default."""
    raw = explicit or env.getenv(env.CONFIG_PATH, None, environ)
    if raw:
        path = Path(raw)
        path = path if path.is_absolute() else repo_root / path
        if not path.is_file():
            raise ConfigError(f"config file not found: {path}")
        return path
    default = repo_root / DEFAULT_CONFIG_REL
    return default if default.is_file() else None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"{path}: unable to read config: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: root must be mapping")
    return data


def validate_config(data: dict[str, Any], source: str) -> None:
    try:
        jsonschema.validate(data, load_schema())
    except jsonschema.ValidationError as exc:
        where = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ConfigError(f"{source}: invalid config at {where}: {exc.message}") from exc


def load_config(
    repo_root: Path,
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[BookConfig, Path | None]:
    path = resolve_config_path(repo_root, explicit, environ)
    if path is None:
        return BookConfig(), None
    data = _read_yaml(path)
    validate_config(data, str(path))
    return BookConfig(**data), path
