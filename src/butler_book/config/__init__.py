from __future__ import annotations

from .loader import DEFAULT_CONFIG_REL, load_config, resolve_config_path
from .model import BookConfig

__all__ = ["DEFAULT_CONFIG_REL", "BookConfig", "load_config", "resolve_config_path"]
