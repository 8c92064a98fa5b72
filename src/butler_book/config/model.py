from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any


@dataclass(frozen=True)
class BookConfig:
    npm: str = "npm"
    gitbook: str = "gitbook"
    gsutil: str = "gsutil"
    toolchain_package: str = "gitbook-cli"
    docs_dir: str = "docs"
    output_dir: str = "docs/_book"
    bucket: str = "gs://docs.itch.ovh"
    product: str = "butler"
    acl: str = "public-read"
    # gitbook-cli's bundled npm breaks on CI file systems without this pin,
    # see GitbookIO/gitbook-cli#110
    compat_package: str = "graceful-fs"
    compat_version: str = "4.1.4"
    nested_modules_path: str = "lib/node_modules/gitbook-cli/node_modules/npm/node_modules"
    timeout_seconds: int = 0

    @property
    def compat_spec(self) -> str:
        return f"{self.compat_package}@{self.compat_version}"

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_overrides(self, **overrides: Any) -> "BookConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
