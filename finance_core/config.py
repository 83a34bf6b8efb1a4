"""Runtime settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

DEFAULT_EXPORT_DIR = "exports"
DEV_ENVIRONMENTS = {"dev", "development"}


@dataclass(frozen=True)
class Settings:
    export_dir: Path = Path(DEFAULT_EXPORT_DIR)
    log_level: str = "INFO"
    env_name: str = "prod"
    allowed_origins: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_dev(self) -> bool:
        return self.env_name in DEV_ENVIRONMENTS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        raw_origins = env.get("FINANCE_TRACKER_ALLOWED_ORIGINS", "")
        origins = tuple(origin.strip() for origin in raw_origins.split(",") if origin.strip())
        return cls(
            export_dir=Path(env.get("FINANCE_TRACKER_EXPORT_DIR") or DEFAULT_EXPORT_DIR),
            log_level=(env.get("FINANCE_TRACKER_LOG_LEVEL") or "INFO").strip().upper(),
            env_name=(env.get("FINANCE_TRACKER_ENV") or "prod").strip().lower(),
            allowed_origins=origins,
        )

    def override(self, **changes: object) -> "Settings":
        """Return a copy with non-None command-line values applied."""
        cleaned = {k: v for k, v in changes.items() if v is not None}
        if "export_dir" in cleaned:
            cleaned["export_dir"] = Path(cleaned["export_dir"])
        return replace(self, **cleaned)
