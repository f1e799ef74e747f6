"""Process configuration loaded from the environment (and an optional .env)."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

import dotenv

EXTRA_FIELD_POLICIES = ("ignore", "forbid")


@dataclass(frozen=True)
class Settings:
    # ignore: unknown keys in a payload are tolerated and carried through
    # forbid: unknown keys fail validation
    extra_fields: str = "ignore"
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    channel_maxsize: int = 100

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, env_file: Optional[str] = ".env") -> "Settings":
        if env_file:
            dotenv.load_dotenv(env_file)

        extra = os.environ.get("MSGCONTRACT_EXTRA_FIELDS", "ignore").strip().lower()
        if extra not in EXTRA_FIELD_POLICIES:
            raise ValueError(
                f"MSGCONTRACT_EXTRA_FIELDS must be one of {EXTRA_FIELD_POLICIES}, got {extra!r}"
            )

        level = os.environ.get("MSGCONTRACT_LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown MSGCONTRACT_LOG_LEVEL: {level!r}")

        raw_maxsize = os.environ.get("MSGCONTRACT_CHANNEL_MAXSIZE", "100")
        try:
            maxsize = int(raw_maxsize)
        except ValueError:
            raise ValueError(f"MSGCONTRACT_CHANNEL_MAXSIZE must be an integer, got {raw_maxsize!r}")
        if maxsize < 0:
            raise ValueError("MSGCONTRACT_CHANNEL_MAXSIZE must be >= 0")

        return cls(
            extra_fields=extra,
            log_level=level,
            log_dir=os.environ.get("MSGCONTRACT_LOG_DIR") or None,
            channel_maxsize=maxsize,
        )
