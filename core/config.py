from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def _optional(raw: Optional[str]) -> Optional[str]:
    # An empty TOKEN_SECRET counts as unset.
    return raw or None


@dataclass(frozen=True)
class Settings:
    app_name: str = "Stream Token API"
    app_version: str = "0.1.0"
    allowed_origins: tuple[str, ...] = _split_origins(os.getenv("STREAM_ALLOWED_ORIGIN", "*"))
    token_secret: Optional[str] = _optional(os.getenv("TOKEN_SECRET"))
    token_ttl_seconds: int = 60
    max_tokens_per_minute: int = int(os.getenv("STREAM_RATE_LIMIT", "30"))
    log_level: str = os.getenv("STREAM_LOG_LEVEL", "INFO").upper()


settings = Settings()
