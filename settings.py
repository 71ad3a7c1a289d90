"""
Runtime settings.

Values come from the process environment, optionally seeded from a `.env`
file in the project root. Nothing here talks to the network; Supabase
credentials are only checked when the Supabase client is first built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from domain.time import DEFAULT_BUSINESS_TIMEZONE

# Look for .env next to this file (project root)
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)

STORAGE_BACKENDS: Tuple[str, ...] = ("supabase", "memory")


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    storage_backend: str = "supabase"
    business_timezone: str = DEFAULT_BUSINESS_TIMEZONE
    stock_conflict_attempts: int = 3
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise RuntimeError(
                f"Invalid POS_STORAGE_BACKEND: {self.storage_backend!r}. "
                f"Expected one of: {', '.join(STORAGE_BACKENDS)}."
            )
        if self.stock_conflict_attempts < 1:
            raise RuntimeError("POS_STOCK_CONFLICT_ATTEMPTS must be at least 1.")


def _split_csv(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def load_settings() -> Settings:
    """Read settings from the environment."""

    attempts_raw = os.getenv("POS_STOCK_CONFLICT_ATTEMPTS", "3")
    try:
        attempts = int(attempts_raw)
    except ValueError:
        raise RuntimeError(
            f"POS_STOCK_CONFLICT_ATTEMPTS must be an integer, got {attempts_raw!r}."
        ) from None

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        storage_backend=os.getenv("POS_STORAGE_BACKEND", "supabase").strip().lower(),
        business_timezone=os.getenv("POS_BUSINESS_TIMEZONE", DEFAULT_BUSINESS_TIMEZONE),
        stock_conflict_attempts=attempts,
        cors_origins=_split_csv(os.getenv("POS_CORS_ORIGINS", "*")) or ("*",),
        log_level=os.getenv("POS_LOG_LEVEL", "INFO").upper(),
    )


__all__ = ["Settings", "load_settings", "STORAGE_BACKENDS"]
