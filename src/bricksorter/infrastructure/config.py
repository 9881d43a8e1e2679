"""Runtime settings, read from the environment (and a ``.env`` file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://rebrickable.com/api/v3/lego"


@dataclass(frozen=True)
class Settings:
    db_path: Path
    rebrickable_api_key: str | None
    rebrickable_base_url: str = DEFAULT_BASE_URL
    http_timeout: float = 10.0
    log_level: str = "WARNING"


def get_settings() -> Settings:
    """Build settings from the current environment.

    Values already present in the environment win over ``.env``.
    """
    load_dotenv()
    return Settings(
        db_path=Path(os.getenv("BRICKSORTER_DB", "bricks.db")),
        rebrickable_api_key=os.getenv("REBRICKABLE_API_KEY") or None,
        rebrickable_base_url=os.getenv("REBRICKABLE_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        http_timeout=float(os.getenv("BRICKSORTER_HTTP_TIMEOUT", "10")),
        log_level=os.getenv("BRICKSORTER_LOG_LEVEL", "WARNING").upper(),
    )
