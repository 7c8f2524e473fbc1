"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

DEFAULT_UPSTREAM_URL = "https://api.hirefraction.com/api/test/baseball"
DEFAULT_CACHE_TTL = 5 * 60.0
DEFAULT_UPSTREAM_TIMEOUT = 10.0
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "scoutbook.sqlite"

_UPSTREAM_URL_ENV = "SCOUTBOOK_UPSTREAM_URL"
_CACHE_TTL_ENV = "SCOUTBOOK_CACHE_TTL"
_UPSTREAM_TIMEOUT_ENV = "SCOUTBOOK_UPSTREAM_TIMEOUT"
_DB_PATH_ENV = "SCOUTBOOK_DB_PATH"
_OPENAI_KEY_ENV = "OPENAI_API_KEY"
_OPENAI_MODEL_ENV = "SCOUTBOOK_OPENAI_MODEL"


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip()
    return raw or default


@dataclass(frozen=True)
class Settings:
    upstream_url: str = DEFAULT_UPSTREAM_URL
    cache_ttl: float = DEFAULT_CACHE_TTL
    upstream_timeout: float = DEFAULT_UPSTREAM_TIMEOUT
    db_path: Path | str = DEFAULT_DB_PATH
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL

    @classmethod
    def from_env(cls) -> "Settings":
        db_raw = _env_str(_DB_PATH_ENV)
        if db_raw is None:
            db_path: Path | str = DEFAULT_DB_PATH
        elif db_raw.startswith("file:"):
            db_path = db_raw
        else:
            db_path = Path(db_raw)
        return cls(
            upstream_url=_env_str(_UPSTREAM_URL_ENV, DEFAULT_UPSTREAM_URL) or DEFAULT_UPSTREAM_URL,
            cache_ttl=_env_float(_CACHE_TTL_ENV, DEFAULT_CACHE_TTL, clamp_min=0.0),
            upstream_timeout=_env_float(_UPSTREAM_TIMEOUT_ENV, DEFAULT_UPSTREAM_TIMEOUT, clamp_min=0.1),
            db_path=db_path,
            openai_api_key=_env_str(_OPENAI_KEY_ENV),
            openai_model=_env_str(_OPENAI_MODEL_ENV, DEFAULT_OPENAI_MODEL) or DEFAULT_OPENAI_MODEL,
        )
