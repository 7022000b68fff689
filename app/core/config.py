from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    upload_rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    history_storage_backend: str
    history_db_path: str
    history_storage_key: str
    history_max_items: int
    analysis_delay_seconds: float
    humanize_delay_seconds: float
    min_text_chars: int
    upload_size_hint_mb: int
    max_upload_bytes: int
    random_seed: int | None


def _get_random_seed() -> int | None:
    raw = _get_env("RANDOM_SEED", None)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


settings = Settings(
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    upload_rate_limit=_get_env("UPLOAD_RATE_LIMIT", "20/minute") or "20/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    history_storage_backend=(_get_env("HISTORY_STORAGE_BACKEND", "sqlite") or "sqlite").strip().lower(),
    history_db_path=_get_env("HISTORY_DB_PATH", "data/session_store.db") or "data/session_store.db",
    history_storage_key=_get_env("HISTORY_STORAGE_KEY", "resume_guard_history") or "resume_guard_history",
    history_max_items=_get_env_int("HISTORY_MAX_ITEMS", 0),
    analysis_delay_seconds=_get_env_float("ANALYSIS_DELAY_SECONDS", 1.5),
    humanize_delay_seconds=_get_env_float("HUMANIZE_DELAY_SECONDS", 2.0),
    min_text_chars=_get_env_int("MIN_TEXT_CHARS", 50),
    upload_size_hint_mb=_get_env_int("UPLOAD_SIZE_HINT_MB", 5),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 0),
    random_seed=_get_random_seed(),
)

if settings.history_storage_backend not in {"sqlite", "memory"}:
    raise RuntimeError("HISTORY_STORAGE_BACKEND must be either 'sqlite' or 'memory'.")

if settings.history_max_items < 0:
    raise RuntimeError("HISTORY_MAX_ITEMS must be 0 (unbounded) or a positive integer.")
