"""
Environment-backed settings.

Every value is read lazily so tests can tweak `os.environ` (or use
pytest's `monkeypatch.setenv`) without reloading modules.
"""

from __future__ import annotations

import os

DEFAULT_PORTS = (5000, 3000, 8080, 4000, 8000)
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def database_url() -> str:
    return _env_str("DATABASE_URL")


def db_pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(1, _env_int("DB_POOL_MAX_SIZE", 5))


def db_command_timeout() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", 30)


def storage_backend() -> str:
    return _env_str("STORAGE_BACKEND", "postgres").lower()


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def static_dir() -> str | None:
    return _env_str("STATIC_DIR") or None


def host() -> str:
    return _env_str("HOST", "0.0.0.0")


def candidate_ports() -> list[int]:
    # An explicit PORT disables the fallback list.
    port = _env_int("PORT", 0)
    if port > 0:
        return [port]
    return list(DEFAULT_PORTS)
