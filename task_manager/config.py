from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

ENV_PREFIX = "TASKS"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


@dataclass(frozen=True)
class Settings:
    app_name: str
    environment: str
    database_url: str
    log_level: str
    host: str
    port: int
    cors_origins: List[str]

    @property
    def debug(self) -> bool:
        return self.environment == "development"


def load_settings() -> Settings:
    """Read settings from ``TASKS_*`` environment variables."""
    return Settings(
        app_name=_env(_k("APP_NAME"), "Caseworker Task Manager API"),
        environment=_env(_k("ENV"), "development").lower(),
        database_url=_env(_k("DATABASE_URL"), "sqlite:///./data/tasks.db"),
        log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
        host=_env(_k("HOST"), "127.0.0.1"),
        port=_env_int(_k("PORT"), 8000),
        cors_origins=_env_list(_k("CORS_ORIGINS"), ["*"]),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
