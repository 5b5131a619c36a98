"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    """Read a non-negative integer setting, rejecting garbage early."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "habitcore"
    DB_FILENAME = "habitcore.db"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITCORE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITCORE_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_GRACE_DAYS = _env_int("HABITCORE_DEFAULT_GRACE_DAYS", 1)
        self.MILESTONE_INTERVAL = _env_int("HABITCORE_MILESTONE_INTERVAL", 7, minimum=1)
        self.HISTORY_LIMIT = _env_int("HABITCORE_HISTORY_LIMIT", 90, minimum=1)

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the database and logs."""

        data_root = os.getenv("HABITCORE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


__all__ = ["BaseConfig"]
