"""Environment-driven settings for HabitFlow."""

from __future__ import annotations

import os
from dataclasses import dataclass


FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    tick_interval: float = 1.0
    seed: bool = True
    username: str = ""
    password: str = ""
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def auth_enabled(self) -> bool:
        return bool(self.username and self.password)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> Settings:
    """Read HABITFLOW_* environment variables into a Settings object."""
    return Settings(
        log_level=(os.environ.get("HABITFLOW_LOG_LEVEL", "") or "WARNING").strip().upper(),
        tick_interval=_env_float("HABITFLOW_TICK_INTERVAL", 1.0),
        seed=os.environ.get("HABITFLOW_SEED", "1").strip().lower() not in FALSY,
        username=os.environ.get("HABITFLOW_USERNAME", ""),
        password=os.environ.get("HABITFLOW_PASSWORD", ""),
        host=os.environ.get("HABITFLOW_HOST", "") or "127.0.0.1",
        port=_env_int("HABITFLOW_PORT", 8000),
    )
