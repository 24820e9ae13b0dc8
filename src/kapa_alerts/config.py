# src/kapa_alerts/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Connection parameters handed to the orchestrator as an immutable KapacitorConfig.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "KAPA_ALERTS"

DEFAULT_KAPACITOR_URL = "http://localhost:9092"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_PAGE_SIZE = 100


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class KapacitorConfig:
    """Connection parameters for one Kapacitor instance."""

    url: str = DEFAULT_KAPACITOR_URL
    # Empty username => no authentication is attempted.
    username: str = ""
    password: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def auth(self) -> tuple[str, str] | None:
        if not self.username:
            return None
        return (self.username, self.password)


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Kapacitor ----
    kapacitor_url: str
    kapacitor_username: str
    kapacitor_password: str
    kapacitor_timeout_seconds: float
    kapacitor_page_size: int

    def kapacitor(self) -> KapacitorConfig:
        return KapacitorConfig(
            url=self.kapacitor_url,
            username=self.kapacitor_username,
            password=self.kapacitor_password,
            timeout_seconds=self.kapacitor_timeout_seconds,
            page_size=self.kapacitor_page_size,
        )

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "kapa-alerts")
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/kapa-alerts"))

        # Accept the unprefixed KAPACITOR_* names too; they are common in deployments.
        kapacitor_url = (
            _first_env(_k("KAPACITOR_URL"), "KAPACITOR_URL", default=DEFAULT_KAPACITOR_URL)
            or DEFAULT_KAPACITOR_URL
        ).strip()
        kapacitor_username = (
            _first_env(_k("KAPACITOR_USERNAME"), "KAPACITOR_USERNAME", default="") or ""
        ).strip()
        kapacitor_password = _first_env(_k("KAPACITOR_PASSWORD"), "KAPACITOR_PASSWORD", default="") or ""

        timeout = _env_float(_k("KAPACITOR_TIMEOUT_SECONDS"), DEFAULT_TIMEOUT_SECONDS)
        if timeout <= 0:
            timeout = DEFAULT_TIMEOUT_SECONDS
        page_size = _env_int(_k("KAPACITOR_PAGE_SIZE"), DEFAULT_PAGE_SIZE)
        if page_size <= 0:
            page_size = DEFAULT_PAGE_SIZE

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            kapacitor_url=kapacitor_url,
            kapacitor_username=kapacitor_username,
            kapacitor_password=kapacitor_password,
            kapacitor_timeout_seconds=timeout,
            kapacitor_page_size=page_size,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load settings once (reads .env on first call, never overriding the real environment)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
