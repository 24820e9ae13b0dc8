# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from kapa_alerts.config import DEFAULT_KAPACITOR_URL, KapacitorConfig, Settings

_VARS = [
    "KAPA_ALERTS_KAPACITOR_URL",
    "KAPACITOR_URL",
    "KAPA_ALERTS_KAPACITOR_USERNAME",
    "KAPACITOR_USERNAME",
    "KAPA_ALERTS_KAPACITOR_PASSWORD",
    "KAPACITOR_PASSWORD",
    "KAPA_ALERTS_KAPACITOR_TIMEOUT_SECONDS",
    "KAPA_ALERTS_KAPACITOR_PAGE_SIZE",
    "KAPA_ALERTS_DATA_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    cfg = s.kapacitor()
    assert cfg.url == DEFAULT_KAPACITOR_URL
    assert cfg.auth is None
    assert cfg.page_size == 100
    assert s.data_dir == Path(".local/kapa-alerts")


def test_prefixed_vars_win_over_plain(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KAPACITOR_URL", "http://plain:9092")
    monkeypatch.setenv("KAPA_ALERTS_KAPACITOR_URL", "http://prefixed:9092")
    monkeypatch.setenv("KAPACITOR_USERNAME", "kapa")
    monkeypatch.setenv("KAPACITOR_PASSWORD", "secret")

    cfg = Settings.from_env().kapacitor()
    assert cfg.url == "http://prefixed:9092"
    assert cfg.auth == ("kapa", "secret")


def test_bad_numbers_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KAPA_ALERTS_KAPACITOR_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("KAPA_ALERTS_KAPACITOR_PAGE_SIZE", "-3")

    cfg = Settings.from_env().kapacitor()
    assert cfg.timeout_seconds == 10.0
    assert cfg.page_size == 100


def test_password_without_username_means_no_auth() -> None:
    assert KapacitorConfig(password="secret").auth is None
