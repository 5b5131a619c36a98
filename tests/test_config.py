"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from habitcore.config import BaseConfig

ENV_VARS = (
    "HABITCORE_DATABASE_URL",
    "HABITCORE_DEV_MODE",
    "HABITCORE_DEFAULT_GRACE_DAYS",
    "HABITCORE_MILESTONE_INTERVAL",
    "HABITCORE_HISTORY_LIMIT",
)


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HABITCORE_DATA_DIR", str(tmp_path / "data"))


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'habitcore.db'}"
    assert config.DEV_MODE is True
    assert config.DEFAULT_GRACE_DAYS == 1
    assert config.MILESTONE_INTERVAL == 7
    assert config.HISTORY_LIMIT == 90


def test_overrides(monkeypatch):
    monkeypatch.setenv("HABITCORE_DATABASE_URL", "postgresql://habits@localhost/habits")
    monkeypatch.setenv("HABITCORE_DEV_MODE", "false")
    monkeypatch.setenv("HABITCORE_DEFAULT_GRACE_DAYS", "0")
    monkeypatch.setenv("HABITCORE_MILESTONE_INTERVAL", "30")

    config = BaseConfig()

    assert config.DEV_MODE is False
    assert config.DEFAULT_GRACE_DAYS == 0
    assert config.MILESTONE_INTERVAL == 30
    assert config.sqlalchemy_engine_options() == {"pool_pre_ping": True}


def test_sqlite_engine_options():
    assert BaseConfig().sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


@pytest.mark.parametrize(
    "name,value",
    [
        ("HABITCORE_DEFAULT_GRACE_DAYS", "a few"),
        ("HABITCORE_DEFAULT_GRACE_DAYS", "-1"),
        ("HABITCORE_MILESTONE_INTERVAL", "0"),
        ("HABITCORE_HISTORY_LIMIT", "0"),
    ],
)
def test_invalid_integers_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        BaseConfig()

