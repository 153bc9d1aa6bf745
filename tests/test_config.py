"""
Configuration tests.
"""

import pytest

from infoshare.core import config
from infoshare.core.backend import InMemoryStateBackend
from infoshare.core.sqlite_backend import SQLiteStateBackend


def test_memory_backend_from_environment(monkeypatch):
    monkeypatch.setenv("STATE_BACKEND", "memory")
    assert isinstance(config.get_state_backend(), InMemoryStateBackend)


def test_sqlite_backend_creates_database_directory(monkeypatch, tmp_path):
    db_path = tmp_path / "nested" / "dir" / "state.db"
    monkeypatch.setenv("STATE_BACKEND", "SQLite")
    monkeypatch.setenv("DB_PATH", str(db_path))

    backend = config.get_state_backend()

    assert isinstance(backend, SQLiteStateBackend)
    assert db_path.exists()


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("STATE_BACKEND", "couchdb")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    with pytest.raises(ValueError):
        config.get_state_backend()
    assert config.validate_config() == ["Invalid STATE_BACKEND: couchdb"]


def test_validate_config_log_level(monkeypatch):
    monkeypatch.setenv("STATE_BACKEND", "memory")
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    assert config.validate_config() == ["Invalid LOG_LEVEL: CHATTY"]


def test_debug_flag_is_read_dynamically(monkeypatch):
    monkeypatch.setenv("DEBUG", "false")
    assert config.debug_enabled() is False
    monkeypatch.setenv("DEBUG", "TRUE")
    assert config.debug_enabled() is True
