"""
Runtime configuration for the info record service.
All settings come from environment variables with local-first defaults.
"""

import os
from pathlib import Path

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/infoshare.db")

# State backend selection
STATE_BACKEND = os.getenv("STATE_BACKEND", "sqlite")  # sqlite|memory

# Debug flag enables interactive API docs
DEBUG = os.getenv("DEBUG", "true").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Version string
VERSION = "1.0.0"

VALID_BACKENDS = ["sqlite", "memory"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def get_db_path() -> str:
    """Get the SQLite database path, honoring late environment changes."""
    return os.getenv("DB_PATH", DB_PATH)


def get_state_backend_name() -> str:
    """Get configured state backend name (sqlite|memory)."""
    return os.getenv("STATE_BACKEND", STATE_BACKEND).lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", LOG_LEVEL).upper()


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def get_state_backend():
    """Build the configured state backend implementation."""
    name = get_state_backend_name()

    if name == "memory":
        from .backend import InMemoryStateBackend
        return InMemoryStateBackend()
    elif name == "sqlite":
        from .sqlite_backend import SQLiteStateBackend
        return SQLiteStateBackend(get_db_path())
    else:
        raise ValueError(f"Invalid STATE_BACKEND: {name}")


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if get_state_backend_name() not in VALID_BACKENDS:
        issues.append(f"Invalid STATE_BACKEND: {get_state_backend_name()}")

    if get_log_level() not in VALID_LOG_LEVELS:
        issues.append(f"Invalid LOG_LEVEL: {get_log_level()}")

    if get_state_backend_name() == "sqlite" and not get_db_path().strip():
        issues.append("DB_PATH must be set when STATE_BACKEND=sqlite")

    return issues
