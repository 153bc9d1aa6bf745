"""
Shared fixtures: every contract test runs against both state backends.
"""

import pytest

from infoshare.core.backend import InMemoryStateBackend
from infoshare.core.sqlite_backend import SQLiteStateBackend


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path):
    """A fresh, empty state backend."""
    if request.param == "memory":
        return InMemoryStateBackend()
    return SQLiteStateBackend(str(tmp_path / "state.db"))


@pytest.fixture
def sqlite_backend(tmp_path):
    return SQLiteStateBackend(str(tmp_path / "state.db"))
