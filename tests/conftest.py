"""Shared pytest fixtures for investment tracker tests."""

import pytest

import investment_tracker.core.config as configmod
import investment_tracker.data.database as dbmod
from investment_tracker.data.database import get_db, set_db_path


@pytest.fixture(autouse=True)
def isolated_db(tmp_path):
    """Each test gets a fresh temp DB. Resets the global singleton after."""
    db_path = tmp_path / "test.db"
    set_db_path(str(db_path))
    db = get_db()
    yield db
    db.close()
    dbmod._db = None


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config.json at the temp dir and clear the cached config."""
    config_path = tmp_path / "config.json"
    monkeypatch.setattr(configmod, "_config_path", lambda: config_path)
    configmod.reset_config_cache()
    yield config_path
    configmod.reset_config_cache()
