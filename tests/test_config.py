"""
Tests for settings loading and engine setup.
"""

import pytest
from sqlalchemy import inspect

import config
import db_engine
from services import context_from_settings


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Reload settings from a controlled environment, restoring afterwards."""
    monkeypatch.chdir(tmp_path)  # no stray .env
    yield monkeypatch
    config._settings = None
    db_engine.reset_engine()


def test_defaults(clean_settings):
    settings = config.reload_settings()

    assert settings.database_url == "sqlite:///invest_track.db"
    assert settings.is_sqlite
    assert settings.default_broker_fee_percent == 5.0
    assert settings.long_term_threshold_days == 365
    assert settings.fiscal_year_start_month == 4
    assert settings.user_id is None


def test_environment_overrides(clean_settings):
    clean_settings.setenv("USER_ID", "alice")
    clean_settings.setenv("CURRENCY_SYMBOL", "$")
    clean_settings.setenv("LONG_TERM_THRESHOLD_DAYS", "730")

    settings = config.reload_settings()

    assert settings.user_id == "alice"
    assert settings.currency_symbol == "$"
    assert settings.long_term_threshold_days == 730
    assert context_from_settings().user_id == "alice"
    assert context_from_settings("bob").user_id == "bob"


def test_init_db_creates_tables(clean_settings, tmp_path):
    clean_settings.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    config.reload_settings()
    db_engine.reset_engine()

    db_engine.init_db()

    tables = inspect(db_engine.get_engine()).get_table_names()
    assert "investment" in tables
    assert "transaction" in tables
