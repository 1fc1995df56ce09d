"""Settings and logging setup tests."""

import logging

from task_api.core.config import Settings
from task_api.core.logging_utils import (
    RequestIdFilter,
    configure_logging,
    get_request_id,
    reset_request_id,
    set_request_id,
)


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "mysql+pymysql://appuser:apppassword@db:3306/IA_DB")
    monkeypatch.setenv("DB_POOL_SIZE", "5")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL.startswith("mysql+pymysql://")
    assert settings.DB_POOL_SIZE == 5
    assert settings.is_development is False


def test_settings_defaults(monkeypatch) -> None:
    for name in ("DATABASE_URL", "ENVIRONMENT", "API_V1_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.API_V1_PREFIX == "/api/v1"
    assert settings.DATABASE_URL.startswith("sqlite:///")
    assert settings.is_development is True


def test_request_id_filter() -> None:
    record = logging.LogRecord("task_api", logging.INFO, __file__, 1, "hello", None, None)
    RequestIdFilter().filter(record)
    assert record.request_id == "-"

    token = set_request_id("req-1")
    try:
        assert get_request_id() == "req-1"
        RequestIdFilter().filter(record)
        assert record.request_id == "req-1"
    finally:
        reset_request_id(token)
    assert get_request_id() is None


def test_configure_logging_adds_filter_once() -> None:
    configure_logging("DEBUG")
    configure_logging("INFO")
    for handler in logging.getLogger().handlers:
        assert sum(isinstance(f, RequestIdFilter) for f in handler.filters) == 1
