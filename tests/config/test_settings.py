# tests/config/test_settings.py
from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from peerboard.config.settings import Environment, Settings, get_settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "ENVIRONMENT",
        "LOG_LEVEL",
        "PEERBOARD_NO_DATA_MARKER",
        "PEERBOARD_CURRENCY_SYMBOL",
        "PEERBOARD_MAX_FORMULA_LENGTH",
        "PEERBOARD_EXPORT_SHEET_NAME",
    ):
        monkeypatch.delenv(key, raising=False)

    s = Settings(_env_file=None)  # type: ignore[call-arg]

    assert s.environment is Environment.DEVELOPMENT
    assert s.log_level == "INFO"
    assert s.no_data_marker == "N/A"
    assert s.currency_symbol == "$"
    assert s.max_formula_length == 2000
    assert s.export_sheet_name == "Comparison"


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings should hydrate deterministically from environment variables."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PEERBOARD_NO_DATA_MARKER", "n/a")
    monkeypatch.setenv("PEERBOARD_MAX_FORMULA_LENGTH", "500")

    s = Settings()

    assert s.environment == Environment.TEST
    assert s.log_level == "DEBUG"
    assert s.no_data_marker == "n/a"
    assert s.max_formula_length == 500


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_formula_length": 0},
        {"max_formula_length": 100_001},
        {"export_sheet_name": "x" * 32},
        {"no_data_marker": ""},
        {"log_level": "chatty"},
    ],
)
def test_settings_reject_out_of_range_values(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_settings_forbid_extra_fields() -> None:
    """Model should reject unexpected fields."""
    with pytest.raises(ValidationError):
        Settings.model_validate({"environment": "test", "unexpected_field": "boom"})


def test_get_settings_is_cached_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="peerboard.config.settings"):
        first = get_settings()
        second = get_settings()

    assert first is second
    assert [r.getMessage() for r in caplog.records].count("Settings initialized") == 1


def test_get_settings_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PEERBOARD_MAX_FORMULA_LENGTH", "-1")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        get_settings()
