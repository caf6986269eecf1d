"""
Tests for Settings (environment configuration) and structured logging
"""

import json
import logging

import pytest
from pydantic import ValidationError

from src.config import Settings, get_settings
from src.core.math.bonding_curve import CurveConfig
from src.observability import JSONFormatter, setup_logging


# =============================================================================
# SETTINGS
# =============================================================================


class TestSettings:
    """Tests for Settings / get_settings"""

    def test_defaults_match_curve(self, monkeypatch) -> None:
        for name in ("BASE_PRICE", "SLOPE", "MAX_QUOTE_STEPS", "FOUNDER_ALLOCATION"):
            monkeypatch.delenv(f"TOKENOMICS_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert CurveConfig.from_settings(settings) == CurveConfig()
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"

    def test_env_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("TOKENOMICS_SLOPE", "0.0002")
        monkeypatch.setenv("TOKENOMICS_FOUNDER_ALLOCATION", "250")
        settings = Settings(_env_file=None)
        assert settings.slope == 0.0002
        assert settings.founder_allocation == 250

    def test_invalid_env_value(self, monkeypatch) -> None:
        monkeypatch.setenv("TOKENOMICS_BASE_PRICE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_cached(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


# =============================================================================
# LOGGING
# =============================================================================


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="src.registry.project_registry",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="buy: %d tokens",
        args=(290,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter"""

    def test_base_fields(self) -> None:
        payload = json.loads(JSONFormatter().format(_record()))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "src.registry.project_registry"
        assert payload["message"] == "buy: 290 tokens"
        assert "timestamp" in payload

    def test_engine_ids_included(self) -> None:
        payload = json.loads(JSONFormatter().format(
            _record(project_id="p1", user_id="u_alice", error_code="CAP_REACHED")
        ))
        assert payload["project_id"] == "p1"
        assert payload["user_id"] == "u_alice"
        assert payload["error_code"] == "CAP_REACHED"
        assert "offer_id" not in payload

    def test_none_ids_omitted(self) -> None:
        payload = json.loads(JSONFormatter().format(_record(user_id=None)))
        assert "user_id" not in payload


class TestSetupLogging:
    """Tests for setup_logging"""

    @pytest.fixture(autouse=True)
    def _restore_root(self):
        handlers = list(logging.root.handlers)
        level = logging.root.level
        yield
        for handler in logging.root.handlers[:]:
            if handler not in handlers:
                logging.root.removeHandler(handler)
        logging.root.setLevel(level)

    def test_json_handler(self) -> None:
        handler = setup_logging("DEBUG", "json")
        assert isinstance(handler.formatter, JSONFormatter)
        assert handler in logging.root.handlers
        assert logging.root.level == logging.DEBUG

    def test_text_handler(self) -> None:
        handler = setup_logging("INFO", "text")
        assert not isinstance(handler.formatter, JSONFormatter)

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("CHATTY")
        assert logging.root.level == logging.INFO
