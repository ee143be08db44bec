"""Tests for environment-based configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from financify.config import (
    AppSettings,
    GeminiSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test away from any real .env file and with no AI keys set."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GEMINI_API_KEY", "API_KEY", "GEMINI_MODEL_NAME", "GEMINI_TEMPERATURE",
        "GEMINI_MAX_TOKENS", "CURRENCY", "DATA_FILE", "CHAT_TRANSACTION_LIMIT",
        "DEBUG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGeminiSettings:
    """Tests for the Gemini settings."""

    def test_reads_prefixed_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        settings = GeminiSettings()
        assert settings.api_key == "secret"
        assert settings.model_name == "gemini-2.5-flash"
        assert settings.temperature == 0.4

    def test_reads_plain_api_key(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "plain")
        assert GeminiSettings().api_key == "plain"

    def test_missing_key_fails(self):
        with pytest.raises(ValidationError):
            GeminiSettings()

    def test_empty_key_fails(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "")
        with pytest.raises(ValidationError):
            GeminiSettings()

    def test_temperature_bounds(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        monkeypatch.setenv("GEMINI_TEMPERATURE", "1.5")
        with pytest.raises(ValidationError):
            GeminiSettings()

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("GEMINI_API_KEY=from-file\n", encoding="utf-8")
        assert GeminiSettings().api_key == "from-file"


class TestAppSettings:
    """Tests for the application settings."""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.currency == "USD"
        assert settings.data_file is None
        assert settings.chat_transaction_limit == 50
        assert settings.debug_mode is False

    def test_currency_uppercased(self, monkeypatch):
        monkeypatch.setenv("CURRENCY", "gbp")
        assert AppSettings().currency == "GBP"

    def test_data_file_expands_user(self, monkeypatch):
        monkeypatch.setenv("DATA_FILE", "~/finances.json")
        assert AppSettings().data_file == Path("~/finances.json").expanduser()

    def test_chat_limit_bounds(self, monkeypatch):
        monkeypatch.setenv("CHAT_TRANSACTION_LIMIT", "0")
        with pytest.raises(ValidationError):
            AppSettings()


class TestValidateAllSettings:
    """Tests for the settings page status check."""

    def test_reports_missing_gemini_key(self):
        status = validate_all_settings()
        assert status["gemini"] is False
        assert "gemini_error" in status
        assert status["app"] is True

    def test_all_configured(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        status = validate_all_settings()
        assert status == {"gemini": True, "app": True}
