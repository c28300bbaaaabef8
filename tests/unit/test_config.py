"""Configuration tests."""

import pytest

from uiforge.core import ProviderKind, Settings, get_settings


@pytest.mark.unit
def test_settings_defaults(monkeypatch):
    for name in ("UIFORGE_PROVIDER", "UIFORGE_LOG_LEVEL", "UIFORGE_OPENAI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.port == 3001
    assert settings.provider is ProviderKind.GEMINI
    assert settings.gemini_model == "gemini-2.0-flash"
    assert settings.max_attempts == 3
    assert settings.backoff_base_seconds == 5.0
    assert settings.max_prompt_length == 5000
    assert settings.excerpt_length == 500
    assert settings.log_level == "INFO"


@pytest.mark.unit
def test_env_prefix(monkeypatch):
    monkeypatch.setenv("UIFORGE_PROVIDER", "openai")
    monkeypatch.setenv("UIFORGE_MAX_ATTEMPTS", "5")
    settings = Settings(_env_file=None)
    assert settings.provider is ProviderKind.OPENAI
    assert settings.max_attempts == 5


@pytest.mark.unit
def test_gemini_key_falls_back_to_google_env(monkeypatch):
    monkeypatch.delenv("UIFORGE_GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GOOGLE_AI_API_KEY", "from-google-env")
    assert Settings(_env_file=None).gemini_api_key == "from-google-env"


@pytest.mark.unit
def test_settings_validation():
    assert Settings(temperature=0.5).temperature == 0.5

    with pytest.raises(Exception):
        Settings(temperature=3.0)

    with pytest.raises(Exception):
        Settings(max_attempts=0)

    with pytest.raises(Exception):
        Settings(provider="llama")


@pytest.mark.unit
def test_get_settings_is_cached():
    assert get_settings() is get_settings()


@pytest.mark.unit
def test_log_level_normalized_and_checked():
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(Exception):
        Settings(log_level="chatty")


@pytest.mark.unit
def test_allowed_origins_split():
    assert Settings().allowed_origins == ["*"]
    settings = Settings(cors_origins="http://localhost:5173, https://app.test ,")
    assert settings.allowed_origins == ["http://localhost:5173", "https://app.test"]
