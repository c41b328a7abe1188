"""Unit tests for settings lookup."""
import pytest

from src.infrastructure.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CLASSIFIER_PROVIDER",
        "MISTRAL_API_KEY",
        "MISTRAL_VISION_MODEL",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "GEMINI_MODEL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()
    assert settings.classifier_provider == "mistral"
    assert settings.mistral_api_key is None
    assert settings.mistral_vision_model == "pixtral-large-latest"
    assert settings.gemini_api_key is None
    assert settings.gemini_model == "gemini-2.5-pro"
    assert settings.log_level == "INFO"


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("CLASSIFIER_PROVIDER", " Gemini ")
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.0-flash")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings()
    assert settings.classifier_provider == "gemini"
    assert settings.gemini_api_key == "g-key"
    assert settings.gemini_model == "gemini-2.0-flash"
    assert settings.log_level == "DEBUG"


def test_google_api_key_is_accepted(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
    assert Settings().gemini_api_key == "google-key"


def test_unknown_provider_uses_mistral(monkeypatch):
    monkeypatch.setenv("CLASSIFIER_PROVIDER", "openai")
    assert Settings().classifier_provider == "mistral"
