import os
import logging

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


PROVIDERS = ("mistral", "gemini", "mock")


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            # no secrets.toml present
            pass
    # Fallback to environment variables
    return os.environ.get(name, default)


class Settings:
    @property
    def classifier_provider(self) -> str:
        provider = (get_secret("CLASSIFIER_PROVIDER", "mistral") or "mistral").strip().lower()
        if provider not in PROVIDERS:
            logger.warning("Unknown CLASSIFIER_PROVIDER %r, using mistral.", provider)
            return "mistral"
        return provider

    @property
    def mistral_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY")

    @property
    def mistral_vision_model(self) -> str:
        return get_secret("MISTRAL_VISION_MODEL", "pixtral-large-latest") or "pixtral-large-latest"

    @property
    def gemini_api_key(self) -> str | None:
        return get_secret("GEMINI_API_KEY") or get_secret("GOOGLE_API_KEY")

    @property
    def gemini_model(self) -> str:
        return get_secret("GEMINI_MODEL", "gemini-2.5-pro") or "gemini-2.5-pro"

    @property
    def log_level(self) -> str:
        return (get_secret("LOG_LEVEL", "INFO") or "INFO").upper()
