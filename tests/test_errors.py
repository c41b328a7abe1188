"""Unit tests for user-facing error messages."""
import pytest

from src.application.errors import (
    AUTH_FAILURE_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    QUOTA_EXHAUSTED_MESSAGE,
    SERVICE_UNAVAILABLE_MESSAGE,
    ClassifierUnavailableError,
    InvalidImageError,
    user_message_for,
)


@pytest.mark.parametrize("exc,expected", [
    (InvalidImageError("仅支持JPG/PNG图片格式"), "仅支持JPG/PNG图片格式"),
    (ClassifierUnavailableError("no key"), AUTH_FAILURE_MESSAGE),
    (RuntimeError("403 PERMISSION_DENIED. Caller lacks access"), AUTH_FAILURE_MESSAGE),
    (RuntimeError("API key not valid. Please pass a valid API key."), AUTH_FAILURE_MESSAGE),
    (RuntimeError("429 RESOURCE_EXHAUSTED"), QUOTA_EXHAUSTED_MESSAGE),
    (RuntimeError("503 UNAVAILABLE: model overloaded"), SERVICE_UNAVAILABLE_MESSAGE),
    (TimeoutError("504 DEADLINE_EXCEEDED"), SERVICE_UNAVAILABLE_MESSAGE),
    (ValueError("something else"), GENERIC_FAILURE_MESSAGE),
    (Exception(), GENERIC_FAILURE_MESSAGE),
])
def test_user_message_for(exc, expected):
    assert user_message_for(exc) == expected
