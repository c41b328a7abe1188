"""Errors raised around the image analysis flow and their user-facing messages."""


GENERIC_FAILURE_MESSAGE = "分析失败，请重试或联系客服"
AUTH_FAILURE_MESSAGE = "AI服务授权失败，请联系客服"
QUOTA_EXHAUSTED_MESSAGE = "AI服务请求次数已达上限，请稍后再试"
SERVICE_UNAVAILABLE_MESSAGE = "AI服务暂时不可用，请稍后再试"


class AnalysisError(Exception):
    pass


class InvalidImageError(AnalysisError):
    """Upload rejected; the message is shown to the user as is."""


class ClassifierUnavailableError(AnalysisError):
    """No usable image classifier (missing API key or SDK)."""


def user_message_for(exc: BaseException) -> str:
    if isinstance(exc, InvalidImageError):
        return str(exc)
    if isinstance(exc, ClassifierUnavailableError):
        return AUTH_FAILURE_MESSAGE

    text = str(exc)
    if "PERMISSION_DENIED" in text or "API key" in text:
        return AUTH_FAILURE_MESSAGE
    if "RESOURCE_EXHAUSTED" in text:
        return QUOTA_EXHAUSTED_MESSAGE
    if "UNAVAILABLE" in text or "DEADLINE_EXCEEDED" in text:
        return SERVICE_UNAVAILABLE_MESSAGE
    return GENERIC_FAILURE_MESSAGE
