import logging
import random
import time

from src.application.errors import ClassifierUnavailableError
from src.application.ports import ImageClassifierPort
from src.domain.models import UploadedImage
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


# Errors that will not go away on a retry
_PERMANENT_MARKERS = ("PERMISSION_DENIED", "API key", "INVALID_ARGUMENT")


def _retry(func, times: int = 3, base: float = 1.0):
    for i in range(times):
        try:
            return func()
        except Exception as e:
            if i == times - 1 or any(marker in str(e) for marker in _PERMANENT_MARKERS):
                raise
            logger.warning("Gemini call failed (attempt %d/%d): %s", i + 1, times, e)
            time.sleep(base * (2 ** i) + random.random() * 0.2)


class GeminiImageClassifierAdapter(ImageClassifierPort):
    def __init__(self, settings: Settings | None = None, retries: int = 3, backoff: float = 1.0):
        self.settings = settings or Settings()
        self.retries = retries
        self.backoff = backoff
        self._client = None
        self._model = self.settings.gemini_model
        self._init_client()

    def _init_client(self):
        api_key = self.settings.gemini_api_key
        if not api_key:
            logger.error("Gemini API key is missing.")
            self._client = None
            return
        try:
            from google import genai
            self._client = genai.Client(api_key=api_key)
        except Exception as e:
            logger.exception("Failed to initialize Gemini client: %s", e)
            self._client = None

    def classify_image(self, image: UploadedImage, prompt: str) -> str:
        if not self._client:
            raise ClassifierUnavailableError("Gemini client not initialized (missing API key or import error)")

        from google.genai import types as genai_types

        contents = [
            genai_types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
            prompt,
        ]

        def _do_req():
            resp = self._client.models.generate_content(model=self._model, contents=contents)
            return getattr(resp, "text", None) or ""

        try:
            return _retry(_do_req, times=self.retries, base=self.backoff)
        except Exception as e:
            logger.exception("Gemini vision call failed: %s", e)
            raise
