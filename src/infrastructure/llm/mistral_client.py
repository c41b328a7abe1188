import logging

from src.application.errors import ClassifierUnavailableError
from src.application.ports import ImageClassifierPort
from src.domain.models import UploadedImage
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


class MistralImageClassifierAdapter(ImageClassifierPort):
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._client = None
        self._model = self.settings.mistral_vision_model
        self._init_client()

    def _init_client(self):
        api_key = self.settings.mistral_api_key
        if not api_key:
            logger.error("Mistral API key is missing.")
            self._client = None
            return
        try:
            from mistralai import Mistral
            self._client = Mistral(api_key=api_key)
        except Exception as e:
            logger.exception("Failed to initialize Mistral client: %s", e)
            self._client = None

    def classify_image(self, image: UploadedImage, prompt: str) -> str:
        if not self._client:
            raise ClassifierUnavailableError("Mistral client not initialized (missing API key or import error)")
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": image.to_data_url()},
                ],
            }
        ]
        try:
            response = self._client.chat.complete(
                model=self._model,
                messages=messages,
            )
            # Return the assistant content
            return response.choices[0].message.content or ""
        except Exception as e:
            logger.exception("Mistral vision call failed: %s", e)
            raise
