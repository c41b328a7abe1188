from typing import Protocol

from src.domain.models import UploadedImage


class ImageClassifierPort(Protocol):
    def classify_image(self, image: UploadedImage, prompt: str) -> str:
        """
        Sends the image and the instruction prompt to a vision model and
        returns its free-form text answer, expected (not guaranteed) to be JSON.
        """
        ...
