import io
import logging
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from src.application.errors import InvalidImageError
from src.domain.models import UploadedImage


logger = logging.getLogger(__name__)


MAX_IMAGE_SIDE = 1280

SUPPORTED_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
}

MISSING_IMAGE_MESSAGE = "未找到图片文件"
NOT_AN_IMAGE_MESSAGE = "请上传图片文件（JPG、PNG格式）"
UNSUPPORTED_FORMAT_MESSAGE = "仅支持JPG/PNG图片格式"


def prepare_upload(data: Optional[bytes], filename: Optional[str] = None) -> UploadedImage:
    """
    Validate an uploaded file and shrink it for the vision model.

    Args:
        data: Raw bytes of the uploaded file
        filename: Original file name, kept for display only

    Returns:
        UploadedImage ready to be sent to an image classifier

    Raises:
        InvalidImageError: if the data is missing, not an image, or not JPG/PNG
    """
    if not data:
        raise InvalidImageError(MISSING_IMAGE_MESSAGE)

    try:
        with Image.open(io.BytesIO(data)) as probe:
            image_format = probe.format
            probe.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.info("Rejected upload %s: %s", filename, e)
        raise InvalidImageError(NOT_AN_IMAGE_MESSAGE) from e

    mime_type = SUPPORTED_FORMATS.get(image_format or "")
    if mime_type is None:
        logger.info("Rejected upload %s with format %s", filename, image_format)
        raise InvalidImageError(UNSUPPORTED_FORMAT_MESSAGE)

    return UploadedImage(data=_downscale(data, image_format), mime_type=mime_type, filename=filename)


def _downscale(data: bytes, image_format: str) -> bytes:
    # verify() leaves the image unusable, so it is opened again here
    with Image.open(io.BytesIO(data)) as raw_im:
        if max(raw_im.size) <= MAX_IMAGE_SIDE:
            return data
        im = ImageOps.exif_transpose(raw_im).copy()

    original_size = im.size
    im.thumbnail((MAX_IMAGE_SIDE, MAX_IMAGE_SIDE))
    if image_format == "JPEG" and im.mode not in ("RGB", "L"):
        im = im.convert("RGB")

    buf = io.BytesIO()
    im.save(buf, format=image_format)
    logger.debug("Downscaled upload from %s to %s", original_size, im.size)
    return buf.getvalue()
