"""Decoding of receipt photos into numpy arrays."""

import io
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from receipt_fields.utils.logger import get_logger

from .normalizer import InvalidImageError

logger = get_logger(__name__)


def load_image(source: Path | bytes) -> np.ndarray:
    """Decode an image file or in-memory image into an RGB array.

    Args:
        source: Path to an image file, or its raw bytes.

    Returns:
        ``uint8`` array of shape ``(height, width, 3)``.

    Raises:
        InvalidImageError: If the data cannot be decoded as an image.
    """
    try:
        if isinstance(source, bytes):
            img = Image.open(io.BytesIO(source))
        else:
            img = Image.open(Path(source))
        with img:
            rgb = np.array(img.convert("RGB"))
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidImageError(f"Cannot decode image: {exc}") from exc

    logger.debug("Decoded image of shape %s", rgb.shape)
    return rgb
