"""Photo normalization ahead of OCR.

Converts a receipt photo to grayscale, decides from the mean brightness
whether the tones must be inverted, and stretches the contrast.
"""

from dataclasses import dataclass

import numpy as np

from receipt_fields.utils.config import NormalizerConfig
from receipt_fields.utils.logger import get_logger

from .contrast import apply_clahe, invert, stretch_contrast, to_grayscale

logger = get_logger(__name__)

# Mean gray level below which the photo is inverted before OCR.
BRIGHTNESS_THRESHOLD = 150


class InvalidImageError(ValueError):
    """Raised when an image is undecodable, not 8-bit or has zero area."""


@dataclass
class NormalizedImage:
    """Grayscale image ready for OCR.

    ``inverted`` records which branch of the brightness test was taken
    and is kept for diagnostics only.
    """

    image: np.ndarray
    inverted: bool
    mean_brightness: float


def _validate(image: np.ndarray) -> None:
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Expected a numpy array, got {type(image).__name__}")
    if image.dtype != np.uint8:
        raise InvalidImageError(f"Expected 8-bit samples, got {image.dtype}")
    if image.ndim not in (2, 3):
        raise InvalidImageError(f"Unsupported image shape: {image.shape}")
    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise InvalidImageError(f"Unsupported channel count: {image.shape[2]}")
    if image.size == 0:
        raise InvalidImageError("Image has zero area")


def normalize(
    image: np.ndarray, config: NormalizerConfig | None = None
) -> NormalizedImage:
    """Normalize a photo for OCR without modifying the input array.

    Args:
        image: RGB, RGBA or grayscale image.
        config: Normalization settings. Defaults are used when omitted.

    Returns:
        The processed grayscale image and the inversion decision.

    Raises:
        InvalidImageError: If the image is not a non-empty 8-bit bitmap.
    """
    _validate(image)
    config = config or NormalizerConfig()

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    gray = to_grayscale(image, method=config.grayscale_method)
    brightness = float(gray.mean())
    inverted = brightness < BRIGHTNESS_THRESHOLD

    if inverted:
        gray = invert(gray)

    if config.contrast_method == "clahe":
        result = apply_clahe(
            gray,
            clip_limit=config.clahe_clip_limit,
            tile_size=config.clahe_tile_size,
        )
    elif config.contrast_method == "minmax":
        result = stretch_contrast(gray)
    else:
        raise ValueError(f"Unsupported contrast method: {config.contrast_method}")

    logger.info(
        "Normalized %dx%d image: mean brightness %.1f, inverted=%s",
        gray.shape[1],
        gray.shape[0],
        brightness,
        inverted,
    )
    return NormalizedImage(image=result, inverted=inverted, mean_brightness=brightness)


class ImageNormalizer:
    """Normalizer bound to a configuration.

    Holds no per-image state, so one instance can serve several threads.

    Args:
        config: Normalization settings.
    """

    def __init__(self, config: NormalizerConfig) -> None:
        self.config = config

    def process(self, image: np.ndarray) -> NormalizedImage:
        """Normalize one image with the bound configuration."""
        return normalize(image, self.config)
