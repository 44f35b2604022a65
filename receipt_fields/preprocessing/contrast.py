"""Grayscale conversion, tone inversion and contrast stretching.

All helpers return new arrays and never modify their input. Color
images are expected in RGB channel order, as decoded by Pillow.
"""

import cv2
import numpy as np

from receipt_fields.utils.logger import get_logger

logger = get_logger(__name__)

GRAYSCALE_METHODS = ("average", "luminance")


def to_grayscale(image: np.ndarray, method: str = "average") -> np.ndarray:
    """Convert an image to an 8-bit single-channel grayscale image.

    Args:
        image: 8-bit RGB, RGBA or already grayscale image.
        method: ``"average"`` computes ``(r + g + b) / 3``; ``"luminance"``
            uses OpenCV's perceptual weighting.

    Returns:
        Grayscale ``uint8`` image with the same height and width.

    Raises:
        ValueError: If an unsupported method is specified or the samples
            are not 8-bit.
    """
    if method not in GRAYSCALE_METHODS:
        raise ValueError(f"Unsupported grayscale method: {method}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected uint8 samples, got {image.dtype}")

    if image.ndim == 2:
        return image.copy()

    rgb = image[:, :, :3]
    if method == "luminance":
        rgb = np.ascontiguousarray(rgb, dtype=np.uint8)
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)

    # Integer arithmetic keeps the result reproducible across platforms.
    total = rgb.astype(np.uint16).sum(axis=2)
    return (total // 3).astype(np.uint8)


def invert(gray: np.ndarray) -> np.ndarray:
    """Flip tones so that every value becomes ``255 - value``."""
    return cv2.bitwise_not(gray)


def stretch_contrast(gray: np.ndarray) -> np.ndarray:
    """Linearly stretch intensities to the full 0..255 range.

    A flat image (every pixel equal) has no range to stretch and is
    returned as a copy.
    """
    low, high = int(gray.min()), int(gray.max())
    if low == high:
        return gray.copy()
    result = cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX)
    logger.debug("Stretched contrast from [%d, %d] to [0, 255]", low, high)
    return result


def apply_clahe(
    gray: np.ndarray,
    clip_limit: float = 2.0,
    tile_size: int = 8,
) -> np.ndarray:
    """Enhance contrast using CLAHE (Contrast Limited Adaptive Histogram Equalization).

    Args:
        gray: Grayscale image.
        clip_limit: Threshold for contrast limiting.
        tile_size: Size of the grid for histogram equalization.

    Returns:
        Contrast-enhanced grayscale image.
    """
    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=(tile_size, tile_size))
    result = clahe.apply(gray)
    logger.debug("Applied CLAHE (clip=%.1f, tile=%d)", clip_limit, tile_size)
    return result


def calculate_contrast(image: np.ndarray) -> float:
    """Return the standard deviation of pixel intensities."""
    return float(image.std())
