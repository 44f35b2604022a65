"""Tests for photo loading and normalization."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from receipt_fields.preprocessing.contrast import (
    apply_clahe,
    calculate_contrast,
    invert,
    stretch_contrast,
    to_grayscale,
)
from receipt_fields.preprocessing.loader import load_image
from receipt_fields.preprocessing.normalizer import (
    BRIGHTNESS_THRESHOLD,
    ImageNormalizer,
    InvalidImageError,
    NormalizedImage,
    normalize,
)
from receipt_fields.utils.config import NormalizerConfig


class TestGrayscale:
    """Tests for grayscale conversion."""

    def test_average_of_channels(self) -> None:
        image = np.full((4, 4, 3), (30, 60, 90), dtype=np.uint8)
        gray = to_grayscale(image, method="average")
        assert gray.shape == (4, 4)
        assert gray.dtype == np.uint8
        assert np.all(gray == 60)

    def test_average_does_not_overflow(self) -> None:
        image = np.full((2, 2, 3), 255, dtype=np.uint8)
        assert np.all(to_grayscale(image) == 255)

    def test_luminance(self) -> None:
        image = np.full((4, 4, 3), (255, 0, 0), dtype=np.uint8)
        gray = to_grayscale(image, method="luminance")
        assert gray.shape == (4, 4)
        assert 70 <= int(gray[0, 0]) <= 80

    def test_alpha_channel_ignored(self) -> None:
        image = np.full((4, 4, 4), (90, 90, 90, 0), dtype=np.uint8)
        assert np.all(to_grayscale(image) == 90)

    def test_grayscale_passthrough_is_copy(self, light_image: np.ndarray) -> None:
        gray = to_grayscale(light_image)
        np.testing.assert_array_equal(gray, light_image)
        assert gray is not light_image

    def test_invalid_method_raises(self, light_image: np.ndarray) -> None:
        with pytest.raises(ValueError, match="Unsupported grayscale method"):
            to_grayscale(light_image, method="magic")

    def test_wide_samples_raise(self) -> None:
        image = np.full((2, 2, 3), 1000, dtype=np.uint16)
        with pytest.raises(ValueError, match="uint8"):
            to_grayscale(image)


class TestToneAndContrast:
    """Tests for inversion and contrast helpers."""

    def test_invert(self) -> None:
        gray = np.array([[0, 100], [200, 255]], dtype=np.uint8)
        np.testing.assert_array_equal(
            invert(gray), np.array([[255, 155], [55, 0]], dtype=np.uint8)
        )

    def test_stretch_to_full_range(self) -> None:
        gray = np.array([[50, 75], [100, 100]], dtype=np.uint8)
        stretched = stretch_contrast(gray)
        assert int(stretched.min()) == 0
        assert int(stretched.max()) == 255

    def test_stretch_flat_image_unchanged(self) -> None:
        gray = np.full((10, 10), 90, dtype=np.uint8)
        np.testing.assert_array_equal(stretch_contrast(gray), gray)

    def test_clahe_preserves_shape(self, dark_image: np.ndarray) -> None:
        enhanced = apply_clahe(dark_image, clip_limit=2.0, tile_size=8)
        assert enhanced.shape == dark_image.shape

    def test_contrast_metric(self, light_image: np.ndarray) -> None:
        assert calculate_contrast(light_image) > 0
        assert calculate_contrast(np.zeros((5, 5), dtype=np.uint8)) == 0.0


class TestNormalize:
    """Tests for the brightness decision and full normalization."""

    def test_dark_photo_is_inverted(self, dark_image: np.ndarray) -> None:
        result = normalize(dark_image)
        assert isinstance(result, NormalizedImage)
        assert result.inverted is True
        assert result.mean_brightness < BRIGHTNESS_THRESHOLD
        assert result.image[0, 0] == 255
        assert result.image[100, 100] == 0

    def test_light_photo_kept(self, light_image: np.ndarray) -> None:
        result = normalize(light_image)
        assert result.inverted is False
        assert result.image[0, 0] == 255
        assert result.image[100, 150] == 0

    def test_threshold_boundary(self) -> None:
        at_threshold = np.full((10, 10), BRIGHTNESS_THRESHOLD, dtype=np.uint8)
        below = np.full((10, 10), BRIGHTNESS_THRESHOLD - 1, dtype=np.uint8)
        assert normalize(at_threshold).inverted is False
        result = normalize(below)
        assert result.inverted is True
        assert np.all(result.image == 255 - (BRIGHTNESS_THRESHOLD - 1))

    def test_color_photo(self, sample_color_image: np.ndarray) -> None:
        result = normalize(sample_color_image)
        assert result.image.ndim == 2
        assert result.inverted is True

    def test_single_channel_axis(self, light_image: np.ndarray) -> None:
        result = normalize(light_image[:, :, np.newaxis])
        assert result.image.shape == light_image.shape

    def test_input_not_modified(self, dark_image: np.ndarray) -> None:
        original = dark_image.copy()
        normalize(dark_image)
        np.testing.assert_array_equal(dark_image, original)

    def test_deterministic(self, sample_color_image: np.ndarray) -> None:
        first = normalize(sample_color_image)
        second = normalize(sample_color_image)
        np.testing.assert_array_equal(first.image, second.image)
        assert first.mean_brightness == second.mean_brightness

    def test_clahe_contrast_method(self, light_image: np.ndarray) -> None:
        config = NormalizerConfig(contrast_method="clahe")
        result = normalize(light_image, config)
        assert result.image.shape == light_image.shape

    def test_luminance_method(self, sample_color_image: np.ndarray) -> None:
        config = NormalizerConfig(grayscale_method="luminance")
        assert normalize(sample_color_image, config).image.ndim == 2

    def test_unknown_contrast_method(self, light_image: np.ndarray) -> None:
        with pytest.raises(ValueError, match="Unsupported contrast method"):
            normalize(light_image, NormalizerConfig(contrast_method="magic"))

    @pytest.mark.parametrize(
        "image",
        [
            np.zeros((0, 0), dtype=np.uint8),
            np.zeros((0, 10, 3), dtype=np.uint8),
            np.zeros((2, 2, 2, 2), dtype=np.uint8),
            np.zeros((5, 5, 2), dtype=np.uint8),
        ],
    )
    def test_invalid_arrays(self, image: np.ndarray) -> None:
        with pytest.raises(InvalidImageError):
            normalize(image)

    @pytest.mark.parametrize(
        "image",
        [
            np.full((2, 2), 768, dtype=np.uint16),
            np.full((4, 4, 3), 40000, dtype=np.uint16),
            np.full((4, 4), 0.9, dtype=np.float32),
            np.full((4, 4), 200, dtype=np.int64),
        ],
    )
    def test_rejects_non_8bit_samples(self, image: np.ndarray) -> None:
        with pytest.raises(InvalidImageError, match="8-bit"):
            normalize(image)

    def test_not_an_array(self) -> None:
        with pytest.raises(InvalidImageError, match="numpy array"):
            normalize(b"not an image")  # type: ignore[arg-type]

    def test_normalizer_class(self, dark_image: np.ndarray) -> None:
        normalizer = ImageNormalizer(NormalizerConfig())
        assert normalizer.process(dark_image).inverted is True


class TestLoadImage:
    """Tests for decoding photos."""

    def test_from_bytes(self, png_bytes: bytes) -> None:
        image = load_image(png_bytes)
        assert image.shape == (200, 300, 3)
        assert image.dtype == np.uint8

    def test_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "receipt.jpg"
        Image.new("L", (40, 20), color=200).save(path, format="JPEG")
        image = load_image(path)
        assert image.shape == (20, 40, 3)

    def test_undecodable_bytes(self) -> None:
        with pytest.raises(InvalidImageError, match="Cannot decode"):
            load_image(b"definitely not a picture")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidImageError):
            load_image(tmp_path / "missing.png")

    def test_round_trip_through_normalize(self) -> None:
        buffer = io.BytesIO()
        Image.new("RGB", (30, 30), color=(20, 20, 20)).save(buffer, format="PNG")
        result = normalize(load_image(buffer.getvalue()))
        assert result.inverted is True
