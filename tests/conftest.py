"""Shared test fixtures for the receipt field extraction test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def dark_image() -> np.ndarray:
    """Grayscale photo with a dark background and a light patch (mean 85)."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def light_image() -> np.ndarray:
    """Grayscale photo of dark print on white paper."""
    image = np.full((200, 300), 255, dtype=np.uint8)
    image[80:120, 100:200] = 0
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """RGB photo with a bright receipt on a dark table."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (255, 255, 255)
    return image


@pytest.fixture
def png_bytes(sample_color_image: np.ndarray) -> bytes:
    """The color fixture encoded as PNG."""
    buffer = io.BytesIO()
    Image.fromarray(sample_color_image).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
