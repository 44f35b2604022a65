"""Configuration management for the receipt field extractor.

Loads and validates YAML configuration with sensible defaults
for image normalization and the OCR engine.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Digits, Latin letters, currency symbols and the punctuation receipts use.
DEFAULT_CHAR_WHITELIST = (
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "₹$€£¥"
    ":/.,-"
)


class NormalizerConfig(BaseModel):
    """Configuration for photo normalization before OCR."""

    grayscale_method: str = "average"
    contrast_method: str = "minmax"
    clahe_clip_limit: float = 2.0
    clahe_tile_size: int = 8


class OCRConfig(BaseModel):
    """Configuration for the Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 11
    char_whitelist: str = DEFAULT_CHAR_WHITELIST
    timeout_s: float = 30.0


class AppConfig(BaseModel):
    """Top-level application configuration."""

    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
