"""End-to-end processing of one receipt photo.

Loads the photo, normalizes it, runs OCR and extracts the amount and
date. The processor keeps no per-receipt state, so a single instance
can be shared by worker threads.
"""

from dataclasses import dataclass
from pathlib import Path

from receipt_fields.extraction.fields import ExtractionResult, extract_fields
from receipt_fields.preprocessing.loader import load_image
from receipt_fields.preprocessing.normalizer import ImageNormalizer
from receipt_fields.utils.config import AppConfig
from receipt_fields.utils.logger import get_logger

from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)


@dataclass
class ReceiptResult:
    """Everything learned from one receipt photo."""

    source_file: str
    inverted: bool
    mean_brightness: float
    ocr_text: str
    extraction: ExtractionResult


class ReceiptProcessor:
    """Photo-to-fields pipeline.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.normalizer = ImageNormalizer(config.normalizer)
        self.ocr_engine = TesseractEngine(config.ocr)

    def process(self, source: Path | bytes, filename: str = "receipt") -> ReceiptResult:
        """Process a receipt photo from a file path or raw bytes.

        Args:
            source: Path to an image file, or its raw bytes.
            filename: Display name for the receipt.

        Returns:
            The extracted fields plus normalization diagnostics.

        Raises:
            InvalidImageError: If the photo cannot be decoded or is empty.
            OCRError: If Tesseract fails or times out.
        """
        logger.info("Processing receipt: %s", filename)
        image = load_image(source)
        normalized = self.normalizer.process(image)
        ocr_result = self.ocr_engine.extract_text(normalized.image)
        extraction = extract_fields(ocr_result.text)

        return ReceiptResult(
            source_file=filename,
            inverted=normalized.inverted,
            mean_brightness=normalized.mean_brightness,
            ocr_text=ocr_result.text,
            extraction=extraction,
        )
