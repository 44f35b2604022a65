"""Tesseract OCR adapter tuned for receipts.

Runs Tesseract in sparse-text mode with a restricted character set and
a per-call timeout. A failed or timed-out run raises ``OCRError`` so
that incomplete text never reaches field extraction.
"""

from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from receipt_fields.utils.config import OCRConfig
from receipt_fields.utils.logger import get_logger

logger = get_logger(__name__)


class OCRError(RuntimeError):
    """Raised when Tesseract fails or exceeds its time budget."""


@dataclass
class OCRResult:
    """Text recognized on one receipt image."""

    text: str
    lines: list[str]
    language: str


class TesseractEngine:
    """Wrapper around Tesseract OCR for receipt text.

    Args:
        config: OCR settings (binary path, language, page segmentation
            mode, character whitelist and timeout).
    """

    def __init__(self, config: OCRConfig | None = None) -> None:
        self.config = config or OCRConfig()
        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd

    def build_config(self) -> str:
        """Return the Tesseract command-line options for receipts."""
        options = [f"--psm {self.config.psm}"]
        if self.config.char_whitelist:
            options.append(f"-c tessedit_char_whitelist={self.config.char_whitelist}")
        return " ".join(options)

    def extract_text(self, image: np.ndarray, lang: str | None = None) -> OCRResult:
        """Recognize text in a normalized receipt image.

        Args:
            image: Grayscale image as a numpy array.
            lang: OCR language code. Defaults to the configured language.

        Returns:
            OCRResult with the raw text and its non-blank lines.

        Raises:
            OCRError: If Tesseract fails or times out.
        """
        lang = lang or self.config.default_lang
        pil_image = Image.fromarray(image)

        try:
            text = pytesseract.image_to_string(
                pil_image,
                lang=lang,
                config=self.build_config(),
                timeout=self.config.timeout_s,
            )
        except pytesseract.TesseractError as exc:
            raise OCRError(f"Tesseract failed: {exc}") from exc
        except RuntimeError as exc:
            # pytesseract reports a killed process as a bare RuntimeError.
            raise OCRError(
                f"Tesseract timed out after {self.config.timeout_s}s"
            ) from exc

        lines = [line.strip() for line in text.splitlines() if line.strip()]
        logger.info("OCR recognized %d lines", len(lines))
        return OCRResult(text=text, lines=lines, language=lang)
