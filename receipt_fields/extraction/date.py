"""Transaction date extraction from OCR lines.

Patterns are tried in a fixed order on each line, and the first line
with any match wins. The matched text is returned as printed on the
receipt; no calendar validation is applied.
"""

import re
from collections.abc import Sequence

from receipt_fields.utils.logger import get_logger

logger = get_logger(__name__)

_MONTH = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
# Two- or four-digit years only; "12 Jun 450" is not a date.
_YEAR = r"(?:\d{4}|\d{2})\b"

DATE_PATTERNS: list[re.Pattern[str]] = [
    # 24 May 2025, 24-May-25, 24th May, 2025
    re.compile(
        rf"\b\d{{1,2}}(?:st|nd|rd|th)?[\s\-/.]*{_MONTH}[\s\-/.,']*{_YEAR}",
        re.IGNORECASE,
    ),
    # 24/05/2025, 24-05-25, 24.05.2025
    re.compile(rf"\b\d{{1,2}}[/\-.]\d{{1,2}}[/\-.]{_YEAR}"),
    # 2025/05/24, 2025-05-24
    re.compile(r"\b\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2}\b"),
    # May 24, 2025
    re.compile(
        rf"\b{_MONTH}\.?\s*\d{{1,2}}(?:st|nd|rd|th)?,?\s+{_YEAR}",
        re.IGNORECASE,
    ),
]


def extract_date(lines: Sequence[str]) -> str | None:
    """Return the first date-shaped text found in reading order.

    Args:
        lines: OCR text lines in reading order.

    Returns:
        The matched date text, or ``None`` when no line contains a date.
    """
    for index, line in enumerate(lines):
        for pattern in DATE_PATTERNS:
            match = pattern.search(line)
            if match:
                logger.debug("Date %r found on line %d", match.group(0), index)
                return match.group(0)
    return None


def mask_dates(line: str) -> str:
    """Blank out every date-shaped substring, keeping the line length."""
    for pattern in DATE_PATTERNS:
        line = pattern.sub(lambda m: " " * len(m.group(0)), line)
    return line
