"""Public entry point turning raw OCR text into receipt fields."""

from dataclasses import dataclass

from receipt_fields.utils.logger import get_logger

from .amount import StrategyTag, extract_amount
from .date import extract_date
from .money import Money

logger = get_logger(__name__)

# UTF-8 rupee sign decoded as cp1252, a frequent artefact in pasted OCR text.
_MOJIBAKE = {"â‚¹": "₹"}


@dataclass(frozen=True)
class ExtractionResult:
    """Amount and date chosen for one receipt.

    Either field may be ``None`` when nothing suitable was found; the
    receipt then needs a manual entry before it can be filed.
    """

    amount: Money | None
    amount_strategy: StrategyTag
    date: str | None

    @property
    def needs_review(self) -> bool:
        return self.amount is None or self.date is None

    def to_dict(self) -> dict[str, str | bool | None]:
        return {
            "amount": str(self.amount) if self.amount is not None else None,
            "amount_strategy": str(self.amount_strategy),
            "date": self.date,
            "needs_review": self.needs_review,
        }


def _clean(text: str) -> str:
    for broken, fixed in _MOJIBAKE.items():
        text = text.replace(broken, fixed)
    return text


def extract_fields(ocr_text: str) -> ExtractionResult:
    """Extract the amount and transaction date from OCR output.

    The function is pure: identical text always gives an identical
    result, and empty text gives an empty result rather than an error.

    Args:
        ocr_text: Text returned by the OCR engine, lines in reading order.

    Returns:
        The single best amount and date, each possibly ``None``.
    """
    lines = _clean(ocr_text).splitlines()
    candidate, strategy = extract_amount(lines)
    date = extract_date(lines)

    if date is None:
        logger.info("No date found in %d lines", len(lines))

    return ExtractionResult(
        amount=candidate.value if candidate is not None else None,
        amount_strategy=strategy,
        date=date,
    )
