"""Fixed-point money values for extracted receipt amounts.

Amounts are held as integer minor units (hundredths) so that range
checks and comparisons never suffer from binary floating point drift.
"""

import re
from dataclasses import dataclass
from decimal import Decimal

_MONEY_TEXT = re.compile(r"^(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d{1,2}))?$")


@dataclass(frozen=True, order=True)
class Money:
    """A non-negative amount stored as integer minor units."""

    minor_units: int

    def __post_init__(self) -> None:
        if self.minor_units < 0:
            raise ValueError(f"Money cannot be negative: {self.minor_units}")

    @classmethod
    def from_minor_units(cls, minor_units: int) -> "Money":
        return cls(minor_units)

    @classmethod
    def parse(cls, text: str) -> "Money | None":
        """Parse a plain numeric string such as ``"1,234.5"``.

        Comma thousands groups are accepted. Anything else, including a
        sign, currency symbol or more than two fractional digits, yields
        ``None``.
        """
        match = _MONEY_TEXT.match(text.strip())
        if match is None:
            return None
        whole = int(match.group(1).replace(",", ""))
        fraction = (match.group(2) or "0").ljust(2, "0")
        return cls(whole * 100 + int(fraction))

    @property
    def decimal(self) -> Decimal:
        return Decimal(self.minor_units).scaleb(-2).quantize(Decimal("0.01"))

    def __str__(self) -> str:
        return f"{self.minor_units // 100}.{self.minor_units % 100:02d}"


MIN_AMOUNT = Money(1_000)
MAX_AMOUNT = Money(1_000_000)


def is_valid_amount(money: Money) -> bool:
    """Check the inclusive 10.00 to 10000.00 policy range.

    Smaller values are item counts or quantities, larger ones are OCR
    noise from several tokens running together.
    """
    return MIN_AMOUNT <= money <= MAX_AMOUNT
