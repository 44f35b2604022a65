"""Amount extraction as an ordered cascade of heuristics.

Each strategy looks at the OCR lines on its own and returns its best
candidate, the largest valid amount it can see. Strategies run in the
order of ``AMOUNT_STRATEGIES`` and the first one that returns anything
decides the amount; later strategies never override it.

Before numbers are read from a line, date-shaped text, ``HH:MM`` times
and digit runs of ten or more (phone numbers, IDs) are blanked out.
Lines holding a time or a long digit run are skipped entirely from the
standalone-number strategy onwards.
"""

import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum

from receipt_fields.utils.logger import get_logger

from .date import mask_dates
from .money import Money, is_valid_amount
from .spelled import split_words, words_to_number

logger = get_logger(__name__)

CONTEXT_KEYWORDS = (
    "total",
    "amount",
    "paid",
    "completed",
    "fare",
    "price",
    "grand",
    "final",
    "net",
    "received",
    "charged",
    "payment",
)

# Vehicle and model fragments that OCR fuses onto ride receipt fares.
NOISE_WORDS = (
    "bajaj",
    "tvs",
    "hero",
    "honda",
    "maruti",
    "suzuki",
    "mahindra",
    "tata",
    "piaggio",
    "yamaha",
    "auto",
)

# Keywords start a word or a camel-case part ("GrandTotal"), never mid-word.
_WORD_START = r"(?:(?<![A-Za-z])|(?-i:(?<=[a-z])(?=[A-Z])))"
_CONTEXT = re.compile(
    _WORD_START + "(?:" + "|".join(CONTEXT_KEYWORDS) + ")", re.IGNORECASE
)

_NUMBER_BODY = r"((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?)(?!\d|[.,]\d)"
_ANY_NUMBER = re.compile(r"(?<!\d)(?<!\d[.,])" + _NUMBER_BODY)
_TOKEN_NUMBER = re.compile(r"(?<![A-Za-z\d])(?<!\d[.,])" + _NUMBER_BODY)
_CURRENCY_NUMBER = re.compile(
    r"(?:[₹$€£¥]|\b(?:rupees?|rs|inr|usd|eur|gbp)\.?"
    # "NetAmountRs.450": abbreviation fused onto the word before it.
    r"|(?-i:(?<=[a-z])(?:Rs|INR))\.?)\s*" + _NUMBER_BODY,
    re.IGNORECASE,
)
_STANDALONE = re.compile(r"((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?)(?:/-)?")
_FUSED_NOISE = re.compile(
    r"(?<!\d)(\d{4,6})(?=" + "|".join(NOISE_WORDS) + r"|re(?![a-z]))",
    re.IGNORECASE,
)
_DECIMAL_IN_TEXT = re.compile(r"(?<![\d,])(\d{2,5}\.\d{2})")
_SPELLED = re.compile(
    r"(?:rupees?|rs\.?|inr|dollars?|usd)\s*([a-z][a-z\s\-]*?)\s*only",
    re.IGNORECASE,
)
_MISREAD_PREFIX = re.compile(r"(?<=[^\d\s.,])(\d{2,5})(?!\d|[.,]\d)")

_LONG_DIGITS = re.compile(r"\d{10,}")
_TIME = re.compile(r"(?<!\d)\d{1,2}:\d{2}(?::\d{2})?(?!\d)")


class StrategyTag(StrEnum):
    """Cascade stage that produced an amount."""

    CONTEXT_CURRENCY = "context_currency"
    CONTEXT_NUMBER = "context_number"
    CURRENCY_ANYWHERE = "currency_anywhere"
    STANDALONE_NUMBER = "standalone_number"
    EMBEDDED_NUMBER = "embedded_number"
    DIGIT_REINSERTION = "digit_reinsertion"
    DECIMAL_IN_TEXT = "decimal_in_text"
    SPELLED_OUT = "spelled_out"
    OCR_QUIRK = "ocr_quirk"
    NONE = "none"


@dataclass(frozen=True)
class Candidate:
    """A provisional amount considered during one extraction call."""

    value: Money
    source_line_index: int
    strategy_rank: int


Strategy = Callable[[Sequence[str]], Candidate | None]


def _blank(match: re.Match[str]) -> str:
    return " " * len(match.group(0))


def _scrub(line: str) -> str:
    """Blank out dates, times and long digit runs."""
    line = _LONG_DIGITS.sub(_blank, line)
    line = _TIME.sub(_blank, line)
    return mask_dates(line)


def _is_excluded(line: str) -> bool:
    return bool(_LONG_DIGITS.search(line) or _TIME.search(line))


def _eligible(lines: Sequence[str]) -> Iterator[tuple[int, str]]:
    """Yield scrubbed lines that hold neither a time nor an ID-like run."""
    for index, line in enumerate(lines):
        if _is_excluded(line):
            logger.debug("Skipping time or ID line %d: %r", index, line)
            continue
        yield index, _scrub(line)


def _amounts(pattern: re.Pattern[str], text: str) -> Iterator[Money]:
    """Yield every in-range amount captured by ``pattern`` in ``text``."""
    for match in pattern.finditer(text):
        money = Money.parse(match.group(1))
        if money is None:
            logger.debug("Unparsable number %r", match.group(1))
            continue
        if is_valid_amount(money):
            yield money


def _best(found: Iterable[tuple[int, Money]], rank: int) -> Candidate | None:
    """Pick the largest value; ties keep the earliest line."""
    best: Candidate | None = None
    for index, value in found:
        if best is None or value > best.value:
            best = Candidate(value=value, source_line_index=index, strategy_rank=rank)
    return best


def context_with_currency(lines: Sequence[str]) -> Candidate | None:
    """Currency-marked number on or next to a line with a context keyword."""
    scrubbed = [_scrub(line) for line in lines]
    found: list[tuple[int, Money]] = []
    for index, line in enumerate(lines):
        if not _CONTEXT.search(line):
            continue
        for near in range(max(0, index - 1), min(len(lines), index + 2)):
            found.extend((near, m) for m in _amounts(_CURRENCY_NUMBER, scrubbed[near]))
    return _best(found, rank=1)


def context_with_number(lines: Sequence[str]) -> Candidate | None:
    """Any number on a line that carries a context keyword."""
    found: list[tuple[int, Money]] = []
    for index, line in enumerate(lines):
        if _CONTEXT.search(line):
            found.extend((index, m) for m in _amounts(_ANY_NUMBER, _scrub(line)))
    return _best(found, rank=2)


def largest_currency_number(lines: Sequence[str]) -> Candidate | None:
    """Largest currency-marked number anywhere, ignoring context."""
    found = (
        (index, m)
        for index, line in enumerate(lines)
        for m in _amounts(_CURRENCY_NUMBER, _scrub(line))
    )
    return _best(found, rank=3)


def largest_standalone_number(lines: Sequence[str]) -> Candidate | None:
    """Largest line that is nothing but a number (``450/-`` allowed)."""
    found: list[tuple[int, Money]] = []
    for index, line in _eligible(lines):
        match = _STANDALONE.fullmatch(line.strip())
        if match is None:
            continue
        money = Money.parse(match.group(1))
        if money is not None and is_valid_amount(money):
            found.append((index, money))
    return _best(found, rank=4)


def embedded_number(lines: Sequence[str]) -> Candidate | None:
    """Number tokens inside text; values with a decimal point win."""
    with_point: list[tuple[int, Money]] = []
    without_point: list[tuple[int, Money]] = []
    for index, line in _eligible(lines):
        for match in _TOKEN_NUMBER.finditer(line):
            money = Money.parse(match.group(1))
            if money is None or not is_valid_amount(money):
                continue
            bucket = with_point if "." in match.group(1) else without_point
            bucket.append((index, money))
    return _best(with_point, rank=5) or _best(without_point, rank=5)


def digit_reinsertion(lines: Sequence[str]) -> Candidate | None:
    """Restore the dropped decimal point of a fare fused to a vehicle token.

    ``40710BajajRE`` reads as 407.10.
    """
    found: list[tuple[int, Money]] = []
    for index, line in _eligible(lines):
        for match in _FUSED_NOISE.finditer(line):
            digits = match.group(1)
            money = Money.parse(f"{digits[:-2]}.{digits[-2:]}")
            if money is not None and is_valid_amount(money):
                found.append((index, money))
    return _best(found, rank=6)


def decimal_in_text(lines: Sequence[str]) -> Candidate | None:
    """Any ``NN.NN`` shape, even when glued to surrounding characters."""
    found = (
        (index, m)
        for index, line in _eligible(lines)
        for m in _amounts(_DECIMAL_IN_TEXT, line)
    )
    return _best(found, rank=7)


def spelled_out_amount(lines: Sequence[str]) -> Candidate | None:
    """Amount written in words, e.g. ``RupeesFiftyOnly``."""
    found: list[tuple[int, Money]] = []
    for index, line in _eligible(lines):
        for match in _SPELLED.finditer(line):
            value = words_to_number(split_words(match.group(1)))
            if value is None:
                logger.debug("Unreadable spelled amount %r", match.group(0))
                continue
            money = Money.from_minor_units(value * 100)
            if is_valid_amount(money):
                found.append((index, money))
    return _best(found, rank=8)


def misread_prefix_number(lines: Sequence[str]) -> Candidate | None:
    """Digits right after a stray glyph, such as a currency sign read as ``I``."""
    found = (
        (index, m)
        for index, line in _eligible(lines)
        for m in _amounts(_MISREAD_PREFIX, line)
    )
    return _best(found, rank=9)


AMOUNT_STRATEGIES: list[tuple[StrategyTag, Strategy]] = [
    (StrategyTag.CONTEXT_CURRENCY, context_with_currency),
    (StrategyTag.CONTEXT_NUMBER, context_with_number),
    (StrategyTag.CURRENCY_ANYWHERE, largest_currency_number),
    (StrategyTag.STANDALONE_NUMBER, largest_standalone_number),
    (StrategyTag.EMBEDDED_NUMBER, embedded_number),
    (StrategyTag.DIGIT_REINSERTION, digit_reinsertion),
    (StrategyTag.DECIMAL_IN_TEXT, decimal_in_text),
    (StrategyTag.SPELLED_OUT, spelled_out_amount),
    (StrategyTag.OCR_QUIRK, misread_prefix_number),
]


def extract_amount(lines: Sequence[str]) -> tuple[Candidate | None, StrategyTag]:
    """Run the cascade and stop at the first strategy with a result.

    Args:
        lines: OCR text lines in reading order.

    Returns:
        The winning candidate and the tag of the strategy that found it,
        or ``(None, StrategyTag.NONE)`` when every strategy comes up empty.
    """
    for tag, strategy in AMOUNT_STRATEGIES:
        candidate = strategy(lines)
        if candidate is not None:
            logger.info(
                "Amount %s found by %s on line %d",
                candidate.value,
                tag,
                candidate.source_line_index,
            )
            return candidate, tag

    logger.info("No amount found in %d lines", len(lines))
    return None, StrategyTag.NONE
