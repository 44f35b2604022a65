"""Conversion of spelled-out amounts such as ``RupeesFiftyOnly``."""

import re

_ONES = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
}
_TEENS = {
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
}
_TENS = {
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
}
_UNITS = {**_ONES, **_TEENS, **_TENS}

_WORD = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])")


def split_words(run: str) -> list[str]:
    """Split a word run on case boundaries, spaces and hyphens.

    >>> split_words("OneHundredFifty")
    ['One', 'Hundred', 'Fifty']
    """
    return _WORD.findall(run)


def words_to_number(tokens: list[str]) -> int | None:
    """Resolve number words to an integer.

    ``hundred`` multiplies the running group and ``thousand`` closes it.
    ``and`` is ignored. Any other unknown word makes the whole run
    unreadable and returns ``None``, as does a run with no number words.
    """
    total = 0
    current = 0
    seen = False

    for token in tokens:
        word = token.lower()
        if word == "and":
            continue
        if word in _UNITS:
            current += _UNITS[word]
        elif word == "hundred":
            current = (current or 1) * 100
        elif word == "thousand":
            total += (current or 1) * 1000
            current = 0
        else:
            return None
        seen = True

    if not seen:
        return None
    return total + current
