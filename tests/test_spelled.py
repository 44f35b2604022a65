"""Tests for spelled-out amount parsing."""

import pytest

from receipt_fields.extraction.spelled import split_words, words_to_number


class TestSplitWords:
    """Tests for case-boundary word splitting."""

    def test_camel_case_run(self) -> None:
        assert split_words("OneHundredFifty") == ["One", "Hundred", "Fifty"]

    def test_spaces_and_hyphens(self) -> None:
        assert split_words("fifty-five and  two") == ["fifty", "five", "and", "two"]

    def test_single_word(self) -> None:
        assert split_words("Fifty") == ["Fifty"]


class TestWordsToNumber:
    """Tests for resolving number words to integers."""

    @pytest.mark.parametrize(
        "tokens, expected",
        [
            (["Fifty"], 50),
            (["Fifty", "Five"], 55),
            (["Nineteen"], 19),
            (["One", "Hundred", "Fifty"], 150),
            (["Hundred"], 100),
            (["One", "Hundred", "And", "Five"], 105),
            (["Two", "Thousand", "Five", "Hundred"], 2500),
            (["Thousand"], 1000),
            (["Nine", "Thousand", "Nine", "Hundred", "Ninety", "Nine"], 9999),
        ],
    )
    def test_known_words(self, tokens: list[str], expected: int) -> None:
        assert words_to_number(tokens) == expected

    def test_unknown_word_rejects_run(self) -> None:
        assert words_to_number(["Fifty", "Paise"]) is None

    def test_empty_run(self) -> None:
        assert words_to_number([]) is None

    def test_only_filler(self) -> None:
        assert words_to_number(["and"]) is None
