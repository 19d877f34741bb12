"""
Tests for pinyin.py - numbered to tone-marked pinyin.
"""

import pytest

from fenci.pinyin import (
    convert_pinyin,
    numbered_to_accented,
    split_tone,
    strip_tone,
    tone_mark_position,
)


class TestTones:
    """All five tones on a single vowel."""

    @pytest.mark.parametrize("numbered,accented", [
        ("ma1", "mā"),
        ("ma2", "má"),
        ("ma3", "mǎ"),
        ("ma4", "mà"),
        ("ma5", "ma"),
    ])
    def test_ma(self, numbered, accented):
        assert numbered_to_accented(numbered) == accented


class TestPlacement:
    """Which vowel receives the mark."""

    def test_a_before_o(self):
        assert numbered_to_accented("hao3") == "hǎo"

    def test_e_before_i(self):
        assert numbered_to_accented("mei2") == "méi"

    def test_ou_marks_o(self):
        assert numbered_to_accented("zhou1") == "zhōu"
        assert numbered_to_accented("you5") == "you"

    def test_last_vowel(self):
        assert numbered_to_accented("gui4") == "guì"
        assert numbered_to_accented("liu2") == "liú"
        assert numbered_to_accented("duo1") == "duō"

    def test_single_vowel(self):
        assert numbered_to_accented("e4") == "è"
        assert numbered_to_accented("er2") == "ér"

    def test_capitalized(self):
        assert numbered_to_accented("Zhong1") == "Zhōng"
        assert numbered_to_accented("Ou1") == "Ōu"
        assert numbered_to_accented("A1") == "Ā"

    def test_position_helper(self):
        assert tone_mark_position("xiao") == 2
        assert tone_mark_position("zhr") is None


class TestUmlaut:
    """ASCII spellings of ü."""

    def test_u_colon(self):
        assert numbered_to_accented("lu:4") == "lǜ"
        assert numbered_to_accented("nu:3") == "nǚ"

    def test_v(self):
        assert numbered_to_accented("lv4") == "lǜ"

    def test_both_spellings_agree(self):
        assert numbered_to_accented("lu:e4") == numbered_to_accented("lve4") == "lüè"

    def test_lu_an_forms(self):
        # u: becomes ü before the a takes the mark; plain u stays u
        assert numbered_to_accented("lu:an4") == "lüàn"
        assert numbered_to_accented("luan4") == "luàn"

    def test_neutral_umlaut(self):
        assert numbered_to_accented("nu:5") == "nü"


class TestUnchanged:
    """Best-effort handling of input without a usable tone."""

    def test_no_tone_digit(self):
        assert numbered_to_accented("hao") == "hao"

    def test_already_accented(self):
        assert numbered_to_accented("hǎo") == "hǎo"

    def test_out_of_range_digit(self):
        assert numbered_to_accented("ma6") == "ma6"
        assert numbered_to_accented("ma0") == "ma0"

    def test_no_vowel(self):
        assert numbered_to_accented("r5") == "r"
        assert numbered_to_accented("m2") == "m"

    def test_empty(self):
        assert numbered_to_accented("") == ""

    def test_punctuation(self):
        assert numbered_to_accented("，") == "，"


class TestHelpers:

    def test_split_tone(self):
        assert split_tone("ge4") == ("ge", 4)
        assert split_tone("ge") == ("ge", None)

    def test_strip_tone(self):
        assert strip_tone("lu:4") == "lü"
        assert strip_tone("ma") == "ma"

    def test_convert_pinyin(self):
        assert convert_pinyin("ni3 hao3") == ["nǐ", "hǎo"]
        assert convert_pinyin("  xue2   sheng5 ") == ["xué", "sheng"]
        assert convert_pinyin("") == []
