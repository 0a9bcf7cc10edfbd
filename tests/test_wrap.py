from __future__ import annotations

import pytest
from rich.cells import cell_len

from mdscroll.wrap import Fragment, split_fragments, wrap_text


def test_wraps_on_spaces():
    assert wrap_text("aaa bbb ccc", 7) == ["aaa bbb", "ccc"]


def test_long_word_is_broken():
    assert wrap_text("abcdefgh", 3) == ["abc", "def", "gh"]


def test_text_that_fits_is_returned_unchanged():
    assert wrap_text("short line", 80) == ["short line"]


def test_inner_whitespace_is_kept_verbatim():
    assert wrap_text("a  b", 10) == ["a  b"]


def test_whitespace_at_break_is_consumed():
    assert wrap_text("aaaa    bbbb", 4) == ["aaaa", "bbbb"]


@pytest.mark.parametrize("text", ["", "   ", "\t"])
def test_blank_text_has_no_lines(text):
    assert wrap_text(text, 10) == []


@pytest.mark.parametrize("width", [0, -1])
def test_width_is_clamped_to_one(width):
    assert wrap_text("ab", width) == ["a", "b"]


def test_leading_whitespace_is_preserved_on_first_line():
    assert wrap_text("  indented", 20) == ["  indented"]


def test_cjk_breaks_between_characters():
    assert wrap_text("漢字漢字", 4) == ["漢字", "漢字"]


def test_cjk_and_latin_mix():
    lines = wrap_text("abc漢字def", 5)

    assert "".join(lines) == "abc漢字def"
    assert all(cell_len(line) <= 5 for line in lines)


def test_closing_punctuation_stays_with_preceding_ideograph():
    fragments = split_fragments("漢。")

    assert fragments == [Fragment("漢。")]


def test_emoji_zwj_sequence_is_one_cluster():
    family = "\U0001f468\u200d\U0001f469\u200d\U0001f467"

    assert wrap_text(family + "x", 1) == [family, "x"]


def test_flag_is_one_cluster():
    flag = "\U0001f1eb\U0001f1f7"

    assert wrap_text(flag + flag, 1) == [flag, flag]


def test_wide_cluster_wider_than_width_overflows_alone():
    assert wrap_text("漢", 1) == ["漢"]


def test_no_break_space_does_not_break():
    assert wrap_text("a\u00a0b c", 3) == ["a\u00a0b", "c"]


def test_fragments_reproduce_text():
    text = "one  two\tthree 漢字 four"

    fragments = split_fragments(text)

    assert "".join(fragment.text + fragment.whitespace for fragment in fragments) == text


def test_every_line_is_a_substring():
    text = "The quick brown fox jumps over the lazy dog, twice over."

    for width in range(1, 20):
        for line in wrap_text(text, width):
            assert line in text


def test_breaks_after_hyphens():
    assert wrap_text("state-of-the-art", 10) == ["state-of-", "the-art"]


def test_hyphen_before_number_does_not_break():
    assert split_fragments("range -5") == [Fragment("range", " "), Fragment("-5")]


def test_breaks_after_zero_width_space():
    assert wrap_text("alpha\u200bbeta\u200bgamma", 6) == ["alpha\u200b", "beta\u200b", "gamma"]


def test_breaks_after_soft_hyphen():
    assert split_fragments("hyphen\u00adation") == [Fragment("hyphen\u00ad"), Fragment("ation")]


def test_decomposed_hangul_syllable_is_never_split():
    syllable = "\u1100\u1161\u11a8"

    assert wrap_text(syllable + syllable, 1) == [syllable, syllable]


def test_combining_mark_stays_with_its_base():
    assert wrap_text("e\u0301e\u0301", 1) == ["e\u0301", "e\u0301"]
