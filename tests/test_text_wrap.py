import pytest

from boxtext.utils.text_split import split_words
from boxtext.utils.text_trim import trim, trim_left, trim_right
from boxtext.utils.text_wrap import TextWrapper


@pytest.fixture
def wrap(measurer):
    return TextWrapper(measurer)


class TestSplitWords:
    def test_whitespace_separates_units(self):
        assert split_words("Hello   big\nworld") == ["Hello", "big", "world"]

    def test_split_characters_stay_on_preceding_unit(self):
        assert split_words("state-of-the-art a/b") == ["state-", "of-", "the-", "art", "a/", "b"]

    def test_empty_text(self):
        assert split_words("") == []
        assert split_words("   ") == []

    def test_cjk_characters_are_separate_units(self):
        assert split_words("日本語のテキスト。") == ["日", "本", "語", "の", "テ", "キ", "ス", "ト。"]

    def test_cjk_brackets_attach_inward(self):
        assert split_words("「日本」です") == ["「日", "本」", "で", "す"]

    def test_latin_run_inside_cjk_stays_whole(self):
        assert split_words("日本ABC") == ["日", "本", "ABC"]


class TestTrim:
    def test_trim_right(self):
        assert trim_right("text \n\t") == "text"

    def test_trim_left(self):
        assert trim_left("  text ") == "text "

    def test_trim(self):
        assert trim("\n text \n") == "text"


class TestTextWrapper:
    def test_keeps_original_spacing(self, wrap, style):
        result = wrap("Hello  World", style, 200, 200)

        assert result.lines == ["Hello  World"]
        assert result.truncated is False
        assert result.words == ["Hello", "World"]

    def test_breaks_when_width_is_exceeded(self, wrap, style):
        result = wrap("one two three", style, 50, 200)

        assert result.lines == ["one two", "three"]
        assert result.widths == pytest.approx([42, 30])

    def test_newline_forces_break(self, wrap, style):
        result = wrap("first\nsecond", style, 500, 200)

        assert result.lines == ["first", "second"]

    def test_first_word_too_wide_truncates(self, wrap, style):
        result = wrap("Hello World", style, 25, 200)

        assert result.lines == []
        assert result.truncated is True

    def test_line_taller_than_box_truncates(self, wrap, style):
        result = wrap("Hi", style, 500, 10)

        assert result.lines == []
        assert result.truncated is True
        assert wrap("Hi", style, 500, 10, overflow=True).lines == ["Hi"]

    def test_height_limit_truncates(self, wrap, style):
        result = wrap("one two three four five six", style, 50, 30)

        assert result.lines == ["one two", "three"]
        assert result.truncated is True

    def test_wide_word_after_first_line_truncates(self, wrap, style):
        result = wrap("a enormousword", style, 50, 200)

        assert result.lines == ["a"]
        assert result.truncated is True

    def test_overflow_allows_wide_words(self, wrap, style):
        result = wrap("a enormousword", style, 50, 200, overflow=True)

        assert result.lines == ["a", "enormousword"]
        assert result.truncated is False

    def test_hyphenated_units_rejoin(self, wrap, style):
        result = wrap("state-of-the-art", style, 500, 200)

        assert result.lines == ["state-of-the-art"]

    def test_empty_text(self, wrap, style):
        result = wrap("", style, 100, 100)

        assert result.lines == []
        assert result.truncated is False

    def test_custom_split_that_rewrites_units(self, measurer, style):
        wrap = TextWrapper(measurer, split=lambda text: text.upper().split())

        assert wrap("ab cd", style, 500, 200).lines == ["AB CD"]
