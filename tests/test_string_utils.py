"""Tests for character-level scanners."""

import pytest

from equation_citator.utils.string_utils import (
    escape_string,
    find_code_spans,
    find_inline_math_spans,
    find_last_unescaped_dollar,
    is_escaped,
    is_in_inline_math_environment,
    process_quote_line,
    quote_prefix_length,
    remove_paired_braces,
)


class TestEscapeString:

    def test_backslash(self):
        assert escape_string("a\\b") == "a\\\\b"

    def test_quote_type(self):
        text = "She said: \"Don't worry\""
        assert escape_string(text, '"') == "She said: \\\"Don't worry\\\""
        assert escape_string(text, "'") == "She said: \"Don\\'t worry\""

    def test_short_escapes(self):
        assert escape_string("a\nb\tc\rd") == "a\\nb\\tc\\rd"
        assert escape_string("\b\f\v") == "\\b\\f\\v"

    def test_control_characters(self):
        assert escape_string("\x01\x02\x1f\x7f") == "\\u0001\\u0002\\u001f\\u007f"
        assert escape_string("null:\x00") == "null:\\u0000"
        assert escape_string("\x7f \x9f") == "\\u007f \\u009f"

    def test_printable_unchanged(self):
        text = "ABC xyz 123 ~!@#$%^&*()_+"
        assert escape_string(text) == text


class TestProcessQuoteLine:

    @pytest.mark.parametrize("line,content,depth", [
        ("normal text", "normal text", 0),
        ("> quoted text", "quoted text", 1),
        (">> double quoted", "double quoted", 2),
        (" > > spaced quotes ", "spaced quotes", 2),
        ("> [!note] callout text", "[!note] callout text", 1),
        ("", "", 0),
        (">>>", "", 3),
        (" > > >  deep quote with text ", "deep quote with text", 3),
    ])
    def test_depth_and_content(self, line, content, depth):
        result = process_quote_line(line)
        assert result.content == content
        assert result.quote_depth == depth
        assert result.is_quote == (depth > 0)

    def test_prefix_length(self):
        assert quote_prefix_length("> > text") == 4
        assert quote_prefix_length("text") == 0


class TestInlineMath:

    def test_boundaries(self):
        assert is_in_inline_math_environment("$123$", 0) is False
        assert all(is_in_inline_math_environment("$123$", i) for i in (1, 2, 3, 4))
        assert is_in_inline_math_environment("$123$", 5) is False

    def test_loose_delimiters_are_literal(self):
        for line in ("$ 123$", "$123 $", "$ 123 $"):
            assert not any(is_in_inline_math_environment(line, i) for i in range(len(line)))

    def test_multiple_and_consecutive(self):
        assert is_in_inline_math_environment("$a$ and $b$", 1)
        assert not is_in_inline_math_environment("$a$ and $b$", 5)
        assert is_in_inline_math_environment("$a$ and $b$", 9)
        assert is_in_inline_math_environment("$a$$b$", 4)

    def test_code_spans_are_opaque(self):
        line = "`$not math$` $real math$"
        assert not is_in_inline_math_environment(line, 5)
        assert is_in_inline_math_environment(line, 19)
        line = "`code with \\` inside` $math$"
        assert not is_in_inline_math_environment(line, 10)
        assert is_in_inline_math_environment(line, 25)

    def test_escapes(self):
        assert not is_in_inline_math_environment("\\$not math\\$", 5)
        assert is_in_inline_math_environment("\\\\$math$", 5)

    def test_odd_dollar_count(self):
        assert is_in_inline_math_environment("$a$b$", 2)
        assert not is_in_inline_math_environment("$a$b$", 3)
        assert not is_in_inline_math_environment("$a$b$", 4)

    def test_display_math_is_skipped(self):
        line = "$$display$$ and then $inline$"
        assert not any(is_in_inline_math_environment(line, i) for i in range(11))
        assert is_in_inline_math_environment(line, 23)
        line = "$$E=mc^2$"
        assert not any(is_in_inline_math_environment(line, i) for i in range(len(line)))

    def test_out_of_range(self):
        assert not is_in_inline_math_environment("", 0)
        assert not is_in_inline_math_environment("$math$", -1)
        assert not is_in_inline_math_environment("$math$", 10)

    def test_spans(self):
        assert find_inline_math_spans("x $a$ y $b$") == [(2, 4), (8, 10)]
        assert find_code_spans("a `b` ``c`` d") == [(2, 5), (6, 11)]


class TestFindLastUnescapedDollar:

    def test_basic(self):
        assert find_last_unescaped_dollar("hello world", 11) == -1
        assert find_last_unescaped_dollar("hello $world", 12) == 6
        assert find_last_unescaped_dollar("$first $second $third", 21) == 15
        assert find_last_unescaped_dollar("$first $second $third", 15) == 7

    def test_position_is_exclusive(self):
        assert find_last_unescaped_dollar("hello $world", 6) == -1
        assert find_last_unescaped_dollar("$test", 0) == -1
        assert find_last_unescaped_dollar("$test", 1) == 0

    def test_escapes(self):
        assert find_last_unescaped_dollar("hello \\$world", 13) == -1
        assert find_last_unescaped_dollar("hello \\\\$world", 14) == 8
        assert find_last_unescaped_dollar("hello \\\\\\$world", 15) == -1
        assert find_last_unescaped_dollar("\\\\\\\\$test", 9) == 4

    def test_consecutive(self):
        assert find_last_unescaped_dollar("$$$$", 4) == 3
        assert find_last_unescaped_dollar("$$$$", 1) == 0
        assert find_last_unescaped_dollar("\\$$\\$", 5) == 2

    def test_is_escaped(self):
        assert is_escaped("\\$", 1)
        assert not is_escaped("\\\\$", 2)


class TestRemovePairedBraces:

    @pytest.mark.parametrize("text,expected", [
        ("abc{def}ghi", "abcdefghi"),
        ("a{b{c}d}e", "abcde"),
        ("abc}def", "abc}def"),
        ("}}abc", "}}abc"),
        ("abc{def", "abcdef"),
        ("a{{}{}}b", "ab"),
        ("}}a{b}c{{d}}e{f", "}}abcdef"),
        ("}{x}{", "}x"),
        ("", ""),
    ])
    def test_remove(self, text, expected):
        assert remove_paired_braces(text) == expected
