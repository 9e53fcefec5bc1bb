"""Tests for citation tag splitting, ranges and autocompletion input."""

import pytest

from equation_citator.linkers.citation_tags import (
    combine_continuous_citation_tags,
    extract_auto_complete_input_tag,
    extract_common_prefix,
    extract_last_number,
    split_continuous_citation_tags,
    split_file_citation,
)

DELIMITERS = [".", "-", ":", "_"]


def _combine(tags):
    return combine_continuous_citation_tags(tags, "~", DELIMITERS, "^")


def _split(tags):
    return split_continuous_citation_tags(tags, "~", [".", "-"], "^")


class TestCombine:

    @pytest.mark.parametrize("tags,expected", [
        (["1.1.1", "1.1.2"], ["1.1.1~2"]),
        (["EQ1", "EQ2", "EQ3"], ["EQ1~3"]),
        (["1.1.3", "1.1.1", "1.1.2"], ["1.1.1~3"]),
        (["1.1.1", "1.1.3", "1.1.5"], ["1.1.1", "1.1.3", "1.1.5"]),
        (["1-1-1", "1-1-2", "1-1-3"], ["1-1-1~3"]),
        (["1.1-1", "1.1-2", "1.1-3"], ["1.1-1~3"]),
        (["1.1.1", "2.1.1", "1.1.2"], ["1.1.1~2", "2.1.1"]),
        (["P1", "2.1.1", "3:1:1"], ["P1", "2.1.1", "3:1:1"]),
        ([], []),
    ])
    def test_local_tags(self, tags, expected):
        assert _combine(tags) == expected

    def test_cross_file_tags(self):
        assert _combine(["P1", "2^1.1.1", "2^1.1.2", "2^1.1.3"]) == ["P1", "2^{1.1.1~3}"]
        assert _combine(["1^1.1.1", "1^1.1.2", "2^1.1.1", "2^1.1.2"]) == ["1^{1.1.1~2}", "2^{1.1.1~2}"]

    def test_complex_mix(self):
        tags = ["P1", "1^{1.1.1}", "1^{1.1.2}", "2.1.1", "2.1.2", "2^{1.1.1}", "3-1-1", "3-1-2"]
        assert _combine(tags) == ["P1", "1^{1.1.1~2}", "2.1.1~2", "2^{1.1.1}", "3-1-1~2"]

    def test_existing_ranges_and_blanks(self):
        assert _combine(["", "P1~2", "", "P3~4"]) == ["P1~2", "P3~4"]

    def test_malformed_prefix_is_not_grouped(self):
        assert _combine([".1", ".2"]) == [".1", ".2"]
        assert _combine(["1..1", "1..2"]) == ["1..1", "1..2"]


class TestSplit:

    @pytest.mark.parametrize("tags,expected", [
        (["1~3"], ["1", "2", "3"]),
        (["P1~3"], ["P1", "P2", "P3"]),
        (["1.2.1~4"], ["1.2.1", "1.2.2", "1.2.3", "1.2.4"]),
        (["A-1~3"], ["A-1", "A-2", "A-3"]),
        (["P01~03"], ["P1", "P2", "P3"]),
        ([" P1 ", "", "P2"], ["P1", "P2"]),
    ])
    def test_local_ranges(self, tags, expected):
        assert _split(tags) == expected

    def test_cross_file_ranges(self):
        assert _split(["2^1.1.1~3"]) == ["2^{1.1.1}", "2^{1.1.2}", "2^{1.1.3}"]
        assert _split(["P1~2", "2^{1.1.1~2}", "1^{1.3.4}"]) == ["P1", "P2", "2^{1.1.1}", "2^{1.1.2}", "1^{1.3.4}"]
        assert _split(["2~3^{1.1}"]) == ["2~3^{1.1}"]

    @pytest.mark.parametrize("tag", ["P5~3", "P1~abc", "Pabc~3", "~3", "..~3"])
    def test_invalid_ranges_kept(self, tag):
        assert _split([tag]) == [tag]

    def test_last_range_symbol_is_used(self):
        assert _split(["P1~2~3"]) == ["P1~2", "P1~3"]

    def test_none_input(self):
        assert _split(None) == []


class TestFileCitation:

    @pytest.mark.parametrize("tag,cross,local", [
        ("1^1.3.1", "1", "1.3.1"),
        ("1.3.1", None, "1.3.1"),
        ("1^1.3.1~3", "1", "1.3.1~3"),
        ("1^2^1.1.1", "1", "2^1.1.1"),
        ("2^{1.1.1~3}", "2", "1.1.1~3"),
        ("3^{1.{2}.1}", "3", "1.2.1"),
        (" 4 ^ { 1.2.3 } ", "4", "1.2.3"),
    ])
    def test_split(self, tag, cross, local):
        cite = split_file_citation(tag, "^")
        assert (cite.cross_file, cite.local) == (cross, local)

    def test_custom_delimiter(self):
        assert split_file_citation("1@1.3.1", "@").to_dict() == {"cross_file": "1", "local": "1.3.1"}


def test_common_prefix():
    assert extract_common_prefix("1.3.1", "1.3.3", DELIMITERS) == "1.3."
    assert extract_common_prefix("1-3-1", "1-3-3", DELIMITERS) == "1-3-"
    assert extract_common_prefix("1.2.3", "4.5.6", DELIMITERS) == ""
    assert extract_common_prefix("1.2.3", "1.2.4.5", DELIMITERS) == "1.2."
    assert extract_common_prefix("1.2-3", "1.2-4", DELIMITERS) == "1.2-"


def test_last_number():
    assert extract_last_number("1.3.123", "1.3.") == 123
    assert extract_last_number("123", "") == 123
    assert extract_last_number("1.3.a", "1.3.") is None
    assert extract_last_number("2.1", "1.") is None


class TestAutoCompleteInput:

    @pytest.mark.parametrize("content,expected", [
        ("abc", "abc"),
        ("tag1,tag2", "tag2"),
        ("tag1, tag2", "tag2"),
        (" tag1 , tag2", "tag2"),
        ("tag1,par", "par"),
        ("tag1,,partial", "partial"),
        ("tag1,", ""),
        ("tag1, ", ""),
        ("tag1 ", ""),
        ("tag1,tag2\t", ""),
        ("tag1,,,", ""),
        ("", ""),
        ("   ", ""),
    ])
    def test_comma(self, content, expected):
        assert extract_auto_complete_input_tag(content, ",") == expected

    def test_other_delimiters(self):
        assert extract_auto_complete_input_tag("tag1;tag2", ";") == "tag2"
        assert extract_auto_complete_input_tag("tag1::tag2::", "::") == ""
        assert extract_auto_complete_input_tag("tag1::partial", "::") == "partial"
        assert extract_auto_complete_input_tag("no_delimiter_here", ";") == "no_delimiter_here"
