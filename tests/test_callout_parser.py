"""Tests for citable callouts."""

from equation_citator.parsers.callout_parser import (
    CitationPrefix,
    format_callout_title,
    parse_all_callouts_from_markdown,
    parse_first_callout_in_markdown,
)


def test_basic_callout(callout_prefixes):
    [callout] = parse_all_callouts_from_markdown("> [!table:1.1]\n> This is a table callout", callout_prefixes)
    assert (callout.type, callout.prefix, callout.tag, callout.label) == ("table", "table:", "1.1", "table:1.1")
    assert callout.content == "This is a table callout"
    assert (callout.line_start, callout.line_end) == (0, 1)


def test_multi_line_and_multiple(callout_prefixes):
    md = "\n".join([
        "> [!thm:2.3] Pythagoras",
        "> **Theorem**: a long statement",
        ">",
        "> The proof is left as an exercise.",
        "",
        "Some text",
        "",
        "> [!def:A.5]",
        "> Definition content",
    ])
    callouts = parse_all_callouts_from_markdown(md, callout_prefixes)
    assert [c.tag for c in callouts] == ["2.3", "A.5"]
    assert callouts[0].title == "Pythagoras"
    assert "proof" in callouts[0].content
    assert callouts[0].line_end == 3


def test_ends_at_non_quote_line(callout_prefixes):
    md = "> [!table:1.1]\n> Line 1\n> Line 2\nRegular text\n> [!thm:2.1]\n> Another"
    callouts = parse_all_callouts_from_markdown(md, callout_prefixes)
    assert len(callouts) == 2
    assert callouts[0].content == "Line 1\nLine 2"


def test_ignored_forms(callout_prefixes):
    assert parse_all_callouts_from_markdown("> plain quote\n> text", callout_prefixes) == []
    assert parse_all_callouts_from_markdown("```\n> [!table:9]\n> x\n```", callout_prefixes) == []
    assert parse_all_callouts_from_markdown("> [!example:1.1]\n> x", callout_prefixes) == []
    assert parse_all_callouts_from_markdown("> [!table:1.1]\n> x", []) == []


def test_longest_prefix_wins():
    prefixes = [CitationPrefix("thm:", "Theorem #"), CitationPrefix("thm:lemma:", "Lemma #")]
    [callout] = parse_all_callouts_from_markdown("> [!thm:lemma:3]", prefixes)
    assert callout.prefix == "thm:lemma:"
    assert callout.tag == "3"


def test_first_callout_and_title(callout_prefixes):
    md = "> [!thm:2.3]\n> A\n\n> [!table:1.1]\n> B"
    callout = parse_first_callout_in_markdown(md, "1.1", callout_prefixes)
    assert callout.label == "table:1.1"
    assert format_callout_title(callout, callout_prefixes) == "Table. 1.1"
    theorem = parse_first_callout_in_markdown(md, "2.3", callout_prefixes)
    assert format_callout_title(theorem, callout_prefixes) == "Theorem 2.3"
    assert parse_first_callout_in_markdown(md, " ", callout_prefixes) is None
