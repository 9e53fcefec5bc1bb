"""Equation auto-numbering: assign `\\tag{...}` to every display equation."""

from __future__ import annotations

from typing import Dict, List, Tuple, Union

from ..parsers.equation_parser import EquationMatch, parse_equations_in_markdown
from ..parsers.heading_parser import parse_headings
from ..parsers.line_scanner import split_lines
from ..utils.regex_utils import create_equation_tag_string, find_tag_command
from ..utils.string_utils import quote_prefix_length
from .core import AutoNumberingType, NumberingOptions, NumberingResult, record_mapping, walk_in_order


def _segments(lines: List[str], eq: EquationMatch) -> List[Tuple[int, int, int]]:
    """(line, start, end) of the equation body on each line, last line first."""
    segments = []
    for index in range(eq.line_end, eq.line_start - 1, -1):
        raw = lines[index]
        start = quote_prefix_length(raw)
        end = len(raw.rstrip())
        if index == eq.line_start:
            start = raw.index("$$", start) + 2
        if index == eq.line_end and eq.closed:
            end = raw.rstrip().rfind("$$")
            if index == eq.line_start:
                # single line: `$$ body $$`
                end = max(end, start)
        segments.append((index, start, end))
    return segments


def _retag(lines: List[str], eq: EquationMatch, tag_string: str) -> None:
    segments = _segments(lines, eq)

    for index, start, end in segments:
        found = find_tag_command(lines[index][start:end])
        if found is not None:
            raw = lines[index]
            lines[index] = raw[:start + found[0]] + tag_string + raw[start + found[1]:]
            return

    for index, start, end in segments:
        raw = lines[index]
        body_end = len(raw[:end].rstrip())
        if body_end <= start:
            continue
        lines[index] = raw[:body_end] + " " + tag_string + raw[body_end:]
        return

    # empty equation: put the tag right after the opening `$$`
    index, start, _ = segments[-1]
    raw = lines[index]
    lines[index] = raw[:start] + " " + tag_string + raw[start:]


def auto_number_equations(
    content: str,
    auto_numbering_type: Union[AutoNumberingType, str] = AutoNumberingType.RELATIVE,
    max_depth: int = 3,
    delimiter: str = ".",
    no_heading_prefix: str = "P",
    global_prefix: str = "",
    parse_quotes: bool = False,
    typst: bool = False,
) -> NumberingResult:
    """
    Renumber every display equation from the heading structure.

    Existing tags are replaced in place; untagged equations get a tag after
    their last body line. Equations inside fenced code are never touched,
    and quoted equations only when `parse_quotes` is set.

    Args:
        content: Full document text
        auto_numbering_type: Relative or absolute heading depth
        max_depth: Number of tag segments, heading path included
        delimiter: Separator between tag segments
        no_heading_prefix: Prefix for equations before the first heading
        global_prefix: Prefix prepended to every tag
        parse_quotes: Also number equations inside blockquotes
        typst: Emit `#tag("...")` instead of `\\tag{...}`

    Returns:
        NumberingResult with the rewritten text and the old -> new mapping
    """
    if not content:
        return NumberingResult(md=content or "")

    options = NumberingOptions(
        auto_numbering_type=auto_numbering_type,
        max_depth=max_depth,
        delimiter=delimiter,
        no_heading_prefix=no_heading_prefix,
        global_prefix=global_prefix,
        parse_quotes=parse_quotes,
    )
    equations = parse_equations_in_markdown(content, parse_quotes=options.parse_quotes)
    if not equations:
        return NumberingResult(md=content)

    lines = split_lines(content)
    mapping: Dict[str, str] = {}
    for eq, counter in walk_in_order(parse_headings(content), equations, options):
        new_tag = counter.next_tag()
        record_mapping(mapping, eq.tag, new_tag)
        _retag(lines, eq, create_equation_tag_string(new_tag, typst))

    md = "\n".join(lines)
    return NumberingResult(md=md, tag_mapping=mapping, numbered=len(equations))
