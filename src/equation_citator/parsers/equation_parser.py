"""
Display-math equation parser.

Recognizes `$$ ... $$` on one line and `$$` fenced blocks spanning several
lines, inside or outside blockquotes, never inside fenced code. A fence line
must carry nothing but the equation: prose, table pipes or inline code in
front of `$$` disqualify the line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..utils.regex_utils import find_tag_command
from .line_scanner import ScanState, advance, split_lines


@dataclass
class EquationMatch:
    """A display equation found in a document."""
    raw: str                  # quote-stripped, trimmed source lines joined by \n
    content: str              # body without the tag command
    content_with_tag: str     # body as written
    line_start: int
    line_end: int
    tag: Optional[str] = None
    in_quote: bool = False
    quote_depth: int = 0
    closed: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw": self.raw,
            "content": self.content,
            "content_with_tag": self.content_with_tag,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "tag": self.tag,
            "in_quote": self.in_quote,
        }


def is_valid_equation_part(part: str, valid_delimiters: Sequence[str]) -> bool:
    """True if `part` is digit runs joined by single valid delimiters."""
    if not part:
        return False
    if valid_delimiters:
        delims = "|".join(re.escape(d) for d in valid_delimiters if d)
        pattern = rf'^\d+(?:(?:{delims})\d+)*$'
    else:
        pattern = r'^\d+$'
    return re.match(pattern, part) is not None


def _is_single_line(content: str) -> bool:
    return (
        len(content) >= 4
        and content.startswith("$$")
        and not content.startswith("$$$")
        and content.endswith("$$")
    )


def _is_opener(content: str) -> bool:
    return (
        content.startswith("$$")
        and not content.startswith("$$$")
        and "$$" not in content[2:]
    )


def _build_match(
    lines: List[str],
    interior: List[str],
    line_start: int,
    line_end: int,
    quote_depth: int,
    closed: bool,
) -> EquationMatch:
    content_with_tag = "\n".join(interior).strip()
    tag = None
    content = content_with_tag
    found = find_tag_command(content_with_tag)
    if found is not None:
        start, end, tag = found
        content = (content_with_tag[:start] + content_with_tag[end:]).strip()
    return EquationMatch(
        raw="\n".join(lines),
        content=content,
        content_with_tag=content_with_tag,
        line_start=line_start,
        line_end=line_end,
        tag=tag,
        in_quote=quote_depth > 0,
        quote_depth=quote_depth,
        closed=closed,
    )


def parse_equations_in_markdown(markdown: str, parse_quotes: bool = True) -> List[EquationMatch]:
    """
    Parse every display equation in a document.

    Args:
        markdown: Full document text
        parse_quotes: Include equations that sit inside blockquotes/callouts

    Returns:
        EquationMatch records in document order
    """
    equations: List[EquationMatch] = []
    if not markdown or not markdown.strip():
        return equations

    state = ScanState()
    block_lines: Optional[List[str]] = None
    interior: List[str] = []
    start = 0
    depth = 0

    lines = split_lines(markdown)
    for index, raw in enumerate(lines):
        next_state, line = advance(state, index, raw)

        if block_lines is not None:
            block_lines.append(line.content)
            if line.content.endswith("$$"):
                body = line.content[:-2].strip()
                if body:
                    interior.append(body)
                equations.append(_build_match(block_lines, interior, start, index, depth, True))
                block_lines = None
            else:
                interior.append(line.content)
            continue

        state = next_state
        if line.is_code:
            continue

        content = line.content
        if _is_single_line(content):
            equations.append(_build_match(
                [content], [content[2:-2]], index, index, line.quote_depth, True,
            ))
        elif _is_opener(content):
            block_lines = [content]
            first = content[2:].strip()
            interior = [first] if first else []
            start = index
            depth = line.quote_depth

    if block_lines is not None:
        equations.append(_build_match(block_lines, interior, start, len(lines) - 1, depth, False))

    if not parse_quotes:
        equations = [eq for eq in equations if not eq.in_quote]
    return equations


def parse_first_equation_in_markdown(markdown: str, tag: str) -> Optional[EquationMatch]:
    """First equation whose tag equals `tag` exactly, or None."""
    if not markdown or not markdown.strip() or not tag or not tag.strip():
        return None
    for equation in parse_equations_in_markdown(markdown):
        if equation.tag == tag:
            return equation
    return None
