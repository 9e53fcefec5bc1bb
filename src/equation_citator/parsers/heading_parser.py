"""ATX heading extraction and relative depth resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .line_scanner import scan_lines


# `#` x 1..6, then whitespace and text
RE_HEADING = re.compile(r'^(#{1,6})\s+(.*?)\s*$')


@dataclass(frozen=True)
class Heading:
    level: int    # raw Markdown level
    line: int     # 0-based line number
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "line": self.line, "text": self.text}


def parse_headings(markdown: str) -> List[Heading]:
    """Collect headings outside fenced code and blockquotes, in line order."""
    headings: List[Heading] = []
    for line in scan_lines(markdown):
        if line.is_code or line.in_quote:
            continue
        m = RE_HEADING.match(line.raw)
        if m:
            headings.append(Heading(level=len(m.group(1)), line=line.index, text=m.group(2)))
    return headings


def relative_heading_levels(headings: Sequence[Heading]) -> List[int]:
    """
    Relative depth of every heading.

    A stack of raw levels holds the open ancestors; a heading pops every
    ancestor whose raw level is >= its own, so any jump in raw level only
    ever adds one relative level.
    """
    depths: List[int] = []
    stack: List[int] = []
    for heading in headings:
        while stack and stack[-1] >= heading.level:
            stack.pop()
        depths.append(len(stack) + 1)
        stack.append(heading.level)
    return depths


def relative_heading_level(headings: Sequence[Heading], index: int) -> int:
    """Relative depth of `headings[index]`; 0 for an empty list or bad index."""
    if not headings or index < 0 or index >= len(headings):
        return 0
    return relative_heading_levels(headings[:index + 1])[index]
