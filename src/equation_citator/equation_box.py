"""
Box the equation under the cursor.

The editor hands over the document and cursor; the result is a single
replacement `(text, start, end)` with (line, ch) positions that the editor
applies as one edit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .parsers.equation_parser import EquationMatch, parse_equations_in_markdown
from .parsers.line_scanner import split_lines
from .utils.string_utils import quote_prefix_length

Position = Tuple[int, int]


@dataclass
class TextReplacement:
    text: str
    start: Position     # (line, ch), inclusive
    end: Position       # (line, ch), exclusive

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "start": {"line": self.start[0], "ch": self.start[1]},
            "end": {"line": self.end[0], "ch": self.end[1]},
        }


def _box_delimiters(typst_mode: bool, typst_box_symbol: str) -> Tuple[str, str]:
    if typst_mode:
        return f"{typst_box_symbol}(", ")"
    return "\\boxed{", "}"


def _line_offsets(lines: List[str]) -> List[int]:
    offsets = []
    total = 0
    for line in lines:
        offsets.append(total)
        total += len(line) + 1
    return offsets


def _content_start(lines: List[str], eq: EquationMatch, index: int) -> Optional[int]:
    """Column where the body starts on `index`, or None for a blank line."""
    raw = lines[index]
    start = quote_prefix_length(raw)
    if index == eq.line_start:
        start = raw.index("$$", start) + 2
    end = _content_end_limit(lines, eq, index)
    segment = raw[start:end]
    if not segment.strip():
        return None
    return start + (len(segment) - len(segment.lstrip()))


def _content_end_limit(lines: List[str], eq: EquationMatch, index: int) -> int:
    raw = lines[index]
    if index == eq.line_end and eq.closed and index != eq.line_start:
        return raw.rstrip().rfind("$$")
    return len(raw)


def box_equation_at(
    markdown: str,
    line: int,
    ch: int = 0,
    skip_first_line: bool = False,
    typst_mode: bool = False,
    typst_box_symbol: str = "rect",
) -> Optional[TextReplacement]:
    """
    Wrap the equation containing (line, ch) in `\\boxed{...}`.

    Single-line equations get their trimmed body boxed between the two `$$`.
    For multi-line equations the replacement runs from the first non-blank
    body line to the closing `$$`; the newline and quote prefix in front of
    the closer stay outside the box.

    Args:
        markdown: Full document text
        line: Cursor line (0-based)
        ch: Cursor column
        skip_first_line: Leave the first body line (e.g. `\\begin{align}`)
            outside the box unless it is blank
        typst_mode: Emit `<symbol>(...)` instead of `\\boxed{...}`
        typst_box_symbol: Typst box function name

    Returns:
        TextReplacement, or None when the cursor is not inside an equation
    """
    equation = None
    for eq in parse_equations_in_markdown(markdown, parse_quotes=True):
        if eq.line_start <= line <= eq.line_end:
            equation = eq
            break
    if equation is None:
        return None

    lines = split_lines(markdown)
    open_box, close_box = _box_delimiters(typst_mode, typst_box_symbol)

    if equation.line_start == equation.line_end and equation.closed:
        raw = lines[equation.line_start]
        start = raw.index("$$", quote_prefix_length(raw)) + 2
        end = max(raw.rstrip().rfind("$$"), start)
        body = raw[start:end].strip()
        return TextReplacement(
            text=f"{open_box}{body}{close_box}",
            start=(equation.line_start, start),
            end=(equation.line_start, end),
        )

    body_lines = []
    for index in range(equation.line_start, equation.line_end + 1):
        col = _content_start(lines, equation, index)
        if col is not None:
            body_lines.append((index, col))
    if not body_lines:
        return None

    first_line, first_col = body_lines[0]
    start = (first_line, first_col)
    if equation.closed:
        end_line = equation.line_end
        end = (end_line, _content_end_limit(lines, equation, end_line))
    else:
        end = (equation.line_end, len(lines[equation.line_end]))

    wrap_start = start
    opener_has_body = _content_start(lines, equation, equation.line_start) is not None
    first_body_line = equation.line_start if opener_has_body else equation.line_start + 1
    if skip_first_line and first_line == first_body_line and len(body_lines) > 1:
        wrap_start = body_lines[1]

    last_line, _ = body_lines[-1]
    last_raw = lines[last_line]
    wrap_end = (last_line, len(last_raw[:_content_end_limit(lines, equation, last_line)].rstrip()))

    offsets = _line_offsets(lines)

    def absolute(pos: Position) -> int:
        return offsets[pos[0]] + pos[1]

    a_start, a_wrap_start = absolute(start), absolute(wrap_start)
    a_wrap_end, a_end = absolute(wrap_end), absolute(end)
    text = (
        markdown[a_start:a_wrap_start]
        + open_box
        + markdown[a_wrap_start:a_wrap_end]
        + close_box
        + markdown[a_wrap_end:a_end]
    )
    return TextReplacement(text=text, start=start, end=end)
