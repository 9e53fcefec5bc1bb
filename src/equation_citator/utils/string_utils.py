"""
Character-level scanners for Markdown + LaTeX text.

Every routine here is a single left-to-right (or right-to-left) pass over a
string with an explicit depth counter or escape counter; none of them uses a
backtracking regex, so all run in linear time on hostile input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class QuoteLine:
    """A line with its blockquote markers consumed."""
    content: str          # remainder after the `>` run, trimmed
    quote_depth: int      # number of `>` markers
    is_quote: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "quote_depth": self.quote_depth,
            "is_quote": self.is_quote,
        }


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# leading whitespace + any run of `>` markers, each optionally spaced
RE_QUOTE_PREFIX = re.compile(r'^\s*((?:>\s*)*)')

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}


# ---------------------------------------------------------------------------
# Brace / escape helpers
# ---------------------------------------------------------------------------

def remove_paired_braces(s: str) -> str:
    """Drop every brace that belongs to a matched pair, keep the content.

    A `}` seen at depth 0 has no partner and is kept verbatim. An opening
    `{` that is never closed is dropped as well.
    """
    out = []
    depth = 0
    for ch in s:
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                out.append(ch)
            else:
                depth -= 1
        else:
            out.append(ch)
    return "".join(out)


def escape_string(s: str, quote_type: Optional[str] = None) -> str:
    """
    Escape a string for embedding in a quoted literal.

    Args:
        s: Raw string
        quote_type: `"` or `'` to escape that quote character as well

    Returns:
        Escaped string; control characters in 0x00-0x1F and 0x7F-0x9F
        without a short escape become `\\u00XX` (lowercase hex)
    """
    out = []
    for ch in s:
        if ch in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[ch])
        elif quote_type is not None and ch == quote_type:
            out.append("\\" + ch)
        else:
            code = ord(ch)
            if code <= 0x1F or 0x7F <= code <= 0x9F:
                out.append("\\u%04x" % code)
            else:
                out.append(ch)
    return "".join(out)


def is_escaped(text: str, pos: int) -> bool:
    """True if the character at `pos` is preceded by an odd backslash run."""
    count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        count += 1
        i -= 1
    return count % 2 == 1


def process_quote_line(line: str) -> QuoteLine:
    """Consume leading `>` markers and report depth plus trimmed content."""
    m = RE_QUOTE_PREFIX.match(line)
    markers = m.group(1) if m else ""
    depth = markers.count(">")
    content = line[m.end():] if m else line
    return QuoteLine(content=content.strip(), quote_depth=depth, is_quote=depth > 0)


def quote_prefix_length(line: str) -> int:
    """Length of the leading whitespace + `>` marker run of a line."""
    m = RE_QUOTE_PREFIX.match(line)
    return m.end() if m else 0


# ---------------------------------------------------------------------------
# Inline code / inline math spans
# ---------------------------------------------------------------------------

def _backtick_run(line: str, i: int) -> int:
    n = 0
    while i + n < len(line) and line[i + n] == "`":
        n += 1
    return n


def find_code_spans(line: str) -> List[Tuple[int, int]]:
    """
    Locate inline code spans in a single line.

    An opening run of N unescaped backticks closes at the next run of exactly
    N unescaped backticks. A run without a partner is literal text.

    Returns:
        List of (start, end) index pairs, `end` exclusive, covering the
        delimiters
    """
    spans: List[Tuple[int, int]] = []
    i = 0
    length = len(line)
    while i < length:
        if line[i] != "`" or is_escaped(line, i):
            i += 1
            continue
        run = _backtick_run(line, i)
        j = i + run
        close = -1
        while j < length:
            if line[j] == "`" and not is_escaped(line, j):
                other = _backtick_run(line, j)
                if other == run:
                    close = j
                    break
                j += other
            else:
                j += 1
        if close == -1:
            i += run
            continue
        spans.append((i, close + run))
        i = close + run
    return spans


def find_inline_math_spans(line: str) -> List[Tuple[int, int]]:
    """
    Locate single-`$` inline math spans in a line.

    Rules:
      - `$` preceded by an odd number of backslashes is literal
      - `$$ ... $$` is display math and is skipped as a whole
      - the opening `$` must not be followed by whitespace and the closing
        `$` must not be preceded by whitespace; otherwise the opener is
        treated as literal
      - inline code spans are opaque

    Returns:
        List of (open, close) indices of the two `$` delimiters
    """
    spans: List[Tuple[int, int]] = []
    code_spans = find_code_spans(line)
    code_starts = {start: end for start, end in code_spans}
    length = len(line)
    i = 0
    while i < length:
        if i in code_starts:
            i = code_starts[i]
            continue
        ch = line[i]
        if ch != "$" or is_escaped(line, i):
            i += 1
            continue

        if i + 1 < length and line[i + 1] == "$":
            close = _find_display_close(line, i + 2, code_starts)
            i = close + 2 if close != -1 else i + 2
            continue

        if i + 1 >= length or line[i + 1].isspace():
            i += 1
            continue

        close = _find_unescaped_dollar(line, i + 1, code_starts)
        if close == -1 or line[close - 1].isspace():
            i += 1
            continue
        spans.append((i, close))
        i = close + 1
    return spans


def _find_unescaped_dollar(line: str, start: int, code_starts: dict) -> int:
    i = start
    while i < len(line):
        if i in code_starts:
            return -1
        if line[i] == "$" and not is_escaped(line, i):
            return i
        i += 1
    return -1


def _find_display_close(line: str, start: int, code_starts: dict) -> int:
    i = start
    while i < len(line) - 1:
        if i in code_starts:
            i = code_starts[i]
            continue
        if line[i] == "$" and line[i + 1] == "$" and not is_escaped(line, i):
            return i
        i += 1
    return -1


def is_in_inline_math_environment(line: str, pos: int) -> bool:
    """True iff `pos` lies after an inline-math opener and up to its closer."""
    if pos < 0 or pos >= len(line):
        return False
    for open_idx, close_idx in find_inline_math_spans(line):
        if open_idx < pos <= close_idx:
            return True
        if open_idx >= pos:
            break
    return False


def find_last_unescaped_dollar(line: str, pos: int) -> int:
    """Index of the nearest unescaped `$` strictly before `pos`, or -1."""
    i = min(pos, len(line)) - 1
    while i >= 0:
        if line[i] == "$" and not is_escaped(line, i):
            return i
        i -= 1
    return -1
