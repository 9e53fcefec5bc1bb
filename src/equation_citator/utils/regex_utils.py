"""
Token matchers for citations, tags, fences and footnote links.

Nested `\\ref{...}` and `\\tag{...}` bodies are matched with an explicit
depth counter bounded by MAX_CITATION_DEPTH instead of a recursive regex.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .string_utils import find_inline_math_spans, is_escaped


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# ``` fence, optionally behind blockquote markers
CODE_BLOCK_START = re.compile(r'^\s*(?:>\s*)*```')

# [^note]: [[target|alias]]
PURE_FILE_LINK_FOOTNOTE = re.compile(
    r'^\[(\^[^\]]+)\]:\s*\[\[([^\]|]+)(?:\|([^\]]*))?\]\]\s*$'
)

# #tag("1.1") in Typst mode
RE_TYPST_TAG = re.compile(r'#tag\(\s*"((?:[^"\\]|\\.)*)"\s*\)')

REF_OPEN = "\\ref{"
TAG_OPEN = "\\tag{"
MAX_CITATION_DEPTH = 10


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class NestedCitation:
    """A single `\\ref{...}` located inside a piece of text."""
    content: str      # `\ref{...}` including delimiters
    label: str        # body, with the prefix filter stripped if one was given
    start: int = 0    # offset of `\ref{` in the scanned text
    end: int = 0      # offset just past the closing brace

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "label": self.label}


@dataclass
class LineCitation:
    """An inline-math span holding exactly one `\\ref{}`."""
    label: str
    full_match: str   # `$...$` including both delimiters
    start: int        # index of the opening `$`
    end: int          # index after the closing `$`
    ref_start: int    # index of `\ref{` within the line
    ref_end: int      # index after the `\ref{}` closing brace


@dataclass
class CitationForm:
    valid: bool
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Fences
# ---------------------------------------------------------------------------

def is_code_block_toggle(line: str) -> bool:
    """True if the line is a bare fence line that flips code-block state."""
    if "\n" in line:
        return False
    m = CODE_BLOCK_START.match(line)
    if not m:
        return False
    # the fence run may be longer than three; only an info string may follow
    return "`" not in line[m.end():].lstrip("`")


# ---------------------------------------------------------------------------
# Brace-balanced commands
# ---------------------------------------------------------------------------

def _balanced_close(text: str, body_start: int) -> int:
    """Index of the brace closing a body that starts at `body_start`, or -1."""
    depth = 1
    i = body_start
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\\" and i + 1 < length and text[i + 1] in "{}":
            i += 2
            continue
        if ch == "{":
            depth += 1
            if depth > MAX_CITATION_DEPTH:
                return -1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def match_nested_citation(
    text: str,
    prefix: Optional[str] = None,
) -> Optional[NestedCitation]:
    """
    Match the one `\\ref{...}` in `text`.

    Args:
        text: Text to scan (typically an inline math body)
        prefix: Optional label prefix such as "eq:"; the label must start with
            it after trimming, and it is stripped from the returned label

    Returns:
        NestedCitation, or None when there is no ref, more than one ref, an
        unclosed body, nesting deeper than MAX_CITATION_DEPTH, or a prefix
        mismatch
    """
    if not text or text.count(REF_OPEN) != 1:
        return None

    start = text.find(REF_OPEN)
    body_start = start + len(REF_OPEN)
    close = _balanced_close(text, body_start)
    if close == -1:
        return None

    label = text[body_start:close]
    if prefix:
        trimmed = label.strip()
        if not trimmed.startswith(prefix):
            return None
        label = trimmed[len(prefix):]

    return NestedCitation(
        content=text[start:close + 1],
        label=label,
        start=start,
        end=close + 1,
    )


def match_citations_in_line(line: str) -> List[LineCitation]:
    """Every tight inline-math span of `line` that holds exactly one ref."""
    results: List[LineCitation] = []
    for open_idx, close_idx in find_inline_math_spans(line):
        body = line[open_idx + 1:close_idx]
        cite = match_nested_citation(body)
        if cite is None:
            continue
        results.append(LineCitation(
            label=cite.label,
            full_match=line[open_idx:close_idx + 1],
            start=open_idx,
            end=close_idx + 1,
            ref_start=open_idx + 1 + cite.start,
            ref_end=open_idx + 1 + cite.end,
        ))
    return results


def is_valid_citation_form(text: str, prefix: Optional[str] = None) -> CitationForm:
    cite = match_nested_citation(text, prefix)
    if cite is None:
        return CitationForm(valid=False)
    return CitationForm(valid=True, label=cite.label)


def find_tag_command(text: str) -> Optional[Tuple[int, int, str]]:
    """
    Locate the last `\\tag{...}` (or Typst `#tag("...")`) in `text`.

    Returns:
        (start, end, value) with `end` exclusive and `value` trimmed, or None
    """
    found: Optional[Tuple[int, int, str]] = None

    pos = text.find(TAG_OPEN)
    while pos != -1:
        if not is_escaped(text, pos):
            body_start = pos + len(TAG_OPEN)
            close = _balanced_close(text, body_start)
            if close != -1:
                found = (pos, close + 1, text[body_start:close].strip())
        pos = text.find(TAG_OPEN, pos + 1)

    for m in RE_TYPST_TAG.finditer(text):
        if found is None or m.start() > found[0]:
            found = (m.start(), m.end(), m.group(1).strip())

    return found


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

def create_citation_string(tag: str, extra_content: str = "") -> str:
    return f"$\\ref{{{tag}{extra_content or ''}}}$"


def create_equation_tag_string(tag: str, is_typst: bool = False) -> str:
    if is_typst:
        return f'#tag("{tag}")'
    return f"\\tag{{{tag}}}"
