"""
Citation tag algebra.

A citation tag is `[crossFile<fileDelimiter>]local`, where the local part may
be brace-wrapped when it belongs to another file and may end in a range
suffix, e.g. `1.2.1~4` or `2^{1.1.1~3}`. Runs of consecutive tags are
compressed into ranges for display and expanded back for lookups.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..utils.string_utils import remove_paired_braces


# prefix + trailing digit run, e.g. `1.2.` + `13`, `EQ` + `4`
RE_TRAILING_NUMBER = re.compile(r'^(.*?)(\d+)$', re.DOTALL)

RE_DIGITS = re.compile(r'^\d+$')


@dataclass
class FileCitation:
    cross_file: Optional[str]
    local: str

    def to_dict(self) -> Dict[str, Any]:
        return {"cross_file": self.cross_file, "local": self.local}


# ---------------------------------------------------------------------------
# Tag parts
# ---------------------------------------------------------------------------

def _first_outside_braces(text: str, needle: str) -> int:
    depth = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
        elif depth == 0 and text.startswith(needle, i):
            return i
        i += 1
    return -1


def split_file_citation(tag: str, file_delimiter: str) -> FileCitation:
    """
    Split a tag into its cross-file id and local part.

    The first file delimiter outside any braces separates the two. A local
    part wrapped in braces is unwrapped, with inner paired braces removed.

    Args:
        tag: Citation tag, e.g. "2^{1.1.1~3}"
        file_delimiter: Separator between file id and local tag

    Returns:
        FileCitation; `cross_file` is None for a local tag
    """
    text = (tag or "").strip()
    pos = _first_outside_braces(text, file_delimiter) if file_delimiter else -1
    if pos == -1:
        return FileCitation(cross_file=None, local=text)

    cross_file = text[:pos].strip()
    local = text[pos + len(file_delimiter):].strip()
    if local.startswith("{") and local.endswith("}"):
        local = remove_paired_braces(local[1:-1]).strip()
    return FileCitation(cross_file=cross_file, local=local)


def join_file_citation(cross_file: Optional[str], local: str, file_delimiter: str) -> str:
    if cross_file is None:
        return local
    return f"{cross_file}{file_delimiter}{{{local}}}"


def extract_common_prefix(a: str, b: str, valid_delimiters: Sequence[str]) -> str:
    """Longest prefix of `a` ending at a delimiter that `b` also starts with."""
    best = ""
    for i in range(len(a)):
        for delim in valid_delimiters:
            if delim and a.startswith(delim, i):
                candidate = a[:i + len(delim)]
                if b.startswith(candidate) and len(candidate) > len(best):
                    best = candidate
    return best


def extract_last_number(tag: str, prefix: str) -> Optional[int]:
    """Integer after `prefix`, or None when the rest is not all digits."""
    if not tag.startswith(prefix):
        return None
    rest = tag[len(prefix):]
    if not RE_DIGITS.match(rest):
        return None
    return int(rest)


def _is_well_formed(prefix: str, valid_delimiters: Sequence[str]) -> bool:
    """Reject prefixes with a leading or doubled delimiter."""
    delims = [d for d in valid_delimiters if d]
    for delim in delims:
        if prefix.startswith(delim):
            return False
        for other in delims:
            if delim + other in prefix:
                return False
    return True


def _split_number(local: str, valid_delimiters: Sequence[str]) -> Optional[Tuple[str, int]]:
    m = RE_TRAILING_NUMBER.match(local)
    if not m or not _is_well_formed(m.group(1), valid_delimiters):
        return None
    return m.group(1), int(m.group(2))


# ---------------------------------------------------------------------------
# Range compression / expansion
# ---------------------------------------------------------------------------

def combine_continuous_citation_tags(
    tags: Optional[Sequence[str]],
    range_symbol: str,
    valid_delimiters: Sequence[str],
    file_delimiter: str,
) -> List[str]:
    """
    Compress runs of consecutive tags into ranges.

    Tags are grouped by cross-file id and by the prefix before their trailing
    number; groups keep the order of their first member. Inside a group,
    numbers are sorted and each run of two or more becomes
    `prefix<first><range_symbol><last>`.

    Args:
        tags: Tags as written; empty entries are dropped
        range_symbol: Range marker, e.g. "~"
        valid_delimiters: Segment delimiters of the local part
        file_delimiter: Cross-file separator, e.g. "^"

    Returns:
        Compressed tag list
    """
    groups: Dict[Tuple[Optional[str], str, bool], Dict[int, str]] = {}
    order: List[Tuple[Optional[str], str, bool]] = []

    for raw in tags or []:
        tag = (raw or "").strip()
        if not tag:
            continue
        cite = split_file_citation(tag, file_delimiter)
        parts = None
        if not range_symbol or range_symbol not in cite.local:
            parts = _split_number(cite.local, valid_delimiters)

        if parts is None:
            key = (cite.cross_file, cite.local, False)
            if key not in groups:
                groups[key] = {}
                order.append(key)
            continue

        prefix, number = parts
        key = (cite.cross_file, prefix, True)
        if key not in groups:
            groups[key] = {}
            order.append(key)
        groups[key].setdefault(number, cite.local)

    result: List[str] = []
    for key in order:
        cross_file, prefix, numeric = key
        if not numeric:
            result.append(join_file_citation(cross_file, prefix, file_delimiter))
            continue

        numbers = sorted(groups[key])
        run_start = 0
        for i in range(1, len(numbers) + 1):
            if i < len(numbers) and numbers[i] == numbers[i - 1] + 1:
                continue
            first, last = numbers[run_start], numbers[i - 1]
            if first == last:
                local = groups[key][first]
            else:
                local = f"{prefix}{first}{range_symbol}{last}"
            result.append(join_file_citation(cross_file, local, file_delimiter))
            run_start = i
    return result


def _expand_local(local: str, range_symbol: str,
                  valid_delimiters: Sequence[str]) -> Optional[List[str]]:
    pos = local.rfind(range_symbol)
    head, tail = local[:pos], local[pos + len(range_symbol):].strip()
    parts = _split_number(head.strip(), valid_delimiters)
    if parts is None or not RE_DIGITS.match(tail):
        return None
    prefix, start = parts
    end = int(tail)
    if end < start:
        return None
    return [f"{prefix}{n}" for n in range(start, end + 1)]


def split_continuous_citation_tags(
    tags: Optional[Sequence[str]],
    range_symbol: str,
    valid_delimiters: Sequence[str],
    file_delimiter: str,
) -> List[str]:
    """
    Expand range tags into individual tags.

    The range is taken at the last `range_symbol` of the local part. Numbers
    are written unpadded. Invalid ranges (non-numeric ends, descending
    bounds, missing prefix number) are kept verbatim. Cross-file tags come
    back brace-wrapped.

    Args:
        tags: Tags as written; None or empty entries are dropped
        range_symbol: Range marker, e.g. "~"
        valid_delimiters: Segment delimiters of the local part
        file_delimiter: Cross-file separator, e.g. "^"

    Returns:
        Flat list of tags
    """
    result: List[str] = []
    for raw in tags or []:
        tag = (raw or "").strip()
        if not tag:
            continue
        cite = split_file_citation(tag, file_delimiter)
        if not range_symbol or range_symbol not in cite.local:
            result.append(join_file_citation(cite.cross_file, cite.local, file_delimiter))
            continue

        expanded = _expand_local(cite.local, range_symbol, valid_delimiters)
        if expanded is None:
            result.append(tag)
            continue
        result.extend(join_file_citation(cite.cross_file, local, file_delimiter) for local in expanded)
    return result


def extract_auto_complete_input_tag(content: str, delimiter: str) -> str:
    """
    Partial tag under the cursor for autocompletion.

    Returns "" when the input is blank, ends in whitespace or ends in the
    delimiter, since there is no token being typed in those cases.
    """
    if not content or content[-1].isspace():
        return ""
    if delimiter and content.endswith(delimiter):
        return ""
    if not delimiter:
        return content.strip()
    return content.split(delimiter)[-1].strip()
