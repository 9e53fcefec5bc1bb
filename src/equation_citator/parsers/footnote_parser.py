"""Footnote definitions that point at other notes: `[^n]: [[path|alias]]`."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..utils.regex_utils import PURE_FILE_LINK_FOOTNOTE
from .line_scanner import scan_lines


# [^num]: body   (must start the line)
RE_FOOTNOTE_DEF = re.compile(r'^\[\^([^\]]+)\]:\s*(.*?)\s*$')

# [label](url)
RE_MARKDOWN_LINK_BODY = re.compile(r'^\[([^\]]*)\]\(([^)\s]+)\)$')


@dataclass
class FootnoteEntry:
    num: str
    path: Optional[str]
    label: Optional[str]
    text: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num": self.num,
            "path": self.path,
            "label": self.label,
            "text": self.text,
            "url": self.url,
        }


def _parse_body(num: str, text: str, raw: str) -> FootnoteEntry:
    m = PURE_FILE_LINK_FOOTNOTE.match(raw)
    if m:
        alias = m.group(3)
        label = alias.strip() if alias and alias.strip() else None
        return FootnoteEntry(num=num, path=m.group(2), label=label, text=text)

    m = RE_MARKDOWN_LINK_BODY.match(text)
    if m:
        label = m.group(1).strip() or None
        return FootnoteEntry(num=num, path=None, label=label, text=text, url=m.group(2))

    return FootnoteEntry(num=num, path=None, label=None, text=text)


def parse_footnote_in_markdown(markdown: str) -> List[FootnoteEntry]:
    """
    Collect footnote definitions outside fenced code.

    A missing or blank alias gives `label=None`, meaning the caller should
    derive a label from the file name. Bodies that are neither a wiki link nor
    a Markdown link still produce an entry, with `path` and `label` unset.

    Args:
        markdown: Full document text

    Returns:
        FootnoteEntry records in line order
    """
    entries: List[FootnoteEntry] = []
    for line in scan_lines(markdown):
        if line.is_code or not line.raw.startswith("[^"):
            continue
        m = RE_FOOTNOTE_DEF.match(line.raw)
        if not m:
            continue
        entries.append(_parse_body(m.group(1), m.group(2), line.raw))
    return entries
