"""
Citable callouts: blockquotes opened by `> [!<prefix><tag>]`.

Only prefixes listed in the configured CitationPrefix set are recognized, so
ordinary Obsidian callouts such as `> [!note]` are left alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .line_scanner import scan_lines


# [!prefix:tag] optionally followed by a title
RE_CALLOUT_OPENER = re.compile(r'^\[!([^\]]+)\]\s*(.*)$')


@dataclass
class CitationPrefix:
    """A configured callout prefix and its display format (`#` is the tag)."""
    prefix: str
    format: str

    def to_dict(self) -> Dict[str, Any]:
        return {"prefix": self.prefix, "format": self.format}


@dataclass
class CalloutMatch:
    raw: str
    type: str             # prefix without its trailing `:`
    prefix: str
    tag: str
    label: str            # prefix + tag
    title: str            # text after `]` on the opening line
    content: str          # quote-stripped body lines joined by \n
    line_start: int
    line_end: int
    quote_depth: int

    @property
    def in_quote(self) -> bool:
        return self.quote_depth > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw": self.raw,
            "type": self.type,
            "prefix": self.prefix,
            "tag": self.tag,
            "label": self.label,
            "title": self.title,
            "content": self.content,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "quote_depth": self.quote_depth,
        }


def _match_prefix(body: str, prefixes: Sequence[CitationPrefix]) -> Optional[CitationPrefix]:
    # longest prefix first so `thm:` never shadows `thmx:`
    for entry in sorted(prefixes, key=lambda p: len(p.prefix), reverse=True):
        if entry.prefix and body.startswith(entry.prefix):
            return entry
    return None


def _open_callout(content: str, prefixes: Sequence[CitationPrefix]):
    m = RE_CALLOUT_OPENER.match(content)
    if not m:
        return None
    body = m.group(1).strip()
    entry = _match_prefix(body, prefixes)
    if entry is None:
        return None
    tag = body[len(entry.prefix):].strip()
    if not tag:
        return None
    return entry, tag, m.group(2).strip()


def parse_all_callouts_from_markdown(
    markdown: str,
    prefixes: Sequence[CitationPrefix],
) -> List[CalloutMatch]:
    """
    Parse every configured callout outside fenced code.

    A callout runs from its opener through the following quote lines of the
    same or greater depth, ending at the first shallower or non-quote line or
    at the next callout opener.

    Args:
        markdown: Full document text
        prefixes: Configured callout prefixes

    Returns:
        CalloutMatch records in document order
    """
    callouts: List[CalloutMatch] = []
    if not markdown or not prefixes:
        return callouts

    current: Optional[Dict[str, Any]] = None

    def close() -> None:
        entry, tag = current["entry"], current["tag"]
        callouts.append(CalloutMatch(
            raw="\n".join(current["raw"]),
            type=entry.prefix.rstrip(":"),
            prefix=entry.prefix,
            tag=tag,
            label=entry.prefix + tag,
            title=current["title"],
            content="\n".join(current["body"]).strip(),
            line_start=current["start"],
            line_end=current["end"],
            quote_depth=current["depth"],
        ))

    for line in scan_lines(markdown):
        opened = None
        if not line.is_code and line.in_quote:
            opened = _open_callout(line.content, prefixes)

        if current is not None:
            if opened is None and line.quote_depth >= current["depth"]:
                current["raw"].append(line.raw)
                current["body"].append(line.content)
                current["end"] = line.index
                continue
            close()
            current = None

        if opened is not None:
            entry, tag, title = opened
            current = {
                "entry": entry,
                "tag": tag,
                "title": title,
                "raw": [line.raw],
                "body": [],
                "start": line.index,
                "end": line.index,
                "depth": line.quote_depth,
            }

    if current is not None:
        close()
    return callouts


def parse_first_callout_in_markdown(
    markdown: str,
    tag: str,
    prefixes: Sequence[CitationPrefix],
) -> Optional[CalloutMatch]:
    """First callout whose tag equals `tag`, or None."""
    if not tag or not tag.strip():
        return None
    for callout in parse_all_callouts_from_markdown(markdown, prefixes):
        if callout.tag == tag.strip():
            return callout
    return None


def format_callout_title(callout: CalloutMatch, prefixes: Sequence[CitationPrefix]) -> str:
    """Display title for a callout, e.g. `Theorem 2.3` for format `Theorem #`."""
    for entry in prefixes:
        if entry.prefix == callout.prefix:
            return entry.format.replace("#", callout.tag)
    return callout.label
