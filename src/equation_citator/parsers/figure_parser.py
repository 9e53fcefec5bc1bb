"""
Image embed parser for wiki (`![[path|meta|...]]`) and Markdown
(`![meta|...](path)`) figures.

Metadata items are pipe-separated. `title:` and `desc:` items, the citation
item (configured prefix such as `fig:`) and a bare size (`400` or `400x300`)
are recognized; every other item is kept verbatim in its original order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..utils.string_utils import find_code_spans
from .line_scanner import scan_lines


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# ![[path|meta...]]
RE_WIKI_IMAGE = re.compile(r'!\[\[([^\]|]+?)((?:\|[^\]]*)?)\]\]')

# ![meta](path)
RE_MARKDOWN_IMAGE = re.compile(r'!\[([^\]\n]*)\]\(([^)\n]+)\)')

# 400 or 400x300
RE_SIZE = re.compile(r'^\d+(?:x\d+)?$')

TITLE_PREFIX = "title:"
DESC_PREFIX = "desc:"


class FigureFormat(Enum):
    WIKI = "wiki"
    MARKDOWN = "markdown"


@dataclass
class FigureMetadata:
    """Structured view of a figure's metadata list."""
    title: Optional[str] = None       # full `title:...` item
    desc: Optional[str] = None        # full `desc:...` item
    citation: Optional[str] = None    # tag with the citation prefix removed
    size: Optional[str] = None
    others: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "desc": self.desc,
            "citation": self.citation,
            "size": self.size,
            "others": list(self.others),
        }

    def items(self, citation_prefix: str, tag: Optional[str] = None) -> List[str]:
        """Metadata items in canonical order, with `tag` as the citation."""
        items: List[str] = []
        if self.title is not None:
            items.append(self.title)
        if self.desc is not None:
            items.append(self.desc)
        items.extend(self.others)
        if tag is not None:
            items.append(f"{citation_prefix}{tag}")
        if self.size is not None:
            items.append(self.size)
        return items


@dataclass
class FigureMatch:
    """One image embed."""
    raw: str
    path: str
    format: FigureFormat
    metadata: FigureMetadata
    line: int
    col_start: int        # offset of `!` within the line
    col_end: int          # offset past the closing bracket
    in_quote: bool = False
    quote_depth: int = 0

    @property
    def tag(self) -> Optional[str]:
        return self.metadata.citation

    @property
    def line_start(self) -> int:
        return self.line

    @property
    def line_end(self) -> int:
        return self.line

    def render(self, citation_prefix: str, tag: Optional[str] = None) -> str:
        """Rebuild the embed with `tag` as its citation (None drops it)."""
        items = self.metadata.items(citation_prefix, tag)
        if self.format is FigureFormat.WIKI:
            suffix = "".join(f"|{item}" for item in items)
            return f"![[{self.path}{suffix}]]"
        return f"![{'|'.join(items)}]({self.path})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw": self.raw,
            "path": self.path,
            "format": self.format.value,
            "metadata": self.metadata.to_dict(),
            "line": self.line,
            "col_start": self.col_start,
            "col_end": self.col_end,
            "in_quote": self.in_quote,
        }


def parse_figure_metadata(items: List[str], citation_prefix: str) -> FigureMetadata:
    """
    Sort raw metadata items into known fields.

    Args:
        items: Pipe-separated items as written
        citation_prefix: Prefix marking the citation item, e.g. "fig:"

    Returns:
        FigureMetadata; the first item of each known kind wins, later
        duplicates are kept as ordinary items
    """
    meta = FigureMetadata()
    for item in items:
        text = item.strip()
        if not text:
            continue
        if text.startswith(TITLE_PREFIX) and meta.title is None:
            meta.title = text
        elif text.startswith(DESC_PREFIX) and meta.desc is None:
            meta.desc = text
        elif citation_prefix and text.startswith(citation_prefix) and meta.citation is None:
            meta.citation = text[len(citation_prefix):].strip()
        elif RE_SIZE.match(text) and meta.size is None:
            meta.size = text
        else:
            meta.others.append(text)
    return meta


def _in_spans(pos: int, spans: List[tuple]) -> bool:
    return any(start <= pos < end for start, end in spans)


def _figures_in_line(text: str, index: int, citation_prefix: str,
                     quote_depth: int) -> List[FigureMatch]:
    code = find_code_spans(text)
    found: List[FigureMatch] = []

    for m in RE_WIKI_IMAGE.finditer(text):
        if _in_spans(m.start(), code):
            continue
        items = m.group(2)[1:].split("|") if m.group(2) else []
        found.append(FigureMatch(
            raw=m.group(0),
            path=m.group(1).strip(),
            format=FigureFormat.WIKI,
            metadata=parse_figure_metadata(items, citation_prefix),
            line=index,
            col_start=m.start(),
            col_end=m.end(),
            in_quote=quote_depth > 0,
            quote_depth=quote_depth,
        ))

    for m in RE_MARKDOWN_IMAGE.finditer(text):
        if _in_spans(m.start(), code):
            continue
        # `![[a.png]](x)` is a wiki embed followed by text
        if any(f.col_start <= m.start() < f.col_end for f in found):
            continue
        items = m.group(1).split("|") if m.group(1) else []
        found.append(FigureMatch(
            raw=m.group(0),
            path=m.group(2).strip(),
            format=FigureFormat.MARKDOWN,
            metadata=parse_figure_metadata(items, citation_prefix),
            line=index,
            col_start=m.start(),
            col_end=m.end(),
            in_quote=quote_depth > 0,
            quote_depth=quote_depth,
        ))

    found.sort(key=lambda f: f.col_start)
    return found


def parse_figures_in_markdown(
    markdown: str,
    citation_prefix: str = "fig:",
    parse_quotes: bool = True,
) -> List[FigureMatch]:
    """
    Parse every image embed outside fenced and inline code.

    Args:
        markdown: Full document text
        citation_prefix: Prefix marking the citation metadata item
        parse_quotes: Include embeds inside blockquotes/callouts

    Returns:
        FigureMatch records in document order
    """
    figures: List[FigureMatch] = []
    for line in scan_lines(markdown):
        if line.is_code:
            continue
        if line.in_quote and not parse_quotes:
            continue
        if "![" not in line.raw:
            continue
        figures.extend(_figures_in_line(line.raw, line.index, citation_prefix, line.quote_depth))
    return figures


def parse_first_figure_in_markdown(
    markdown: str,
    tag: str,
    citation_prefix: str = "fig:",
) -> Optional[FigureMatch]:
    """First figure whose citation tag equals `tag`, or None."""
    if not markdown or not tag or not tag.strip():
        return None
    for figure in parse_figures_in_markdown(markdown, citation_prefix):
        if figure.tag == tag.strip():
            return figure
    return None
