"""Inline `$\\ref{...}$` citation occurrences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple

from ..utils.regex_utils import LineCitation, match_citations_in_line
from .line_scanner import ScannedLine, scan_lines


@dataclass
class CitationOccurrence:
    label: str            # full ref body, prefix included
    line: int
    full_match: str       # `$...$`
    start: int            # offset of the opening `$` in the line
    end: int              # offset past the closing `$`
    ref_start: int = 0    # offset of `\ref{`
    ref_end: int = 0      # offset past the ref's closing brace

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "line": self.line,
            "full_match": self.full_match,
            "position": {"start": self.start, "end": self.end},
        }


def _is_display_opener(content: str) -> bool:
    return content.startswith("$$") and "$$" not in content[2:]


def iter_citation_lines(markdown: str) -> Iterator[Tuple[ScannedLine, List[LineCitation]]]:
    """
    Yield each prose line with its inline citations.

    Fenced code and display-math blocks are skipped whole. Inline code spans
    and `$$...$$` on a single line are excluded by the line matcher.
    """
    in_display = False
    for line in scan_lines(markdown):
        if line.is_code:
            continue
        if in_display:
            if line.content.endswith("$$"):
                in_display = False
            continue
        if _is_display_opener(line.content):
            in_display = True
            continue
        if "$" not in line.raw:
            continue
        citations = match_citations_in_line(line.raw)
        if citations:
            yield line, citations


def parse_citations_in_markdown(markdown: str) -> List[CitationOccurrence]:
    """
    Find every inline-math span holding exactly one `\\ref{}`.

    Args:
        markdown: Full document text

    Returns:
        CitationOccurrence records in document order, with offsets relative
        to their line
    """
    occurrences: List[CitationOccurrence] = []
    if not markdown or not markdown.strip():
        return occurrences

    for line, citations in iter_citation_lines(markdown):
        for cite in citations:
            occurrences.append(CitationOccurrence(
                label=cite.label,
                line=line.index,
                full_match=cite.full_match,
                start=cite.start,
                end=cite.end,
                ref_start=cite.ref_start,
                ref_end=cite.ref_end,
            ))
    return occurrences
