"""
Citation rendering and remapping.

Rendering turns `$\\ref{eq:1.1, 1.2}$` into inline HTML spans that Markdown
previewers display as clickable labels. Remapping rewrites the labels in
place after a renumbering pass, using the old -> new tag mapping.
"""

from __future__ import annotations

import html
from typing import Dict, List, Optional, Sequence

from ..parsers.citation_parser import iter_citation_lines
from ..parsers.line_scanner import split_lines
from .citation_tags import (
    combine_continuous_citation_tags,
    join_file_citation,
    split_continuous_citation_tags,
    split_file_citation,
)


CITATION_CLASS = "em-math-citation"
CONTAINER_CLASS = "em-math-citation-container"
CITATION_STYLE = "color: var(--text-accent); cursor: pointer;"


def split_multi_citation(label: str, delimiter: str) -> List[str]:
    """Split a ref body such as `1.1, 1.2` into trimmed, non-empty tags."""
    if not delimiter:
        parts = [label]
    else:
        # `1.1,1.2` is still two tags when the delimiter is `, `
        parts = label.split(delimiter.strip() or delimiter)
    return [part.strip() for part in parts if part.strip()]


def generate_citation_spans(
    tags: Sequence[str],
    file_delimiter: str,
    join_string: str = ", ",
) -> str:
    """
    Render tags as styled spans.

    Cross-file tags show their local part followed by a superscript
    footnote marker `[^fileId]` pointing at the other note.

    Args:
        tags: Tags to render, already compressed if wanted
        file_delimiter: Cross-file separator, e.g. "^"
        join_string: Text placed between spans

    Returns:
        HTML fragment
    """
    spans = []
    for tag in tags:
        cite = split_file_citation(tag, file_delimiter)
        text = html.escape(cite.local)
        marker = ""
        if cite.cross_file is not None:
            marker = f"<sup>[^{html.escape(cite.cross_file)}]</sup>"
        spans.append(
            f'<span class="{CITATION_CLASS}" style="{CITATION_STYLE}" '
            f'data-tag="{html.escape(tag, quote=True)}">{text}{marker}</span>'
        )
    return join_string.join(spans)


def _replace_spans(line: str, replacements: List[tuple]) -> str:
    # right to left so earlier offsets stay valid
    for start, end, text in sorted(replacements, key=lambda r: r[0], reverse=True):
        line = line[:start] + text + line[end:]
    return line


def _rewrite_lines(markdown: str, rewrite_line) -> str:
    lines = split_lines(markdown)
    changed = False
    for line, citations in iter_citation_lines(markdown):
        replacements = rewrite_line(line.raw, citations)
        if replacements:
            lines[line.index] = _replace_spans(line.raw, replacements)
            changed = True
    return "\n".join(lines) if changed else markdown


def replace_citations_in_markdown_with_span(
    markdown: str,
    prefix: str,
    range_symbol: Optional[str],
    valid_delimiters: Sequence[str],
    file_delimiter: str,
    multi_citation_delimiter: str = ", ",
) -> str:
    """
    Replace qualifying inline citations that start with `prefix` by spans.

    Args:
        markdown: Full document text
        prefix: Citation prefix, e.g. "eq:"
        range_symbol: Range marker; None disables range compression
        valid_delimiters: Segment delimiters of local tags
        file_delimiter: Cross-file separator
        multi_citation_delimiter: Separator between tags inside one ref

    Returns:
        Rewritten document, or `markdown` itself when nothing qualified
    """
    if not markdown:
        return markdown

    def rewrite(raw: str, citations) -> List[tuple]:
        replacements = []
        for cite in citations:
            label = cite.label.strip()
            if not label.startswith(prefix):
                continue
            tags = split_multi_citation(label[len(prefix):], multi_citation_delimiter)
            if not tags:
                continue
            if range_symbol:
                tags = combine_continuous_citation_tags(
                    split_continuous_citation_tags(tags, range_symbol, valid_delimiters, file_delimiter),
                    range_symbol, valid_delimiters, file_delimiter,
                )
            spans = generate_citation_spans(tags, file_delimiter, multi_citation_delimiter)
            replacements.append((cite.start, cite.end, f'<span class="{CONTAINER_CLASS}">{spans}</span>'))
        return replacements

    return _rewrite_lines(markdown, rewrite)


def update_citations_in_markdown(
    markdown: str,
    prefix: str,
    tag_mapping: Dict[str, str],
    range_symbol: Optional[str],
    valid_delimiters: Sequence[str],
    file_delimiter: str,
    multi_citation_delimiter: str = ", ",
) -> str:
    """
    Rewrite local citation tags through an old -> new mapping.

    Every tag of a qualifying citation is looked up once, so swapped tags
    (`1.1 <-> 1.2`) never chain. Cross-file tags are never remapped. A
    citation is only rewritten when at least one of its tags maps.

    Args:
        markdown: Full document text
        prefix: Citation prefix, e.g. "eq:"
        tag_mapping: Old tag -> new tag from a numbering pass
        range_symbol: Range marker; None leaves ranges alone
        valid_delimiters: Segment delimiters of local tags
        file_delimiter: Cross-file separator
        multi_citation_delimiter: Separator between tags inside one ref

    Returns:
        Rewritten document, or `markdown` itself when nothing mapped
    """
    if not markdown or not tag_mapping:
        return markdown

    def rewrite(raw: str, citations) -> List[tuple]:
        replacements = []
        for cite in citations:
            label = cite.label.strip()
            if not label.startswith(prefix):
                continue
            tags = split_multi_citation(label[len(prefix):], multi_citation_delimiter)
            if range_symbol:
                tags = split_continuous_citation_tags(tags, range_symbol, valid_delimiters, file_delimiter)

            mapped = False
            new_tags = []
            for tag in tags:
                part = split_file_citation(tag, file_delimiter)
                if part.cross_file is None and part.local in tag_mapping:
                    new_tag = tag_mapping[part.local]
                    new_tags.append(join_file_citation(None, new_tag, file_delimiter))
                    mapped = mapped or new_tag != part.local
                else:
                    new_tags.append(tag)
            if not mapped:
                continue

            if range_symbol:
                new_tags = combine_continuous_citation_tags(
                    new_tags, range_symbol, valid_delimiters, file_delimiter,
                )
            body = prefix + multi_citation_delimiter.join(new_tags)
            replacements.append((cite.ref_start, cite.ref_end, f"\\ref{{{body}}}"))
        return replacements

    return _rewrite_lines(markdown, rewrite)
