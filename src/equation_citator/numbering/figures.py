"""Figure auto-numbering: write the citation item (`fig:1.2`) into image embeds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from ..parsers.figure_parser import parse_figures_in_markdown
from ..parsers.heading_parser import parse_headings
from ..parsers.line_scanner import split_lines
from .core import AutoNumberingType, NumberingOptions, NumberingResult, record_mapping, walk_in_order


@dataclass
class FigureNumberingConfig:
    auto_numbering_type: Union[AutoNumberingType, str] = AutoNumberingType.RELATIVE
    max_depth: int = 3
    delimiter: str = "."
    no_heading_prefix: str = "P"
    global_prefix: str = ""
    parse_quotes: bool = False
    enable_tagged_only: bool = False      # only renumber figures that already carry a citation
    fig_citation_prefix: str = "fig:"

    def numbering_options(self) -> NumberingOptions:
        return NumberingOptions(
            auto_numbering_type=self.auto_numbering_type,
            max_depth=self.max_depth,
            delimiter=self.delimiter,
            no_heading_prefix=self.no_heading_prefix,
            global_prefix=self.global_prefix,
            parse_quotes=self.parse_quotes,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.numbering_options().to_dict()
        data.update({
            "enable_tagged_only": self.enable_tagged_only,
            "fig_citation_prefix": self.fig_citation_prefix,
        })
        return data


def auto_number_figures(content: str, config: FigureNumberingConfig) -> NumberingResult:
    """
    Renumber image embeds from the heading structure.

    The citation item is always rewritten between the title/description
    items and the size item; other metadata keeps its order. With
    `enable_tagged_only`, figures without a citation item are left as they
    are and do not consume a number.

    Args:
        content: Full document text
        config: Numbering settings and citation prefix

    Returns:
        NumberingResult; the mapping keys are old tags without the prefix
    """
    if not content:
        return NumberingResult(md=content or "")

    options = config.numbering_options()
    prefix = config.fig_citation_prefix
    figures = parse_figures_in_markdown(content, prefix, parse_quotes=options.parse_quotes)
    if config.enable_tagged_only:
        figures = [f for f in figures if f.tag is not None]
    if not figures:
        return NumberingResult(md=content)

    edits: Dict[int, List[Tuple[int, int, str]]] = {}
    mapping: Dict[str, str] = {}
    for figure, counter in walk_in_order(parse_headings(content), figures, options):
        new_tag = counter.next_tag()
        record_mapping(mapping, figure.tag, new_tag)
        edits.setdefault(figure.line, []).append(
            (figure.col_start, figure.col_end, figure.render(prefix, new_tag))
        )

    lines = split_lines(content)
    for index, line_edits in edits.items():
        raw = lines[index]
        for start, end, text in sorted(line_edits, reverse=True):
            raw = raw[:start] + text + raw[end:]
        lines[index] = raw
    return NumberingResult(md="\n".join(lines), tag_mapping=mapping, numbered=len(figures))
