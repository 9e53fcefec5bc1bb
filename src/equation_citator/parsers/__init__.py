"""Parser modules for Markdown notes."""

from .heading_parser import Heading, parse_headings
from .equation_parser import EquationMatch, parse_equations_in_markdown, parse_first_equation_in_markdown
from .figure_parser import FigureMatch, parse_figures_in_markdown, parse_first_figure_in_markdown
from .footnote_parser import FootnoteEntry, parse_footnote_in_markdown
from .callout_parser import (
    CitationPrefix,
    CalloutMatch,
    parse_all_callouts_from_markdown,
    parse_first_callout_in_markdown,
)
from .citation_parser import CitationOccurrence, parse_citations_in_markdown

__all__ = [
    "Heading",
    "parse_headings",
    # Numbered entities
    "EquationMatch",
    "parse_equations_in_markdown",
    "parse_first_equation_in_markdown",
    "FigureMatch",
    "parse_figures_in_markdown",
    "parse_first_figure_in_markdown",
    "CitationPrefix",
    "CalloutMatch",
    "parse_all_callouts_from_markdown",
    "parse_first_callout_in_markdown",
    # References
    "FootnoteEntry",
    "parse_footnote_in_markdown",
    "CitationOccurrence",
    "parse_citations_in_markdown",
]
