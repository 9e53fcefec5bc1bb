"""Equation and figure numbering with citation tracking for Markdown notes."""

__version__ = "1.0.0"

from .numbering.core import AutoNumberingType
from .numbering.equations import auto_number_equations
from .numbering.figures import FigureNumberingConfig, auto_number_figures
from .linkers.citation_renderer import replace_citations_in_markdown_with_span, update_citations_in_markdown
from .equation_box import TextReplacement, box_equation_at
from .pipeline import CitationPipeline, run_pipeline

__all__ = [
    "AutoNumberingType",
    "auto_number_equations",
    "FigureNumberingConfig",
    "auto_number_figures",
    "replace_citations_in_markdown_with_span",
    "update_citations_in_markdown",
    "TextReplacement",
    "box_equation_at",
    "CitationPipeline",
    "run_pipeline",
]
