"""Heading-driven auto-numbering for equations and figures."""

from .core import AutoNumberingType, NumberingOptions, NumberingResult, TagCounter
from .equations import auto_number_equations
from .figures import FigureNumberingConfig, auto_number_figures

__all__ = [
    "AutoNumberingType",
    "NumberingOptions",
    "NumberingResult",
    "TagCounter",
    "auto_number_equations",
    "FigureNumberingConfig",
    "auto_number_figures",
]
