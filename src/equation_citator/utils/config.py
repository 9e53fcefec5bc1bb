"""Configuration management module."""

import yaml
from pathlib import Path
from typing import Any, Dict, List
from dataclasses import dataclass, field

from ..numbering.core import AutoNumberingType
from ..parsers.callout_parser import CitationPrefix


DEFAULT_CALLOUT_PREFIXES = [
    {"prefix": "table:", "format": "Table. #"},
    {"prefix": "thm:", "format": "Theorem #"},
    {"prefix": "def:", "format": "Definition #"},
]


@dataclass
class NumberingConfig:
    """Heading-driven numbering shared by equations and figures."""
    auto_numbering_type: AutoNumberingType = AutoNumberingType.RELATIVE
    max_depth: int = 3
    delimiter: str = "."
    no_heading_prefix: str = "P"
    global_prefix: str = ""
    parse_quotes: bool = False


@dataclass
class EquationConfig:
    """Equation tagging and boxing."""
    enabled: bool = True
    citation_prefix: str = "eq:"
    typst_mode: bool = False
    typst_box_symbol: str = "rect"
    skip_first_line_in_boxed: bool = False


@dataclass
class FigureConfig:
    """Figure tagging."""
    enabled: bool = True
    citation_prefix: str = "fig:"
    enable_tagged_only: bool = False


@dataclass
class CitationConfig:
    """Citation rendering and remapping."""
    enable_continuous: bool = True
    range_symbol: str = "~"
    valid_delimiters: List[str] = field(default_factory=lambda: [".", "-", ":", "_"])
    file_delimiter: str = "^"
    multi_citation_delimiter: str = ", "
    render_spans: bool = False
    update_references: bool = True


class Config:
    """Main configuration class."""

    def __init__(self, config_path: str = "configs/config.yaml"):
        self.config_path = Path(config_path)
        self._raw_config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._raw_config = yaml.safe_load(f) or {}
        else:
            print(f"Warning: Config file {self.config_path} not found, using defaults")
            self._raw_config = {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    @property
    def numbering(self) -> NumberingConfig:
        """Get numbering configuration; an unknown mode raises ValueError."""
        cfg = self._raw_config.get("numbering", {})
        return NumberingConfig(
            auto_numbering_type=AutoNumberingType.coerce(cfg.get("auto_numbering_type", "relative")),
            max_depth=max(int(cfg.get("max_depth", 3)), 1),
            delimiter=cfg.get("delimiter", "."),
            no_heading_prefix=cfg.get("no_heading_prefix", "P"),
            global_prefix=cfg.get("global_prefix", "") or "",
            parse_quotes=cfg.get("parse_quotes", False)
        )

    @property
    def equations(self) -> EquationConfig:
        """Get equation configuration."""
        cfg = self._raw_config.get("equations", {})
        return EquationConfig(
            enabled=cfg.get("enabled", True),
            citation_prefix=cfg.get("citation_prefix", "eq:"),
            typst_mode=cfg.get("typst_mode", False),
            typst_box_symbol=cfg.get("typst_box_symbol", "rect"),
            skip_first_line_in_boxed=cfg.get("skip_first_line_in_boxed", False)
        )

    @property
    def figures(self) -> FigureConfig:
        """Get figure configuration."""
        cfg = self._raw_config.get("figures", {})
        return FigureConfig(
            enabled=cfg.get("enabled", True),
            citation_prefix=cfg.get("citation_prefix", "fig:"),
            enable_tagged_only=cfg.get("enable_tagged_only", False)
        )

    @property
    def citations(self) -> CitationConfig:
        """Get citation configuration."""
        cfg = self._raw_config.get("citations", {})
        return CitationConfig(
            enable_continuous=cfg.get("enable_continuous", True),
            range_symbol=cfg.get("range_symbol", "~"),
            valid_delimiters=cfg.get("valid_delimiters", [".", "-", ":", "_"]),
            file_delimiter=cfg.get("file_delimiter", "^"),
            multi_citation_delimiter=cfg.get("multi_citation_delimiter", ", "),
            render_spans=cfg.get("render_spans", False),
            update_references=cfg.get("update_references", True)
        )

    @property
    def callouts(self) -> List[CitationPrefix]:
        """Get configured callout prefixes."""
        entries = self._raw_config.get("callouts", DEFAULT_CALLOUT_PREFIXES)
        return [CitationPrefix(prefix=e["prefix"], format=e.get("format", "#")) for e in entries]

    @property
    def paths(self) -> Dict[str, str]:
        """Get path configuration."""
        defaults = {
            "log_dir": "./logs",
            "report_output": "./reports/renumber_report.json"
        }
        return {**defaults, **self._raw_config.get("paths", {})}

    def get(self, key: str, default: Any = None) -> Any:
        """Get raw configuration value."""
        return self._raw_config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to configuration."""
        return self._raw_config[key]
