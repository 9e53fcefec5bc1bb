"""Shared pytest fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from equation_citator.parsers.callout_parser import CitationPrefix


@pytest.fixture
def callout_prefixes():
    return [
        CitationPrefix(prefix="table:", format="Table. #"),
        CitationPrefix(prefix="thm:", format="Theorem #"),
        CitationPrefix(prefix="def:", format="Definition #"),
    ]


@pytest.fixture
def sample_note():
    return "\n".join([
        "# Intro",
        "",
        "$$E = mc^2 \\tag{1.1}$$",
        "",
        "## Details",
        "",
        "$$",
        "a + b = c \\tag{1.2}",
        "$$",
        "",
        "![[plot.png|fig:1.1|300]]",
        "",
        "See $\\ref{eq:1.1}$ and $\\ref{eq:1.2}$, plus $\\ref{fig:1.1}$.",
    ])


@pytest.fixture
def config_file(tmp_path):
    """Write a config that keeps logs and reports inside tmp_path."""
    def _write(extra: str = "") -> str:
        path = tmp_path / "config.yaml"
        path.write_text(
            "paths:\n"
            f"  log_dir: \"{(tmp_path / 'logs').as_posix()}\"\n"
            f"  report_output: \"{(tmp_path / 'reports' / 'report.json').as_posix()}\"\n"
            + extra,
            encoding="utf-8",
        )
        return str(path)
    return _write
