"""
Batch renumbering pipeline for a folder of Markdown notes.

Per note, as enabled by config:
1. Equation numbering → 2. Figure numbering →
3. Citation remapping (old → new tags) → 4. Span rendering →
5. Callout index (titles of configured callouts, for the report)
"""

from pathlib import Path
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from tqdm import tqdm

from .utils.config import Config
from .utils.logging_utils import PipelineLogger
from .utils.file_utils import safe_json_dump, read_text, write_text_atomic, get_markdown_files
from .numbering.equations import auto_number_equations
from .numbering.figures import FigureNumberingConfig, auto_number_figures
from .parsers.citation_parser import parse_citations_in_markdown
from .parsers.callout_parser import format_callout_title, parse_all_callouts_from_markdown
from .equation_box import TextReplacement, box_equation_at
from .linkers.citation_renderer import (
    replace_citations_in_markdown_with_span,
    update_citations_in_markdown,
)


@dataclass
class NoteStats:
    """Statistics for one processed note."""
    path: str = ""
    equations_numbered: int = 0
    figures_numbered: int = 0
    citations_remapped: int = 0
    citations_rendered: int = 0
    callouts_indexed: int = 0
    callouts: List[str] = field(default_factory=list)
    changed: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "equations_numbered": self.equations_numbered,
            "figures_numbered": self.figures_numbered,
            "citations_remapped": self.citations_remapped,
            "citations_rendered": self.citations_rendered,
            "callouts_indexed": self.callouts_indexed,
            "callouts": list(self.callouts),
            "changed": self.changed,
            "error": self.error
        }


@dataclass
class ProcessedNote:
    """Result of processing one note's text."""
    text: str
    changed: bool
    equation_mapping: Dict[str, str] = field(default_factory=dict)
    figure_mapping: Dict[str, str] = field(default_factory=dict)
    stats: NoteStats = field(default_factory=NoteStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "changed": self.changed,
            "equation_mapping": dict(self.equation_mapping),
            "figure_mapping": dict(self.figure_mapping),
            "stats": self.stats.to_dict()
        }


@dataclass
class PipelineStats:
    """Statistics for a batch run."""
    start_time: datetime
    end_time: Optional[datetime] = None
    total_notes: int = 0
    changed_notes: int = 0
    failed_notes: int = 0
    dry_run: bool = False
    notes: List[NoteStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": (self.end_time - self.start_time).total_seconds() if self.end_time else None,
            "total_notes": self.total_notes,
            "changed_notes": self.changed_notes,
            "failed_notes": self.failed_notes,
            "dry_run": self.dry_run,
            "notes": [n.to_dict() for n in self.notes]
        }


def _count_remapped(before: str, after: str) -> int:
    old = parse_citations_in_markdown(before)
    new = parse_citations_in_markdown(after)
    return sum(1 for a, b in zip(old, new) if a.label != b.label)


def _count_with_prefix(text: str, prefix: str) -> int:
    return sum(1 for c in parse_citations_in_markdown(text) if c.label.strip().startswith(prefix))


class CitationPipeline:
    """
    Renumbers equations and figures in Markdown notes and keeps their
    citations in sync.
    """

    def __init__(self, config_path: str = "configs/config.yaml", log_level: str = "INFO"):
        """
        Initialize pipeline with configuration.

        Args:
            config_path: Path to configuration file
            log_level: Logging level for console and log file
        """
        self.config = Config(config_path)

        self.logger = PipelineLogger(
            name="equation_citator",
            log_dir=self.config.paths.get("log_dir", "./logs"),
            level=log_level
        )

    # =========================================================================
    # Single note
    # =========================================================================

    def process_text(self, text: str, path: str = "") -> ProcessedNote:
        """
        Run every enabled stage over one note.

        Args:
            text: Note content
            path: Note path, only used in stats

        Returns:
            ProcessedNote with the new text and the tag mappings
        """
        numbering = self.config.numbering
        eq_cfg = self.config.equations
        fig_cfg = self.config.figures
        cite_cfg = self.config.citations
        range_symbol = cite_cfg.range_symbol if cite_cfg.enable_continuous else None

        stats = NoteStats(path=path)
        result = ProcessedNote(text=text, changed=False, stats=stats)
        current = text

        if eq_cfg.enabled:
            numbered = auto_number_equations(
                current,
                numbering.auto_numbering_type,
                numbering.max_depth,
                numbering.delimiter,
                numbering.no_heading_prefix,
                numbering.global_prefix,
                parse_quotes=numbering.parse_quotes,
                typst=eq_cfg.typst_mode
            )
            stats.equations_numbered = numbered.numbered
            result.equation_mapping = numbered.tag_mapping
            current = numbered.md

        if fig_cfg.enabled:
            numbered = auto_number_figures(current, FigureNumberingConfig(
                auto_numbering_type=numbering.auto_numbering_type,
                max_depth=numbering.max_depth,
                delimiter=numbering.delimiter,
                no_heading_prefix=numbering.no_heading_prefix,
                global_prefix=numbering.global_prefix,
                parse_quotes=numbering.parse_quotes,
                enable_tagged_only=fig_cfg.enable_tagged_only,
                fig_citation_prefix=fig_cfg.citation_prefix
            ))
            stats.figures_numbered = numbered.numbered
            result.figure_mapping = numbered.tag_mapping
            current = numbered.md

        if cite_cfg.update_references:
            before = current
            for prefix, mapping in (
                (eq_cfg.citation_prefix, result.equation_mapping),
                (fig_cfg.citation_prefix, result.figure_mapping),
            ):
                current = update_citations_in_markdown(
                    current, prefix, mapping, range_symbol,
                    cite_cfg.valid_delimiters, cite_cfg.file_delimiter,
                    cite_cfg.multi_citation_delimiter
                )
            stats.citations_remapped = _count_remapped(before, current)

        if cite_cfg.render_spans:
            for prefix in (eq_cfg.citation_prefix, fig_cfg.citation_prefix):
                stats.citations_rendered += _count_with_prefix(current, prefix)
                current = replace_citations_in_markdown_with_span(
                    current, prefix, range_symbol,
                    cite_cfg.valid_delimiters, cite_cfg.file_delimiter,
                    cite_cfg.multi_citation_delimiter
                )

        prefixes = self.config.callouts
        callouts = parse_all_callouts_from_markdown(current, prefixes)
        stats.callouts = [format_callout_title(c, prefixes) for c in callouts]
        stats.callouts_indexed = len(callouts)

        result.text = current
        result.changed = current != text
        stats.changed = result.changed
        return result

    def process_file(self, path: Path, dry_run: bool = False) -> NoteStats:
        """
        Process one note on disk; write back only when it changed.

        I/O and decoding failures are logged and reported in the returned
        stats instead of aborting the batch.
        """
        path = Path(path)
        try:
            text = read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Failed to read {path}: {e}", exc=e)
            self.logger.update_metric("docs_failed")
            return NoteStats(path=str(path), error=str(e))

        processed = self.process_text(text, path=str(path))
        stats = processed.stats

        if processed.changed and not dry_run:
            try:
                write_text_atomic(path, processed.text)
            except OSError as e:
                self.logger.error(f"Failed to write {path}: {e}", exc=e)
                self.logger.update_metric("docs_failed")
                stats.error = str(e)
                return stats

        self.logger.record_note(stats.to_dict(), processed.changed)
        if processed.changed:
            self.logger.debug(f"{'Would update' if dry_run else 'Updated'} {path}")
        return stats

    def box_equation(self, text: str, line: int, ch: int = 0) -> Optional[TextReplacement]:
        """
        Box the equation at (line, ch) using the configured equation settings.

        Args:
            text: Note content
            line: Cursor line (0-based)
            ch: Cursor column

        Returns:
            TextReplacement to apply, or None when the cursor is not in an equation
        """
        eq_cfg = self.config.equations
        return box_equation_at(
            text, line, ch,
            skip_first_line=eq_cfg.skip_first_line_in_boxed,
            typst_mode=eq_cfg.typst_mode,
            typst_box_symbol=eq_cfg.typst_box_symbol
        )

    # =========================================================================
    # Batch
    # =========================================================================

    def run(
        self,
        input_dir: str,
        recursive: bool = True,
        dry_run: bool = False
    ) -> PipelineStats:
        """
        Process every Markdown note under `input_dir`.

        Args:
            input_dir: Folder of notes
            recursive: Descend into subfolders
            dry_run: Compute changes without writing notes

        Returns:
            Batch statistics (also written to paths.report_output)
        """
        stats = PipelineStats(start_time=datetime.now(), dry_run=dry_run)

        self.logger.info("=" * 60)
        self.logger.info("Starting note renumbering")
        self.logger.info(f"Input directory: {input_dir} (dry run: {dry_run})")
        self.logger.info("=" * 60)

        try:
            note_paths = get_markdown_files(input_dir, recursive=recursive)
            stats.total_notes = len(note_paths)
            self.logger.info(f"Found {len(note_paths)} notes")

            for note_path in tqdm(note_paths, desc="Renumbering notes"):
                note_stats = self.process_file(note_path, dry_run=dry_run)
                stats.notes.append(note_stats)
                if note_stats.error:
                    stats.failed_notes += 1
                elif note_stats.changed:
                    stats.changed_notes += 1

            stats.end_time = datetime.now()
            report_path = Path(self.config.paths["report_output"])
            safe_json_dump(stats.to_dict(), report_path)
            self.logger.info(f"Report written to {report_path}")

            self.logger.log_summary()

        except Exception as e:
            self.logger.error(f"Pipeline failed: {e}", exc=e)
            stats.end_time = datetime.now()
            raise

        return stats


def run_pipeline(
    input_dir: str,
    config_path: str = "configs/config.yaml",
    recursive: bool = True,
    dry_run: bool = False
) -> PipelineStats:
    """
    Convenience function to run the pipeline.

    Args:
        input_dir: Folder of notes
        config_path: Path to config file
        recursive: Descend into subfolders
        dry_run: Compute changes without writing notes

    Returns:
        Pipeline statistics
    """
    pipeline = CitationPipeline(config_path)
    return pipeline.run(input_dir, recursive=recursive, dry_run=dry_run)
