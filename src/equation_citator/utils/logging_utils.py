"""Logging utilities for the renumbering pipeline."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime


def setup_logger(
    name: str = "equation_citator",
    log_file: Optional[str] = None,
    level: str = "INFO",
    format_str: Optional[str] = None,
    console: bool = True
) -> logging.Logger:
    """
    Set up a logger with file and console handlers.

    Args:
        name: Logger name
        log_file: Path to log file (optional)
        level: Logging level
        format_str: Log format string
        console: Whether to log to console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers.clear()

    if format_str is None:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_str)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


NOTE_COUNTERS = (
    "equations_numbered",
    "figures_numbered",
    "citations_remapped",
    "citations_rendered",
    "callouts_indexed",
)


class PipelineLogger:
    """Logger for batch renumbering runs with per-note counters."""

    def __init__(self, name: str = "equation_citator", log_dir: str = "./logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{name}_{timestamp}.log"

        self.logger = setup_logger(name, str(self.log_file), level=level)

        self.metrics = {
            "docs_processed": 0,
            "docs_failed": 0,
            "docs_changed": 0,
            **{key: 0 for key in NOTE_COUNTERS},
            "errors": []
        }

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str, exc: Optional[Exception] = None) -> None:
        self.logger.error(msg)
        self.metrics["errors"].append({
            "message": msg,
            "exception": str(exc) if exc else None,
            "timestamp": datetime.now().isoformat()
        })

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def update_metric(self, key: str, value: int = 1, increment: bool = True) -> None:
        """Update a metric value."""
        if key in self.metrics:
            if increment:
                self.metrics[key] += value
            else:
                self.metrics[key] = value

    def record_note(self, counts: Dict[str, Any], changed: bool) -> None:
        """
        Fold one processed note into the run metrics.

        Args:
            counts: Per-note counters keyed like NOTE_COUNTERS; other keys
                are ignored
            changed: Whether the note's text changed
        """
        self.update_metric("docs_processed")
        for key in NOTE_COUNTERS:
            self.update_metric(key, int(counts.get(key) or 0))
        if changed:
            self.update_metric("docs_changed")

    def get_summary(self) -> dict:
        """Metrics plus unchanged-note count and change rate over processed notes."""
        processed = self.metrics["docs_processed"]
        changed = self.metrics["docs_changed"]
        return {
            **self.metrics,
            "docs_scanned": processed + self.metrics["docs_failed"],
            "docs_unchanged": processed - changed,
            "change_rate": changed / processed if processed else 0
        }

    def log_summary(self) -> None:
        """Log final metrics summary."""
        summary = self.get_summary()
        self.info("=" * 60)
        self.info("Renumbering Summary")
        self.info("=" * 60)
        self.info(f"Notes scanned: {summary['docs_scanned']}")
        self.info(f"Notes changed: {summary['docs_changed']} ({summary['change_rate']:.2%} of processed)")
        self.info(f"Notes unchanged: {summary['docs_unchanged']}")
        self.info(f"Notes failed: {summary['docs_failed']}")
        for key in NOTE_COUNTERS:
            self.info(f"{key.replace('_', ' ').capitalize()}: {summary[key]}")
        if summary["errors"]:
            self.warning(f"Total errors: {len(summary['errors'])}")
        self.info("=" * 60)
