"""Utility modules for the renumbering pipeline."""

from .logging_utils import setup_logger, PipelineLogger
from .file_utils import ensure_dir, safe_json_dump, safe_json_load

__all__ = ["setup_logger", "PipelineLogger", "ensure_dir", "safe_json_dump", "safe_json_load"]
