#!/usr/bin/env python3
"""
Entry script for renumbering equations and figures in a folder of notes.

Usage:
    python scripts/renumber_notes.py --input-dir ./vault
    python scripts/renumber_notes.py --input-dir ./vault --dry-run
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from equation_citator.cli import main


if __name__ == "__main__":
    sys.exit(main())
