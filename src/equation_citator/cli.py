"""
Command line entry point for renumbering a folder of notes.

Usage:
    # Renumber every note under ./vault
    renumber-notes --input-dir ./vault

    # Preview without writing, top-level notes only
    renumber-notes --input-dir ./vault --dry-run --no-recursive

    # Custom config
    renumber-notes --input-dir ./vault --config configs/my_config.yaml
"""

import argparse
from typing import List, Optional

from .pipeline import CitationPipeline


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Renumber equations and figures in Markdown notes and update their citations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Renumber a vault in place
    renumber-notes --input-dir ./vault

    # Show what would change
    renumber-notes --input-dir ./vault --dry-run
        """
    )

    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--input-dir",
        type=str,
        required=True,
        help="Folder containing Markdown notes"
    )

    parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Only process notes directly inside the input folder"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute changes and write the report without touching notes"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    print("=" * 60)
    print("Equation Citator: Note Renumbering")
    print("=" * 60)
    print(f"Config: {args.config}")
    print(f"Input directory: {args.input_dir}")
    print(f"Recursive: {not args.no_recursive}")
    print(f"Dry run: {args.dry_run}")
    print("=" * 60)

    pipeline = CitationPipeline(args.config, log_level=args.log_level)
    stats = pipeline.run(
        args.input_dir,
        recursive=not args.no_recursive,
        dry_run=args.dry_run
    )

    print("\n" + "=" * 60)
    print("Renumbering Completed!")
    print("=" * 60)
    print(f"Notes scanned: {stats.total_notes}")
    print(f"Notes {'to change' if args.dry_run else 'changed'}: {stats.changed_notes}")
    print(f"Notes failed: {stats.failed_notes}")

    if stats.end_time and stats.start_time:
        duration = (stats.end_time - stats.start_time).total_seconds()
        print(f"\nTotal time: {duration:.1f} seconds")

    print("=" * 60)
    return 1 if stats.failed_notes else 0
