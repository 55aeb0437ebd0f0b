"""
Main entry point for the Project Mass import.

Provides CLI commands for downloading the day-sheets, inspecting the
detected segments and previewing the correlated import.
"""

import sys
import logging
import argparse
from typing import List

from .config import AppConfig, SHEET_CONFIGS
from .correlate import collect_all_exercise_names, correlate_instances
from .dates import format_date
from .models import Segment, SheetData
from .preview import preview_import, print_stats
from .segments import detect_segments
from .sheets_client import SheetFetchError, SheetLayoutError, load_all_sheets


logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def detect_all_segments(sheets: List[SheetData]) -> List[Segment]:
    """
    Detect segments on every sheet.

    Sheets share no state, so each is segmented on its own.
    """
    segments: List[Segment] = []
    for sheet in sheets:
        segments.extend(detect_segments(sheet))
    return segments


def cmd_fetch(args: argparse.Namespace, config: AppConfig) -> None:
    """Download every day-sheet into the data directory."""
    sheets = load_all_sheets(config, save=True)
    logger.info(f"Saved {len(sheets)} sheets to {config.paths.data_dir}")


def cmd_segments(args: argparse.Namespace, config: AppConfig) -> None:
    """List the segments detected on each sheet."""
    sheets = load_all_sheets(config, offline=args.offline)

    for sheet in sheets:
        segments = detect_segments(sheet)
        print(f"\nDay {sheet.day_number} ({sheet.focus}): {len(segments)} segments")
        for seg in segments:
            print(
                f"   {format_date(seg.start_date)} -> {format_date(seg.end_date)}: "
                f"{len(seg.workout_rows)} workout rows, "
                f"{len(seg.cycle_markers)} cycle markers"
            )


def cmd_preview(args: argparse.Namespace, config: AppConfig) -> None:
    """Correlate all sheets and preview the import."""
    sheets = load_all_sheets(config, offline=args.offline)
    result = correlate_instances(detect_all_segments(sheets))

    instances = result.instances
    if args.instance is not None:
        instances = [i for i in instances if i.number == args.instance]
        if not instances:
            logger.error(f"Instance #{args.instance} not found")
            sys.exit(1)
        logger.info(f"Previewing only instance #{args.instance}")

    names = collect_all_exercise_names(instances)
    for sheet in sheets:
        names.update(sheet.exercise_names)

    stats = preview_import(instances, names, verbose=args.verbose, sheet_count=len(SHEET_CONFIGS))
    stats.unmatched_segments = len(result.unmatched)
    print_stats(stats)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Project Mass spreadsheet import"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # fetch command
    subparsers.add_parser("fetch", help="Download day-sheets to the data directory")

    # segments command
    segments_parser = subparsers.add_parser("segments", help="List detected segments")
    segments_parser.add_argument(
        "--offline", action="store_true", help="Read saved exports instead of fetching"
    )

    # preview command
    preview_parser = subparsers.add_parser("preview", help="Dry-run the import")
    preview_parser.add_argument(
        "--verbose", "-v", action="store_true", help="List every workout and set"
    )
    preview_parser.add_argument(
        "--instance", type=int, help="Only preview this instance number"
    )
    preview_parser.add_argument(
        "--offline", action="store_true", help="Read saved exports instead of fetching"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = AppConfig.load()

    commands = {
        "fetch": cmd_fetch,
        "segments": cmd_segments,
        "preview": cmd_preview,
    }

    try:
        commands[args.command](args, config)
    except (SheetFetchError, SheetLayoutError, FileNotFoundError) as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
