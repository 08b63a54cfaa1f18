import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__, config
from .core import FileOrganizer, OrganizeOptions, OrganizeReport
from .errors import ConfigLoadError, DirectoryReadError

logger = logging.getLogger(__name__)


class _BelowLevelFilter(logging.Filter):
    """Lets through records strictly below `level`."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(level: int) -> None:
    """
    Sets up logging for the application.

    Informational records go to stdout; warnings and errors go to stderr.
    """
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_BelowLevelFilter(logging.WARNING))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)

    logging.basicConfig(level=level, handlers=[stdout_handler, stderr_handler], force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirsort",
        description="Organizes the files of a directory into category sub-folders based on their extension."
    )
    parser.add_argument("-d", "--directory", type=Path, required=True, help="The directory to organize.")
    parser.add_argument("-c", "--config", type=Path, default=config.get_config_file_path(),
                        help="Path to the JSON file mapping categories to extensions (default: %(default)s).")
    parser.add_argument("--prepend-date", action="store_true", help="Prepend the current date (YYYY-MM-DD_) to moved file names.")
    parser.add_argument("--dry-run", action="store_true", help="Show where files would go without moving anything.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed output.")
    parser.add_argument("--no-mime-fallback", dest="mime_fallback", action="store_false",
                        help="Only use the configured extensions; do not fall back to MIME types.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def print_report(report: OrganizeReport) -> None:
    """Writes the dry-run tree and the list of failed files to the console."""
    if report.dry_run and report.rendered_tree is not None:
        print(f"Dry-run mode enabled. Displaying where files will be organized within '{report.directory}':")
        print(report.rendered_tree)

    for result in report.failed:
        logger.error(f"Failed: {result.error}")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point of the CLI application."""
    args = build_parser().parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        # 1. Rejects a bad target before any interactive prompt
        if not args.directory.is_dir():
            raise DirectoryReadError(args.directory, NotADirectoryError(f"Not an existing directory: '{args.directory}'"))

        # 2. Offers to bootstrap the rules file, then loads it
        config.ensure_config_file(args.config)
        rules = config.load_category_rules(args.config)

        # 3. Runs the organizer
        options = OrganizeOptions(
            prepend_date=args.prepend_date,
            dry_run=args.dry_run,
            verbose=args.verbose,
            mime_fallback=args.mime_fallback,
        )
        organizer = FileOrganizer(args.directory, rules, options)
        report = organizer.organize()
    except ConfigLoadError as e:
        logger.critical(f"Configuration Error: {e}")
        sys.exit(1)
    except DirectoryReadError as e:
        logger.critical(f"Directory Error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"An unexpected critical error occurred: {e}", exc_info=True)
        sys.exit(1)

    # 4. Shows the outcome
    print_report(report)
    if report.has_failures:
        sys.exit(1)
