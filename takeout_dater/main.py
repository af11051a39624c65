import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config
from .core import DateBackfillApp
from .metadata.exiftool import ExifTool
from .reporting import RunReporter


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries ("File format not recognized" for every PNG etc.)
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="takeout-dater",
        description="Process Google Takeout metadata and update EXIF data",
    )

    p.add_argument("directory", type=Path, metavar="DIRECTORY",
                   help="Directory to search recursively for supplemental metadata files")

    p.add_argument("-w", "--workers", type=int, default=config.DEFAULT_WORKERS,
                   help="Number of parallel workers (default: one per CPU)")
    p.add_argument("--exiftool", default=config.EXIFTOOL_EXECUTABLE,
                   help="Path to the exiftool executable (default: exiftool on PATH)")
    p.add_argument("--timeout", type=float, default=config.EXIFTOOL_TIMEOUT,
                   help=f"Seconds before a single exiftool call is abandoned (default: {config.EXIFTOOL_TIMEOUT})")
    p.add_argument("--report-csv", type=Path, default=None,
                   help="Write a per-file outcome report to this CSV")
    p.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    directory: Path = args.directory
    if not directory.exists():
        print(f"Error: Directory '{directory}' does not exist", file=sys.stderr)
        return 1
    if not directory.is_dir():
        print(f"Error: '{directory}' is not a directory", file=sys.stderr)
        return 1

    print(f"Searching for supplemental metadata files in: {directory}")

    exiftool = ExifTool(executable=args.exiftool, timeout=args.timeout)
    if not exiftool.probe():
        logging.warning("exiftool is not available; files without a date will fail to update.")

    app = DateBackfillApp(exiftool)
    reporter = RunReporter()

    try:
        summary = app.run(directory, max_workers=args.workers, reporter=reporter)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

    reporter.print_summary(summary)

    if args.report_csv:
        reporter.write_csv(args.report_csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
