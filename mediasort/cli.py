"""Command-line entry point: ``mediasort SOURCE DESTINATION``."""
import argparse
from pathlib import Path

from mediasort import __version__
from mediasort import config
from mediasort.logger import setup_logging
from mediasort.organiser import organise_files, print_summary


def build_parser():
    parser = argparse.ArgumentParser(
        prog="mediasort",
        description="Copy photos and videos into YYYY/MM/DD folders by capture date, skipping duplicates.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("source", help="Folder to read media from (searched recursively)")
    parser.add_argument("destination", help="Root of the date-organised tree")
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Resolve destinations and log what would be copied without writing anything",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every probe attempt")
    parser.add_argument("--log-dir", help="Folder for the run log (default: $MEDIASORT_LOG_DIR or ./logs)")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    source = Path(args.source)
    if not source.is_dir():
        parser.error(f"source folder does not exist or is not a directory: {source}")

    settings = config.load_config()
    level = "DEBUG" if args.verbose else settings["log_level"]
    logger = setup_logging(args.log_dir or settings["log_dir"], level)

    logger.info(f"Lets do this {source} -> {args.destination}")

    stats = organise_files(
        source,
        args.destination,
        dry_run=args.dry_run,
        logger=logger,
        chunk_size=settings["chunk_size"],
    )
    print_summary(stats, args.dry_run)
    print("Check logs for detailed information!")
    return 0
