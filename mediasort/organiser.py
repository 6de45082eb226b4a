import logging
import os
import stat
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Optional

from mediasort import constants
from mediasort.copier import copy_media
from mediasort.exceptions import CopyError, SameFileError
from mediasort.hasher import fingerprint
from mediasort.resolver import PathResolver, ResolutionStatus


@dataclass
class OrganiseStats:
    """Counters for one organise run"""
    total_files: int = 0
    copied: int = 0
    duplicates: int = 0
    no_timestamp: int = 0
    probe_exhausted: int = 0
    same_file: int = 0
    errors: int = 0
    directories: int = 0
    bytes_written: int = 0

    @property
    def skipped(self) -> int:
        return (self.duplicates + self.no_timestamp + self.probe_exhausted
                + self.same_file + self.errors)


def organise_files(
    src_dir,
    dest_dir,
    dry_run: bool = False,
    logger: Optional[logging.Logger] = None,
    resolver: Optional[PathResolver] = None,
    chunk_size: int = constants.CHUNK_SIZE
) -> OrganiseStats:
    """
    Copy every timestamped file under src_dir into dest_dir/YYYY/MM/DD.

    Files are processed one at a time; each resolution sees what earlier
    copies wrote. Per-file problems are logged and counted, never raised.

    Args:
        src_dir: Root of the tree to read
        dest_dir: Root of the organised tree
        dry_run: Resolve and log only, copy nothing
        logger: Logger to report through
        resolver: Pre-built resolver (defaults to one rooted at dest_dir)
        chunk_size: Read/copy chunk size in bytes

    Returns:
        OrganiseStats for the run
    """
    logger = logger or logging.getLogger(__name__)
    src_path = Path(os.path.abspath(src_dir))
    dest_path = Path(os.path.abspath(dest_dir))
    dest_real = os.path.realpath(dest_path)
    if resolver is None:
        resolver = PathResolver(
            dest_path,
            hash_func=partial(fingerprint, chunk_size=chunk_size),
            logger=logger
        )

    stats = OrganiseStats()

    def on_walk_error(error):
        logger.warning(f"Walk error: {error}")
        stats.errors += 1

    for root, dirnames, filenames in os.walk(src_path, onerror=on_walk_error):
        root_path = Path(root)

        for name in sorted(dirnames):
            dir_path = root_path / name
            # don't descend into the output when it lives inside the source tree
            if os.path.realpath(dir_path) == dest_real:
                logger.info(f"Skipping destination folder inside source: {dir_path}")
                dirnames.remove(name)
                continue
            logger.info(f"{dir_path} is a directory")
            stats.directories += 1
        dirnames.sort()

        for name in sorted(filenames):
            _organise_one(root_path / name, resolver, stats, logger, dry_run, chunk_size)

    return stats


def _organise_one(file_path, resolver, stats, logger, dry_run, chunk_size):
    try:
        file_stat = file_path.stat()
    except OSError as e:
        logger.warning(f"Could not stat {file_path}: {e}")
        stats.errors += 1
        return

    #Ignore sockets, fifos and anything else that isn't a plain file
    if not stat.S_ISREG(file_stat.st_mode):
        logger.info(f"{file_path} is not a regular file - skipped")
        return

    stats.total_files += 1

    try:
        resolution = resolver.resolve(file_path)
    except OSError as e:
        logger.warning(f"Failed to get target filepath for {file_path}: {e}")
        stats.errors += 1
        return

    if resolution.status is ResolutionStatus.DUPLICATE:
        logger.info(f"Skipped duplicate: {file_path} already exists as {resolution.existing}")
        stats.duplicates += 1
        return

    if resolution.status is ResolutionStatus.TIMESTAMP_UNAVAILABLE:
        logger.warning(f"No capture timestamp for {file_path} ({resolution.reason}) - skipped")
        stats.no_timestamp += 1
        return

    if resolution.status is ResolutionStatus.PROBE_EXHAUSTED:
        logger.warning(f"Skipped {file_path}: {resolution.reason}")
        stats.probe_exhausted += 1
        return

    try:
        bytes_written = copy_media(file_path, resolution.destination, chunk_size=chunk_size, dry_run=dry_run)
    except SameFileError as e:
        logger.warning(str(e))
        stats.same_file += 1
        return
    except CopyError as e:
        logger.warning(str(e))
        stats.errors += 1
        return

    stats.copied += 1
    stats.bytes_written += bytes_written
    if dry_run:
        logger.info(f"DRY RUN: would copy {file_path} -> {resolution.destination} ({bytes_written} bytes)")
    else:
        logger.info(f"Copied: {file_path} -> {resolution.destination}")
        logger.info(f"Bytes Written: {bytes_written}")


def _format_size(size):
    if size >= 1024 * 1024 * 1024:
        return f"{size / (1024**3):.2f} GB"
    if size >= 1024 * 1024:
        return f"{size / (1024**2):.2f} MB"
    return f"{size / 1024:.2f} KB"


def print_summary(stats: OrganiseStats, dry_run: bool = False):
    """Print a formatted summary of an organise run."""
    print("\n" + "=" * 50)
    print("        ORGANISE SUMMARY" + (" (DRY RUN)" if dry_run else ""))
    print("=" * 50)

    print(f"\nFiles examined:        {stats.total_files:,}")
    label = "Would copy:" if dry_run else "Copied:"
    print(f"{label:<23}{stats.copied:,} ({_format_size(stats.bytes_written)})")
    print(f"{'Directories:':<23}{stats.directories:,}")
    print(f"{'Skipped:':<23}{stats.skipped:,}")

    rows = [
        ("Duplicates", stats.duplicates),
        ("No capture timestamp", stats.no_timestamp),
        ("Name slots exhausted", stats.probe_exhausted),
        ("Source is destination", stats.same_file),
        ("Errors", stats.errors),
    ]
    for label, count in rows:
        if count:
            print(f"  {label + ':':<23}{count:,}")

    print("\n" + "=" * 50 + "\n")
