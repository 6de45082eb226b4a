"""
Target Path Resolution

Works out where a source file belongs in the destination tree:

    <destination>/<YYYY>/<MM>/<DD>/<stem>[-<n>]<ext>

The day folder comes only from the capture timestamp. Within it, candidate
names are probed in order. A free name is used, an existing file with the
same content means the file is already there, and an existing file with
different content moves the probe on to the next suffix. Probing stops after
a fixed number of attempts.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from mediasort import constants
from mediasort.hasher import fingerprint as md5_fingerprint
from mediasort.metadata import CaptureTime, extract_capture_time


class ResolutionStatus(Enum):
    RESOLVED = "resolved"
    DUPLICATE = "duplicate"
    TIMESTAMP_UNAVAILABLE = "timestamp_unavailable"
    PROBE_EXHAUSTED = "probe_exhausted"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one source file."""
    status: ResolutionStatus
    source: Path
    destination: Optional[Path] = None  # set when RESOLVED
    existing: Optional[Path] = None  # matching file when DUPLICATE
    attempts: int = 0
    reason: str = ""

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


def split_name(name: str) -> Tuple[str, str]:
    """Split a filename on its final dot. ("a.tar.gz" -> ("a.tar", ".gz"), "README" -> ("README", ""))"""
    stem, ext = os.path.splitext(name)
    return stem, ext


def candidate_name(stem: str, ext: str, attempt: int) -> str:
    """Filename for a probe attempt; attempt 0 is the bare name."""
    if attempt == 0:
        return f"{stem}{ext}"
    return f"{stem}-{attempt}{ext}"


def day_bucket(timestamp: datetime) -> Path:
    """Relative YYYY/MM/DD folder for a capture timestamp."""
    return Path(f"{timestamp.year:04d}", f"{timestamp.month:02d}", f"{timestamp.day:02d}")


class SourceFile:
    """A file being resolved. Its fingerprint is computed at most once."""

    def __init__(self, path, hash_func: Callable[[Path], str] = md5_fingerprint):
        self.path = Path(os.path.abspath(path))
        self._hash_func = hash_func
        self._fingerprint = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def fingerprint(self) -> str:
        if self._fingerprint is None:
            self._fingerprint = self._hash_func(self.path)
        return self._fingerprint


class PathResolver:
    """
    Resolves source files to their destination path under one root.

    Args:
        destination_root: Root of the organised tree
        extract: Capture-time extractor, returns a CaptureTime
        hash_func: Content fingerprint function
        probe_limit: Maximum number of candidate names tried
        logger: Logger for probe diagnostics
    """

    def __init__(
        self,
        destination_root,
        extract: Callable[[Path], CaptureTime] = extract_capture_time,
        hash_func: Callable[[Path], str] = md5_fingerprint,
        probe_limit: int = constants.PROBE_LIMIT,
        logger: Optional[logging.Logger] = None
    ):
        if probe_limit < 1:
            raise ValueError("probe_limit must be at least 1")
        self.destination_root = Path(os.path.abspath(destination_root))
        self.extract = extract
        self.hash_func = hash_func
        self.probe_limit = probe_limit
        self.logger = logger or logging.getLogger(__name__)

    def target_directory(self, timestamp: datetime) -> Path:
        return self.destination_root / day_bucket(timestamp)

    def resolve(self, source_path) -> Resolution:
        """
        Resolve one source file.

        Raises:
            OSError: If the source can't be read while fingerprinting it
        """
        source = SourceFile(source_path, self.hash_func)

        try:
            capture = self.extract(source.path)
        except OSError as e:
            return Resolution(
                ResolutionStatus.TIMESTAMP_UNAVAILABLE, source.path,
                reason=f"could not open for metadata: {e}"
            )

        if not capture.found:
            return Resolution(
                ResolutionStatus.TIMESTAMP_UNAVAILABLE, source.path,
                reason=f"{capture.status.value}: {capture.detail}".rstrip(": ")
            )

        target_dir = self.target_directory(capture.timestamp)
        return self._probe(source, target_dir)

    def _probe(self, source: SourceFile, target_dir: Path) -> Resolution:
        stem, ext = split_name(source.name)

        for attempt in range(self.probe_limit):
            candidate = target_dir / candidate_name(stem, ext, attempt)
            self.logger.debug(f"Attempt {attempt}: {candidate}")

            if not os.path.lexists(candidate):
                self.logger.debug(f"{candidate} does not exist - this is the target filename")
                return Resolution(
                    ResolutionStatus.RESOLVED, source.path,
                    destination=candidate, attempts=attempt + 1
                )

            if self._holds_same_content(candidate, source):
                return Resolution(
                    ResolutionStatus.DUPLICATE, source.path,
                    existing=candidate, attempts=attempt + 1,
                    reason=f"same content as {candidate}"
                )

        return Resolution(
            ResolutionStatus.PROBE_EXHAUSTED, source.path,
            attempts=self.probe_limit,
            reason=f"no free name for {source.name} in {target_dir} after {self.probe_limit} attempts"
        )

    def _holds_same_content(self, candidate: Path, source: SourceFile) -> bool:
        if not candidate.is_file():
            self.logger.debug(f"{candidate} exists but is not a regular file")
            return False

        try:
            existing = self.hash_func(candidate)
        except OSError as e:
            self.logger.warning(f"Could not hash existing {candidate}, treating as different: {e}")
            return False

        # source hash errors propagate to the caller
        return existing == source.fingerprint


def resolve(source_path, destination_root, **kwargs) -> Resolution:
    """Resolve a single file without keeping a PathResolver around."""
    return PathResolver(destination_root, **kwargs).resolve(source_path)
