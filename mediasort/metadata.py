"""
Capture-time extraction.

Images are read with Pillow (HEIC/HEIF via pillow-heif), videos with hachoir.
A file that opens but carries no usable timestamp is reported as MISSING or
UNDECODABLE, never as an error and never with a substitute date.
"""

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from PIL import Image, ExifTags
from pillow_heif import register_heif_opener

from hachoir.core import config as hachoir_config
from hachoir.metadata import extractMetadata
from hachoir.parser import createParser

from mediasort import constants

register_heif_opener()

# Keep hachoir's own warnings off the console
hachoir_config.quiet = True

log = logging.getLogger(__name__)

# Zero times some containers write when the clock was never set
QUICKTIME_EPOCH = datetime(1904, 1, 1)
UNIX_EPOCH = datetime(1970, 1, 1)

_TIMESTAMP_FORMATS = (constants.EXIF_DATETIME_FORMAT, "%Y-%m-%d %H:%M:%S")


class CaptureStatus(Enum):
    FOUND = "found"
    MISSING = "missing"
    UNDECODABLE = "undecodable"


@dataclass(frozen=True)
class CaptureTime:
    status: CaptureStatus
    timestamp: Optional[datetime] = None
    detail: str = ""

    @property
    def found(self) -> bool:
        return self.status is CaptureStatus.FOUND

    @classmethod
    def of(cls, timestamp: datetime) -> "CaptureTime":
        return cls(CaptureStatus.FOUND, timestamp)

    @classmethod
    def missing(cls, detail: str = "") -> "CaptureTime":
        return cls(CaptureStatus.MISSING, detail=detail)

    @classmethod
    def undecodable(cls, detail: str = "") -> "CaptureTime":
        return cls(CaptureStatus.UNDECODABLE, detail=detail)


def parse_exif_datetime(value) -> Optional[datetime]:
    """Parse an EXIF "YYYY:MM:DD HH:MM:SS" value. Returns None if malformed."""
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None
    value = value.strip("\x00 ")
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _is_zero_time(value: datetime) -> bool:
    naive = value.replace(tzinfo=None)
    return naive in (QUICKTIME_EPOCH, UNIX_EPOCH)


def get_image_date(fh) -> CaptureTime:
    """Read the capture time from an open image file's EXIF block."""
    try:
        with Image.open(fh) as img:
            exif_data = img.getexif()
    except Exception as e:
        return CaptureTime.undecodable(f"not a readable image: {e}")

    if not exif_data:
        return CaptureTime.missing("no EXIF data")

    exif_ifd = exif_data.get_ifd(ExifTags.IFD.Exif)
    candidates = (
        ("DateTimeOriginal", exif_ifd.get(ExifTags.Base.DateTimeOriginal)),
        ("DateTimeDigitized", exif_ifd.get(ExifTags.Base.DateTimeDigitized)),
        ("DateTime", exif_data.get(ExifTags.Base.DateTime)),
    )

    malformed = []
    for tag_name, value in candidates:
        if value is None:
            continue
        taken = parse_exif_datetime(value)
        if taken is not None:
            return CaptureTime.of(taken)
        malformed.append(f"{tag_name}={value!r}")

    if malformed:
        return CaptureTime.undecodable("malformed " + ", ".join(malformed))
    return CaptureTime.missing("no date tag in EXIF")


def get_video_date(file_path) -> CaptureTime:
    """Read the creation date from a video container with hachoir."""
    try:
        parser = createParser(str(file_path))
        if not parser:
            return CaptureTime.undecodable("unrecognised container")

        #get creation date
        with parser:
            metadata = extractMetadata(parser)
    except Exception as e:
        return CaptureTime.undecodable(f"could not parse container: {e}")

    if not metadata or not metadata.has("creation_date"):
        return CaptureTime.missing("no creation_date in container")

    created = metadata.get("creation_date")
    if isinstance(created, date) and not isinstance(created, datetime):
        created = datetime.combine(created, datetime.min.time())
    if not isinstance(created, datetime):
        return CaptureTime.undecodable(f"unexpected creation_date {created!r}")
    if _is_zero_time(created):
        return CaptureTime.missing("creation_date is a zero epoch")
    return CaptureTime.of(created)


def extract_capture_time(file_path) -> CaptureTime:
    """
    Extract the capture timestamp embedded in a media file.

    Args:
        file_path: Path to the file

    Returns:
        CaptureTime with status FOUND, MISSING or UNDECODABLE

    Raises:
        OSError: If the file itself can't be opened
    """
    ext = os.path.splitext(str(file_path))[1].lower()

    with open(file_path, 'rb') as fh:
        if ext in constants.VIDEO_EXTENSIONS:
            result = get_video_date(file_path)
        else:
            result = get_image_date(fh)

    if not result.found:
        log.debug(f"No capture time for {file_path}: {result.status.value} ({result.detail})")
    return result
