import logging
from datetime import datetime
from pathlib import Path

import pytest
from PIL import Image, ExifTags

from mediasort.logger import LOGGER_NAME
from mediasort.metadata import CaptureTime


def make_jpeg(path: Path, taken=None, color=(200, 30, 30), original=None) -> Path:
    """Write a small JPEG, optionally stamped with EXIF DateTime / DateTimeOriginal."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", (16, 16), color)
    exif = Image.Exif()
    if taken is not None:
        exif[ExifTags.Base.DateTime] = taken.strftime("%Y:%m:%d %H:%M:%S")
    if original is not None:
        exif[ExifTags.IFD.Exif] = {
            ExifTags.Base.DateTimeOriginal: original.strftime("%Y:%m:%d %H:%M:%S"),
        }
    if len(exif):
        img.save(path, "JPEG", exif=exif)
    else:
        img.save(path, "JPEG")
    return path


class FakeExtractor:
    """Capture times keyed by file name; unknown names have no timestamp."""

    def __init__(self, times=None, default=None):
        self.times = dict(times or {})
        self.default = default
        self.calls = []

    def __call__(self, path):
        self.calls.append(Path(path))
        taken = self.times.get(Path(path).name, self.default)
        if taken is None:
            return CaptureTime.missing("no date tag in EXIF")
        return CaptureTime.of(taken)


@pytest.fixture
def june_15():
    return datetime(2021, 6, 15, 9, 30, 0)


@pytest.fixture
def src_dir(tmp_path):
    d = tmp_path / "src"
    d.mkdir()
    return d


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers main() attached, so no test logs into a closed capture stream."""
    yield
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)
