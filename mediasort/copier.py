import logging
import os
import shutil
from pathlib import Path

from mediasort.constants import CHUNK_SIZE
from mediasort.exceptions import CopyError, SameFileError

log = logging.getLogger(__name__)


def _same_path(src: Path, dst: Path) -> bool:
    if os.path.abspath(src) == os.path.abspath(dst):
        return True
    try:
        return os.path.samefile(src, dst)
    except OSError:
        return False


def copy_media(source, destination, chunk_size=CHUNK_SIZE, dry_run=False):
    """
    Copy a file to a resolved destination and return the number of bytes written.

    Missing parent folders are created. The destination is opened in
    exclusive-create mode so an existing file is never overwritten.

    Raises:
        SameFileError: source and destination are the same file
        CopyError: the copy failed; any partial destination is removed
    """
    src = Path(source)
    dst = Path(destination)

    #Safety - checked before anything on disk changes
    if _same_path(src, dst):
        raise SameFileError(f"Not copying {src} onto itself")

    if dry_run:
        return src.stat().st_size

    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CopyError(f"Could not create {dst.parent}: {e}") from e

    created = False
    try:
        with open(src, 'rb') as original:
            with open(dst, 'xb') as new:
                created = True
                shutil.copyfileobj(original, new, chunk_size)
                bytes_written = new.tell()
    except FileExistsError as e:
        raise CopyError(f"{dst} appeared before it could be written") from e
    except OSError as e:
        if created:
            try:
                dst.unlink()
            except FileNotFoundError:
                pass
            except OSError as cleanup_error:
                log.warning(f"Could not remove partial copy {dst}: {cleanup_error}")
        raise CopyError(f"Error copying {src} -> {dst}: {e}") from e

    # keep the original timestamps like shutil.copy2
    try:
        shutil.copystat(src, dst)
    except OSError as e:
        log.warning(f"Copied {dst} but could not keep timestamps/permissions: {e}")

    return bytes_written
