"""
Content Hashing Module

Fingerprints files by content so an identical copy already present in the
destination can be recognised regardless of its name.
"""

import hashlib
import os
from typing import Union

from mediasort.constants import CHUNK_SIZE

PathLike = Union[str, os.PathLike]


def fingerprint(path: PathLike, chunk_size: int = CHUNK_SIZE) -> str:
    """
    Compute the MD5 digest of a file's content.

    The file is streamed in chunks so large videos are never held in memory.

    Args:
        path: File to hash
        chunk_size: Bytes read per iteration

    Returns:
        32-character hex digest

    Raises:
        OSError: If the file can't be opened or read
    """
    digest = hashlib.md5()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()
