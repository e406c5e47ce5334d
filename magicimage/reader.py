"""
Image File Reader — load a whole source file into memory before analysis.

Nothing downstream streams: every operation works on one in-memory buffer,
so the file is read exactly once, up front.

  1. Size pre-check against MAX_FILE_SIZE (50 MB) before touching the data.
  2. Memory-mapped read (the OS handles paging), copied out to bytes.
  3. Fallback to a plain read() when mmap is unavailable (empty files,
     pipes, some network filesystems).
"""

import os
import mmap
import logging
import mimetypes
from typing import Optional, BinaryIO

from .errors import FileTooLargeError, UnsupportedFormatError
from .scanner import detect_format_at
from .signatures import UNKNOWN_FORMAT, mime_type_for

logger = logging.getLogger(__name__)

# Ingestion ceiling for a single source file
MAX_FILE_SIZE = 50 * 1024 * 1024

# Declared types we accept for source images
ACCEPTED_MIME_PREFIX = "image/"


class FileReader:
    """
    Whole-file reader with mmap support.

    Usage:
        with FileReader(fh, size) as reader:
            data = reader.read_all()
    """

    def __init__(self, fd: BinaryIO, total_size: int, use_mmap: bool = True):
        self._fd = fd
        self._size = total_size
        self._mmap: Optional[mmap.mmap] = None
        self._using_mmap = False

        if use_mmap and total_size > 0:
            self._try_mmap()

    def _try_mmap(self):
        try:
            self._mmap = mmap.mmap(self._fd.fileno(), 0, access=mmap.ACCESS_READ)
            self._using_mmap = True
        except (OSError, ValueError, OverflowError) as e:
            logger.debug("mmap unavailable (%s), using buffered reads", e)
            self._mmap = None
            self._using_mmap = False

    @property
    def is_mmap(self) -> bool:
        return self._using_mmap

    @property
    def size(self) -> int:
        return self._size

    def read_all(self) -> bytes:
        if self._using_mmap and self._mmap is not None:
            return self._mmap[:self._size]
        self._fd.seek(0)
        return self._fd.read(self._size)

    def close(self):
        if self._mmap is not None:
            self._mmap.close()
            self._mmap = None
            self._using_mmap = False

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def read_image_file(
    path: str,
    max_size: int = MAX_FILE_SIZE,
    require_signature: bool = False,
) -> bytes:
    """
    Read `path` fully into memory.

    Raises FileTooLargeError above `max_size`, and UnsupportedFormatError
    when `require_signature` is set and the file does not start with a
    known image header.  OSError from the filesystem propagates unchanged.
    """
    size = os.path.getsize(path)
    if max_size and size > max_size:
        raise FileTooLargeError(path, size, max_size)

    with open(path, "rb") as f:
        with FileReader(f, size) as reader:
            data = reader.read_all()
            logger.info(
                "Read %s: %d bytes (%s)",
                path, len(data), "mmap" if reader.is_mmap else "buffered",
            )

    if require_signature and detect_format_at(data, 0) == UNKNOWN_FORMAT:
        raise UnsupportedFormatError(
            f"{path} does not start with a supported image signature "
            f"(PNG, JPEG, GIF, BMP)"
        )
    return data


def declared_content_type(path: str, data: bytes = b"") -> str:
    """
    Content type a source file declares by its name.

    Falls back to the format detected in `data` when the name says nothing
    image-like.
    """
    guessed, _encoding = mimetypes.guess_type(path)
    if guessed and guessed.startswith(ACCEPTED_MIME_PREFIX):
        return guessed
    return mime_type_for(detect_format_at(data, 0)) if data else mime_type_for(UNKNOWN_FORMAT)
