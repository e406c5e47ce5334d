"""
Extractor — slice one embedded image back out of a magic image.

Two modes, matching the two ways a magic image is viewed:

  NORMAL  extract_first()   the image every ordinary viewer shows
  MAGIC   extract_hidden()  the image appended after it

Both require a header somewhere in the buffer (NoSignatureFoundError
otherwise).  A missing hidden image is a normal outcome: extract_hidden()
returns None and callers branch on it.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .analyzer import analyze
from .errors import NoSignatureFoundError
from .scanner import MIN_GAP, as_searchable, find_signature, find_next_region_start
from .signatures import extension_for, mime_type_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedImage:
    """Payload bytes of one region, labelled with its MIME type."""
    data: bytes
    mime_type: str
    format_name: str
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def extension(self) -> str:
        return extension_for(self.format_name)


def _slice(buffer, start: int, end: int, format_name: str) -> ExtractedImage:
    return ExtractedImage(
        data=bytes(buffer[start:end]),
        mime_type=mime_type_for(format_name),
        format_name=format_name,
        start=start,
        end=end,
    )


def _first_header(buffer):
    first = find_signature(buffer, 0)
    if not first.found:
        raise NoSignatureFoundError(
            f"No valid image format found in {len(buffer)} bytes",
            size=len(buffer),
        )
    logger.info("First image: %s at %d", first.format_name, first.offset)
    return first


def extract_first(buffer, min_gap: int = MIN_GAP) -> ExtractedImage:
    """Extract the visible (first) image."""
    buffer = as_searchable(buffer)
    first = _first_header(buffer)

    nxt = find_next_region_start(buffer, first.offset, min_gap)
    if nxt.found:
        end = nxt.offset
        logger.info("Next image starts at %d", end)
    else:
        end = len(buffer)
        logger.info("No further image; using end of data")

    logger.info("First image ends at %d (%d bytes)", end, end - first.offset)
    return _slice(buffer, first.offset, end, first.format_name)


def extract_hidden(buffer, min_gap: int = MIN_GAP) -> Optional[ExtractedImage]:
    """Extract the hidden (second) image, or None when there is none."""
    buffer = as_searchable(buffer)
    first = _first_header(buffer)

    second = find_next_region_start(buffer, first.offset, min_gap)
    if not second.found:
        logger.info(
            "No hidden image found; not a magic image or the second format "
            "is unsupported"
        )
        return None

    logger.info(
        "Hidden image: %s at %d (first image is %d bytes)",
        second.format_name, second.offset, second.offset - first.offset,
    )

    third = find_next_region_start(buffer, second.offset, min_gap)
    end = third.offset if third.found else len(buffer)

    logger.info("Hidden image ends at %d (%d bytes)", end, end - second.offset)
    return _slice(buffer, second.offset, end, second.format_name)


def extract_region(buffer, index: int, min_gap: int = MIN_GAP) -> ExtractedImage:
    """Extract the region with 1-based `index` as reported by analyze()."""
    buffer = as_searchable(buffer)
    report = analyze(buffer, min_gap=min_gap)
    if not report.regions:
        raise NoSignatureFoundError(
            f"No valid image format found in {len(buffer)} bytes",
            size=len(buffer),
        )
    if not 1 <= index <= len(report.regions):
        raise IndexError(
            f"region {index} out of range (container has {len(report.regions)})"
        )
    region = report.regions[index - 1]
    return _slice(buffer, region.start, region.end, region.format_name)


# ─── Saving ──────────────────────────────────────────────────

def unique_output_path(path: str) -> str:
    """`path`, or `path` with _1, _2, ... appended if it already exists."""
    if not os.path.exists(path):
        return path
    base, ext = os.path.splitext(path)
    i = 1
    candidate = f"{base}_{i}{ext}"
    while os.path.exists(candidate):
        i += 1
        candidate = f"{base}_{i}{ext}"
    return candidate


def save_extracted(image: ExtractedImage, path: str, overwrite: bool = False) -> str:
    """Write an extracted payload to disk and return the path used."""
    if not overwrite:
        path = unique_output_path(path)
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "wb") as f:
        f.write(image.data)
    logger.info("Image extracted to %s (%d bytes)", path, image.size)
    return path
