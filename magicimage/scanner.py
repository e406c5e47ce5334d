"""
Signature Scanner — locate embedded image headers inside a raw byte buffer.

HOW BOUNDARY DETECTION WORKS
────────────────────────────
1.  A magic image is the plain concatenation of complete image files.
2.  The first region starts at the first offset where ANY known prefix
    matches (lowest offset wins, table order breaks ties).
3.  The next region is searched for only after skipping MIN_GAP bytes past
    the current header.  Compressed payloads routinely contain "BM", "GIF8"
    or "FF D8 FF" by chance right after a real header; the gap keeps those
    from being mistaken for a new image.
4.  Trade-off: an image shorter than MIN_GAP is skipped over and merged into
    the following region.  Exact length recovery is NOT guaranteed for very
    small inputs.

Searching uses bytes.find() once per prefix instead of a Python-level
byte loop; the result is identical to testing every offset in turn.
"""

import logging
from dataclasses import dataclass

from .signatures import (
    HEADER_SIGNATURES,
    UNKNOWN_FORMAT,
    UNKNOWN_EXTENSION,
)

logger = logging.getLogger(__name__)

# Bytes skipped after a header before looking for the next one
MIN_GAP = 1000


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one signature search."""
    offset: int = 0
    format_name: str = UNKNOWN_FORMAT
    extension: str = UNKNOWN_EXTENSION
    found: bool = False

    @property
    def offset_hex(self) -> str:
        return f"0x{self.offset:X}"


NOT_FOUND = ScanResult()


def as_searchable(buffer):
    """Buffer in a form that supports .find(); convert once per operation."""
    # memoryview has no .find(); bytes and bytearray do
    if isinstance(buffer, memoryview):
        return buffer.tobytes()
    return buffer


def _check_offset(name: str, value: int):
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def detect_format_at(buffer, offset: int = 0) -> str:
    """Format whose prefix sits exactly at `offset`, else UNKNOWN."""
    _check_offset("offset", offset)
    for prefix, sig in HEADER_SIGNATURES:
        end = offset + len(prefix)
        if end <= len(buffer) and buffer[offset:end] == prefix:
            return sig.format_name
    return UNKNOWN_FORMAT


def find_signature(buffer, from_offset: int = 0) -> ScanResult:
    """
    Find the first known image header at or after `from_offset`.

    Returns NOT_FOUND when the scan reaches the end of the buffer.
    """
    _check_offset("from_offset", from_offset)
    data = as_searchable(buffer)
    if from_offset >= len(data):
        return NOT_FOUND

    best_pos = -1
    best_sig = None
    for prefix, sig in HEADER_SIGNATURES:
        pos = data.find(prefix, from_offset)
        # strict "<" keeps the earlier table entry on equal offsets
        if pos != -1 and (best_pos == -1 or pos < best_pos):
            best_pos = pos
            best_sig = sig

    if best_sig is None:
        return NOT_FOUND

    logger.debug(
        "Signature %s at 0x%X (searched from 0x%X)",
        best_sig.format_name, best_pos, from_offset,
    )
    return ScanResult(
        offset=best_pos,
        format_name=best_sig.format_name,
        extension=best_sig.extension,
        found=True,
    )


def find_next_region_start(buffer, after_offset: int, min_gap: int = MIN_GAP) -> ScanResult:
    """
    Find the header of the image that follows the one at `after_offset`.

    The search starts `min_gap` bytes past `after_offset` so that
    signature-like bytes inside the current image's payload are ignored.
    """
    _check_offset("after_offset", after_offset)
    if min_gap < 1:
        # a zero gap would find the current header again
        raise ValueError(f"min_gap must be >= 1, got {min_gap}")
    search_start = after_offset + min_gap
    if search_start >= len(buffer):
        return NOT_FOUND
    return find_signature(buffer, search_start)
