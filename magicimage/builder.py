"""
Container Builder — glue two images into one magic image.

The second image is appended verbatim after the first.  Ordinary viewers stop
decoding at the first image's end marker and show only that image; the
extractor recovers the second one by signature scanning.

The output is labelled with the FIRST image's declared content type no matter
what the second image is.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from .scanner import detect_format_at
from .signatures import UNKNOWN_FORMAT, mime_type_for

logger = logging.getLogger(__name__)


@dataclass
class BuiltContainer:
    """A freshly built magic image plus what was learned about its inputs."""
    data: bytes
    content_type: str
    first_format: str
    second_format: str
    first_size: int
    second_size: int
    warnings: list[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def first_range(self) -> tuple[int, int]:
        return 0, self.first_size

    @property
    def second_range(self) -> tuple[int, int]:
        return self.first_size, self.first_size + self.second_size


def build(first, second) -> bytes:
    """Byte-wise concatenation `first ++ second`."""
    return bytes(first) + bytes(second)


def build_container(first, second, content_type: Optional[str] = None) -> BuiltContainer:
    """
    Build a magic image and report the detected input formats.

    Unknown input formats do not stop the build; each one adds an entry to
    `warnings` and is logged.  `content_type` is the first image's declared
    type; without one, the first image's detected format decides it.
    """
    first_format = detect_format_at(first, 0)
    logger.info("First image: %s (%d bytes)", first_format, len(first))
    second_format = detect_format_at(second, 0)
    logger.info("Second image: %s (%d bytes)", second_format, len(second))

    warnings: list[str] = []
    for label, fmt in (("first", first_format), ("second", second_format)):
        if fmt == UNKNOWN_FORMAT:
            msg = f"Unknown image format for the {label} image; continuing anyway"
            logger.warning(msg)
            warnings.append(msg)

    data = build(first, second)
    result = BuiltContainer(
        data=data,
        content_type=content_type or mime_type_for(first_format),
        first_format=first_format,
        second_format=second_format,
        first_size=len(first),
        second_size=len(second),
        warnings=warnings,
    )
    logger.info(
        "Magic image built: %d bytes (first 0-%d, second %d-%d)",
        result.size, result.first_size - 1,
        result.first_size, result.size - 1,
    )
    return result


def write_container(path: str, first, second, content_type: Optional[str] = None) -> BuiltContainer:
    """Build a magic image and write it to `path`."""
    result = build_container(first, second, content_type=content_type)
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "wb") as f:
        f.write(result.data)
    logger.info("Magic image written to %s", path)
    return result
