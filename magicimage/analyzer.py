"""
Container Analyzer — partition a magic image into its embedded image regions.

Each region runs from one detected header to the next detected header
(searched MIN_GAP bytes later) or to the end of the buffer.  At most
MAX_REGIONS regions are reported; anything beyond is silently ignored so a
pathological buffer cannot make the scan run away.
"""

import logging
from dataclasses import dataclass, field

from .scanner import MIN_GAP, as_searchable, find_signature, find_next_region_start
from .signatures import extension_for, mime_type_for

logger = logging.getLogger(__name__)

# Hard cap on regions reported by analyze()
MAX_REGIONS = 10


@dataclass(frozen=True)
class ImageRegion:
    """A contiguous byte range inferred to hold one embedded image."""
    index: int                      # 1-based position in the container
    format_name: str
    start: int
    end: int                        # exclusive

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def extension(self) -> str:
        return extension_for(self.format_name)

    @property
    def mime_type(self) -> str:
        return mime_type_for(self.format_name)

    @property
    def offset_hex(self) -> str:
        return f"0x{self.start:X}"

    @property
    def size_human(self) -> str:
        return human_size(self.size)

    def as_dict(self) -> dict:
        return {
            "index": self.index,
            "format": self.format_name,
            "mime_type": self.mime_type,
            "start": self.start,
            "end": self.end,
            "size": self.size,
            "offset_hex": self.offset_hex,
        }


@dataclass(frozen=True)
class AnalysisReport:
    """Result of analyze(): every region found, in container order."""
    total_size: int
    regions: tuple[ImageRegion, ...] = field(default_factory=tuple)

    @property
    def is_composite(self) -> bool:
        return len(self.regions) > 1

    @property
    def first_region(self):
        return self.regions[0] if self.regions else None

    @property
    def hidden_regions(self) -> tuple[ImageRegion, ...]:
        return self.regions[1:]

    @property
    def total_size_human(self) -> str:
        return human_size(self.total_size)

    @property
    def summary(self) -> dict:
        return {
            "total_size": self.total_size,
            "total_size_human": self.total_size_human,
            "region_count": len(self.regions),
            "is_composite": self.is_composite,
            "formats": [r.format_name for r in self.regions],
        }


def analyze(buffer, min_gap: int = MIN_GAP, max_regions: int = MAX_REGIONS) -> AnalysisReport:
    """Split `buffer` into image regions by repeated signature scans."""
    buffer = as_searchable(buffer)
    total = len(buffer)
    regions: list[ImageRegion] = []
    search_pos = 0
    count = 1

    logger.info("Analyzing container: %d bytes", total)

    while search_pos < total and count <= max_regions:
        sig = find_signature(buffer, search_pos)
        if not sig.found:
            break

        nxt = find_next_region_start(buffer, sig.offset, min_gap)
        region_end = nxt.offset if nxt.found else total

        region = ImageRegion(
            index=count,
            format_name=sig.format_name,
            start=sig.offset,
            end=region_end,
        )
        regions.append(region)
        logger.info(
            "Region %d: %s at %d-%d (%d bytes)",
            region.index, region.format_name, region.start, region.end, region.size,
        )

        search_pos = region_end
        count += 1

    if count > max_regions and search_pos < total:
        logger.debug("Region cap (%d) reached at offset %d", max_regions, search_pos)

    if not regions:
        logger.info("No recognisable image format found")
    elif len(regions) == 1:
        logger.info("Plain image file (single region)")
    else:
        logger.info("Magic image with %d regions", len(regions))

    return AnalysisReport(total_size=total, regions=tuple(regions))


def human_size(nbytes: int) -> str:
    s = float(nbytes)
    for u in ("B", "KB", "MB", "GB"):
        if s < 1024:
            return f"{s:.1f} {u}"
        s /= 1024
    return f"{s:.1f} TB"
