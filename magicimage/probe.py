"""
Region Probe — read the declared dimensions of an extracted region with Pillow.

Only the image header is parsed (Image.open is lazy); pixels are never
decoded.  The probe is informational: region boundaries come from the
signature scanner alone and are never adjusted by what Pillow reports.
"""

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .analyzer import AnalysisReport, ImageRegion
from .signatures import get_all_formats

logger = logging.getLogger(__name__)

# Pillow plugin names match our format names one-to-one
_PIL_FORMATS = tuple(get_all_formats())


@dataclass(frozen=True)
class ProbeResult:
    ok: bool
    width: int = 0
    height: int = 0
    mode: str = ""
    pil_format: str = ""
    reason: str = ""

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}" if self.ok else "?"


def probe_image(data: bytes) -> ProbeResult:
    """Header-only Pillow probe of one image payload."""
    try:
        with Image.open(io.BytesIO(data), formats=_PIL_FORMATS) as img:
            w, h = img.size
            return ProbeResult(
                ok=True, width=w, height=h,
                mode=img.mode, pil_format=img.format or "",
                reason=f"Image header OK ({w}x{h}, {img.mode})",
            )
    except UnidentifiedImageError as e:
        return ProbeResult(ok=False, reason=f"Not a decodable image: {e}")
    except Image.DecompressionBombError as e:
        return ProbeResult(ok=False, reason=f"Declared size too large: {e}")
    except (OSError, SyntaxError, ValueError) as e:
        # Pillow reports malformed headers through several exception types
        return ProbeResult(ok=False, reason=f"Image header unreadable: {e}")


def probe_region(buffer, region: ImageRegion) -> ProbeResult:
    result = probe_image(bytes(buffer[region.start:region.end]))
    logger.debug("Region %d probe: %s", region.index, result.reason)
    return result


def probe_report(buffer, report: AnalysisReport) -> list[tuple[ImageRegion, ProbeResult]]:
    """Probe every region of an analysis report."""
    return [(region, probe_region(buffer, region)) for region in report.regions]
