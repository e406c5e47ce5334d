"""
Image Signature Table — magic-byte prefixes of every format a container may hold.

DESIGN RATIONALE
────────────────
A magic image has no container header, no index and no length fields, so the
only structure we can recover is where each embedded image *starts*.  Each
supported format announces itself with a fixed prefix:

  • PNG   89 50 4E 47 0D 0A 1A 0A   (8 bytes, practically collision-free)
  • JPEG  FF D8 FF                  (SOI + first marker byte)
  • GIF   47 49 46 38               ("GIF8", covers GIF87a and GIF89a)
  • BMP   42 4D                     ("BM", shortest and most collision-prone)

Exported for the scanner:
  • HEADER_SIGNATURES — ordered list of (prefix, SignatureInfo)
  • SignatureInfo     — lightweight dataclass describing a format
  • UNKNOWN_FORMAT    — format name reported when nothing matches

The ORDER of HEADER_SIGNATURES is significant: when several prefixes match at
the same offset the earliest entry wins.
"""

from dataclasses import dataclass
from typing import Optional


UNKNOWN_FORMAT = "UNKNOWN"
UNKNOWN_EXTENSION = ".bin"
DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class SignatureInfo:
    """Describes one embeddable image format."""
    format_name: str            # "PNG", "JPEG", "GIF" or "BMP"
    prefix: bytes               # Magic bytes at offset 0 of the image
    extension: str              # file extension with leading dot
    mime_type: str
    description: str

    @property
    def prefix_hex(self) -> str:
        return " ".join(f"{b:02X}" for b in self.prefix)


# ══════════════════════════════════════════════════════════════
#  I M A G E   S I G N A T U R E S
# ══════════════════════════════════════════════════════════════

# ── PNG ──
SIG_PNG = SignatureInfo(
    format_name="PNG", prefix=b"\x89PNG\r\n\x1A\n",
    extension=".png", mime_type="image/png",
    description="PNG Image",
)

# ── JPEG ──
SIG_JPEG = SignatureInfo(
    format_name="JPEG", prefix=b"\xFF\xD8\xFF",
    extension=".jpg", mime_type="image/jpeg",
    description="JPEG Image",
)

# ── GIF ──  (both 87a and 89a share "GIF8")
SIG_GIF = SignatureInfo(
    format_name="GIF", prefix=b"GIF8",
    extension=".gif", mime_type="image/gif",
    description="GIF Image",
)

# ── BMP ──  (2-byte prefix, frequent false positives inside payloads)
SIG_BMP = SignatureInfo(
    format_name="BMP", prefix=b"BM",
    extension=".bmp", mime_type="image/bmp",
    description="BMP Image",
)


# ═════════════════════════════════════════════════════════════
#  HEADER_SIGNATURES — fixed magic bytes, in tie-break order
# ═════════════════════════════════════════════════════════════

HEADER_SIGNATURES: list[tuple[bytes, SignatureInfo]] = [
    (SIG_PNG.prefix,    SIG_PNG),
    (SIG_JPEG.prefix,   SIG_JPEG),
    (SIG_GIF.prefix,    SIG_GIF),
    (SIG_BMP.prefix,    SIG_BMP),
]

_BY_FORMAT: dict[str, SignatureInfo] = {
    sig.format_name: sig for _prefix, sig in HEADER_SIGNATURES
}


# ═════════════════════════════════════════════════════════════
#  Convenience helpers
# ═════════════════════════════════════════════════════════════

def get_all_formats() -> list[str]:
    return [sig.format_name for _prefix, sig in HEADER_SIGNATURES]


def get_signature(format_name: str) -> Optional[SignatureInfo]:
    return _BY_FORMAT.get(format_name)


def mime_type_for(format_name: str) -> str:
    """MIME type for a format name; anything unrecognised is opaque bytes."""
    sig = _BY_FORMAT.get(format_name)
    return sig.mime_type if sig else DEFAULT_MIME_TYPE


def extension_for(format_name: str) -> str:
    sig = _BY_FORMAT.get(format_name)
    return sig.extension if sig else UNKNOWN_EXTENSION
