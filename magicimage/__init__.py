# magicimage — hide one image behind another by raw concatenation.
# Pure-Python signature scanning over in-memory byte buffers.
#
# Architecture (bottom → top):
#   signatures — Magic-byte table (PNG, JPEG, GIF, BMP), in tie-break order
#   scanner    — Header search with a minimum gap between images
#   analyzer   — Partition a container into image regions
#   builder    — Concatenate two images into one container
#   extractor  — Slice out the visible or the hidden image
#   reader     — Whole-file loading with the 50 MB ingestion ceiling
#   probe      — Pillow header probe for region dimensions
#   manager    — Orchestrator (threading, save, report export)
#   cli        — argparse front-end (create, view, analyze)

from .analyzer import AnalysisReport, ImageRegion, analyze
from .builder import BuiltContainer, build, build_container
from .errors import (
    MagicImageError,
    NoSignatureFoundError,
    FileTooLargeError,
    UnsupportedFormatError,
)
from .extractor import ExtractedImage, extract_first, extract_hidden, extract_region
from .scanner import ScanResult, detect_format_at, find_signature, find_next_region_start
