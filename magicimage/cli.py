"""
Magic Image CLI — create, view and analyze magic images from the terminal.

Usage:
    magic-image create photo1.jpg photo2.png magic.jpg
    magic-image view magic.jpg                 # normal mode (first image)
    magic-image view -m magic.jpg hidden.png   # magic mode (hidden image)
    magic-image analyze magic.jpg --json report.json
"""

import sys
import logging
import argparse

from .analyzer import analyze, human_size
from .builder import write_container
from .errors import MagicImageError
from .extractor import extract_first, extract_hidden, save_extracted
from .manager import InspectionManager
from .probe import probe_report
from .reader import MAX_FILE_SIZE, declared_content_type, read_image_file
from .scanner import MIN_GAP

APP_VERSION = "1.2.0"

logger = logging.getLogger(__name__)


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return value


def _banner(title: str):
    print("=" * 60)
    print(f"  {title}  v{APP_VERSION}")
    print("=" * 60)
    print()


def cmd_create(args) -> int:
    _banner("Magic Image Creator")
    print(f"First image:  {args.image1}")
    print(f"Second image: {args.image2}")
    print(f"Output:       {args.output}")
    print()

    first = read_image_file(args.image1, max_size=args.max_size)
    second = read_image_file(args.image2, max_size=args.max_size)

    result = write_container(
        args.output, first, second,
        content_type=declared_content_type(args.image1, first),
    )

    print(f"  First image:  {result.first_format:7s} {human_size(result.first_size):>10s}")
    print(f"  Second image: {result.second_format:7s} {human_size(result.second_size):>10s}")
    for w in result.warnings:
        print(f"  ⚠️  {w}")
    print()
    print("─" * 60)
    print(f"  Total size:   {result.size} bytes")
    print(f"  First image:  0 - {result.first_size - 1}")
    print(f"  Second image: {result.first_size} - {result.size - 1}")
    print(f"  Content type: {result.content_type}")
    print("─" * 60)
    print()
    print("  Ordinary viewers show the first image.")
    print("  Use `view -m` to extract the hidden second image.")
    if result.first_size < args.min_gap:
        print(f"  ⚠️  First image is under {args.min_gap} bytes; "
              "the hidden image may not be recoverable.")
    print()
    return 0


def cmd_view(args) -> int:
    mode = "magic" if args.magic else "normal"
    _banner("Magic Image Viewer")
    print(f"Input:  {args.container}")
    if args.output:
        print(f"Output: {args.output}")
    print(f"Mode:   {mode}")
    print()

    data = read_image_file(args.container, max_size=args.max_size)

    if mode == "magic":
        image = extract_hidden(data, min_gap=args.min_gap)
        if image is None:
            print("  No hidden second image found.", file=sys.stderr)
            print("  Hint: this may not be a magic image, or the second "
                  "image's format is not supported.")
            return 1
    else:
        image = extract_first(data, min_gap=args.min_gap)

    print(f"  Format: {image.format_name} ({image.mime_type})")
    print(f"  Start:  {image.start}")
    print(f"  End:    {image.end}")
    print(f"  Size:   {image.size} bytes ({human_size(image.size)})")

    if args.output:
        path = save_extracted(image, args.output, overwrite=args.overwrite)
        print(f"\n  Saved to: {path}")
    print()
    return 0


def cmd_analyze(args) -> int:
    _banner("Magic Image Analysis")

    if args.json or args.csv:
        manager = InspectionManager(min_gap=args.min_gap, max_size=args.max_size)
        session = manager.inspect(args.container, probe=not args.no_probe)
        if not session.succeeded:
            print(f"Error: {session.error}", file=sys.stderr)
            return 1
        report = session.report
        probes = session.probes
        if args.json:
            manager.export_report_json(args.json)
        if args.csv:
            manager.export_report_csv(args.csv)
    else:
        data = read_image_file(args.container, max_size=args.max_size)
        report = analyze(data, min_gap=args.min_gap)
        probes = [] if args.no_probe else [p for _r, p in probe_report(data, report)]

    print(f"  File size: {report.total_size} bytes ({report.total_size_human})")
    print()

    if not report.regions:
        print("  No recognisable image format found.")
        print()
        return 0

    print(f"  {'#':>2s}  {'Format':7s} {'Start':>10s} {'End':>10s} {'Size':>10s}  {'Dims':>11s}")
    print(f"  {'-'*2}  {'-'*7} {'-'*10} {'-'*10} {'-'*10}  {'-'*11}")
    for i, r in enumerate(report.regions):
        dims = probes[i].dimensions if i < len(probes) else "-"
        print(f"  {r.index:2d}  {r.format_name:7s} {r.start:10d} {r.end:10d} "
              f"{r.size_human:>10s}  {dims:>11s}")
    print()

    if report.is_composite:
        print(f"  ✨ Magic image with {len(report.regions)} images")
    else:
        print("  Plain image file")
    if args.json:
        print(f"  JSON report: {args.json}")
    if args.csv:
        print(f"  CSV report:  {args.csv}")
    print()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hide an image behind another and get it back.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--min-gap", type=_positive_int, default=MIN_GAP,
                        help="Bytes skipped after a header before the next search")
    parser.add_argument("--max-size", type=int, default=MAX_FILE_SIZE,
                        help="Largest accepted input file in bytes")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("create", help="Concatenate two images into a magic image")
    p.add_argument("image1", help="Visible image (PNG, JPEG, GIF, BMP)")
    p.add_argument("image2", help="Hidden image (PNG, JPEG, GIF, BMP)")
    p.add_argument("output", help="Magic image to write")
    p.set_defaults(func=cmd_create)

    p = sub.add_parser("view", help="Extract the first or the hidden image")
    g = p.add_mutually_exclusive_group()
    g.add_argument("-n", "--normal", action="store_true", help="First image (default)")
    g.add_argument("-m", "--magic", action="store_true", help="Hidden second image")
    p.add_argument("container", help="Magic image file")
    p.add_argument("output", nargs="?", default="", help="Where to save the image")
    p.add_argument("--overwrite", action="store_true", help="Replace an existing output file")
    p.set_defaults(func=cmd_view)

    p = sub.add_parser("analyze", help="List every image region in a file")
    p.add_argument("container", help="Magic image file")
    p.add_argument("--json", default="", help="Write a JSON report")
    p.add_argument("--csv", default="", help="Write a CSV report")
    p.add_argument("--no-probe", action="store_true", help="Skip Pillow dimension probe")
    p.set_defaults(func=cmd_analyze)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        return args.func(args)
    except (MagicImageError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
