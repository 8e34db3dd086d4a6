"""
Indian Flag Image Validator

Checks a rasterized flag against the national flag rules:
- Aspect ratio 3:2 (±1%)
- Color accuracy (±5% per-channel tolerance from reference RGB; deviation reported as mean-channel % of full scale 255)
- Stripe proportions (each 1/3 of height, ±1%)
- Ashoka Chakra: centered in white band (<1px), diameter = 3/4 of white band height (±2%), 24 spokes (±1)

Assumptions:
- Flat, solid-color flags (no folds/shading)
- PNG/JPG/SVG up to 5 MB; the longer side is downscaled to 1600px before analysis

Usage (CLI):
    flag-validator <image_path> [--output report.json]
Outputs JSON report to stdout.

Use as a module:
    from flag_validator import validate, validate_buffer
    report = validate("path/to/image.png")              # JSON-ready dict
    report = validate_buffer(PixelBuffer.from_array(a))  # ValidationReport
"""

import argparse
import json
import logging
import sys
import time
from typing import Any, Dict, Optional, Sequence

from . import chakra, stripes
from .buffer import PixelBuffer
from .colors import average_color
from .config import DEFAULT_SPEC, LOG_LEVEL, MAX_SIDE, REPORT_NAME, TargetSpec
from .errors import InvalidBufferError, UpstreamDecodeError
from .loader import load_buffer, save_report
from .report import ValidationReport, build

logger = logging.getLogger(__name__)


def validate_buffer(buffer: PixelBuffer, spec: TargetSpec = DEFAULT_SPEC) -> ValidationReport:
    """Run every check on a decoded pixel buffer.

    Pure and deterministic: the buffer is only read, and the same buffer and
    spec always give the same report. Raises InvalidBufferError for a
    missing or zero-sized buffer; every other outcome is a report status.
    """
    if not isinstance(buffer, PixelBuffer):
        raise InvalidBufferError(f"expected a PixelBuffer, got {type(buffer).__name__}")
    t0 = time.perf_counter()

    bands = stripes.classify(buffer, spec)
    color_stats = {
        "saffron": average_color(buffer, bands.top, spec.band_margin),
        "white": average_color(buffer, bands.middle, spec.band_margin),
        "green": average_color(buffer, bands.bottom, spec.band_margin),
    }
    metrics = chakra.detect(buffer, bands.middle, spec)
    report = build(buffer.aspect_ratio, bands, color_stats, metrics, spec)

    logger.info("validated %dx%d image in %.0fms: %s",
                buffer.width, buffer.height, (time.perf_counter() - t0) * 1000,
                "pass" if report.passed else "fail")
    return report


def validate(image_path: str, spec: TargetSpec = DEFAULT_SPEC,
             max_side: int = MAX_SIDE) -> Dict[str, Any]:
    """
    Validate a flag image file and return the JSON-compatible report dict:
      aspect_ratio, colors, stripe_proportion, chakra_position,
      chakra_diameter, chakra_spokes, chakra
    """
    buffer = load_buffer(image_path, max_side=max_side)
    return validate_buffer(buffer, spec).to_dict()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="flag-validator",
                                     description="Validate an Indian flag image and print a JSON report.")
    parser.add_argument("image", nargs="?", help="PNG, JPG or SVG file")
    parser.add_argument("-o", "--output", nargs="?", const=REPORT_NAME,
                        help=f"also write the report to a file (default name {REPORT_NAME})")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="logging level (stderr)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if not args.image:
        print(json.dumps({"error": "usage: flag-validator <image_path>"}))
        return 1
    try:
        rep = validate(args.image)
    except UpstreamDecodeError as e:
        logger.error("decode failed: %s", e)
        print(json.dumps({"error": f"processing failed: {e}"}))
        return 2
    print(json.dumps(rep, indent=2))
    if args.output:
        save_report(rep, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
