#!/usr/bin/env python3
"""
Conversion Smoke Test Script
============================

Standalone script to exercise a running svg2png service.

This script:
    1. Posts an SVG file to /svg-to-png at one or more DPI values
    2. Verifies the response is a well-formed PNG
    3. Reports canvas size and the embedded pHYs density
    4. Optionally writes the PNGs next to the input

Prerequisites:
    - svg2png must be running at the configured URL
    - Install dependencies: pip install -e .

Usage:
    python scripts/convert_svg.py drawing.svg --dpi 96 --dpi 300
    python scripts/convert_svg.py drawing.svg --url http://localhost:3000 --save
"""

import argparse
import logging
import os
import struct
import sys
from pathlib import Path

import requests

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from svg2png.encoding import iter_chunks, read_density


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def convert(url: str, svg: bytes, dpi: float, timeout: float) -> requests.Response:
    """POST an SVG to the service at the given DPI."""
    return requests.post(
        f"{url.rstrip('/')}/svg-to-png",
        params={"dpi": dpi},
        data=svg,
        headers={"Content-Type": "image/svg+xml"},
        timeout=timeout,
    )


def describe_png(png: bytes) -> dict:
    """Extract canvas size and density from a PNG stream."""
    width = height = None
    for chunk_type, body in iter_chunks(png):
        if chunk_type == b"IHDR":
            width, height = struct.unpack(">II", body[:8])
            break

    density = read_density(png)
    return {
        "width": width,
        "height": height,
        "pixels_per_meter": density.x_pixels_per_unit if density else None,
        "dpi": round(density.dpi, 2) if density else None,
    }


def run(url: str, svg_path: Path, dpis: list, save: bool, timeout: float) -> bool:
    """
    Run the smoke test.

    Returns:
        True if every conversion succeeded
    """
    svg = svg_path.read_bytes()

    logger.info("=" * 60)
    logger.info("svg2png Smoke Test")
    logger.info("=" * 60)
    logger.info(f"Service URL: {url}")
    logger.info(f"Input: {svg_path} ({len(svg)} bytes)")
    logger.info(f"DPI values: {dpis}")
    logger.info("=" * 60)

    ok = True
    for dpi in dpis:
        try:
            response = convert(url, svg, dpi, timeout)
        except requests.RequestException as e:
            logger.error(f"dpi={dpi}: request failed: {e}")
            ok = False
            continue

        if response.status_code != 200:
            logger.error(f"dpi={dpi}: HTTP {response.status_code}: {response.text}")
            ok = False
            continue

        try:
            info = describe_png(response.content)
        except ValueError as e:
            logger.error(f"dpi={dpi}: malformed PNG: {e}")
            ok = False
            continue

        logger.info(
            f"dpi={dpi}: {info['width']}x{info['height']} px, "
            f"pHYs={info['pixels_per_meter']} px/m ({info['dpi']} DPI)"
        )

        if save:
            out_path = svg_path.with_name(f"{svg_path.stem}@{dpi:g}dpi.png")
            out_path.write_bytes(response.content)
            logger.info(f"  Wrote {out_path}")

    if ok:
        logger.info("✅ All conversions succeeded")
    else:
        logger.error("❌ Some conversions failed")
    return ok


def main():
    parser = argparse.ArgumentParser(
        description="Smoke test for a running svg2png service"
    )
    parser.add_argument("svg", type=Path, help="SVG file to convert")
    parser.add_argument(
        "--url",
        type=str,
        default=os.environ.get("SVG2PNG_URL", "http://localhost:3000"),
        help="Base URL of the service",
    )
    parser.add_argument(
        "--dpi",
        type=float,
        action="append",
        help="Output DPI (repeatable, default: 96)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write the PNGs next to the input file",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )

    args = parser.parse_args()

    success = run(args.url, args.svg, args.dpi or [96.0], args.save, args.timeout)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
