"""
SVG Units
=========

Intrinsic size resolution for root ``<svg>`` elements.

Lengths are converted to user units at 96 DPI, the same reference the
scale calculator uses, so a document declared as ``width="1in"`` is 96
units wide and renders at 96 pixels at baseline DPI.

Resolution Order:
    1. Absolute ``width`` / ``height`` attributes
    2. Missing or relative sides taken from ``viewBox`` (keeping its
       aspect ratio when only one side is explicit)
    3. 100 x 100 user units
"""

import logging
import math
import re
from typing import Optional, Tuple

from svg2png.errors import SvgParseError
from svg2png.models.geometry import IntrinsicSize


logger = logging.getLogger(__name__)


DEFAULT_SIZE = 100.0

_LENGTH_RE = re.compile(
    r"^\s*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)\s*([a-zA-Z%]*)\s*$"
)

# User units per unit at 96 DPI
_ABSOLUTE_UNITS = {
    "": 1.0,
    "px": 1.0,
    "in": 96.0,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
    "mm": 96.0 / 25.4,
    "cm": 96.0 / 2.54,
    "q": 96.0 / 101.6,
}


def parse_length(value: Optional[str]) -> Optional[float]:
    """
    Convert an absolute CSS length to user units.

    Args:
        value: Attribute value such as "10", "2.5in" or "50%"

    Returns:
        Length in user units, or None for missing, relative or malformed values

    Raises:
        SvgParseError: If the length overflows to infinity
    """
    if value is None:
        return None

    match = _LENGTH_RE.match(value)
    if not match:
        return None

    factor = _ABSOLUTE_UNITS.get(match.group(2).lower())
    if factor is None:
        return None

    length = float(match.group(1)) * factor
    if not math.isfinite(length):
        raise SvgParseError(f"Invalid SVG: length {value!r} is out of range")
    return length


def parse_viewbox(value: Optional[str]) -> Optional[Tuple[float, float]]:
    """
    Extract width and height from a ``viewBox`` attribute.

    Returns:
        (width, height), or None if absent, malformed or not positive

    Raises:
        SvgParseError: If a component is nan or infinite
    """
    if not value:
        return None

    parts = re.split(r"[,\s]+", value.strip())
    if len(parts) != 4:
        return None
    try:
        numbers = [float(part) for part in parts]
    except ValueError:
        return None
    if not all(math.isfinite(number) for number in numbers):
        raise SvgParseError(f"Invalid SVG: viewBox {value!r} is not finite")

    width, height = numbers[2], numbers[3]
    if width <= 0 or height <= 0:
        return None
    return width, height


def resolve_intrinsic_size(
    width: Optional[str],
    height: Optional[str],
    viewbox: Optional[str],
) -> IntrinsicSize:
    """
    Resolve the intrinsic size of a root element.

    Args:
        width: Raw ``width`` attribute
        height: Raw ``height`` attribute
        viewbox: Raw ``viewBox`` attribute

    Returns:
        IntrinsicSize in user units

    Raises:
        SvgParseError: If a side is negative or not finite
    """
    w = parse_length(width)
    h = parse_length(height)

    if (w is not None and w < 0) or (h is not None and h < 0):
        raise SvgParseError(f"Invalid SVG: negative size ({width!r}, {height!r})")

    vb = parse_viewbox(viewbox)

    if w is None and h is None:
        if vb is not None:
            w, h = vb
        else:
            w, h = DEFAULT_SIZE, DEFAULT_SIZE
    elif w is None:
        w = h * vb[0] / vb[1] if vb is not None else DEFAULT_SIZE
    elif h is None:
        h = w * vb[1] / vb[0] if vb is not None else DEFAULT_SIZE

    if not (math.isfinite(w) and math.isfinite(h)):
        raise SvgParseError(f"Invalid SVG: size {w}x{h} is out of range")

    logger.debug(
        f"Resolved intrinsic size {w}x{h} "
        f"(width={width!r}, height={height!r}, viewBox={viewbox!r})"
    )
    return IntrinsicSize(width=w, height=h)
