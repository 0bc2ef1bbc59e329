"""
Scale Calculator
================

Turns a document's intrinsic size and an effective DPI into a uniform scale
factor and an integer canvas size, and validates that canvas before any
pixel buffer is allocated.

Sizing Rule:
    canvas.axis = ceil(intrinsic.axis * dpi / 96)

    Ceiling guarantees the canvas is never smaller than the scaled
    document, at the cost of at most one extra row or column.
"""

import logging
import math

from svg2png.errors import CanvasAllocationError, InvalidGeometry
from svg2png.models.geometry import CanvasSize, IntrinsicSize, ScalePlan
from svg2png.resolution.resolver import BASELINE_DPI


logger = logging.getLogger(__name__)


def compute_scale_plan(size: IntrinsicSize, dpi: float) -> ScalePlan:
    """
    Compute scale factor and canvas size.

    Args:
        size: Intrinsic document size
        dpi: Effective DPI (> 0)

    Returns:
        ScalePlan with uniform scale and ceiling-rounded canvas

    Raises:
        InvalidGeometry: If a scaled side overflows to infinity
    """
    scale = dpi / BASELINE_DPI
    scaled_width = size.width * scale
    scaled_height = size.height * scale

    if not (math.isfinite(scaled_width) and math.isfinite(scaled_height)):
        raise InvalidGeometry(
            f"SVG size {size.width}x{size.height} at {dpi} DPI is too large to scale"
        )

    canvas = CanvasSize(
        width=math.ceil(scaled_width),
        height=math.ceil(scaled_height),
    )

    logger.debug(
        f"Calculated target canvas: {canvas} "
        f"(base={size.width}x{size.height}, scale={scale})"
    )

    return ScalePlan(dpi=dpi, scale=scale, canvas=canvas)


def validate_canvas_size(canvas: CanvasSize) -> CanvasSize:
    """
    Reject degenerate canvas sizes.

    Args:
        canvas: Candidate canvas size

    Returns:
        The same canvas size

    Raises:
        InvalidGeometry: If either side is zero
    """
    if canvas.is_empty:
        raise InvalidGeometry("SVG results in zero width or height after scaling")
    return canvas


def check_canvas_budget(canvas: CanvasSize, max_pixels: int) -> None:
    """
    Refuse canvases larger than the configured pixel budget.

    Args:
        canvas: Validated canvas size
        max_pixels: Maximum number of pixels per canvas

    Raises:
        CanvasAllocationError: If the canvas exceeds the budget
    """
    if canvas.pixel_count > max_pixels:
        raise CanvasAllocationError(
            f"Canvas {canvas} has {canvas.pixel_count} pixels, "
            f"limit is {max_pixels}"
        )
