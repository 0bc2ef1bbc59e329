"""
Geometry Models
===============

Sizes and scale plans passed between the resolution and rendering stages.

Design Rules:
    - All models are immutable
    - IntrinsicSize is in abstract document units (1 unit = 1px at 96 DPI)
    - CanvasSize is in whole pixels
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IntrinsicSize:
    """
    Natural, unscaled size of a vector document.

    Attributes:
        width: Document width in user units
        height: Document height in user units
    """

    width: float
    height: float

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not (math.isfinite(self.width) and math.isfinite(self.height)):
            raise ValueError("document size must be finite")
        if self.width < 0 or self.height < 0:
            raise ValueError("document size must be non-negative")


@dataclass(frozen=True, slots=True)
class CanvasSize:
    """
    Pixel dimensions of the target canvas.

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
    """

    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        """True when either side is zero."""
        return self.width == 0 or self.height == 0

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True, slots=True)
class ScalePlan:
    """
    Uniform scale and resulting canvas for one conversion.

    Attributes:
        dpi: Effective DPI the plan was computed for
        scale: Uniform scale factor (dpi / baseline)
        canvas: Target canvas, each side ceil(intrinsic * scale)
    """

    dpi: float
    scale: float
    canvas: CanvasSize

    def to_dict(self) -> dict:
        """Export as dictionary for logging."""
        return {
            "dpi": self.dpi,
            "scale": round(self.scale, 6),
            "width": self.canvas.width,
            "height": self.canvas.height,
        }
