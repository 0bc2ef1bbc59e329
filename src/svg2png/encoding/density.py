"""
Density Chunk Encoder
=====================

Physical pixel density descriptor for the PNG ``pHYs`` chunk.

Chunk Layout (9 bytes):
    4 bytes  pixels per unit, X axis (big-endian, unsigned)
    4 bytes  pixels per unit, Y axis (big-endian, unsigned)
    1 byte   unit specifier (1 = meter)

Scaling is always uniform, so X and Y carry the same value.

Overflow Policy:
    PNG limits four-byte integers to 2**31 - 1. A DPI whose
    pixels-per-meter value exceeds that is rejected with
    DensityOverflowError instead of being clamped.
"""

import logging
import math
import struct
from dataclasses import dataclass

from svg2png.errors import DensityOverflowError


logger = logging.getLogger(__name__)


PHYS_CHUNK_TYPE = b"pHYs"
METERS_PER_INCH = 0.0254
UNIT_UNKNOWN = 0
UNIT_METER = 1
PNG_MAX_UINT = 2**31 - 1

_PHYS_STRUCT = struct.Struct(">IIB")


def pixels_per_meter(dpi: float) -> int:
    """
    Convert DPI to pixels per meter, rounding half away from zero.

    Args:
        dpi: Effective DPI (> 0)

    Returns:
        Pixels per meter

    Raises:
        DensityOverflowError: If the value does not fit a PNG integer
    """
    ratio = dpi / METERS_PER_INCH
    if not math.isfinite(ratio) or ratio + 0.5 >= PNG_MAX_UINT + 1:
        raise DensityOverflowError(
            f"DPI {dpi} is too large: pixels per meter exceeds {PNG_MAX_UINT}"
        )
    return math.floor(ratio + 0.5)


@dataclass(frozen=True, slots=True)
class DensityDescriptor:
    """
    Decoded ``pHYs`` chunk payload.

    Attributes:
        x_pixels_per_unit: Horizontal density
        y_pixels_per_unit: Vertical density
        unit: Unit specifier (UNIT_METER or UNIT_UNKNOWN)
    """

    x_pixels_per_unit: int
    y_pixels_per_unit: int
    unit: int = UNIT_METER

    @classmethod
    def from_dpi(cls, dpi: float) -> "DensityDescriptor":
        """Build a uniform, meter-based descriptor for the given DPI."""
        ppm = pixels_per_meter(dpi)
        logger.debug(f"Calculated PPM for pHYs chunk: ppm={ppm}, dpi={dpi}")
        return cls(x_pixels_per_unit=ppm, y_pixels_per_unit=ppm, unit=UNIT_METER)

    @classmethod
    def from_bytes(cls, data: bytes) -> "DensityDescriptor":
        """
        Decode a 9-byte chunk payload.

        Raises:
            ValueError: If the payload is not exactly 9 bytes
        """
        if len(data) != _PHYS_STRUCT.size:
            raise ValueError(
                f"pHYs payload must be {_PHYS_STRUCT.size} bytes, got {len(data)}"
            )
        x_ppu, y_ppu, unit = _PHYS_STRUCT.unpack(data)
        return cls(x_pixels_per_unit=x_ppu, y_pixels_per_unit=y_ppu, unit=unit)

    def to_bytes(self) -> bytes:
        """Encode as the 9-byte chunk payload."""
        return _PHYS_STRUCT.pack(
            self.x_pixels_per_unit,
            self.y_pixels_per_unit,
            self.unit,
        )

    @property
    def dpi(self) -> float:
        """Horizontal density expressed in dots per inch."""
        if self.unit != UNIT_METER:
            raise ValueError("descriptor has no physical unit")
        return self.x_pixels_per_unit * METERS_PER_INCH
