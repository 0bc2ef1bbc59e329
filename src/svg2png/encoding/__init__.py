"""
Encoding Module
===============

PNG container writing with physical density metadata.

Components:
    - DensityDescriptor: 9-byte pHYs payload (pixels per meter, X and Y)
    - PngWriter: Order-enforcing RGBA PNG writer
    - encode_png: IHDR -> pHYs -> IDAT -> IEND in one call
    - iter_chunks / read_density: Chunk walker for inspection

Example:
    from svg2png.encoding import DensityDescriptor, encode_png

    density = DensityDescriptor.from_dpi(192.0)
    png = encode_png(pixels, canvas, density)
"""

from svg2png.encoding.density import (
    METERS_PER_INCH,
    PHYS_CHUNK_TYPE,
    UNIT_METER,
    DensityDescriptor,
    pixels_per_meter,
)
from svg2png.encoding.png_writer import (
    PNG_SIGNATURE,
    PngWriter,
    encode_png,
    iter_chunks,
    read_density,
)

__all__ = [
    "METERS_PER_INCH",
    "PHYS_CHUNK_TYPE",
    "UNIT_METER",
    "DensityDescriptor",
    "pixels_per_meter",
    "PNG_SIGNATURE",
    "PngWriter",
    "encode_png",
    "iter_chunks",
    "read_density",
]
