"""
Render Module
=============

Vector parsing and rasterization collaborators.

Components:
    - VectorParser / Rasterizer: Protocols the pipeline depends on
    - resolve_intrinsic_size: Root width/height/viewBox -> IntrinsicSize
    - CairoSvgBackend: CairoSVG implementation (svg2png.render.cairo_backend)

The CairoSVG backend is not imported here because it loads the native
cairo library; import it from its module.
"""

from svg2png.render.backend import Rasterizer, VectorParser
from svg2png.render.units import parse_length, parse_viewbox, resolve_intrinsic_size

__all__ = [
    "VectorParser",
    "Rasterizer",
    "parse_length",
    "parse_viewbox",
    "resolve_intrinsic_size",
]
