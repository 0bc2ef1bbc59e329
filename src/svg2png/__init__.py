"""
svg2png
=======

HTTP microservice that converts SVG images to PNG at a requested DPI.

The output PNG carries a pHYs chunk with the physical pixel density, so
browsers, viewers and print pipelines show it at the intended size.

Components:
    - resolution: DPI resolution and canvas sizing
    - encoding: pHYs descriptor and order-enforcing PNG writer
    - render: Vector parser / rasterizer protocols and CairoSVG backend
    - background: ImageMagick flood-fill background removal
    - pipeline: SvgConverter orchestrating the stages

Example:
    from svg2png.pipeline import SvgConverter
    from svg2png.render.cairo_backend import CairoSvgBackend

    backend = CairoSvgBackend()
    converter = SvgConverter(parser=backend, rasterizer=backend)
    png = converter.convert(svg_bytes, "dpi=300").png
"""

__version__ = "0.2.2"

__all__ = [
    "__version__",
]
