"""
Conversion Pipeline
===================

SVG bytes + query string -> PNG bytes with physical density metadata.

Stages:
    1. Reject empty input
    2. Resolve effective DPI (baseline on absent/invalid input)
    3. Parse the document (VectorParser)
    4. Compute scale and canvas; reject zero-area canvases
    5. Build the pHYs descriptor (rejects overflowing DPI)
    6. Check the canvas pixel budget
    7. Rasterize inside an isolating boundary (Rasterizer)
    8. Encode IHDR -> pHYs -> IDAT -> IEND

Design Rules:
    - Stateless: one converter instance serves concurrent requests
    - Every failure is a classified ConversionError
    - No partial output is ever returned
"""

import logging
from typing import Optional

import numpy as np

from svg2png.encoding.density import DensityDescriptor
from svg2png.encoding.png_writer import CHANNELS, encode_png
from svg2png.errors import ConversionError, EmptyInputError, RasterizationError
from svg2png.models.document import ConversionResult, VectorDocument
from svg2png.models.geometry import CanvasSize
from svg2png.render.backend import Rasterizer, VectorParser
from svg2png.resolution.resolver import resolve_dpi
from svg2png.resolution.scaling import (
    check_canvas_budget,
    compute_scale_plan,
    validate_canvas_size,
)


logger = logging.getLogger(__name__)


DEFAULT_MAX_CANVAS_PIXELS = 16384 * 16384


class SvgConverter:
    """
    Converts SVG documents to PNG at a requested DPI.

    Attributes:
        parser: Vector parser collaborator
        rasterizer: Rasterizer collaborator
        max_canvas_pixels: Largest canvas (width * height) that will be rendered

    Example:
        backend = CairoSvgBackend()
        converter = SvgConverter(parser=backend, rasterizer=backend)

        result = converter.convert(svg_bytes, "dpi=192")
        print(result.plan.canvas, len(result.png))
    """

    def __init__(
        self,
        parser: VectorParser,
        rasterizer: Rasterizer,
        max_canvas_pixels: int = DEFAULT_MAX_CANVAS_PIXELS,
        compression_level: int = 6,
    ) -> None:
        if max_canvas_pixels <= 0:
            raise ValueError("max_canvas_pixels must be positive")

        self.parser = parser
        self.rasterizer = rasterizer
        self.max_canvas_pixels = max_canvas_pixels
        self.compression_level = compression_level

    def convert(self, body: bytes, query: Optional[str] = None) -> ConversionResult:
        """
        Run the full conversion.

        Args:
            body: Raw SVG bytes
            query: Raw query string, may contain ``dpi``

        Returns:
            ConversionResult with the PNG bytes

        Raises:
            ClientInputError: Empty body, invalid SVG, zero-area result,
                or DPI too large for the pHYs chunk
            ServerFault: Canvas too large, rendering or encoding failure
        """
        if not body:
            raise EmptyInputError()

        dpi = resolve_dpi(query)
        document = self.parser.parse(body)

        plan = compute_scale_plan(document.size, dpi)
        canvas = validate_canvas_size(plan.canvas)
        density = DensityDescriptor.from_dpi(dpi)
        check_canvas_budget(canvas, self.max_canvas_pixels)

        pixels = self._rasterize(document, canvas, plan.scale)

        png = encode_png(
            pixels,
            canvas,
            density,
            compression_level=self.compression_level,
        )

        result = ConversionResult(png=png, plan=plan, density=density)
        logger.debug(f"Conversion complete: {result!r}")
        return result

    def _rasterize(
        self,
        document: VectorDocument,
        canvas: CanvasSize,
        scale: float,
    ) -> np.ndarray:
        """Call the rasterizer, turning any failure into RasterizationError."""
        try:
            pixels = self.rasterizer.render(document, canvas, scale)
        except ConversionError:
            raise
        except MemoryError as e:
            raise RasterizationError(f"Out of memory rendering {canvas} canvas") from e
        except Exception as e:
            raise RasterizationError(
                f"Rasterizer failed on {canvas} canvas: {type(e).__name__}: {e}"
            ) from e

        expected = (canvas.height, canvas.width, CHANNELS)
        if not isinstance(pixels, np.ndarray) or pixels.shape != expected:
            shape = getattr(pixels, "shape", None)
            raise RasterizationError(
                f"Rasterizer returned pixels of shape {shape}, expected {expected}"
            )
        return pixels
