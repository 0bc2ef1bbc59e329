"""
CairoSVG Backend
================

Vector parser and rasterizer built on CairoSVG.

This backend:
    - Parses SVG bytes with ``cairosvg.parser.Tree`` (entities and external
      resources are refused unless ``unsafe`` is enabled)
    - Resolves the document's intrinsic size from its root attributes
    - Applies a fallback font family to text that does not specify one
    - Draws onto a PNG surface of exactly the canvas size
    - Decodes the surface with OpenCV into an RGBA array

Scaling:
    The viewport is sized to intrinsic * scale on both axes, so user space
    maps to device space by one uniform factor from the origin. The ceiling
    padding of the canvas lies outside the viewport and stays transparent.
"""

import io
import logging

import cairocffi as cairo
import cv2
import numpy as np
from cairosvg.parser import Tree
from cairosvg.surface import PNGSurface

from svg2png.errors import RasterizationError, SvgParseError
from svg2png.models.document import VectorDocument
from svg2png.models.geometry import CanvasSize
from svg2png.render.units import resolve_intrinsic_size
from svg2png.resolution.resolver import BASELINE_DPI


logger = logging.getLogger(__name__)


DEFAULT_FONT_FAMILY = "Times New Roman"


class _CanvasSurface(PNGSurface):
    """
    PNG surface with a fixed pixel size.

    The viewport is the exact scaled document size, anchored at the origin.
    The pixel buffer is the ceiling canvas; any padding stays transparent.
    """

    def __init__(self, tree: Tree, output: io.BytesIO, canvas: CanvasSize, **kwargs) -> None:
        self._canvas = canvas
        super().__init__(tree, output, BASELINE_DPI, **kwargs)

    def _create_surface(self, width, height):
        surface = cairo.ImageSurface(
            cairo.FORMAT_ARGB32, self._canvas.width, self._canvas.height
        )
        return surface, self._canvas.width, self._canvas.height


class CairoSvgBackend:
    """
    CairoSVG implementation of VectorParser and Rasterizer.

    Attributes:
        font_family: Font used for text without a font-family
        unsafe: Allow XML entities and external resources
    """

    def __init__(
        self,
        font_family: str = DEFAULT_FONT_FAMILY,
        unsafe: bool = False,
    ) -> None:
        self.font_family = font_family
        self.unsafe = unsafe

        logger.info(
            f"CairoSvgBackend initialized: font_family={font_family!r}, "
            f"unsafe={unsafe}"
        )

    def parse(self, data: bytes) -> VectorDocument:
        """
        Parse SVG bytes into a document.

        Raises:
            SvgParseError: If CairoSVG cannot build a tree
        """
        try:
            tree = Tree(bytestring=data, unsafe=self.unsafe)
        except Exception as e:
            raise SvgParseError(f"Invalid SVG: {e}") from e

        if tree.tag != "svg":
            raise SvgParseError(f"Invalid SVG: root element is <{tree.tag}>")

        size = resolve_intrinsic_size(
            tree.get("width"),
            tree.get("height"),
            tree.get("viewBox"),
        )
        if self.font_family:
            self._apply_font_fallback(tree)

        document = VectorDocument(tree=tree, size=size)
        logger.debug(f"Parsed SVG: {document!r}")
        return document

    def _apply_font_fallback(self, tree: Tree) -> None:
        """Set font-family on every node that did not inherit one."""
        stack = [tree]
        while stack:
            node = stack.pop()
            if not node.get("font-family"):
                node["font-family"] = self.font_family
            stack.extend(getattr(node, "children", ()))

    def render(
        self,
        document: VectorDocument,
        canvas: CanvasSize,
        scale: float,
    ) -> np.ndarray:
        """
        Render a document to RGBA pixels.

        Raises:
            RasterizationError: If the surface cannot be drawn or decoded
        """
        logger.debug(f"Rendering SVG to {canvas} canvas at scale {scale}")

        output = io.BytesIO()
        surface = _CanvasSurface(
            document.tree,
            output,
            canvas,
            parent_width=document.size.width,
            parent_height=document.size.height,
            output_width=document.size.width * scale,
            output_height=document.size.height * scale,
        )
        surface.finish()

        buffer = np.frombuffer(output.getvalue(), np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise RasterizationError("cv2.imdecode returned None for rendered surface")

        if image.ndim == 3 and image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        elif image.ndim == 3 and image.shape[2] == 3:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        else:
            raise RasterizationError(f"Unexpected rendered image shape {image.shape}")

        if rgba.shape[:2] != (canvas.height, canvas.width):
            raise RasterizationError(
                f"Rendered surface is {rgba.shape[1]}x{rgba.shape[0]}, expected {canvas}"
            )

        logger.debug("SVG rendering complete")
        return rgba
