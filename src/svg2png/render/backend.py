"""
Render Backend Protocols
========================

Interfaces for the two external capabilities the pipeline depends on.

    VectorParser:  bytes -> VectorDocument (or SvgParseError)
    Rasterizer:    VectorDocument + canvas + scale -> RGBA pixels

The pipeline only ever sees these protocols; the concrete backend is
chosen at startup.
"""

from typing import Protocol

import numpy as np

from svg2png.models.document import VectorDocument
from svg2png.models.geometry import CanvasSize


class VectorParser(Protocol):
    """Parses raw vector data into a document with an intrinsic size."""

    def parse(self, data: bytes) -> VectorDocument:
        """
        Parse vector data.

        Args:
            data: Raw document bytes (non-empty)

        Returns:
            Parsed VectorDocument

        Raises:
            SvgParseError: If the data is not a valid document
        """
        ...


class Rasterizer(Protocol):
    """Draws a parsed document onto a fresh canvas."""

    def render(
        self,
        document: VectorDocument,
        canvas: CanvasSize,
        scale: float,
    ) -> np.ndarray:
        """
        Render a document.

        Args:
            document: Document produced by the matching parser
            canvas: Validated canvas size
            scale: Uniform scale factor applied to both axes

        Returns:
            Array of shape (canvas.height, canvas.width, 4), dtype uint8,
            RGBA, straight (non-premultiplied) alpha
        """
        ...
