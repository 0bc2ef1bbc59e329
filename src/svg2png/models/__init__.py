"""
Data Models
===========

Typed values flowing through the conversion pipeline.

Models:
    Geometry:
        - IntrinsicSize: Natural size of the parsed document
        - CanvasSize: Integer pixel size of the target canvas
        - ScalePlan: Effective DPI, uniform scale and canvas

    Document:
        - VectorDocument: Parsed document handle plus its intrinsic size
        - ConversionResult: Encoded PNG with the values used to produce it
"""

from svg2png.models.geometry import CanvasSize, IntrinsicSize, ScalePlan
from svg2png.models.document import ConversionResult, VectorDocument

__all__ = [
    # Geometry
    "IntrinsicSize",
    "CanvasSize",
    "ScalePlan",
    # Document
    "VectorDocument",
    "ConversionResult",
]
