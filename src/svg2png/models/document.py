"""
Document Models
===============

Parsed vector documents and finished conversion results.

A VectorDocument is owned by exactly one request. The tree handle is
opaque to the pipeline; only the rasterizer that produced it looks inside.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from svg2png.models.geometry import IntrinsicSize, ScalePlan

if TYPE_CHECKING:
    from svg2png.encoding.density import DensityDescriptor


@dataclass(frozen=True, slots=True)
class VectorDocument:
    """
    Parsed vector document.

    Attributes:
        tree: Backend-specific parsed tree
        size: Intrinsic document size in user units
    """

    tree: Any
    size: IntrinsicSize

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the tree."""
        return (
            f"VectorDocument(width={self.size.width:.3f}, "
            f"height={self.size.height:.3f})"
        )


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """
    Complete output of one SVG to PNG conversion.

    Attributes:
        png: Full PNG byte stream
        plan: Scale plan used for rendering
        density: Physical density descriptor embedded in the PNG
    """

    png: bytes
    plan: ScalePlan
    density: "DensityDescriptor"

    def __repr__(self) -> str:
        return (
            f"ConversionResult(bytes={len(self.png)}, "
            f"canvas={self.plan.canvas}, dpi={self.plan.dpi})"
        )
