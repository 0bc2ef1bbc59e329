"""
Background Module
=================

Flood-fill background removal via an external ImageMagick process.
"""

from svg2png.background.remover import BackgroundRemover

__all__ = [
    "BackgroundRemover",
]
