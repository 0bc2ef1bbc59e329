"""
Test Configuration
==================

Pytest fixtures and test configuration for svg2png.
"""

import numpy as np
import pytest

from fakes import FakeBackend, FakeMagick


@pytest.fixture
def fake_backend():
    """Provide a FakeBackend with a 10x10 document."""
    return FakeBackend()


@pytest.fixture
def fake_magick():
    """Provide a successful FakeMagick process runner."""
    return FakeMagick()


@pytest.fixture
def sample_svg():
    """Provide a minimal 10x10 SVG document."""
    return (
        b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">'
        b'<rect width="10" height="10" fill="#ff0000"/>'
        b"</svg>"
    )


@pytest.fixture
def rgba_pixels():
    """Provide a 3x2 (width x height) RGBA gradient."""
    pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    pixels[..., 0] = np.arange(6, dtype=np.uint8).reshape(2, 3) * 40
    pixels[..., 1] = 128
    pixels[..., 2] = 7
    pixels[..., 3] = 255
    pixels[1, 2, 3] = 0
    return pixels
