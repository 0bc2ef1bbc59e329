"""
Pipeline Tests
==============

End-to-end conversion with a fake parser/rasterizer.
"""

import numpy as np
import pytest

from svg2png.encoding import DensityDescriptor, iter_chunks, read_density
from svg2png.errors import (
    CanvasAllocationError,
    ClientInputError,
    DensityOverflowError,
    EmptyInputError,
    InvalidGeometry,
    RasterizationError,
    ServerFault,
    SvgParseError,
)
from svg2png.models.geometry import CanvasSize, IntrinsicSize
from svg2png.pipeline import SvgConverter

from fakes import FakeBackend


def make_converter(backend, **kwargs) -> SvgConverter:
    return SvgConverter(parser=backend, rasterizer=backend, **kwargs)


class TestSvgConverter:
    """Tests for the conversion pipeline."""

    def test_double_resolution(self, fake_backend):
        """10x10 at 192 DPI gives a 20x20 canvas and 7559 px/m."""
        result = make_converter(fake_backend).convert(b"<svg/>", "dpi=192")

        assert result.plan.scale == 2.0
        assert result.plan.canvas == CanvasSize(20, 20)
        assert result.density == DensityDescriptor(7559, 7559, 1)
        assert read_density(result.png) == DensityDescriptor(7559, 7559, 1)
        assert fake_backend.render_calls == [(CanvasSize(20, 20), 2.0)]

    def test_default_dpi(self, fake_backend):
        """No dpi parameter renders at baseline."""
        result = make_converter(fake_backend).convert(b"<svg/>")
        assert result.plan.dpi == 96.0
        assert result.plan.scale == 1.0
        assert result.plan.canvas == CanvasSize(10, 10)
        assert result.density.x_pixels_per_unit == 3780

    @pytest.mark.parametrize("query", ["dpi=abc", "dpi=-5"])
    def test_malformed_dpi_uses_baseline(self, fake_backend, query):
        result = make_converter(fake_backend).convert(b"<svg/>", query)
        assert result.plan.dpi == 96.0

    def test_header_declares_canvas(self, fake_backend):
        result = make_converter(fake_backend).convert(b"<svg/>", "dpi=144")
        chunk_type, ihdr = next(iter_chunks(result.png))
        assert chunk_type == b"IHDR"
        assert int.from_bytes(ihdr[0:4], "big") == 15
        assert int.from_bytes(ihdr[4:8], "big") == 15

    def test_empty_body(self, fake_backend):
        with pytest.raises(EmptyInputError):
            make_converter(fake_backend).convert(b"", "dpi=192")

    def test_parse_error_is_client_error(self, fake_backend):
        with pytest.raises(SvgParseError) as exc_info:
            make_converter(fake_backend).convert(b"not svg")
        assert isinstance(exc_info.value, ClientInputError)
        assert exc_info.value.status_code == 400

    def test_zero_width_document(self):
        """A zero-width document fails before rendering."""
        backend = FakeBackend(size=IntrinsicSize(0.0, 10.0))
        with pytest.raises(InvalidGeometry) as exc_info:
            make_converter(backend).convert(b"<svg/>", "dpi=300")
        assert exc_info.value.status_code == 400
        assert backend.render_calls == []

    @pytest.mark.parametrize("query", ["dpi=100000000", "dpi=1e307"])
    def test_density_overflow_rejected_before_render(self, fake_backend, query):
        with pytest.raises(DensityOverflowError):
            make_converter(fake_backend).convert(b"<svg/>", query)
        assert fake_backend.render_calls == []

    def test_huge_dpi_on_large_document(self):
        """A scaled size that overflows is a client error, not a crash."""
        backend = FakeBackend(size=IntrinsicSize(1000.0, 1000.0))
        with pytest.raises(ClientInputError) as exc_info:
            make_converter(backend).convert(b"<svg/>", "dpi=1e307")
        assert exc_info.value.status_code == 400
        assert backend.render_calls == []

    def test_scaled_overflow_is_invalid_geometry(self):
        backend = FakeBackend(size=IntrinsicSize(1e300, 1e300))
        with pytest.raises(InvalidGeometry):
            make_converter(backend).convert(b"<svg/>", "dpi=1e10")
        assert backend.render_calls == []

    def test_canvas_budget(self, fake_backend):
        converter = make_converter(fake_backend, max_canvas_pixels=399)
        with pytest.raises(CanvasAllocationError) as exc_info:
            converter.convert(b"<svg/>", "dpi=192")
        assert exc_info.value.status_code == 500
        assert fake_backend.render_calls == []

    def test_rasterizer_crash_is_isolated(self, fake_backend):
        """Any rasterizer exception becomes a RasterizationError."""
        def explode(document, canvas, scale):
            raise ZeroDivisionError("bad scene")

        fake_backend.render = explode
        with pytest.raises(RasterizationError) as exc_info:
            make_converter(fake_backend).convert(b"<svg/>")
        assert isinstance(exc_info.value, ServerFault)
        assert "bad scene" in exc_info.value.message
        assert exc_info.value.public_message == "Failed to render SVG"

    def test_rasterizer_out_of_memory(self, fake_backend):
        def exhaust(document, canvas, scale):
            raise MemoryError()

        fake_backend.render = exhaust
        with pytest.raises(RasterizationError):
            make_converter(fake_backend).convert(b"<svg/>")

    def test_rasterizer_wrong_shape(self, fake_backend):
        fake_backend.render = lambda document, canvas, scale: np.zeros((1, 1, 4), np.uint8)
        with pytest.raises(RasterizationError):
            make_converter(fake_backend).convert(b"<svg/>", "dpi=192")

    def test_idempotent(self, fake_backend):
        """Identical requests give identical output."""
        converter = make_converter(fake_backend)
        first = converter.convert(b"<svg/>", "dpi=211")
        second = converter.convert(b"<svg/>", "dpi=211")
        assert first.plan == second.plan
        assert first.density == second.density
        assert first.png == second.png

    def test_invalid_budget(self, fake_backend):
        with pytest.raises(ValueError):
            make_converter(fake_backend, max_canvas_pixels=0)
