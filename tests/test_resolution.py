"""
Resolution Tests
================

DPI resolution, scale computation and canvas validation.
"""

import math

import pytest

from svg2png.errors import CanvasAllocationError, InvalidGeometry
from svg2png.models.geometry import CanvasSize, IntrinsicSize
from svg2png.resolution import (
    BASELINE_DPI,
    check_canvas_budget,
    compute_scale_plan,
    parse_dpi_value,
    resolve_dpi,
    validate_canvas_size,
)


class TestResolveDpi:
    """Tests for query string DPI resolution."""

    @pytest.mark.parametrize("query", [None, "", "width=10", "dpix=300"])
    def test_absent_falls_back_to_baseline(self, query):
        """Missing dpi parameter yields the baseline."""
        assert resolve_dpi(query) == 96.0

    @pytest.mark.parametrize(
        "query",
        [
            "dpi=abc",
            "dpi=-5",
            "dpi=0",
            "dpi=",
            "dpi=nan",
            "dpi=inf",
            "dpi=-inf",
            "dpi=1_92",
            "dpi=+192",
            "dpi=%20192",
            "dpi=192%20",
            "dpi=1e999",
        ],
    )
    def test_invalid_falls_back_to_baseline(self, query):
        """Unparseable, non-finite or non-positive values yield the baseline."""
        assert resolve_dpi(query) == 96.0

    def test_valid_value(self):
        """A positive number is used as-is."""
        assert resolve_dpi("dpi=192") == 192.0
        assert resolve_dpi("dpi=72.5") == 72.5

    def test_first_dpi_wins(self):
        """Only the first dpi parameter is considered."""
        assert resolve_dpi("dpi=300&dpi=72") == 300.0
        assert resolve_dpi("dpi=bad&dpi=72") == 96.0

    def test_other_params_ignored(self):
        """dpi is found among other parameters."""
        assert resolve_dpi("format=png&dpi=144&x=1") == 144.0

    def test_url_encoded_value(self):
        """Values are form-url-decoded before parsing."""
        assert resolve_dpi("dpi=%31%35%30") == 150.0

    def test_parse_dpi_value(self):
        assert parse_dpi_value("300") == 300.0
        assert parse_dpi_value("0") is None
        assert parse_dpi_value("abc") is None

    @pytest.mark.parametrize(
        "value, expected",
        [("+192", 192.0), ("1.5e2", 150.0), (".5", 0.5), ("72.", 72.0)],
    )
    def test_decimal_forms_accepted(self, value, expected):
        assert parse_dpi_value(value) == expected

    @pytest.mark.parametrize("value", ["1_92", " 192", "192\n", "0x10", ".", "1e", "Infinity"])
    def test_non_decimal_forms_rejected(self, value):
        assert parse_dpi_value(value) is None

    def test_encoded_plus_sign(self):
        """An escaped '+' survives form decoding and is accepted."""
        assert resolve_dpi("dpi=%2B192") == 192.0


class TestScalePlan:
    """Tests for scale factor and canvas size computation."""

    def test_baseline_is_identity(self):
        """At baseline DPI, scale is 1 and canvas is ceil(intrinsic)."""
        plan = compute_scale_plan(IntrinsicSize(10.2, 7.0), BASELINE_DPI)
        assert plan.scale == 1.0
        assert plan.canvas == CanvasSize(11, 7)

    @pytest.mark.parametrize("dpi", [1.0, 72.0, 96.0, 150.0, 192.0, 300.0, 1200.0])
    def test_scale_is_dpi_over_baseline(self, dpi):
        """Scale is always dpi / 96."""
        plan = compute_scale_plan(IntrinsicSize(10.0, 10.0), dpi)
        assert plan.scale == pytest.approx(dpi / 96.0)
        assert plan.dpi == dpi

    def test_double_resolution(self):
        """192 DPI doubles a 10x10 document."""
        plan = compute_scale_plan(IntrinsicSize(10.0, 10.0), 192.0)
        assert plan.scale == 2.0
        assert plan.canvas == CanvasSize(20, 20)

    def test_ceiling_not_rounding(self):
        """Fractional sizes always round up."""
        plan = compute_scale_plan(IntrinsicSize(10.1, 20.0), 96.0)
        assert plan.canvas == CanvasSize(11, 20)

        plan = compute_scale_plan(IntrinsicSize(100.0, 33.0), 72.0)
        assert plan.canvas == CanvasSize(75, math.ceil(33.0 * 0.75))

    def test_axes_scaled_independently(self):
        """Each axis is rounded up on its own, with the same scale."""
        plan = compute_scale_plan(IntrinsicSize(3.0, 5.0), 100.0)
        assert plan.canvas.width == math.ceil(3.0 * 100.0 / 96.0)
        assert plan.canvas.height == math.ceil(5.0 * 100.0 / 96.0)

    def test_scaled_overflow_rejected(self):
        """A finite size that overflows once scaled is a geometry error."""
        with pytest.raises(InvalidGeometry):
            compute_scale_plan(IntrinsicSize(1e300, 10.0), 1e300)

    def test_deterministic(self):
        """Identical inputs give identical plans."""
        size = IntrinsicSize(12.34, 56.78)
        assert compute_scale_plan(size, 211.0) == compute_scale_plan(size, 211.0)


class TestCanvasValidation:
    """Tests for degenerate canvas rejection."""

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (0, 0)])
    def test_zero_side_rejected(self, size):
        with pytest.raises(InvalidGeometry):
            validate_canvas_size(CanvasSize(*size))

    def test_zero_document_rejected(self):
        """A zero-width document produces an invalid canvas."""
        plan = compute_scale_plan(IntrinsicSize(0.0, 10.0), 300.0)
        with pytest.raises(InvalidGeometry):
            validate_canvas_size(plan.canvas)

    def test_underflow_rejected(self):
        """A scaled dimension that underflows to zero is rejected."""
        plan = compute_scale_plan(IntrinsicSize(1e-300, 10.0), 1e-30)
        assert plan.canvas.width == 0
        with pytest.raises(InvalidGeometry):
            validate_canvas_size(plan.canvas)

    def test_valid_canvas_returned_unchanged(self):
        canvas = CanvasSize(1, 1)
        assert validate_canvas_size(canvas) is canvas

    def test_budget(self):
        """Canvases above the pixel budget are refused."""
        check_canvas_budget(CanvasSize(100, 100), max_pixels=10_000)
        with pytest.raises(CanvasAllocationError):
            check_canvas_budget(CanvasSize(100, 101), max_pixels=10_000)
