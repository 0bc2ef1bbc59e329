"""
Resolution Module
=================

DPI resolution and canvas sizing.

Components:
    - resolve_dpi: Query string -> effective DPI (baseline on bad input)
    - compute_scale_plan: Intrinsic size + DPI -> scale and canvas
    - validate_canvas_size: Rejects zero-area canvases
    - check_canvas_budget: Rejects canvases over the pixel budget
"""

from svg2png.resolution.resolver import BASELINE_DPI, parse_dpi_value, resolve_dpi
from svg2png.resolution.scaling import (
    check_canvas_budget,
    compute_scale_plan,
    validate_canvas_size,
)

__all__ = [
    "BASELINE_DPI",
    "parse_dpi_value",
    "resolve_dpi",
    "compute_scale_plan",
    "validate_canvas_size",
    "check_canvas_budget",
]
