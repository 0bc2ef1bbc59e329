"""
Resolution Resolver
===================

Derives the effective output DPI from an untrusted query string.

Fallback Policy:
    The baseline DPI is used when the ``dpi`` parameter is absent, cannot be
    parsed as a number, is not finite, or is not positive. This is the
    documented default, not an error, so nothing is raised.

    Only the first ``dpi`` parameter is considered.
"""

import logging
import math
import re
from typing import Optional
from urllib.parse import parse_qsl


logger = logging.getLogger(__name__)


BASELINE_DPI: float = 96.0
"""Density at which one document unit maps to one pixel."""

DPI_QUERY_PARAM = "dpi"

_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_dpi_value(value: str) -> Optional[float]:
    """
    Parse a single DPI value.

    Args:
        value: Raw parameter value

    Returns:
        The parsed DPI, or None if it is not a finite positive number
    """
    # Plain decimal notation only: no padding, digit separators or inf/nan
    if not _DECIMAL_RE.fullmatch(value):
        return None

    dpi = float(value)
    if not math.isfinite(dpi) or dpi <= 0:
        return None
    return dpi


def resolve_dpi(query: Optional[str]) -> float:
    """
    Resolve the effective DPI for a request.

    Args:
        query: Raw form-urlencoded query string (without the leading '?')

    Returns:
        Effective DPI, always > 0
    """
    if not query:
        return BASELINE_DPI

    for key, value in parse_qsl(query, keep_blank_values=True):
        if key != DPI_QUERY_PARAM:
            continue

        dpi = parse_dpi_value(value)
        logger.debug(f"Parsed DPI from query string: raw={value!r}, parsed={dpi}")

        if dpi is None:
            return BASELINE_DPI
        return dpi

    return BASELINE_DPI
