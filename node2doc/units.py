"""Length and color normalisation for WordprocessingML measurements.

Every resolver in this module returns ``None`` for input it cannot understand
instead of raising, so callers can fall back to their own defaults.
"""
from __future__ import annotations

import math
import re
from typing import Any, Dict, Optional

from node2doc.constants import (
    CENTIMETERS_PER_INCH,
    EMU_PER_POINT,
    HALF_POINTS_PER_POINT,
    MILLIMETERS_PER_INCH,
    PIXELS_PER_POINT,
    POINTS_PER_INCH,
    POINTS_PER_PICA,
    TWIPS_PER_POINT,
)

LENGTH_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(pt|px|in|cm|mm|pc|pi)\s*$", re.IGNORECASE)

WIDTH_PERCENTAGE = "pct"
WIDTH_DXA = "dxa"


def round_half_up(value: float) -> int:
    # half-up, so -0.5 rounds to 0 and 2.5 rounds to 3
    return int(math.floor(value + 0.5))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def resolve_length(value: Any) -> Optional[float]:
    """Return ``value`` in points.

    Numbers are already points. Strings must carry one of the units
    pt, px, in, cm, mm, pc or pi.
    """
    if value is None:
        return None
    if _is_number(value):
        return None if math.isnan(value) else float(value)
    if not isinstance(value, str):
        return None

    match = LENGTH_PATTERN.match(value)
    if not match:
        return None
    numeric = float(match.group(1))
    unit = match.group(2).lower()

    if unit == "pt":
        return numeric
    if unit == "px":
        return numeric / PIXELS_PER_POINT
    if unit == "in":
        return numeric * POINTS_PER_INCH
    if unit == "cm":
        return numeric / CENTIMETERS_PER_INCH * POINTS_PER_INCH
    if unit == "mm":
        return numeric / MILLIMETERS_PER_INCH * POINTS_PER_INCH
    # pc / pi
    return numeric * POINTS_PER_PICA


def to_twip(points: Optional[float]) -> Optional[int]:
    """Convert points to twips (1/20th of a point)."""
    if points is None:
        return None
    return round_half_up(points * TWIPS_PER_POINT)


def to_half_points(points: Optional[float]) -> Optional[int]:
    """Convert points to half-points, the unit of font sizes."""
    if points is None:
        return None
    return round_half_up(points * HALF_POINTS_PER_POINT)


def to_emu(points: Optional[float]) -> Optional[int]:
    """Convert points to English Metric Units."""
    if points is None:
        return None
    return round_half_up(points * EMU_PER_POINT)


def to_pixels(points: Optional[float]) -> Optional[int]:
    """Convert points to 96dpi device pixels."""
    if points is None:
        return None
    return round_half_up(points * PIXELS_PER_POINT)


def to_twip_from_pixels(value: float) -> Optional[int]:
    return to_twip(value / PIXELS_PER_POINT)


def length_to_twip(value: Any) -> Optional[int]:
    return to_twip(resolve_length(value))


def millimeters_to_twip(millimeters: float) -> int:
    return int(math.floor(millimeters / MILLIMETERS_PER_INCH * POINTS_PER_INCH * TWIPS_PER_POINT))


def normalize_color(color: Optional[str]) -> Optional[str]:
    """Strip the ``#`` from hex colors; named colors pass through."""
    if not color:
        return None
    if color.startswith("#"):
        return color[1:]
    return color


def _parse_float(text: str) -> Optional[float]:
    # parseFloat semantics: leading numeric prefix, rest ignored
    match = re.match(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", text)
    if not match:
        return None
    return float(match.group(1))


def resolve_width(value: Any) -> Optional[Dict[str, Any]]:
    """Resolve a table or cell width.

    ``"50%"`` is a percentage width. Unit strings resolve through
    :func:`resolve_length`. Bare numbers, and digit strings without a unit,
    are device pixels rather than points.
    """
    if value is None:
        return None

    if isinstance(value, dict):
        if "size" in value and "type" in value:
            return dict(value)
        return None

    if isinstance(value, str):
        trimmed = value.strip()

        if trimmed.endswith("%"):
            percent = _parse_float(trimmed[:-1])
            if percent is None:
                return None
            return {"size": percent, "type": WIDTH_PERCENTAGE}

        length = resolve_length(trimmed)
        if length is not None:
            return {"size": to_twip(length), "type": WIDTH_DXA}

        pixels = _parse_float(trimmed)
        if pixels is not None:
            return {"size": to_twip_from_pixels(pixels), "type": WIDTH_DXA}
        return None

    if _is_number(value):
        if math.isnan(value):
            return None
        return {"size": to_twip_from_pixels(value), "type": WIDTH_DXA}

    return None
