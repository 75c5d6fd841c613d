"""Style cascade and the style-derived values used by every compiler.

A *style input* is either a single style dict or a list of style dicts where
falsy entries are skipped and later entries override earlier ones key by key.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from node2doc.constants import TWIPS_PER_POINT
from node2doc.units import normalize_color, resolve_length, round_half_up, to_emu, to_pixels

Style = Dict[str, Any]
StyleInput = Union[Style, Sequence[Optional[Style]], None]

BORDER_NONE = "none"
BORDER_SINGLE = "single"
BORDER_SIDES = ("top", "bottom", "left", "right")

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"
ALIGN_RIGHT = "right"
ALIGN_JUSTIFIED = "justified"

POSITION_RELATIVE_MARGIN = "margin"


def first_defined(*values: Any) -> Any:
    """Return the first value that is not ``None``."""
    for value in values:
        if value is not None:
            return value
    return None


def resolve_style(style: StyleInput) -> Optional[Style]:
    """Flatten a style input into one dict, later entries winning."""
    if style is None:
        return None
    if isinstance(style, dict):
        return style
    if not isinstance(style, (list, tuple)):
        return None

    entries = [entry for entry in style if entry]
    if not entries:
        return None

    merged: Style = {}
    for entry in entries:
        merged.update(entry)
    return merged


def get_style_value(style: StyleInput, key: str) -> Any:
    resolved = resolve_style(style)
    if resolved is None:
        return None
    return resolved.get(key)


def merge_styles(base: StyleInput, next_style: StyleInput) -> Optional[Style]:
    """Cascade ``next_style`` over ``base``; ``None`` when both are absent."""
    resolved_base = resolve_style(base)
    resolved_next = resolve_style(next_style)
    if resolved_base is None and resolved_next is None:
        return None
    return {**(resolved_base or {}), **(resolved_next or {})}


def to_alignment(value: Optional[str]) -> str:
    if value == "center":
        return ALIGN_CENTER
    if value == "right":
        return ALIGN_RIGHT
    if value == "justify":
        return ALIGN_JUSTIFIED
    return ALIGN_LEFT


def resolve_font_size(style: StyleInput) -> Optional[float]:
    return get_style_value(style, "font_size")


def resolve_font_weight(style: StyleInput) -> bool:
    font_weight = get_style_value(style, "font_weight")
    if font_weight == "bold":
        return True
    if isinstance(font_weight, (int, float)) and not isinstance(font_weight, bool):
        return font_weight >= 600
    return False


def resolve_line_height(style: StyleInput, font_size: Optional[float] = None) -> Optional[int]:
    """Return the line height in twips.

    Values up to 4 multiply the font size (CSS unitless line-height); larger
    values are absolute points.
    """
    line_height = get_style_value(style, "line_height")
    if not line_height:
        return None
    if line_height <= 4 and font_size:
        return round_half_up(font_size * line_height * TWIPS_PER_POINT)
    return round_half_up(line_height * TWIPS_PER_POINT)


def _decoration_tokens(style: StyleInput) -> List[str]:
    decoration = get_style_value(style, "text_decoration")
    return decoration.split() if decoration else []


def has_line_through(style: StyleInput) -> bool:
    return "line-through" in _decoration_tokens(style)


def resolve_underline(style: StyleInput) -> Optional[Dict[str, str]]:
    has_underline = get_style_value(style, "underline")
    if has_underline is None:
        has_underline = "underline" in _decoration_tokens(style)
    if not has_underline:
        return None

    color = normalize_color(
        first_defined(get_style_value(style, "text_decoration_color"), get_style_value(style, "color"))
    )
    underline = {"type": "single"}
    if color:
        underline["color"] = color
    return underline


def normalize_border_style(value: Any) -> Optional[str]:
    if value == "none":
        return BORDER_NONE
    return value


def normalize_border_color(color: Optional[str]) -> str:
    return normalize_color(color) or "auto"


def resolve_border_style(size: Optional[float], color: Optional[str]) -> str:
    if not size or size <= 0:
        return BORDER_NONE
    if color == "none":
        return BORDER_NONE
    return BORDER_SINGLE


def normalize_borders(style: StyleInput) -> Optional[Dict[str, Optional[Dict[str, Any]]]]:
    """Build per-side border specs from either a ``borders`` record or the
    ``border_<side>_width`` / ``border_<side>_color`` properties."""
    resolved = resolve_style(style)
    if resolved is None:
        return None

    borders = resolved.get("borders")
    if isinstance(borders, dict):
        result: Dict[str, Optional[Dict[str, Any]]] = {}
        for side in BORDER_SIDES:
            border = borders.get(side)
            if not border:
                result[side] = None
                continue
            result[side] = {
                "color": first_defined(border.get("color"), "auto"),
                "size": first_defined(border.get("size"), 0),
                "style": first_defined(normalize_border_style(border.get("style")), BORDER_NONE),
            }
        return result

    result = {}
    for side in BORDER_SIDES:
        width = resolved.get(f"border_{side}_width")
        color = resolved.get(f"border_{side}_color")
        result[side] = {
            "color": normalize_border_color(color),
            "size": first_defined(width, 0),
            "style": resolve_border_style(width, color),
        }
    return result


def resolve_padding(style: StyleInput) -> Tuple[Any, Any, Any, Any]:
    """Expand padding shorthands into raw (top, bottom, left, right) values.

    ``padding_top`` beats ``padding_vertical`` beats ``padding``; the
    horizontal sides use ``padding_horizontal`` the same way.
    """
    padding = get_style_value(style, "padding")
    horizontal = get_style_value(style, "padding_horizontal")
    vertical = get_style_value(style, "padding_vertical")
    return (
        first_defined(get_style_value(style, "padding_top"), vertical, padding),
        first_defined(get_style_value(style, "padding_bottom"), vertical, padding),
        first_defined(get_style_value(style, "padding_left"), horizontal, padding),
        first_defined(get_style_value(style, "padding_right"), horizontal, padding),
    )


def resolve_image_transformation(width: Any, height: Any) -> Dict[str, int]:
    """Size an image in pixels; an unresolved axis becomes 1, never 0."""
    return {
        "width": first_defined(to_pixels(resolve_length(width)), 1),
        "height": first_defined(to_pixels(resolve_length(height)), 1),
    }


def resolve_floating(style: StyleInput) -> Optional[Dict[str, Any]]:
    """Anchor position for ``position: absolute`` images, offsets in EMU."""
    resolved = resolve_style(style)
    if resolved is None or resolved.get("position") != "absolute":
        return None

    top = resolve_length(resolved.get("top"))
    bottom = resolve_length(resolved.get("bottom"))
    left = resolve_length(resolved.get("left"))
    right = resolve_length(resolved.get("right"))

    if left is not None:
        horizontal = {"relative": POSITION_RELATIVE_MARGIN, "offset": to_emu(left)}
    elif right is not None:
        horizontal = {"relative": POSITION_RELATIVE_MARGIN, "align": "right", "offset": to_emu(right)}
    else:
        horizontal = {"relative": POSITION_RELATIVE_MARGIN, "offset": 0}

    if top is not None:
        vertical = {"relative": POSITION_RELATIVE_MARGIN, "offset": to_emu(top)}
    elif bottom is not None:
        # anchored upwards from the margin
        vertical = {"relative": POSITION_RELATIVE_MARGIN, "offset": -to_emu(bottom)}
    else:
        vertical = {"relative": POSITION_RELATIVE_MARGIN, "offset": 0}

    floating: Dict[str, Any] = {
        "horizontal_position": horizontal,
        "vertical_position": vertical,
    }
    if resolved.get("behind_document"):
        floating["behind_document"] = True
    if resolved.get("z_index") is not None:
        floating["z_index"] = resolved["z_index"]
    return floating
