"""Text runs and paragraphs from TEXT nodes and their inline children."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from node2doc.nodes import TEXT, Child, Node, is_text_instance
from node2doc.processor import drop_none, merge_defined
from node2doc.style import (
    StyleInput,
    first_defined,
    get_style_value,
    has_line_through,
    merge_styles,
    resolve_font_size,
    resolve_font_weight,
    resolve_line_height,
    resolve_underline,
    to_alignment,
)
from node2doc.units import length_to_twip, normalize_color, resolve_length, to_half_points, to_twip

RunOptions = Dict[str, Any]

BREAK_RUN = {"type": "break", "break": 1}


def resolve_run_options(style: StyleInput, run: Optional[RunOptions] = None) -> RunOptions:
    """Map the effective style onto run options; ``run`` overrides win."""
    strike = get_style_value(style, "strike")
    if strike is None:
        strike = has_line_through(style)
    double_strike = get_style_value(style, "double_strike") or False

    computed = drop_none(
        {
            "bold": resolve_font_weight(style),
            "italics": get_style_value(style, "font_style") == "italic",
            "underline": resolve_underline(style),
            "strike": True if strike and not double_strike else None,
            "double_strike": double_strike or None,
            "all_caps": get_style_value(style, "all_caps") or None,
            "small_caps": get_style_value(style, "small_caps") or None,
            "subscript": get_style_value(style, "subscript") or None,
            "superscript": get_style_value(style, "superscript") or None,
            "highlight": get_style_value(style, "highlight"),
            "size": to_half_points(resolve_font_size(style)),
            "font": get_style_value(style, "font_family"),
            "color": normalize_color(get_style_value(style, "color")),
            "character_spacing": length_to_twip(get_style_value(style, "letter_spacing")),
        }
    )
    return {**computed, **(run or {})}


def create_text_runs_from_string(text: str, style: StyleInput, run: Optional[RunOptions] = None) -> List[Dict[str, Any]]:
    """Split ``text`` on newlines into runs joined by explicit line breaks."""
    options = resolve_run_options(style, run)
    runs: List[Dict[str, Any]] = []
    segments = text.split("\n")
    for index, segment in enumerate(segments):
        runs.append({**options, "type": "text", "text": segment})
        if index < len(segments) - 1:
            runs.append(dict(BREAK_RUN))
    return runs


def render_inline_node(node: Child, inherited_style: StyleInput = None, inherited_run: Optional[RunOptions] = None) -> List[Dict[str, Any]]:
    if is_text_instance(node):
        return create_text_runs_from_string(node.text, inherited_style, inherited_run)

    if node.type == TEXT:
        style = merge_styles(inherited_style, node.props.get("style"))
        run = merge_defined(inherited_run, node.props.get("run"))
        runs: List[Dict[str, Any]] = []
        for child in node.children:
            runs.extend(render_inline_node(child, style, run))
        return runs

    # images and other blocks are not valid inside text
    return []


def create_paragraph_from_text(node: Node, inherited_style: StyleInput = None) -> Dict[str, Any]:
    style = merge_styles(inherited_style, node.props.get("style"))
    font_size = resolve_font_size(style)
    alignment = to_alignment(get_style_value(style, "text_align"))
    run = merge_defined(None, node.props.get("run"))

    paragraph_options = dict(node.props.get("paragraph") or {})
    alignment_override = paragraph_options.pop("alignment", None)
    spacing_override = paragraph_options.pop("spacing", None)
    indent_override = paragraph_options.pop("indent", None)

    margin_left = resolve_length(get_style_value(style, "margin_left"))
    margin_right = resolve_length(get_style_value(style, "margin_right"))
    text_indent = resolve_length(get_style_value(style, "text_indent"))

    spacing = drop_none(
        {
            "before": first_defined(length_to_twip(get_style_value(style, "margin_top")), 0),
            "after": first_defined(length_to_twip(get_style_value(style, "margin_bottom")), 0),
            "line": resolve_line_height(style, font_size),
        }
    )
    spacing.update(spacing_override or {})

    paragraph: Dict[str, Any] = {
        **paragraph_options,
        "type": "paragraph",
        "alignment": first_defined(alignment_override, alignment),
        "spacing": spacing,
    }

    if text_indent is not None or margin_left is not None or margin_right is not None or indent_override:
        indent = drop_none(
            {
                "first_line": to_twip(text_indent),
                "left": to_twip(margin_left),
                "right": to_twip(margin_right),
            }
        )
        indent.update(indent_override or {})
        paragraph["indent"] = indent

    children: List[Dict[str, Any]] = []
    for child in node.children:
        children.extend(render_inline_node(child, style, run))
    paragraph["children"] = children
    return paragraph
