"""Image and inline SVG paragraphs."""
from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from node2doc.constants import TRANSPARENT_PNG_FALLBACK
from node2doc.nodes import PATH, Node
from node2doc.style import (
    StyleInput,
    first_defined,
    get_style_value,
    merge_styles,
    resolve_floating,
    resolve_image_transformation,
    to_alignment,
)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def normalize_image_type(image_type: Optional[str]) -> str:
    if not image_type:
        return "png"
    if image_type == "jpeg":
        return "jpg"
    return image_type


def normalize_fallback_type(image_type: Optional[str]) -> str:
    """Like :func:`normalize_image_type`, but a fallback is always raster."""
    normalized = normalize_image_type(image_type)
    return "png" if normalized == "svg" else normalized


def _image_run(
    image_type: str,
    data: Any,
    transformation: Dict[str, int],
    alt_text: Optional[Dict[str, str]],
    floating: Optional[Dict[str, Any]],
    fallback: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    run: Dict[str, Any] = {
        "type": "image",
        "image_type": image_type,
        "data": data,
        "transformation": copy.deepcopy(transformation),
    }
    if alt_text is not None:
        run["alt_text"] = copy.deepcopy(alt_text)
    if fallback is not None:
        run["fallback"] = fallback
    if floating:
        # props may be shared with the tree; the model owns its own copy
        run["floating"] = copy.deepcopy(floating)
    return run


def _svg_fallback(fallback: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if fallback:
        return {**fallback, "type": normalize_fallback_type(fallback.get("type"))}
    return {"type": "png", "data": TRANSPARENT_PNG_FALLBACK}


def create_image_paragraph(node: Node, inherited_style: StyleInput = None) -> Dict[str, Any]:
    props = node.props
    style = merge_styles(inherited_style, props.get("style"))
    image_type = normalize_image_type(props.get("type"))
    transformation = first_defined(
        props.get("transformation"),
        resolve_image_transformation(get_style_value(style, "width"), get_style_value(style, "height")),
    )
    floating = first_defined(props.get("floating"), resolve_floating(style))
    fallback = _svg_fallback(props.get("fallback")) if image_type == "svg" else None

    run = _image_run(image_type, props.get("src"), transformation, props.get("alt_text"), floating, fallback)
    return {
        "type": "paragraph",
        "alignment": to_alignment(get_style_value(style, "text_align")),
        "children": [run],
    }


def render_svg_to_string(node: Node) -> str:
    """Serialize an SVG node and its PATH children to standalone markup.

    Attribute values are inserted verbatim; path data must already be safe
    to embed in an attribute.
    """
    props = node.props
    width = f' width="{props["width"]}"' if props.get("width") else ""
    height = f' height="{props["height"]}"' if props.get("height") else ""
    view_box = f' viewBox="{props["view_box"]}"' if props.get("view_box") else ""

    paths = []
    for child in node.children:
        if child.type != PATH:
            continue
        path_props = child.props
        fill = f' fill="{path_props["fill"]}"' if path_props.get("fill") else ""
        stroke = f' stroke="{path_props["stroke"]}"' if path_props.get("stroke") else ""
        stroke_width = f' stroke-width="{path_props["stroke_width"]}"' if path_props.get("stroke_width") else ""
        paths.append(f'<path d="{path_props.get("d", "")}"{fill}{stroke}{stroke_width} />')

    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<svg xmlns="{SVG_NAMESPACE}"{width}{height}{view_box}>'
        f'{"".join(paths)}</svg>'
    )


def create_svg_image_paragraph(node: Node, inherited_style: StyleInput = None) -> Dict[str, Any]:
    props = node.props
    markup = render_svg_to_string(node)
    style = merge_styles(inherited_style, props.get("style"))
    width = first_defined(get_style_value(style, "width"), props.get("width"))
    height = first_defined(get_style_value(style, "height"), props.get("height"))
    transformation = first_defined(props.get("transformation"), resolve_image_transformation(width, height))
    floating = first_defined(props.get("floating"), resolve_floating(style))

    run = _image_run(
        "svg",
        markup.encode("utf-8"),
        transformation,
        props.get("alt_text"),
        floating,
        {"type": "png", "data": TRANSPARENT_PNG_FALLBACK},
    )
    return {
        "type": "paragraph",
        "alignment": to_alignment(get_style_value(style, "text_align")),
        "children": [run],
    }
