"""Tables, rows and cells.

Tables keep only TABLE_ROW children and rows keep only TABLE_CELL children;
anything else placed directly inside a table or row is dropped silently.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from node2doc.logger import get_logger
from node2doc.nodes import TABLE_CELL, TABLE_ROW, Node
from node2doc.processor import drop_none, merge_options
from node2doc.style import (
    first_defined,
    get_style_value,
    normalize_borders,
    resolve_padding,
    to_alignment,
)
from node2doc.units import WIDTH_PERCENTAGE, length_to_twip, normalize_color, resolve_width

LOGGER = get_logger(__name__)

SHADING_CLEAR = "clear"

VERTICAL_ALIGN_TOP = "top"
VERTICAL_ALIGN_CENTER = "center"
VERTICAL_ALIGN_BOTTOM = "bottom"


def _vertical_align(value: Any) -> str:
    if value == "center":
        return VERTICAL_ALIGN_CENTER
    if value == "bottom":
        return VERTICAL_ALIGN_BOTTOM
    return VERTICAL_ALIGN_TOP


def resolve_cell_margins(style: Any) -> Optional[Dict[str, int]]:
    """Translate padding shorthands into cell margins in twips.

    Returns None when no side resolves; otherwise missing sides are 0.
    """
    top, bottom, left, right = (length_to_twip(value) for value in resolve_padding(style))
    if top is None and bottom is None and left is None and right is None:
        return None
    return {
        "top": first_defined(top, 0),
        "bottom": first_defined(bottom, 0),
        "left": first_defined(left, 0),
        "right": first_defined(right, 0),
    }


def create_table_cell(node: Node) -> Dict[str, Any]:
    from node2doc.blocks import render_block_nodes

    props = node.props
    style = props.get("style")
    docx_options = props.get("docx") or {}

    background = normalize_color(get_style_value(style, "background_color"))
    shading = None
    if background:
        shading = {"type": SHADING_CLEAR, "color": "auto", "fill": background}

    width = resolve_width(props["width"]) if props.get("width") is not None else docx_options.get("width")

    cell = {
        **docx_options,
        "children": render_block_nodes(node.children, style),
        "column_span": first_defined(props.get("column_span"), docx_options.get("column_span")),
        "row_span": first_defined(props.get("row_span"), docx_options.get("row_span")),
        "width": width,
        "borders": first_defined(docx_options.get("borders"), normalize_borders(style)),
        "margins": first_defined(docx_options.get("margins"), resolve_cell_margins(style)),
        "shading": first_defined(docx_options.get("shading"), shading),
        "vertical_align": first_defined(
            docx_options.get("vertical_align"), _vertical_align(get_style_value(style, "vertical_align"))
        ),
    }
    return drop_none(cell)


def create_table_row(node: Node) -> Dict[str, Any]:
    cells = []
    for child in node.children:
        if child.type != TABLE_CELL:
            LOGGER.debug("Dropping %s inside a table row", child.type)
            continue
        cells.append(create_table_cell(child))
    return {**(node.props.get("docx") or {}), "cells": cells}


def create_table(node: Node) -> Dict[str, Any]:
    props = node.props
    style = props.get("style")
    docx_options = props.get("docx") or {}

    width = get_style_value(style, "width")
    resolved_width = resolve_width(width) if width is not None else None

    rows = []
    for child in node.children:
        if child.type != TABLE_ROW:
            LOGGER.debug("Dropping %s inside a table", child.type)
            continue
        rows.append(create_table_row(child))

    table = merge_options(
        {
            "alignment": to_alignment(get_style_value(style, "text_align")),
            "width": first_defined(resolved_width, {"size": 100, "type": WIDTH_PERCENTAGE}),
        },
        docx_options,
    )
    return {**table, "type": "table", "rows": rows}
