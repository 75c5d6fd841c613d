"""Flatten a list of nodes into block-level paragraphs and tables."""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from node2doc.images import create_image_paragraph, create_svg_image_paragraph
from node2doc.logger import get_logger
from node2doc.nodes import IMAGE, SVG, TABLE, TEXT, VIEW, Child, is_text_instance
from node2doc.style import StyleInput, merge_styles
from node2doc.table import create_table
from node2doc.text import create_paragraph_from_text, create_text_runs_from_string

LOGGER = get_logger(__name__)


def render_block_nodes(nodes: Sequence[Child], inherited_style: StyleInput = None) -> List[Dict[str, Any]]:
    """
    Compile ``nodes`` into an ordered list of block elements.

    VIEW nodes emit nothing themselves: their children are compiled with the
    view's style cascaded over ``inherited_style`` and spliced in place.
    """
    blocks: List[Dict[str, Any]] = []

    for node in nodes:
        if is_text_instance(node):
            blocks.append(
                {
                    "type": "paragraph",
                    "children": create_text_runs_from_string(node.text, inherited_style),
                }
            )
        elif node.type == TEXT:
            blocks.append(create_paragraph_from_text(node, inherited_style))
        elif node.type == IMAGE:
            blocks.append(create_image_paragraph(node, inherited_style))
        elif node.type == SVG:
            blocks.append(create_svg_image_paragraph(node, inherited_style))
        elif node.type == TABLE:
            blocks.append(create_table(node))
        elif node.type == VIEW:
            view_style = merge_styles(inherited_style, node.props.get("style"))
            blocks.extend(render_block_nodes(node.children, view_style))
        else:
            LOGGER.debug("Skipping %s at block level", node.type)

    return blocks
