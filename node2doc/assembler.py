"""Assemble the document model from a DOCUMENT node and its pages."""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Sequence, Union

from node2doc.blocks import render_block_nodes
from node2doc.constants import A4_HEIGHT_MM, A4_WIDTH_MM
from node2doc.logger import get_logger
from node2doc.nodes import (
    DOCUMENT,
    FOOTER,
    HEADER,
    PAGE,
    Child,
    Container,
    Node,
    find_child_by_type,
    find_children_by_type,
)
from node2doc.processor import drop_none, merge_defined
from node2doc.style import StyleInput, get_style_value, resolve_padding
from node2doc.units import length_to_twip, millimeters_to_twip, resolve_length, to_twip

LOGGER = get_logger(__name__)

SLOT_DEFAULT = "default"
SLOT_FIRST = "first"
SLOT_EVEN = "even"
SLOTS = (SLOT_DEFAULT, SLOT_FIRST, SLOT_EVEN)


class DocumentStructureError(ValueError):
    """The node tree cannot be turned into a document."""


def resolve_document_styles(
    style: StyleInput,
    language: Optional[str] = None,
    styles: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Synthesize default run formatting from the document font and language.

    User-supplied ``styles`` win at every level: synthesized defaults sit
    under ``styles["default"]``, which sits under its ``document`` entry,
    which sits under its ``run`` entry.
    """
    styles = copy.deepcopy(styles)
    font_family = get_style_value(style, "font_family")
    if not font_family and not language:
        return styles

    base_run: Dict[str, Any] = {}
    if font_family:
        base_run["font"] = font_family
    if language:
        base_run["language"] = {"value": language}

    resolved_default: Dict[str, Any] = {"document": {"run": base_run}}
    if not styles:
        return {"default": resolved_default}

    user_default = styles.get("default") or {}
    user_document = user_default.get("document") or {}
    user_run = user_document.get("run") or {}

    return {
        **styles,
        "default": {
            **resolved_default,
            **user_default,
            "document": {
                **resolved_default["document"],
                **user_document,
                "run": {**base_run, **user_run},
            },
        },
    }


def resolve_page_size(size: Union[str, Dict[str, Any], None]) -> Optional[Dict[str, Any]]:
    """Page size in twips from ``"A4"`` or ``{width, height, code?, orientation?}``."""
    if not size:
        return None

    if isinstance(size, str):
        if size == "A4":
            return {"width": millimeters_to_twip(A4_WIDTH_MM), "height": millimeters_to_twip(A4_HEIGHT_MM)}
        LOGGER.debug("Unknown page size preset %r", size)
        return None

    width = resolve_length(size.get("width"))
    height = resolve_length(size.get("height"))
    if width is None or height is None:
        return None

    resolved: Dict[str, Any] = {"width": to_twip(width), "height": to_twip(height)}
    if size.get("code") is not None:
        resolved["code"] = size["code"]
    if size.get("orientation"):
        resolved["orientation"] = size["orientation"]
    return resolved


def resolve_page_margins(style: StyleInput) -> Optional[Dict[str, int]]:
    top, bottom, left, right = (length_to_twip(value) for value in resolve_padding(style))
    if top is None and bottom is None and left is None and right is None:
        return None
    # unresolved sides are left to the serializer default
    return drop_none({"top": top, "bottom": bottom, "left": left, "right": right})


def _group_by_slot(nodes: Sequence[Node]) -> Dict[str, Dict[str, Any]]:
    grouped: Dict[str, Dict[str, Any]] = {}
    for node in nodes:
        slot = node.props.get("type") or SLOT_DEFAULT
        if slot not in SLOTS:
            LOGGER.debug("Unknown header/footer slot %r", slot)
        # a later header for the same slot replaces the earlier one
        grouped[slot] = {"children": render_block_nodes(node.children)}
    return grouped


def build_section(page: Node) -> Dict[str, Any]:
    """
    Compile one PAGE node into a section.

    The returned dict carries an extra ``has_even_header_footer`` flag that
    :func:`build_document` removes after aggregating it.
    """
    props = page.props
    headers = _group_by_slot(find_children_by_type(page.children, HEADER))
    footers = _group_by_slot(find_children_by_type(page.children, FOOTER))
    content = [child for child in page.children if child.type not in (HEADER, FOOTER)]

    page_properties = props.get("properties") or {}
    page_from_props = page_properties.get("page")
    size_from_props = (page_from_props or {}).get("size")

    page_size = merge_defined(resolve_page_size(props.get("size")), size_from_props)
    if page_size is None and not size_from_props and not props.get("size"):
        page_size = resolve_page_size("A4")
    margins = merge_defined(resolve_page_margins(props.get("style")), (page_from_props or {}).get("margin"))

    properties: Dict[str, Any] = dict(page_properties)
    if page_size or margins or page_from_props:
        page_block = dict(page_from_props or {})
        if page_size:
            page_block["size"] = page_size
        if margins:
            page_block["margin"] = margins
        properties["page"] = page_block

    has_first = SLOT_FIRST in headers or SLOT_FIRST in footers
    if page_properties.get("title_page") is None and has_first:
        properties["title_page"] = True

    section: Dict[str, Any] = {
        "has_even_header_footer": SLOT_EVEN in headers or SLOT_EVEN in footers,
        "properties": properties,
        "children": render_block_nodes(content),
    }
    if headers:
        section["headers"] = headers
    if footers:
        section["footers"] = footers
    return section


def _find_document(tree: Union[Container, Node, Sequence[Child]]) -> Optional[Node]:
    if isinstance(tree, Node):
        if tree.type == DOCUMENT:
            return tree
        return find_child_by_type(tree.children, DOCUMENT)
    if isinstance(tree, Container):
        return find_child_by_type(tree.children, DOCUMENT)
    return find_child_by_type(list(tree), DOCUMENT)


def build_document(tree: Union[Container, Node, Sequence[Child]]) -> Dict[str, Any]:
    """
    Compile a node tree into the document model the serializer consumes.

    Args:
        tree: A root container, a list of top-level nodes, or the DOCUMENT
              node itself.

    Returns:
        The document model dict.

    Raises:
        DocumentStructureError: No DOCUMENT node among the top-level nodes.
    """
    document = _find_document(tree)
    if document is None:
        raise DocumentStructureError("Document root is missing.")

    props = document.props
    pages = find_children_by_type(document.children, PAGE)
    styles = resolve_document_styles(props.get("style"), props.get("language"), props.get("styles"))

    sections: List[Dict[str, Any]] = [build_section(page) for page in pages]
    even_flags = [section.pop("has_even_header_footer") for section in sections]
    needs_even_odd = any(even_flags)

    keywords = props.get("keywords")
    if isinstance(keywords, (list, tuple)):
        keywords = ", ".join(keywords)

    docx_options = props.get("docx") or {}
    model: Dict[str, Any] = {
        **docx_options,
        "creator": props.get("creator"),
        "description": props.get("description"),
        "keywords": keywords,
        "styles": styles,
        "subject": props.get("subject"),
        "title": props.get("title"),
    }
    if docx_options.get("even_and_odd_header_and_footers") is None and needs_even_odd:
        model["even_and_odd_header_and_footers"] = True
    model["sections"] = sections

    LOGGER.debug("Assembled document with %d section(s)", len(sections))
    return model
