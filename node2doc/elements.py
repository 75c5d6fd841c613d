"""Element factories for building node trees in Python code or from JSON.

    Document(
        Page(Text("Hello", style={"font_size": 12}), size="A4"),
        title="Greeting",
    )

Positional arguments are children; keyword arguments are props. Strings become
text instances, nested lists are flattened, and ``None``/``False`` children
are skipped so conditional children can be written inline.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from node2doc import nodes
from node2doc.nodes import Child, Node, TextInstance


def _normalize_children(children: Iterable[Any]) -> List[Child]:
    result: List[Child] = []
    for child in children:
        if child is None or child is False or child is True:
            continue
        if isinstance(child, (list, tuple)):
            result.extend(_normalize_children(child))
        elif isinstance(child, (Node, TextInstance)):
            result.append(child)
        elif isinstance(child, (str, int, float)):
            result.append(TextInstance(str(child)))
        else:
            raise TypeError(f"Unsupported child of type {type(child).__name__}")
    return result


def create_element(node_type: str, *children: Any, **props: Any) -> Node:
    return Node(node_type, dict(props), _normalize_children(children))


def Document(*children: Any, **props: Any) -> Node:
    return create_element(nodes.DOCUMENT, *children, **props)


def Page(*children: Any, **props: Any) -> Node:
    return create_element(nodes.PAGE, *children, **props)


def View(*children: Any, **props: Any) -> Node:
    return create_element(nodes.VIEW, *children, **props)


def Text(*children: Any, **props: Any) -> Node:
    return create_element(nodes.TEXT, *children, **props)


def Image(*children: Any, **props: Any) -> Node:
    return create_element(nodes.IMAGE, *children, **props)


def Svg(*children: Any, **props: Any) -> Node:
    return create_element(nodes.SVG, *children, **props)


def Path(*children: Any, **props: Any) -> Node:
    return create_element(nodes.PATH, *children, **props)


def Table(*children: Any, **props: Any) -> Node:
    return create_element(nodes.TABLE, *children, **props)


def TableRow(*children: Any, **props: Any) -> Node:
    return create_element(nodes.TABLE_ROW, *children, **props)


def TableCell(*children: Any, **props: Any) -> Node:
    return create_element(nodes.TABLE_CELL, *children, **props)


def Header(*children: Any, **props: Any) -> Node:
    return create_element(nodes.HEADER, *children, **props)


def Footer(*children: Any, **props: Any) -> Node:
    return create_element(nodes.FOOTER, *children, **props)


class StyleSheet:
    """Named style groups; ``create`` returns its argument unchanged."""

    @staticmethod
    def create(styles: Mapping[str, Dict[str, Any]]) -> Mapping[str, Dict[str, Any]]:
        return styles


def node_from_dict(data: Any) -> Child:
    """
    Builds a node from JSON-like data.

    Nodes are ``{"type": "TEXT", "props": {...}, "children": [...]}`` dicts
    (type tags are case-insensitive); plain strings become text instances.
    """
    if isinstance(data, str):
        return TextInstance(data)
    if not isinstance(data, dict):
        raise TypeError(f"Cannot build a node from {type(data).__name__}")

    node_type = str(data.get("type", "")).upper()
    if node_type == nodes.TEXT_INSTANCE:
        return TextInstance(str(data.get("text", "")))

    children = [node_from_dict(child) for child in data.get("children") or []]
    return Node(node_type, dict(data.get("props") or {}), children)
