"""Node tree consumed by the compilers.

A tree builder creates :class:`Node` instances, each with a type tag, a props
dict and an ordered list of children, plus :class:`TextInstance` leaves that
hold raw strings. Compilation only ever reads the tree.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

DOCUMENT = "DOCUMENT"
PAGE = "PAGE"
VIEW = "VIEW"
TEXT = "TEXT"
IMAGE = "IMAGE"
SVG = "SVG"
PATH = "PATH"
TABLE = "TABLE"
TABLE_ROW = "TABLE_ROW"
TABLE_CELL = "TABLE_CELL"
HEADER = "HEADER"
FOOTER = "FOOTER"
TEXT_INSTANCE = "TEXT_INSTANCE"

NODE_TYPES = frozenset(
    {DOCUMENT, PAGE, VIEW, TEXT, IMAGE, SVG, PATH, TABLE, TABLE_ROW, TABLE_CELL, HEADER, FOOTER}
)


class ChildList:
    """Host-side mutation operations shared by nodes and the root container."""

    children: List["Child"]

    def append_child(self, child: "Child") -> None:
        self.children.append(child)

    def insert_before(self, child: "Child", before: "Child") -> None:
        """Insert ``child`` ahead of ``before``, or append when it is absent."""
        index = _index_of(self.children, before)
        if index is None:
            self.children.append(child)
        else:
            self.children.insert(index, child)

    def remove_child(self, child: "Child") -> None:
        index = _index_of(self.children, child)
        if index is not None:
            del self.children[index]


@dataclass
class TextInstance:
    """Raw string content; always a leaf."""

    text: str
    type: str = field(default=TEXT_INSTANCE, init=False)


@dataclass
class Node(ChildList):
    """Typed element with props and owned, ordered children."""

    type: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: List["Child"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.type not in NODE_TYPES:
            raise ValueError(f"Unknown node type: {self.type!r}")


Child = Union[Node, TextInstance]


@dataclass
class Container(ChildList):
    """Root holder the tree builder appends top-level nodes to."""

    children: List[Child] = field(default_factory=list)


def _index_of(children: List[Child], target: Child) -> Optional[int]:
    # identity, not equality: two equal dataclasses are still distinct nodes
    for index, child in enumerate(children):
        if child is target:
            return index
    return None


def is_text_instance(node: Any) -> bool:
    return isinstance(node, TextInstance)


def find_child_by_type(nodes: List[Child], node_type: str) -> Optional[Node]:
    for node in nodes:
        if node.type == node_type:
            return node
    return None


def find_children_by_type(nodes: List[Child], node_type: str) -> List[Node]:
    return [node for node in nodes if node.type == node_type]
